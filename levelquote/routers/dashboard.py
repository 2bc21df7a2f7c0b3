from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..documents import dashboard_summary

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("")
def get_dashboard(db: Session = Depends(get_db)):
    """Document counts by status and invoiced / paid / outstanding totals."""
    return dashboard_summary(db)
