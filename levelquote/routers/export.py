"""
CSV downloads.

GET /api/export/invoices.csv
GET /api/export/estimates.csv
GET /api/export/customers.csv   — roll-up across invoices and estimates
"""

from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from .. import models
from ..csv_export import customers_to_csv, documents_to_csv
from ..database import get_db

router = APIRouter(prefix="/export", tags=["export"])


def _csv_response(content: str, name: str) -> Response:
    filename = f"{name}-{datetime.utcnow().strftime('%Y-%m-%d')}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _documents(db: Session, doc_type: models.DocumentType):
    return db.query(models.Document).filter(
        models.Document.doc_type == doc_type
    ).order_by(models.Document.number).all()


@router.get("/invoices.csv")
def export_invoices(db: Session = Depends(get_db)):
    invoices = _documents(db, models.DocumentType.INVOICE)
    return _csv_response(documents_to_csv(models.DocumentType.INVOICE, invoices), "invoices")


@router.get("/estimates.csv")
def export_estimates(db: Session = Depends(get_db)):
    estimates = _documents(db, models.DocumentType.ESTIMATE)
    return _csv_response(documents_to_csv(models.DocumentType.ESTIMATE, estimates), "estimates")


@router.get("/customers.csv")
def export_customers(db: Session = Depends(get_db)):
    docs = _documents(db, models.DocumentType.INVOICE) + _documents(db, models.DocumentType.ESTIMATE)
    return _csv_response(customers_to_csv(docs), "customers")
