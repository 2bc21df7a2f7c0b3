from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from .. import models, schemas
from ..database import get_db

router = APIRouter(prefix="/customers", tags=["customers"])


def _get_or_404(customer_id: int, db: Session) -> models.Customer:
    customer = db.query(models.Customer).filter(models.Customer.id == customer_id).first()
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer

@router.post("/", response_model=schemas.Customer, status_code=201)
def create_customer(customer: schemas.CustomerCreate, db: Session = Depends(get_db)):
    if len(customer.name.strip()) < 2:
        raise HTTPException(status_code=422, detail="Please enter a valid customer name")
    db_customer = models.Customer(**customer.model_dump())
    db_customer.name = customer.name.strip()
    db.add(db_customer)
    db.commit()
    db.refresh(db_customer)
    return db_customer

@router.get("/", response_model=List[schemas.Customer])
def list_customers(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return db.query(models.Customer).order_by(models.Customer.name).offset(skip).limit(limit).all()

@router.get("/{customer_id}", response_model=schemas.Customer)
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    return _get_or_404(customer_id, db)

@router.patch("/{customer_id}", response_model=schemas.Customer)
def update_customer(customer_id: int, update: schemas.CustomerUpdate, db: Session = Depends(get_db)):
    customer = _get_or_404(customer_id, db)
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(customer, field, value)
    db.commit()
    db.refresh(customer)
    return customer

@router.delete("/{customer_id}", status_code=204)
def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    """Documents keep their customer snapshot; only the link is cleared."""
    customer = _get_or_404(customer_id, db)
    db.query(models.Document).filter(models.Document.customer_id == customer.id).update(
        {models.Document.customer_id: None}, synchronize_session=False
    )
    db.delete(customer)
    db.commit()
