from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey, Enum, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base
import enum


# --- Enums ---

class DocumentType(str, enum.Enum):
    INVOICE = "invoice"
    ESTIMATE = "estimate"


class BusinessType(str, enum.Enum):
    CONCRETE = "concrete"
    MASONRY = "masonry"


class ServiceType(str, enum.Enum):
    FOAM_LEVELING = "foam_leveling"
    CONCRETE_RATE = "concrete_rate"
    MASONRY = "masonry"
    CUSTOM = "custom"


# Status is stored as VARCHAR: invoices and estimates have different
# status sets, validated in Python against the lists below.

INVOICE_STATUSES = ["draft", "sent", "paid", "overdue"]
ESTIMATE_STATUSES = ["draft", "sent", "approved", "rejected", "converted"]

# Only convert_estimate_to_invoice moves an estimate here
CONVERTED_STATUS = "converted"

STATUSES_BY_TYPE = {
    DocumentType.INVOICE: INVOICE_STATUSES,
    DocumentType.ESTIMATE: ESTIMATE_STATUSES,
}

# Unit for flat-priced lines (quantity 1, rate = the job price)
FLAT_UNIT = "job"


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String)
    phone = Column(String)
    address = Column(Text)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)

    documents = relationship("Document", back_populates="customer")


class DocumentCounter(Base):
    """Next human-readable number per document type."""
    __tablename__ = "document_counters"

    id = Column(Integer, primary_key=True, index=True)
    doc_type = Column(Enum(DocumentType), unique=True, nullable=False)
    next_number = Column(Integer, nullable=False, default=1)


class Document(Base):
    """An invoice or an estimate — doc_type says which."""
    __tablename__ = "documents"
    __table_args__ = (UniqueConstraint("doc_type", "number", name="uq_documents_type_number"),)

    id = Column(Integer, primary_key=True, index=True)
    doc_type = Column(Enum(DocumentType), nullable=False, index=True)
    number = Column(Integer, nullable=False)
    document_number = Column(String, unique=True, nullable=False)
    status = Column(String, default="draft")
    business_type = Column(Enum(BusinessType), default=BusinessType.CONCRETE)

    # Customer snapshot, frozen at save time
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True)
    customer_name = Column(String, nullable=False)
    customer_email = Column(String)
    customer_phone = Column(String)
    customer_address = Column(Text)

    notes = Column(Text)
    issue_date = Column(DateTime, default=datetime.utcnow)
    due_date = Column(DateTime, nullable=True)      # invoices
    valid_until = Column(DateTime, nullable=True)   # estimates

    # Totals
    tax_rate = Column(Float, default=0.0825)
    subtotal = Column(Float, default=0.0)
    tax = Column(Float, default=0.0)
    total = Column(Float, default=0.0)

    # Estimate → invoice conversion links
    converted_from_id = Column(Integer, ForeignKey("documents.id"), nullable=True)
    converted_to_id = Column(Integer, ForeignKey("documents.id"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    customer = relationship("Customer", back_populates="documents")
    # post_update: the estimate row is updated after the invoice it points at is inserted
    converted_to = relationship(
        "Document",
        foreign_keys=[converted_to_id],
        remote_side=[id],
        post_update=True,
    )
    service_lines = relationship(
        "ServiceLine",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="ServiceLine.position",
    )


class ServiceLine(Base):
    __tablename__ = "service_lines"

    id = Column(Integer, primary_key=True, index=True)
    document_id = Column(Integer, ForeignKey("documents.id"), nullable=False)
    position = Column(Integer, default=0)
    service_type = Column(Enum(ServiceType), default=ServiceType.CUSTOM)
    description = Column(String, nullable=False)
    quantity = Column(Float, default=1.0)
    unit = Column(String, default=FLAT_UNIT)
    rate = Column(Float, default=0.0)
    amount = Column(Float, default=0.0)
    details = Column(JSON, nullable=True)  # Calculation snapshot the line came from

    document = relationship("Document", back_populates="service_lines")
