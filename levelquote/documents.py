"""
Invoice / estimate managers.

Every operation takes an explicit DocumentType — the same functions serve both
document kinds. Anything that changes a document's content goes through the
save pipeline (validate → assign-number → compute-totals → persist → notify)
and comes back as a SaveResult; lookups raise the domain errors in errors.py.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from . import models
from .calculators.base import BaseCalculator
from .config import settings
from .errors import (
    ConversionError,
    CustomerNotFoundError,
    DocumentNotFoundError,
    InvalidStatusError,
    ServiceLineNotFoundError,
)
from .save_pipeline import DOCUMENT_FIELDS, SaveContext, SavePipeline, SaveResult, default_pipeline

logger = logging.getLogger(__name__)

# Document snapshot field -> Customer attribute
CUSTOMER_SNAPSHOT = {
    "customer_name": "name",
    "customer_email": "email",
    "customer_phone": "phone",
    "customer_address": "address",
}

LINE_FIELDS = ("service_type", "description", "quantity", "unit", "rate", "amount", "details")


def _clean(data: dict) -> dict:
    """Drop unset (None) values so they don't overwrite stored fields."""
    return {k: v for k, v in (data or {}).items() if v is not None}


def _line_to_draft(line: models.ServiceLine) -> dict:
    draft = {field: getattr(line, field) for field in LINE_FIELDS}
    draft["service_type"] = models.ServiceType(line.service_type).value
    return draft


def _document_to_draft(document: models.Document) -> dict:
    draft = {key: getattr(document, key) for key in DOCUMENT_FIELDS}
    if document.business_type is not None:
        draft["business_type"] = models.BusinessType(document.business_type).value
    draft["service_lines"] = [_line_to_draft(line) for line in document.service_lines]
    return draft


def _apply_customer(db: Session, draft: dict, explicit: dict) -> None:
    """Copy the customer's contact details onto the draft unless the caller gave them."""
    customer = db.query(models.Customer).filter(models.Customer.id == draft["customer_id"]).first()
    if not customer:
        raise CustomerNotFoundError(draft["customer_id"])
    for field, attr in CUSTOMER_SNAPSHOT.items():
        if not explicit.get(field):
            draft[field] = getattr(customer, attr)


def _apply_default_dates(doc_type: models.DocumentType, draft: dict) -> None:
    issue_date = draft.get("issue_date") or datetime.utcnow()
    draft["issue_date"] = issue_date
    if doc_type == models.DocumentType.INVOICE and not draft.get("due_date"):
        draft["due_date"] = issue_date + timedelta(days=settings.INVOICE_DUE_DAYS)
    if doc_type == models.DocumentType.ESTIMATE and not draft.get("valid_until"):
        draft["valid_until"] = issue_date + timedelta(days=settings.ESTIMATE_VALID_DAYS)


def _run(db: Session, doc_type: models.DocumentType, draft: dict,
         document: Optional[models.Document] = None,
         pipeline: Optional[SavePipeline] = None) -> SaveResult:
    ctx = SaveContext(db=db, doc_type=doc_type, draft=draft, document=document)
    return (pipeline or default_pipeline()).run(ctx)


# --- Lookups ---

def get_document(db: Session, doc_type: models.DocumentType, document_id: int) -> models.Document:
    document = db.query(models.Document).filter(
        models.Document.id == document_id,
        models.Document.doc_type == doc_type,
    ).first()
    if not document:
        raise DocumentNotFoundError(doc_type.value, document_id)
    return document


def list_documents(db: Session, doc_type: models.DocumentType, status: Optional[str] = None,
                   skip: int = 0, limit: int = 100) -> List[models.Document]:
    """Newest first. An unknown status filter raises InvalidStatusError."""
    query = db.query(models.Document).filter(models.Document.doc_type == doc_type)
    if status:
        allowed = models.STATUSES_BY_TYPE[doc_type]
        if status not in allowed:
            raise InvalidStatusError(doc_type.value, status, allowed)
        query = query.filter(models.Document.status == status)
    return query.order_by(models.Document.number.desc()).offset(skip).limit(limit).all()


# --- Saves ---

def create_document(db: Session, doc_type: models.DocumentType, data: dict,
                    pipeline: Optional[SavePipeline] = None) -> SaveResult:
    """
    Create an invoice or estimate.

    data holds the document fields plus a service_lines list. When customer_id
    is given the customer's contact details fill any snapshot field left blank.
    """
    explicit = _clean(data)
    draft = dict(explicit)
    draft["service_lines"] = [dict(line) for line in explicit.get("service_lines") or []]
    if draft.get("customer_id"):
        _apply_customer(db, draft, explicit)
    _apply_default_dates(doc_type, draft)
    return _run(db, doc_type, draft, pipeline=pipeline)


def update_document(db: Session, doc_type: models.DocumentType, document_id: int, data: dict,
                    pipeline: Optional[SavePipeline] = None) -> SaveResult:
    """Merge the given fields over the stored document and save. service_lines, if given, replaces all lines."""
    document = get_document(db, doc_type, document_id)
    explicit = _clean(data)
    draft = _document_to_draft(document)
    draft.update(explicit)
    if "service_lines" in explicit:
        draft["service_lines"] = [dict(line) for line in explicit["service_lines"]]
    if explicit.get("customer_id") and explicit["customer_id"] != document.customer_id:
        _apply_customer(db, draft, explicit)
    return _run(db, doc_type, draft, document=document, pipeline=pipeline)


def delete_document(db: Session, doc_type: models.DocumentType, document_id: int) -> None:
    document = get_document(db, doc_type, document_id)
    # Unlink conversions pointing at this document
    db.query(models.Document).filter(models.Document.converted_from_id == document.id).update(
        {models.Document.converted_from_id: None}, synchronize_session=False
    )
    db.query(models.Document).filter(models.Document.converted_to_id == document.id).update(
        {models.Document.converted_to_id: None}, synchronize_session=False
    )
    number = document.document_number
    db.delete(document)
    db.commit()
    logger.info("Deleted %s %s", doc_type.value, number)


def add_service_line(db: Session, doc_type: models.DocumentType, document_id: int, line: dict,
                     pipeline: Optional[SavePipeline] = None) -> SaveResult:
    document = get_document(db, doc_type, document_id)
    draft = _document_to_draft(document)
    draft["service_lines"].append(dict(line))
    return _run(db, doc_type, draft, document=document, pipeline=pipeline)


def remove_service_line(db: Session, doc_type: models.DocumentType, document_id: int, line_id: int,
                        pipeline: Optional[SavePipeline] = None) -> SaveResult:
    """Drop one line and recompute totals. Removing the last line fails validation."""
    document = get_document(db, doc_type, document_id)
    if not any(line.id == line_id for line in document.service_lines):
        raise ServiceLineNotFoundError(line_id)
    draft = _document_to_draft(document)
    draft["service_lines"] = [
        _line_to_draft(line) for line in document.service_lines if line.id != line_id
    ]
    return _run(db, doc_type, draft, document=document, pipeline=pipeline)


def set_status(db: Session, doc_type: models.DocumentType, document_id: int, status: str,
               pipeline: Optional[SavePipeline] = None) -> SaveResult:
    allowed = models.STATUSES_BY_TYPE[doc_type]
    if status not in allowed:
        raise InvalidStatusError(doc_type.value, status, allowed)
    if status == models.CONVERTED_STATUS:
        get_document(db, doc_type, document_id)
        raise ConversionError("Convert the estimate to an invoice to mark it converted")
    return update_document(db, doc_type, document_id, {"status": status}, pipeline=pipeline)


def convert_estimate_to_invoice(db: Session, estimate_id: int,
                                pipeline: Optional[SavePipeline] = None) -> SaveResult:
    """
    Copy an estimate into a new draft invoice.

    The invoice gets the next invoice number, the estimate's customer, business
    type, notes and service lines, and a link back to the estimate. The estimate
    is marked converted and linked forward to the invoice in the same commit.
    """
    estimate = get_document(db, models.DocumentType.ESTIMATE, estimate_id)
    if estimate.status == models.CONVERTED_STATUS or estimate.converted_to_id:
        raise ConversionError(f"Estimate {estimate.document_number} has already been converted to an invoice")

    draft = _document_to_draft(estimate)
    draft["status"] = "draft"
    draft["converted_from_id"] = estimate.id
    draft["issue_date"] = None
    draft["due_date"] = None
    draft["valid_until"] = None
    _apply_default_dates(models.DocumentType.INVOICE, draft)

    def link_estimate(ctx: SaveContext) -> None:
        estimate.status = models.CONVERTED_STATUS
        estimate.converted_to = ctx.document

    # Copy so a caller-supplied pipeline is not changed
    pipeline = SavePipeline((pipeline or default_pipeline()).handlers)
    pipeline.insert_before("persist", "link_estimate", link_estimate)
    result = _run(db, models.DocumentType.INVOICE, draft, pipeline=pipeline)
    if result.ok:
        logger.info("Converted estimate %s to invoice %s",
                    estimate.document_number, result.document.document_number)
    return result


# --- Dashboard ---

def _status_counts(db: Session, doc_type: models.DocumentType) -> dict:
    counts = {status: 0 for status in models.STATUSES_BY_TYPE[doc_type]}
    rows = db.query(models.Document.status, func.count(models.Document.id)).filter(
        models.Document.doc_type == doc_type
    ).group_by(models.Document.status).all()
    for status, count in rows:
        counts[status] = count
    return counts


def _sum_total(db: Session, doc_type: models.DocumentType, statuses=None) -> float:
    query = db.query(func.coalesce(func.sum(models.Document.total), 0.0)).filter(
        models.Document.doc_type == doc_type
    )
    if statuses is not None:
        query = query.filter(models.Document.status.in_(statuses))
    return BaseCalculator.round_half_up(query.scalar() or 0.0)


def dashboard_summary(db: Session) -> dict:
    """
    Counts and money totals for the dashboard.

    invoiced    = every invoice except drafts
    paid        = invoices marked paid
    outstanding = sent + overdue invoices
    pipeline    = estimates sent or approved, not yet converted
    """
    invoice = models.DocumentType.INVOICE
    estimate = models.DocumentType.ESTIMATE
    invoice_counts = _status_counts(db, invoice)
    estimate_counts = _status_counts(db, estimate)
    return {
        "invoices": {
            "count": sum(invoice_counts.values()),
            "by_status": invoice_counts,
            "invoiced": _sum_total(db, invoice, ["sent", "paid", "overdue"]),
            "paid": _sum_total(db, invoice, ["paid"]),
            "outstanding": _sum_total(db, invoice, ["sent", "overdue"]),
        },
        "estimates": {
            "count": sum(estimate_counts.values()),
            "by_status": estimate_counts,
            "pipeline": _sum_total(db, estimate, ["sent", "approved"]),
        },
        "customers": db.query(func.count(models.Customer.id)).scalar() or 0,
    }
