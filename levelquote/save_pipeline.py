"""
Document save pipeline — validate → assign-number → compute-totals → persist → notify.

Every invoice/estimate save goes through one ordered list of handlers. New
behaviour is added by inserting a handler, not by wrapping the save function:

    pipeline = default_pipeline()
    pipeline.insert_before("persist", "stamp_sent_date", my_handler)

A handler takes the SaveContext and either mutates ctx.draft / ctx.document or
appends to ctx.errors. The first handler that leaves errors behind stops the
run; the caller gets a SaveResult instead of an exception.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .calculators.base import BaseCalculator
from .config import settings

logger = logging.getLogger(__name__)

MIN_CUSTOMER_NAME_LENGTH = 2

# Draft keys copied straight onto the Document row
DOCUMENT_FIELDS = (
    "customer_id",
    "customer_name",
    "customer_email",
    "customer_phone",
    "customer_address",
    "business_type",
    "status",
    "notes",
    "tax_rate",
    "issue_date",
    "due_date",
    "valid_until",
    "converted_from_id",
)


@dataclass
class SaveContext:
    db: Session
    doc_type: models.DocumentType
    draft: dict
    document: Optional[models.Document] = None
    errors: List[str] = field(default_factory=list)
    created: bool = False

    @property
    def is_new(self) -> bool:
        return self.document is None or self.document.id is None


@dataclass
class SaveResult:
    ok: bool
    document: Optional[models.Document] = None
    errors: List[str] = field(default_factory=list)


Handler = Callable[[SaveContext], None]
Listener = Callable[[models.Document, bool], None]


# --- Handlers ---

def validate(ctx: SaveContext) -> None:
    """Reject drafts that can't become a document."""
    draft = ctx.draft

    name = (draft.get("customer_name") or "").strip()
    if len(name) < MIN_CUSTOMER_NAME_LENGTH:
        ctx.errors.append("Please enter a valid customer name")
    else:
        draft["customer_name"] = name

    business_type = draft.get("business_type")
    if not business_type:
        ctx.errors.append("Please select a business type")
    elif business_type not in [b.value for b in models.BusinessType]:
        ctx.errors.append(f"Unknown business type: {business_type}")

    allowed = models.STATUSES_BY_TYPE[ctx.doc_type]
    status = draft.get("status") or "draft"
    if status not in allowed:
        ctx.errors.append(f"Status '{status}' is not valid for {ctx.doc_type.value}; expected one of {allowed}")
    elif status == models.CONVERTED_STATUS and (ctx.is_new or ctx.document.status != models.CONVERTED_STATUS):
        ctx.errors.append("An estimate becomes converted only by converting it to an invoice")
    else:
        draft["status"] = status

    lines = draft.get("service_lines") or []
    if not lines:
        ctx.errors.append("Please add at least one service")
    for i, line in enumerate(lines, start=1):
        if not (line.get("description") or "").strip():
            ctx.errors.append(f"Service {i}: description is required")
        service_type = line.get("service_type") or models.ServiceType.CUSTOM.value
        if service_type not in [s.value for s in models.ServiceType]:
            ctx.errors.append(f"Service {i}: unknown service type {service_type}")
        if BaseCalculator.parse_number(line.get("quantity"), -1.0) < 0:
            ctx.errors.append(f"Service {i}: quantity must be zero or more")
        if BaseCalculator.parse_number(line.get("rate"), -1.0) < 0:
            ctx.errors.append(f"Service {i}: rate must be zero or more")

    tax_rate = draft.get("tax_rate")
    if tax_rate is not None and BaseCalculator.parse_number(tax_rate, -1.0) < 0:
        ctx.errors.append("Tax rate must be zero or more")


def format_document_number(doc_type: models.DocumentType, number: int) -> str:
    """INV-0001 / EST-0001"""
    prefix = settings.INVOICE_PREFIX if doc_type == models.DocumentType.INVOICE else settings.ESTIMATE_PREFIX
    return f"{prefix}-{str(number).zfill(settings.NUMBER_PADDING)}"


def next_number(db: Session, doc_type: models.DocumentType) -> int:
    """Reserve the next number for a document type. Committed with the document."""
    counter = db.query(models.DocumentCounter).filter(
        models.DocumentCounter.doc_type == doc_type
    ).first()
    if not counter:
        # First use: continue after anything already stored
        highest = db.query(models.Document.number).filter(
            models.Document.doc_type == doc_type
        ).order_by(models.Document.number.desc()).first()
        counter = models.DocumentCounter(doc_type=doc_type, next_number=(highest[0] + 1) if highest else 1)
        db.add(counter)
    number = counter.next_number
    counter.next_number = number + 1
    return number


def assign_number(ctx: SaveContext) -> None:
    """New documents get the next INV-/EST- number. Existing ones keep theirs."""
    if not ctx.is_new:
        return
    number = next_number(ctx.db, ctx.doc_type)
    ctx.document = models.Document(
        doc_type=ctx.doc_type,
        number=number,
        document_number=format_document_number(ctx.doc_type, number),
    )


def line_amount(quantity, rate) -> float:
    return BaseCalculator.round_half_up(
        BaseCalculator.parse_number(quantity, 0.0) * BaseCalculator.parse_number(rate, 0.0)
    )


def compute_totals(ctx: SaveContext) -> None:
    """
    Recalculate every line amount and the document totals.

    line.amount = quantity × rate
    subtotal    = sum of line amounts
    tax         = subtotal × tax_rate
    total       = subtotal + tax
    """
    draft = ctx.draft
    subtotal = 0.0
    for line in draft.get("service_lines") or []:
        line["quantity"] = BaseCalculator.parse_number(line.get("quantity"), 0.0)
        line["rate"] = BaseCalculator.parse_number(line.get("rate"), 0.0)
        line["amount"] = line_amount(line["quantity"], line["rate"])
        subtotal += line["amount"]

    tax_rate = draft.get("tax_rate")
    if tax_rate is None:
        tax_rate = settings.TAX_RATE
    tax_rate = BaseCalculator.parse_number(tax_rate, settings.TAX_RATE)

    subtotal = BaseCalculator.round_half_up(subtotal)
    tax = BaseCalculator.round_half_up(subtotal * tax_rate)
    draft["tax_rate"] = tax_rate
    draft["subtotal"] = subtotal
    draft["tax"] = tax
    draft["total"] = BaseCalculator.round_half_up(subtotal + tax)


def persist(ctx: SaveContext) -> None:
    """Write the draft onto the Document row and commit."""
    document = ctx.document
    draft = ctx.draft
    for key in DOCUMENT_FIELDS:
        if key in draft:
            setattr(document, key, draft[key])
    document.business_type = models.BusinessType(draft["business_type"])
    document.subtotal = draft["subtotal"]
    document.tax = draft["tax"]
    document.total = draft["total"]

    document.service_lines = [
        models.ServiceLine(
            position=position,
            service_type=models.ServiceType(line.get("service_type") or models.ServiceType.CUSTOM),
            description=line["description"].strip(),
            quantity=line["quantity"],
            unit=line.get("unit") or models.FLAT_UNIT,
            rate=line["rate"],
            amount=line["amount"],
            details=line.get("details"),
        )
        for position, line in enumerate(draft.get("service_lines") or [])
    ]

    try:
        ctx.db.add(document)
        ctx.db.commit()
        ctx.db.refresh(document)
    except SQLAlchemyError as e:
        ctx.db.rollback()
        logger.exception("Saving %s %s failed", ctx.doc_type.value, document.document_number)
        ctx.errors.append(f"Could not save {ctx.doc_type.value}: {e.__class__.__name__}")


class SavePipeline:
    """Ordered, named save handlers plus post-save listeners."""

    def __init__(self, handlers=None):
        self.handlers: List[tuple] = list(handlers or [])
        self.listeners: List[Listener] = []

    def names(self) -> List[str]:
        return [name for name, _ in self.handlers]

    def _index(self, name: str) -> int:
        names = self.names()
        if name not in names:
            raise ValueError(f"No handler named {name}. Available: {names}")
        return names.index(name)

    def insert_before(self, existing: str, name: str, handler: Handler) -> "SavePipeline":
        self.handlers.insert(self._index(existing), (name, handler))
        return self

    def insert_after(self, existing: str, name: str, handler: Handler) -> "SavePipeline":
        self.handlers.insert(self._index(existing) + 1, (name, handler))
        return self

    def add_listener(self, listener: Listener) -> "SavePipeline":
        self.listeners.append(listener)
        return self

    def notify(self, ctx: SaveContext) -> None:
        """Log the save and tell listeners. A failing listener never undoes the save."""
        document = ctx.document
        logger.info(
            "%s %s %s: %d service line(s), total %.2f",
            "Created" if ctx.created else "Updated",
            ctx.doc_type.value,
            document.document_number,
            len(document.service_lines),
            document.total or 0.0,
        )
        for listener in self.listeners:
            try:
                listener(document, ctx.created)
            except Exception:
                logger.exception("Save listener %r failed for %s", listener, document.document_number)

    def run(self, ctx: SaveContext) -> SaveResult:
        ctx.created = ctx.is_new
        for name, handler in self.handlers:
            handler(ctx)
            if ctx.errors:
                logger.info("Save of %s stopped at %s: %s", ctx.doc_type.value, name, "; ".join(ctx.errors))
                if ctx.db.new or ctx.db.dirty:
                    ctx.db.rollback()
                return SaveResult(ok=False, document=None, errors=list(ctx.errors))
        return SaveResult(ok=True, document=ctx.document, errors=[])


def default_pipeline() -> SavePipeline:
    pipeline = SavePipeline([
        ("validate", validate),
        ("assign_number", assign_number),
        ("compute_totals", compute_totals),
        ("persist", persist),
    ])
    pipeline.handlers.append(("notify", pipeline.notify))
    return pipeline
