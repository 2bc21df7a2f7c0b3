"""
CSV export — invoices, estimates and a per-customer roll-up.

One row per document. Service lines are flattened into a single column:

    Foam Leveling (Job pricing: $463.00); Brick Repair (40 sq ft @ $18.50)

Every field is quoted; embedded quotes are doubled by the csv module.
"""

import csv
import io
from typing import Iterable, List

from .calculators.base import BaseCalculator
from .models import FLAT_UNIT, Document, DocumentType
from .presentation import format_currency, format_quantity

INVOICE_HEADERS = [
    "Invoice #", "Date", "Customer Name", "Email", "Phone", "Address", "Business Type",
    "Subtotal", "Tax", "Total", "Status", "Due Date", "Services", "Notes", "Created", "Last Modified",
]

ESTIMATE_HEADERS = [
    "Estimate #", "Date", "Customer Name", "Email", "Phone", "Address", "Business Type",
    "Subtotal", "Tax", "Total", "Status", "Valid Until", "Services", "Notes", "Created", "Last Modified",
]

CUSTOMER_HEADERS = [
    "Customer Name", "Email", "Phone", "Address", "Business Type", "Total Jobs", "Total Amount",
]


def _date(value) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


def _timestamp(value) -> str:
    return value.isoformat(timespec="seconds") if value else ""


def _money(value) -> str:
    return f"{BaseCalculator.round_half_up(value or 0.0):.2f}"


def _enum_value(value) -> str:
    return getattr(value, "value", value) or ""


def format_services(document: Document) -> str:
    parts = []
    for line in document.service_lines:
        if line.unit == FLAT_UNIT and line.quantity == 1:
            parts.append(f"{line.description} (Job pricing: {format_currency(line.amount)})")
        else:
            parts.append(
                f"{line.description} ({format_quantity(line.quantity)} {line.unit} @ {format_currency(line.rate)})"
            )
    return "; ".join(parts)


def _write(headers: List[str], rows: Iterable[list]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue()


def documents_to_csv(doc_type: DocumentType, documents: Iterable[Document]) -> str:
    is_invoice = doc_type == DocumentType.INVOICE
    rows = []
    for doc in documents:
        rows.append([
            doc.document_number,
            _date(doc.issue_date),
            doc.customer_name or "",
            doc.customer_email or "",
            doc.customer_phone or "",
            doc.customer_address or "",
            _enum_value(doc.business_type),
            _money(doc.subtotal),
            _money(doc.tax),
            _money(doc.total),
            doc.status or "",
            _date(doc.due_date if is_invoice else doc.valid_until),
            format_services(doc),
            doc.notes or "",
            _timestamp(doc.created_at),
            _timestamp(doc.updated_at),
        ])
    return _write(INVOICE_HEADERS if is_invoice else ESTIMATE_HEADERS, rows)


def customers_to_csv(documents: Iterable[Document]) -> str:
    """
    Roll documents up by customer name.

    Contact fields come from the first document seen for a name; business
    types are every type that name was billed under, in first-seen order.
    """
    customers = {}
    for doc in documents:
        key = doc.customer_name or ""
        entry = customers.get(key)
        if entry is None:
            entry = customers[key] = {
                "name": key,
                "email": doc.customer_email or "",
                "phone": doc.customer_phone or "",
                "address": doc.customer_address or "",
                "business_types": [],
                "jobs": 0,
                "amount": 0.0,
            }
        business_type = _enum_value(doc.business_type)
        if business_type not in entry["business_types"]:
            entry["business_types"].append(business_type)
        entry["jobs"] += 1
        entry["amount"] += doc.total or 0.0

    rows = [
        [
            c["name"], c["email"], c["phone"], c["address"],
            ", ".join(c["business_types"]), str(c["jobs"]), _money(c["amount"]),
        ]
        for c in customers.values()
    ]
    return _write(CUSTOMER_HEADERS, rows)
