"""
PDF download endpoints.

GET /api/invoices/{invoice_id}/pdf
GET /api/estimates/{estimate_id}/pdf
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from .. import documents, models
from ..database import get_db
from ..errors import LevelQuoteError
from ..pdf_generator import generate_document_pdf
from .documents import http_error

router = APIRouter(tags=["pdf"])


def _pdf_response(db: Session, doc_type: models.DocumentType, document_id: int) -> Response:
    try:
        document = documents.get_document(db, doc_type, document_id)
    except LevelQuoteError as e:
        raise http_error(e)

    filename = f"{doc_type.value.capitalize()}-{document.document_number}.pdf"
    return Response(
        content=generate_document_pdf(document),
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
        },
    )


@router.get("/invoices/{invoice_id}/pdf")
def download_invoice_pdf(invoice_id: int, db: Session = Depends(get_db)):
    return _pdf_response(db, models.DocumentType.INVOICE, invoice_id)


@router.get("/estimates/{estimate_id}/pdf")
def download_estimate_pdf(estimate_id: int, db: Session = Depends(get_db)):
    return _pdf_response(db, models.DocumentType.ESTIMATE, estimate_id)
