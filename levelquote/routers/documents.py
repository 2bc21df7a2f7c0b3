"""
Invoice and estimate endpoints.

Both document kinds share one set of routes, built per DocumentType:

    /api/invoices/...   /api/estimates/...

plus POST /api/estimates/{id}/convert. Domain errors are translated to HTTP
status codes here; save-pipeline failures come back as 422 with the messages.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional

from .. import documents, models, schemas
from ..calculators.foam_leveling import FoamLevelingCalculator
from ..database import get_db
from ..errors import (
    ConversionError,
    CustomerNotFoundError,
    DocumentNotFoundError,
    InvalidStatusError,
    LevelQuoteError,
    ServiceLineNotFoundError,
    UnpriceableCalculationError,
)
from ..save_pipeline import SaveResult
from ..service_lines import build_foam_service_line

ERROR_STATUS = {
    DocumentNotFoundError: 404,
    CustomerNotFoundError: 404,
    ServiceLineNotFoundError: 404,
    InvalidStatusError: 400,
    ConversionError: 409,
    UnpriceableCalculationError: 422,
}


def http_error(exc: LevelQuoteError) -> HTTPException:
    return HTTPException(status_code=ERROR_STATUS.get(type(exc), 400), detail=str(exc))


def saved_or_422(result: SaveResult) -> models.Document:
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.errors)
    return result.document


def build_router(doc_type: models.DocumentType) -> APIRouter:
    router = APIRouter(prefix=f"/{doc_type.value}s", tags=[f"{doc_type.value}s"])

    @router.post("/", response_model=schemas.Document, status_code=201)
    def create_document(payload: schemas.DocumentCreate, db: Session = Depends(get_db)):
        try:
            return saved_or_422(documents.create_document(db, doc_type, payload.model_dump()))
        except LevelQuoteError as e:
            raise http_error(e)

    @router.get("/", response_model=List[schemas.Document])
    def list_documents(status: Optional[str] = None, skip: int = 0, limit: int = 100,
                       db: Session = Depends(get_db)):
        try:
            return documents.list_documents(db, doc_type, status=status, skip=skip, limit=limit)
        except LevelQuoteError as e:
            raise http_error(e)

    @router.get("/{document_id}", response_model=schemas.Document)
    def get_document(document_id: int, db: Session = Depends(get_db)):
        try:
            return documents.get_document(db, doc_type, document_id)
        except LevelQuoteError as e:
            raise http_error(e)

    @router.patch("/{document_id}", response_model=schemas.Document)
    def update_document(document_id: int, update: schemas.DocumentUpdate, db: Session = Depends(get_db)):
        try:
            data = update.model_dump(exclude_unset=True)
            return saved_or_422(documents.update_document(db, doc_type, document_id, data))
        except LevelQuoteError as e:
            raise http_error(e)

    @router.delete("/{document_id}", status_code=204)
    def delete_document(document_id: int, db: Session = Depends(get_db)):
        try:
            documents.delete_document(db, doc_type, document_id)
        except LevelQuoteError as e:
            raise http_error(e)

    @router.put("/{document_id}/status", response_model=schemas.Document)
    def set_status(document_id: int, update: schemas.StatusUpdate, db: Session = Depends(get_db)):
        try:
            return saved_or_422(documents.set_status(db, doc_type, document_id, update.status))
        except LevelQuoteError as e:
            raise http_error(e)

    @router.post("/{document_id}/services", response_model=schemas.Document)
    def add_service(document_id: int, line: schemas.ServiceLineCreate, db: Session = Depends(get_db)):
        try:
            return saved_or_422(documents.add_service_line(db, doc_type, document_id, line.model_dump()))
        except LevelQuoteError as e:
            raise http_error(e)

    @router.delete("/{document_id}/services/{line_id}", response_model=schemas.Document)
    def remove_service(document_id: int, line_id: int, db: Session = Depends(get_db)):
        try:
            return saved_or_422(documents.remove_service_line(db, doc_type, document_id, line_id))
        except LevelQuoteError as e:
            raise http_error(e)

    @router.post("/{document_id}/services/foam-leveling", response_model=schemas.Document)
    def add_foam_leveling(document_id: int, payload: schemas.FoamServiceRequest,
                          db: Session = Depends(get_db)):
        """Run the foam leveling calculator and add the priced job as a line."""
        try:
            documents.get_document(db, doc_type, document_id)
            fields = payload.model_dump(
                exclude_none=True,
                exclude={"price_point", "custom_price", "per_area", "description"},
            )
            result = FoamLevelingCalculator().calculate(fields)
            line = build_foam_service_line(
                result,
                price_point=payload.price_point,
                per_area=payload.per_area,
                description=payload.description,
                custom_price=payload.custom_price,
            )
            return saved_or_422(documents.add_service_line(db, doc_type, document_id, line))
        except LevelQuoteError as e:
            raise http_error(e)

    return router


invoices_router = build_router(models.DocumentType.INVOICE)
estimates_router = build_router(models.DocumentType.ESTIMATE)


@estimates_router.post("/{estimate_id}/convert", response_model=schemas.Document, status_code=201)
def convert_estimate(estimate_id: int, db: Session = Depends(get_db)):
    """Create a draft invoice from the estimate. Returns the new invoice."""
    try:
        return saved_or_422(documents.convert_estimate_to_invoice(db, estimate_id))
    except LevelQuoteError as e:
        raise http_error(e)
