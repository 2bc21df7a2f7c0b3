"""
Domain exceptions raised by the document managers.

The pricing calculators never raise for user input; these only come out of
the persistence/document layer and are mapped to HTTP errors by the routers.
"""


class LevelQuoteError(Exception):
    """Base class for all application errors."""


class DocumentNotFoundError(LevelQuoteError):
    def __init__(self, doc_type: str, document_id: int):
        self.doc_type = doc_type
        self.document_id = document_id
        super().__init__(f"{str(doc_type).capitalize()} {document_id} not found")


class CustomerNotFoundError(LevelQuoteError):
    def __init__(self, customer_id: int):
        self.customer_id = customer_id
        super().__init__(f"Customer {customer_id} not found")


class ServiceLineNotFoundError(LevelQuoteError):
    def __init__(self, line_id: int):
        self.line_id = line_id
        super().__init__(f"Service line {line_id} not found")


class InvalidStatusError(LevelQuoteError):
    def __init__(self, doc_type: str, status: str, allowed: list):
        self.status = status
        self.allowed = allowed
        super().__init__(f"Status '{status}' is not valid for {doc_type}; expected one of {allowed}")


class ConversionError(LevelQuoteError):
    """Estimate cannot be converted (already converted, rejected, ...)."""


class UnpriceableCalculationError(LevelQuoteError):
    """A calculation result has no price — enter valid dimensions before adding it."""

    def __init__(self, message: str = "Please enter valid length and width before adding this service."):
        super().__init__(message)
