"""
errors.py — Error Classification for the Basket Service

Every failure a controller operation can surface is one of the classes below.
Each class knows the HTTP status it maps to, so the API layer needs a single
exception handler.

Taxonomy:
    • ValidationError        — malformed input, never reaches the store (400)
    • NotFoundError          — no basket exists for the customer (404)
    • StoreError             — any other store failure (400)
    • ConfirmationReadError  — write succeeded but the read-back failed (400)

The original exception is kept as ``__cause__`` (``raise ... from e``).
"""


class BasketServiceError(Exception):
    """Base class for all classified basket service failures."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BasketServiceError):
    status_code = 400


class NotFoundError(BasketServiceError):
    status_code = 404


class StoreError(BasketServiceError):
    """Store-level failure. ``persisted`` tells whether the data was written."""
    status_code = 400
    persisted = False


class ConfirmationReadError(StoreError):
    """
    Partial failure during upsert: the basket was written, but reading it
    back for the response failed. Callers can rely on the data being stored.
    """
    persisted = True
