# stockroom/core/errors.py
"""
Domain errors raised by the service layer.

They subclass FastAPI's HTTPException so services can raise them directly
and routers need no translation layer. Each error keeps a human message and
a context dict (which entity, which field, available quantity ...) so
callers, including tests, can act on them without parsing strings.
"""

from typing import Any

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base class for all domain errors."""

    status_code_default: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.context = context
        detail: Any = {"message": message, **context} if context else message
        super().__init__(status_code=self.status_code_default, detail=detail)

    def __str__(self) -> str:
        return self.message


# ----- Validation -----


class ValidationError(AppError):
    """Missing or malformed input detected by a service. No side effects."""

    status_code_default = status.HTTP_400_BAD_REQUEST


class InvalidInputError(ValidationError):
    pass


# ----- Not found -----


class NotFoundError(AppError):
    """Entity absent, or soft-deleted where an active one was required."""

    status_code_default = status.HTTP_404_NOT_FOUND


class CategoryNotFoundError(NotFoundError):
    pass


class ProductNotFoundError(NotFoundError):
    pass


class CustomerNotFoundError(NotFoundError):
    pass


class StockNotFoundError(NotFoundError):
    pass


class OrderNotFoundError(NotFoundError):
    pass


class UserNotFoundError(NotFoundError):
    pass


# ----- Conflicts / business rules -----


class ConflictError(AppError):
    """Uniqueness violation on create/update/restore, or a blocked delete."""

    status_code_default = status.HTTP_409_CONFLICT


class InsufficientStockError(AppError):
    """Requested quantity exceeds what a batch has on hand."""

    status_code_default = status.HTTP_409_CONFLICT


# ----- Infrastructure -----


class TransactionError(AppError):
    """The store failed to commit; everything was rolled back."""

    status_code_default = status.HTTP_503_SERVICE_UNAVAILABLE
