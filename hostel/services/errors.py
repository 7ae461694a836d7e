"""Domain error taxonomy.

Every failure surfaced by the services is one of these kinds. The API layer
maps each ``code`` to an HTTP status; nothing else needs to know about HTTP.
"""

from decimal import Decimal


class AppError(Exception):
    """Base application error."""

    code = "error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(AppError):
    """Referenced resident, room or record does not exist."""

    code = "not_found"


class ConflictError(AppError):
    """Resident already assigned, duplicate identifier, or room still in use."""

    code = "conflict"


class CapacityError(AppError):
    """Room has no free bed."""

    code = "capacity"


class InvalidStateError(AppError):
    """Operation not allowed from the current state (e.g. same-room transfer)."""

    code = "invalid_state"


class PreconditionError(AppError):
    """Billing requested for a resident without an active assignment."""

    code = "precondition"


class ValidationError(AppError):
    """Payload or amount failed validation."""

    code = "validation"


class PaymentMismatchError(ValidationError):
    """Payment amount differs from the computed total payable."""

    def __init__(self, message: str, expected: Decimal):
        self.expected = expected
        super().__init__(message)


class InternalError(AppError):
    """Storage or transaction failure; the transaction was rolled back."""

    code = "internal"


__all__ = [
    "AppError",
    "NotFoundError",
    "ConflictError",
    "CapacityError",
    "InvalidStateError",
    "PreconditionError",
    "ValidationError",
    "PaymentMismatchError",
    "InternalError",
]
