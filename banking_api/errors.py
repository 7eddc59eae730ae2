"""
Typed application errors.

Every failure the core can classify is one of the classes below.
Each carries the HTTP status class and a stable error code; the
API layer maps them to responses without inspecting messages.
Anything that is not a BankingError is an unexpected failure.
"""


class BankingError(Exception):
    """Base class for all classified errors."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def public_details(self) -> dict:
        """Details that may be returned to the caller."""
        return {}

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.code}: {self.message}>"


class ValidationError(BankingError):
    """Malformed or out-of-range input."""

    status_code = 400
    code = "VALIDATION_ERROR"

    @property
    def public_details(self) -> dict:
        return self.details


class UnauthorizedError(BankingError):
    """Missing, invalid, expired or revoked credentials."""

    status_code = 401
    code = "UNAUTHORIZED"


class TokenExpiredError(UnauthorizedError):
    code = "TOKEN_EXPIRED"


class ForbiddenError(BankingError):
    """Authenticated, but not entitled to the resource."""

    status_code = 403
    code = "FORBIDDEN"


class NotFoundError(BankingError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(BankingError):
    """Uniqueness violation, e.g. duplicate email or account id."""

    status_code = 409
    code = "CONFLICT"


class ConcurrentModificationError(ConflictError):
    """
    A conditional write kept losing to concurrent writers.

    Transient: the caller may retry the whole request.
    """

    code = "CONCURRENT_MODIFICATION"

    @property
    def public_details(self) -> dict:
        return self.details


class InternalError(BankingError):
    """Unexpected failure. The message is never shown to the caller."""

    status_code = 500
    code = "INTERNAL_ERROR"


class TransferIncompleteError(InternalError):
    """
    A transfer debited its source but could neither credit the
    destination nor reverse the debit.

    The details name everything needed to reconcile by hand.
    """

    code = "TRANSFER_INCOMPLETE"

    @property
    def public_details(self) -> dict:
        return self.details
