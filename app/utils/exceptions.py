"""
Exception handling utilities.

Defines the platform error taxonomy. Every business-rule violation is a
PlatformError subclass carrying the HTTP status and a stable error code;
the API error middleware renders them, and anything else is treated as
an unexpected server error.
"""

from sqlalchemy.exc import OperationalError


class PlatformError(Exception):
    """Base class for expected, caller-facing errors."""

    status_code: int = 500
    error_code: str = "server_error"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PlatformError):
    """Malformed or out-of-range input."""

    status_code = 400
    error_code = "validation_error"
    default_message = "Invalid request"


class InsufficientFundsError(PlatformError):
    """Balance is lower than the requested debit."""

    status_code = 400
    error_code = "insufficient_funds"
    default_message = "Insufficient balance"


class UnauthorizedError(PlatformError):
    """Missing or invalid credentials."""

    status_code = 401
    error_code = "unauthorized"
    default_message = "Authentication required"


class ForbiddenError(PlatformError):
    """Caller is not allowed to act on the resource."""

    status_code = 403
    error_code = "forbidden"
    default_message = "Access denied"


class NotFoundError(PlatformError):
    """Unknown id."""

    status_code = 404
    error_code = "not_found"
    default_message = "Not found"


class ConflictError(PlatformError):
    """State does not allow the requested transition."""

    status_code = 409
    error_code = "conflict"
    default_message = "Conflicting state"


class AlreadyInvestedError(ConflictError):
    """An investment already references the deposit."""

    status_code = 400
    error_code = "already_invested"
    default_message = "Investment already started for this deposit"


class NotApprovedError(ConflictError):
    """Deposit is not approved."""

    status_code = 400
    error_code = "not_approved"
    default_message = "Deposit not approved"


class TooManyRequestsError(PlatformError):
    """Rate limit exceeded."""

    status_code = 429
    error_code = "too_many_requests"
    default_message = "Too many attempts. Try again later"


class ServerError(PlatformError):
    """Unexpected failure surfaced with a generic message."""


# Errors the sweep treats as transient: the investment stays unpaid
# and is picked up by the next run
TRANSIENT_ERRORS = (
    OperationalError,
)


def is_client_error(exc: Exception) -> bool:
    """
    Check if exception is a caller-correctable error.

    Args:
        exc: Exception to check

    Returns:
        True for PlatformError with a 4xx status
    """
    return isinstance(exc, PlatformError) and 400 <= exc.status_code < 500


def is_transient(exc: Exception) -> bool:
    """
    Check if exception is a transient infrastructure failure.

    Args:
        exc: Exception to check

    Returns:
        True if a later retry may succeed
    """
    return isinstance(exc, TRANSIENT_ERRORS)
