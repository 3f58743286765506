"""Error taxonomy shared by every component, and the store error translation."""

import logging
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

FOREIGN_KEY_VIOLATION = "23503"
UNIQUE_VIOLATION = "23505"
NOT_NULL_VIOLATION = "23502"


class ErrorCode(Enum):
    """Error codes returned alongside every error message."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    ALREADY_CANCELLED = "ALREADY_CANCELLED"
    STORE_ERROR = "STORE_ERROR"


@dataclass(eq=False)
class ApiError(Exception):
    """Base error with an HTTP status, a code and a user-safe message.

    ``details`` is safe to show to any caller. ``debug`` carries the raw
    store message and is only rendered outside production.
    """

    message: str
    code: ErrorCode = ErrorCode.STORE_ERROR
    status_code: int = 500
    details: object = None
    debug: str | None = field(default=None, repr=False)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self, include_debug: bool = False) -> dict:
        body = {"error": self.message, "code": self.code.value}
        if self.details is not None:
            body["details"] = self.details
        if include_debug and self.debug:
            body["debug"] = self.debug
        return body


class ValidationError(ApiError):
    """Malformed or missing input."""

    def __init__(self, message: str, details=None, debug: str | None = None) -> None:
        super().__init__(message, ErrorCode.VALIDATION_FAILED, 400, details, debug)


class NotFoundError(ApiError):
    """Referenced entity is absent."""

    def __init__(self, message: str, debug: str | None = None) -> None:
        super().__init__(message, ErrorCode.NOT_FOUND, 404, None, debug)


class ConflictError(ApiError):
    """Duplicate unique value or a row still referenced elsewhere."""

    def __init__(self, message: str, debug: str | None = None) -> None:
        super().__init__(message, ErrorCode.CONFLICT, 409, None, debug)


class AuthenticationError(ApiError):
    """Bad credentials, or a missing/invalid bearer token."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message, ErrorCode.AUTHENTICATION_FAILED, 401)


class UnexpectedStoreError(ApiError):
    def __init__(self, debug: str | None = None) -> None:
        super().__init__("Server error", ErrorCode.STORE_ERROR, 500, None, debug)


class BookingAlreadyCancelledError(ApiError):
    """Raised when a customer cancels a booking that is already cancelled."""

    def __init__(self) -> None:
        super().__init__("Booking is already cancelled", ErrorCode.ALREADY_CANCELLED, 400)


def _sqlstate(orig) -> str | None:
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code:
        return code
    text = str(orig).upper()
    if "FOREIGN KEY" in text:
        return FOREIGN_KEY_VIOLATION
    if "UNIQUE" in text:
        return UNIQUE_VIOLATION
    if "NOT NULL" in text:
        return NOT_NULL_VIOLATION
    return None


def _constraint_name(orig) -> str:
    diag = getattr(orig, "diag", None)
    return (getattr(diag, "constraint_name", None) or "") if diag else ""


def translate_integrity_error(exc, references=None, on_foreign_key=None) -> ApiError:
    """Map a store constraint violation onto the error taxonomy.

    ``references`` maps a foreign-key column name to the error to raise when
    the violated constraint names that column. ``on_foreign_key`` replaces the
    generic foreign-key error (e.g. a conflict when deleting a referenced row).
    """
    orig = getattr(exc, "orig", exc)
    message = str(orig)
    code = _sqlstate(orig)

    if code == FOREIGN_KEY_VIOLATION:
        constraint = _constraint_name(orig)
        for column, error in (references or {}).items():
            if column in constraint:
                error.debug = message
                return error
        if on_foreign_key is not None:
            on_foreign_key.debug = message
            return on_foreign_key
        return ValidationError(
            "Invalid reference: One or more referenced records do not exist", debug=message
        )
    if code == UNIQUE_VIOLATION:
        return ConflictError("Duplicate entry: This record already exists", debug=message)
    if code == NOT_NULL_VIOLATION:
        return ValidationError("Missing required field", debug=message)

    logger.error("Unmapped store error: %s", message)
    return UnexpectedStoreError(debug=message)
