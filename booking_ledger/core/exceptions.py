"""
Error taxonomy for the ledger.

Services raise these; the API layer renders them with a single exception
handler. Every failure maps to a distinct `code` so callers can tell
"nothing happened" (validation, auth) from "storage failed" (persistence,
timeout).
"""

from typing import Any, Optional


class LedgerError(Exception):
    status_code: int = 500
    code: str = "ledger_error"
    default_detail: str = "Ledger operation failed"

    def __init__(self, detail: Optional[str] = None, **context: Any):
        self.detail = detail or self.default_detail
        self.context = context
        super().__init__(self.detail)


class Unauthenticated(LedgerError):
    status_code = 401
    code = "unauthenticated"
    default_detail = "Authentication required"


class InvalidCredentials(LedgerError):
    status_code = 401
    code = "invalid_credentials"
    default_detail = "Invalid email or password"


class Forbidden(LedgerError):
    status_code = 403
    code = "forbidden"
    default_detail = "Not allowed to access this resource"


class ValidationError(LedgerError):
    status_code = 422
    code = "validation_error"
    default_detail = "Invalid booking payload"


class NotFound(LedgerError):
    status_code = 404
    code = "not_found"
    default_detail = "Resource not found"


class UnknownOwner(NotFound):
    code = "unknown_owner"
    default_detail = "Booking owner does not exist"


class Conflict(LedgerError):
    status_code = 409
    code = "conflict"
    default_detail = "Resource already exists"


class InvalidTransition(Conflict):
    code = "invalid_transition"
    default_detail = "Booking cannot move to the requested status"


class PersistenceError(LedgerError):
    status_code = 503
    code = "persistence_error"
    default_detail = "Could not persist changes"


class Timeout(LedgerError):
    status_code = 504
    code = "timeout"
    default_detail = "Storage did not respond in time"
