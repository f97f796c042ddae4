"""
Domain errors raised by the reconciliation engine and the CRUD services.

Routes do not catch these; app.main registers one handler per class and
turns them into JSON responses carrying the offending field and a reason.
"""
from typing import Optional


class LedgerError(Exception):
    """Base class for recoverable, user-correctable ledger errors."""

    status_code = 400

    def __init__(self, reason: str, field: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.field = field

    def to_dict(self) -> dict:
        return {"success": False, "field": self.field, "reason": self.reason}


class PaymentValidationError(LedgerError):
    """Payment amount rejected before persistence."""


class BalanceMismatchError(LedgerError):
    """Client-computed balance disagrees with the engine."""


class InvariantViolationError(LedgerError):
    """Stored totals would no longer match their components."""


class ConflictError(LedgerError):
    """Duplicate or overlapping record, or a delete blocked by references."""

    status_code = 409


class NotFoundError(LedgerError):
    """A referenced record does not exist."""

    status_code = 404
