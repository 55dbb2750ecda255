from __future__ import annotations

from datetime import date
from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist in the store."""


class UpstreamFailure(DomainError):
    """Raised when a record store read or write fails.

    The driver error is chained as ``__cause__``.
    """

    def __init__(self, message: str, *, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class DataIntegrityWarning(UserWarning):
    """Non-fatal inconsistency found in a stored record.

    Never raised by the engine; instances are logged and returned alongside
    the computed result.
    """

    def __init__(self, message: str, *, employee_id: Any = None, day: Optional[date] = None):
        super().__init__(message)
        self.message = message
        self.employee_id = employee_id
        self.day = day

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DataIntegrityWarning):
            return NotImplemented
        return (self.message, self.employee_id, self.day) == (other.message, other.employee_id, other.day)

    def __hash__(self) -> int:
        return hash((self.message, self.employee_id, self.day))

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "employee_id": self.employee_id,
            "date": self.day.isoformat() if self.day else None,
        }
