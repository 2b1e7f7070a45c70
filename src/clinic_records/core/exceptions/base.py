"""Root of the clinic-records exception hierarchy.

Every exception carries a machine-readable ``error_code`` (the class name
unless given) and a ``details`` mapping, so callers can turn any library
error into a structured payload with create_error_response().
"""

from typing import Any, Dict, Optional


class ClinicRecordsError(Exception):
    """Base exception for all clinic-records errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or type(self).__name__
        self.details = dict(details or {})

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.error_code,
            "message": self.message,
            "details": self.details,
            "type": type(self).__name__,
        }


def create_error_response(exception: ClinicRecordsError) -> Dict[str, Any]:
    """Wrap an exception's fields in an ``{"error": {...}}`` payload."""
    return {"error": exception.to_dict()}
