"""Domain-specific exceptions for clinic-records.

Configuration, pagination and validation errors raised by the library
before or without touching the database.
"""

from typing import Dict, List, Optional

from .base import ClinicRecordsError


# Configuration Errors
class ConfigurationError(ClinicRecordsError):
    """Raised when there's a configuration issue."""
    pass


class PaginationConfigurationError(ConfigurationError):
    """Raised when a paginator is not configured for keyset navigation."""

    def __init__(self, message: str, setting: Optional[str] = None):
        details = {"setting": setting} if setting else {}
        super().__init__(message, details=details)


# Pagination Errors
class PaginationError(ClinicRecordsError):
    """Base class for pagination navigation errors."""
    pass


class PageBoundaryError(PaginationError):
    """Raised when navigating before the first page or past the last page."""

    def __init__(self, message: str, page_index: int, total_pages: int):
        self.page_index = page_index
        self.total_pages = total_pages
        super().__init__(
            message,
            details={"page_index": page_index, "total_pages": total_pages}
        )


class InvalidDirectionError(PaginationError, ValueError):
    """Raised when a navigation direction is not previous, current or next."""

    def __init__(self, direction: object):
        self.direction = direction
        super().__init__(
            f"Invalid page direction {direction!r}: expected one of previous, current or next",
            details={"direction": str(direction)}
        )


# Validation Errors
class ValidationError(ClinicRecordsError):
    """Base class for input validation errors."""
    pass


class InvalidColumnError(ValidationError):
    """Raised when a column name is not a safe SQL identifier."""

    def __init__(self, column: str):
        self.column = column
        super().__init__(f"Invalid column name: {column!r}", details={"column": column})


class EntityValidationError(ValidationError):
    """Raised when an entity fails its validation rules."""

    def __init__(self, entity_type: str, errors: Dict[str, List[str]]):
        self.entity_type = entity_type
        self.errors = errors
        summary = "; ".join(
            f"{field}: {', '.join(messages)}" for field, messages in sorted(errors.items())
        )
        super().__init__(
            f"Validate {entity_type} error: {summary}",
            details={"entity_type": entity_type, "errors": errors}
        )
