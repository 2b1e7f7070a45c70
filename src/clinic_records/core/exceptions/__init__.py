"""Exceptions module for clinic-records.

This module provides the complete exception hierarchy, organized by domain
concerns and database concerns.
"""

from .base import (
    ClinicRecordsError,
    create_error_response,
)

from .domain import (
    # Configuration Errors
    ConfigurationError,
    PaginationConfigurationError,

    # Pagination Errors
    PaginationError,
    PageBoundaryError,
    InvalidDirectionError,

    # Validation Errors
    ValidationError,
    InvalidColumnError,
    EntityValidationError,
)

from .database import (
    DatabaseError,
    StorageError,
    QueryError,
    RepositoryError,
    EntityNotFoundError,
    InvalidIdentifierError,
    EmptyAttributesError,
    InvalidAssociationError,
)

__all__ = [
    "ClinicRecordsError",
    "create_error_response",
    "ConfigurationError",
    "PaginationConfigurationError",
    "PaginationError",
    "PageBoundaryError",
    "InvalidDirectionError",
    "ValidationError",
    "InvalidColumnError",
    "EntityValidationError",
    "DatabaseError",
    "StorageError",
    "QueryError",
    "RepositoryError",
    "EntityNotFoundError",
    "InvalidIdentifierError",
    "EmptyAttributesError",
    "InvalidAssociationError",
]
