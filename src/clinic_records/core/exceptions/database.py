"""Database-related exceptions for clinic-records."""

from typing import Optional

from .base import ClinicRecordsError


class DatabaseError(ClinicRecordsError):
    """Base class for database-related errors."""
    pass


class StorageError(DatabaseError):
    """Raised when the database handle fails (connection, syntax or constraint errors)."""

    def __init__(self, message: str, operation: Optional[str] = None):
        self.operation = operation
        details = {"operation": operation} if operation else {}
        super().__init__(message, details=details)


class QueryError(DatabaseError):
    """Raised when a query cannot be built from the given arguments."""
    pass


class RepositoryError(DatabaseError):
    """Base class for repository-related errors."""
    pass


class EntityNotFoundError(RepositoryError):
    """Raised when an entity is not found in the repository."""

    def __init__(self, entity_type: str, identifier: object):
        self.entity_type = entity_type
        self.identifier = identifier
        super().__init__(
            f"{entity_type} with identifier '{identifier}' not found",
            details={"entity_type": entity_type, "identifier": str(identifier)}
        )


class InvalidIdentifierError(RepositoryError):
    """Raised when an id argument is zero or missing."""
    pass


class EmptyAttributesError(RepositoryError):
    """Raised when a create or update is given no attributes."""

    def __init__(self, entity_type: str):
        self.entity_type = entity_type
        super().__init__(
            f"Zero key in the attributes map for {entity_type}",
            details={"entity_type": entity_type}
        )


class InvalidAssociationError(RepositoryError):
    """Raised when an unknown association is requested for preloading."""

    def __init__(self, entity_type: str, association: str):
        self.entity_type = entity_type
        self.association = association
        super().__init__(
            f"{entity_type} has no association named '{association}'",
            details={"entity_type": entity_type, "association": association}
        )
