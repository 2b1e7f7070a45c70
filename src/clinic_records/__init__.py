"""clinic-records - async data access for the clinic schema.

This library provides keyset (seek) pagination, generic table repositories
and per-entity repositories for physicians, patients, appointments and
pictures on top of asyncpg.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

from .config import ClinicSettings, LoggingConfig, get_settings

from .core.exceptions import (
    # Base Exception
    ClinicRecordsError,

    # Common Exceptions
    ConfigurationError,
    DatabaseError,
    EntityNotFoundError,
    PageBoundaryError,
    PaginationConfigurationError,
    PaginationError,
    RepositoryError,
    StorageError,
    ValidationError,

    # Utility Functions
    create_error_response,
)

from .database import (
    DatabaseManager,
    close_database,
    get_database,
    init_database,
    raw,
    where,
)

from .features.pagination import (
    KeysetPaginator,
    PageCursor,
    PageDirection,
    RowSource,
    SortField,
    SortOrder,
)

from .repositories import BaseRepository

from .features.appointments import Appointment, AppointmentRepository
from .features.patients import Patient, PatientRepository
from .features.physicians import Physician, PhysicianRepository
from .features.pictures import Picture, PictureRepository

__all__ = [
    "__version__",

    # Configuration
    "ClinicSettings",
    "LoggingConfig",
    "get_settings",

    # Exceptions
    "ClinicRecordsError",
    "ConfigurationError",
    "DatabaseError",
    "EntityNotFoundError",
    "PageBoundaryError",
    "PaginationConfigurationError",
    "PaginationError",
    "RepositoryError",
    "StorageError",
    "ValidationError",
    "create_error_response",

    # Database
    "DatabaseManager",
    "close_database",
    "get_database",
    "init_database",
    "raw",
    "where",

    # Pagination
    "KeysetPaginator",
    "PageCursor",
    "PageDirection",
    "RowSource",
    "SortField",
    "SortOrder",

    # Repositories
    "BaseRepository",
    "Appointment",
    "AppointmentRepository",
    "Patient",
    "PatientRepository",
    "Physician",
    "PhysicianRepository",
    "Picture",
    "PictureRepository",
]
