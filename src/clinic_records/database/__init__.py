"""Database utilities for clinic-records."""

from .connection import (
    DatabaseManager,
    get_database,
    init_database,
    close_database,
)
from .expressions import (
    AllOf,
    Condition,
    Expression,
    RawCondition,
    and_,
    filters_to_expression,
    raw,
    rebind,
    render,
    validate_column,
    where,
)
from .utils import (
    affected_rows,
    build_insert_query,
    build_update_query,
    process_database_record,
)

__all__ = [
    # Connection management
    "DatabaseManager",
    "get_database",
    "init_database",
    "close_database",
    # Expressions
    "AllOf",
    "Condition",
    "Expression",
    "RawCondition",
    "and_",
    "filters_to_expression",
    "raw",
    "rebind",
    "render",
    "validate_column",
    "where",
    # Utilities
    "affected_rows",
    "build_insert_query",
    "build_update_query",
    "process_database_record",
]
