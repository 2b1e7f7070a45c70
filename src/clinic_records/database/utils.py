"""
Database utility functions for row mapping and statement building.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .expressions import validate_column


def process_database_record(
    data: Any,  # Can be Dict or asyncpg.Record
    text_fields: Optional[Iterable[str]] = None,
    int_fields: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """Process a database record for entity construction.

    - Converts asyncpg.Record to dict if necessary
    - NULL text columns become ''
    - NULL integer columns (foreign keys) become 0

    Args:
        data: Raw database record (Dict or asyncpg.Record)
        text_fields: Field names that hold text
        int_fields: Field names that hold integers

    Returns:
        Processed data ready for the entity constructor
    """
    if hasattr(data, 'items'):
        data = dict(data)

    for field in text_fields or ():
        if field in data and data[field] is None:
            data[field] = ""

    for field in int_fields or ():
        if field in data and data[field] is None:
            data[field] = 0

    return data


def build_insert_query(
    table_name: str,
    data: Mapping[str, Any],
    returning: str = "id"
) -> Tuple[str, List[Any]]:
    """Build an INSERT ... RETURNING statement.

    Args:
        table_name: Target table
        data: Column values; keys are emitted in sorted order
        returning: Column to return

    Returns:
        Tuple of (query, parameters)
    """
    fields = sorted(validate_column(key) for key in data.keys())
    placeholders = [f"${i + 1}" for i in range(len(fields))]
    query = (
        f"INSERT INTO {table_name} ({', '.join(fields)}) "
        f"VALUES ({', '.join(placeholders)}) RETURNING {returning}"
    )
    return query, [data[key] for key in fields]


def build_update_query(
    table_name: str,
    record_id: int,
    data: Mapping[str, Any],
) -> Tuple[str, List[Any]]:
    """Build an UPDATE ... WHERE id = $1 statement.

    Returns:
        Tuple of (query, parameters)
    """
    fields = sorted(validate_column(key) for key in data.keys())
    set_clauses = [f"{key} = ${i + 2}" for i, key in enumerate(fields)]
    query = f"UPDATE {table_name} SET {', '.join(set_clauses)} WHERE id = $1"
    return query, [record_id] + [data[key] for key in fields]


def affected_rows(status: Optional[str]) -> int:
    """Parse the row count out of an asyncpg command status such as 'DELETE 3'."""
    if not status:
        return 0
    try:
        return int(status.split()[-1])
    except (ValueError, IndexError):
        return 0
