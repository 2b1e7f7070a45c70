"""Keyset pagination for clinic-records.

This module provides:
- Sort specifications with deterministic column order
- Immutable cursor state (first/last id, page index, totals)
- The RowSource protocol every repository satisfies
- KeysetPaginator, the generic previous/current/next navigator
"""

# Core entities
from .entities import (
    PageCursor,
    PageDirection,
    SortField,
    SortInput,
    SortOrder,
    SortSpec,
    normalize_sort_spec,
    order_by_sql,
)

# Protocols
from .protocols import RowSource

# Services
from .services import KeysetPaginator

__all__ = [
    # Entities
    "PageCursor",
    "PageDirection",
    "SortField",
    "SortInput",
    "SortOrder",
    "SortSpec",
    "normalize_sort_spec",
    "order_by_sql",

    # Protocols
    "RowSource",

    # Services
    "KeysetPaginator",
]
