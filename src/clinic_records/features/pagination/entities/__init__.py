"""Pagination entities for sort specs, directions and cursor state."""

from .requests import (
    PageDirection,
    SortField,
    SortInput,
    SortOrder,
    SortSpec,
    normalize_sort_spec,
    order_by_sql,
)
from .cursor import PageCursor

__all__ = [
    "PageDirection",
    "SortField",
    "SortInput",
    "SortOrder",
    "SortSpec",
    "normalize_sort_spec",
    "order_by_sql",
    "PageCursor",
]
