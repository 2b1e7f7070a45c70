"""Pagination protocols."""

from .row_source import RowSource

__all__ = ["RowSource"]
