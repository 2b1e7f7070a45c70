"""Pagination services."""

from .keyset_paginator import KeysetPaginator

__all__ = ["KeysetPaginator"]
