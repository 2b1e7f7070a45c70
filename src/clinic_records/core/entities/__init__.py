"""Shared entity base classes."""

from .base import BaseEntity

__all__ = ["BaseEntity"]
