"""Repository base classes."""

from .base import BaseRepository, WhereInput

__all__ = ["BaseRepository", "WhereInput"]
