"""Pictures feature module."""

from .entities import Picture
from .repositories import PictureRepository

__all__ = ["Picture", "PictureRepository"]
