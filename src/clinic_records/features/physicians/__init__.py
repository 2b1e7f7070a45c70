"""Physicians feature module."""

from .entities import Physician
from .repositories import PhysicianRepository

__all__ = ["Physician", "PhysicianRepository"]
