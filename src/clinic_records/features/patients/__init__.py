"""Patients feature module."""

from .entities import Patient
from .repositories import PatientRepository

__all__ = ["Patient", "PatientRepository"]
