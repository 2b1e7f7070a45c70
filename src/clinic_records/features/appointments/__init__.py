"""Appointments feature module."""

from .entities import Appointment
from .repositories import AppointmentRepository

__all__ = ["Appointment", "AppointmentRepository"]
