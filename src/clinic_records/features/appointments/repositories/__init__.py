from .appointment_repository import AppointmentRepository

__all__ = ["AppointmentRepository"]
