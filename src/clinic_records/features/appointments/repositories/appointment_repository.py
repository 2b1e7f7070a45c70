"""Appointment repository."""

import logging
from typing import TYPE_CHECKING, List

from ....repositories import BaseRepository
from ..entities import Appointment

if TYPE_CHECKING:
    from ...patients.entities import Patient
    from ...patients.repositories import PatientRepository
    from ...physicians.entities import Physician
    from ...physicians.repositories import PhysicianRepository

logger = logging.getLogger(__name__)


class AppointmentRepository(BaseRepository[Appointment]):
    """Repository for the ``appointments`` table.

    An appointment belongs to one physician and one patient.
    """

    entity_class = Appointment
    table_name = "appointments"
    associations = ("physician", "patient")

    @property
    def physicians(self) -> "PhysicianRepository":
        from ...physicians.repositories import PhysicianRepository
        return PhysicianRepository(self.database)

    @property
    def patients(self) -> "PatientRepository":
        from ...patients.repositories import PatientRepository
        return PatientRepository(self.database)

    async def physician_of(self, appointment: Appointment) -> "Physician":
        """Load the physician an appointment belongs to and attach it."""
        appointment.physician = await self.physicians.find(appointment.physician_id)
        return appointment.physician

    async def patient_of(self, appointment: Appointment) -> "Patient":
        """Load the patient an appointment belongs to and attach it."""
        appointment.patient = await self.patients.find(appointment.patient_id)
        return appointment.patient

    async def _preload_physician(self, appointments: List[Appointment]) -> None:
        ids = sorted({a.physician_id for a in appointments if a.physician_id})
        if not ids:
            return
        by_id = {p.id: p for p in await self.physicians.find_many(*ids)}
        for appointment in appointments:
            appointment.physician = by_id.get(appointment.physician_id)

    async def _preload_patient(self, appointments: List[Appointment]) -> None:
        ids = sorted({a.patient_id for a in appointments if a.patient_id})
        if not ids:
            return
        by_id = {p.id: p for p in await self.patients.find_many(*ids)}
        for appointment in appointments:
            appointment.patient = by_id.get(appointment.patient_id)
