"""Patient repository."""

import logging
from typing import TYPE_CHECKING, Any, Dict, List

from ....repositories import BaseRepository
from ..entities import Patient

if TYPE_CHECKING:
    from ...appointments.entities import Appointment
    from ...appointments.repositories import AppointmentRepository
    from ...physicians.entities import Physician
    from ...physicians.repositories import PhysicianRepository

logger = logging.getLogger(__name__)


class PatientRepository(BaseRepository[Patient]):
    """Repository for the ``patients`` table.

    A patient has many appointments and many physicians through
    appointments.
    """

    entity_class = Patient
    table_name = "patients"
    associations = ("appointments", "physicians")

    @property
    def appointments(self) -> "AppointmentRepository":
        from ...appointments.repositories import AppointmentRepository
        return AppointmentRepository(self.database)

    @property
    def physicians(self) -> "PhysicianRepository":
        from ...physicians.repositories import PhysicianRepository
        return PhysicianRepository(self.database)

    async def appointments_of(self, patient_id: int) -> List["Appointment"]:
        """Get the appointments of a patient."""
        self._check_id(patient_id)
        grouped = await self.appointments.find_by_owner_ids("patient_id", [patient_id])
        return grouped[patient_id]

    async def physicians_of(self, patient_id: int) -> List["Physician"]:
        """Get the physicians a patient has appointments with."""
        self._check_id(patient_id)
        grouped = await self.physicians.find_through(
            "appointments", "physician_id", "patient_id", [patient_id]
        )
        return grouped[patient_id]

    async def create_appointment(self, patient: Patient, attributes: Dict[str, Any]) -> int:
        """Create an appointment for a patient."""
        self._check_id(patient.id)
        return await self.appointments.create({**attributes, "patient_id": patient.id})

    async def _preload_appointments(self, patients: List[Patient]) -> None:
        grouped = await self.appointments.find_by_owner_ids(
            "patient_id", [p.id for p in patients]
        )
        for patient in patients:
            patient.appointments = grouped.get(patient.id, [])

    async def _preload_physicians(self, patients: List[Patient]) -> None:
        grouped = await self.physicians.find_through(
            "appointments", "physician_id", "patient_id", [p.id for p in patients]
        )
        for patient in patients:
            patient.physicians = grouped.get(patient.id, [])
