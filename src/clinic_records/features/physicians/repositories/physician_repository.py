"""Physician repository."""

import logging
from typing import TYPE_CHECKING, Any, Dict, List

from ....database.expressions import Condition
from ....repositories import BaseRepository
from ..entities import Physician

if TYPE_CHECKING:
    from ...appointments.entities import Appointment
    from ...appointments.repositories import AppointmentRepository
    from ...patients.entities import Patient
    from ...patients.repositories import PatientRepository
    from ...pictures.entities import Picture
    from ...pictures.repositories import PictureRepository

logger = logging.getLogger(__name__)

IMAGEABLE_TYPE = "Physician"


class PhysicianRepository(BaseRepository[Physician]):
    """
    Repository for the ``physicians`` table.

    A physician has many appointments, many patients through appointments
    and many pictures (polymorphic, ``imageable_type = 'Physician'``).
    Physicians are validated before they are written.
    """

    entity_class = Physician
    table_name = "physicians"
    associations = ("appointments", "patients", "pictures")

    @property
    def appointments(self) -> "AppointmentRepository":
        from ...appointments.repositories import AppointmentRepository
        return AppointmentRepository(self.database)

    @property
    def patients(self) -> "PatientRepository":
        from ...patients.repositories import PatientRepository
        return PatientRepository(self.database)

    @property
    def pictures(self) -> "PictureRepository":
        from ...pictures.repositories import PictureRepository
        return PictureRepository(self.database)

    async def appointments_of(self, physician_id: int) -> List["Appointment"]:
        """Get the appointments of a physician."""
        self._check_id(physician_id)
        grouped = await self.appointments.find_by_owner_ids("physician_id", [physician_id])
        return grouped[physician_id]

    async def patients_of(self, physician_id: int) -> List["Patient"]:
        """Get the patients of a physician, joined through appointments."""
        self._check_id(physician_id)
        grouped = await self.patients.find_through(
            "appointments", "patient_id", "physician_id", [physician_id]
        )
        return grouped[physician_id]

    async def pictures_of(self, physician_id: int) -> List["Picture"]:
        """Get the pictures of a physician."""
        self._check_id(physician_id)
        return await self.pictures.pictures_for(IMAGEABLE_TYPE, physician_id)

    async def create_appointment(self, physician: Physician, attributes: Dict[str, Any]) -> int:
        """Create an appointment for a physician."""
        self._check_id(physician.id)
        return await self.appointments.create({**attributes, "physician_id": physician.id})

    async def create_patient(self, physician: Physician, attributes: Dict[str, Any]) -> int:
        """Create a patient and the appointment linking it to the physician.

        The two inserts are not wrapped in a transaction.
        """
        self._check_id(physician.id)
        patient_id = await self.patients.create(attributes)
        await self.appointments.create({"physician_id": physician.id, "patient_id": patient_id})
        logger.info(f"Linked Patient {patient_id} to Physician {physician.id}")
        return patient_id

    async def create_picture(self, physician: Physician, attributes: Dict[str, Any]) -> int:
        """Create a picture owned by a physician."""
        self._check_id(physician.id)
        return await self.pictures.create({
            **attributes,
            "imageable_id": physician.id,
            "imageable_type": IMAGEABLE_TYPE,
        })

    async def _preload_appointments(self, physicians: List[Physician]) -> None:
        grouped = await self.appointments.find_by_owner_ids(
            "physician_id", [p.id for p in physicians]
        )
        for physician in physicians:
            physician.appointments = grouped.get(physician.id, [])

    async def _preload_patients(self, physicians: List[Physician]) -> None:
        grouped = await self.patients.find_through(
            "appointments", "patient_id", "physician_id", [p.id for p in physicians]
        )
        for physician in physicians:
            physician.patients = grouped.get(physician.id, [])

    async def _preload_pictures(self, physicians: List[Physician]) -> None:
        grouped = await self.pictures.find_by_owner_ids(
            "imageable_id",
            [p.id for p in physicians],
            extra=Condition("imageable_type", "=", IMAGEABLE_TYPE)
        )
        for physician in physicians:
            physician.pictures = grouped.get(physician.id, [])
