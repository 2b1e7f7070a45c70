"""Appointment entity."""

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Optional, Tuple

from ....core.entities import BaseEntity

if TYPE_CHECKING:
    from ...patients.entities import Patient
    from ...physicians.entities import Physician


@dataclass
class Appointment(BaseEntity):
    """A visit linking one physician and one patient."""

    appointment_date: Optional[datetime] = None
    physician_id: int = 0
    patient_id: int = 0

    # Associations, populated by the repository loaders
    physician: Optional["Physician"] = None
    patient: Optional["Patient"] = None

    columns: ClassVar[Tuple[str, ...]] = (
        "appointment_date", "physician_id", "patient_id", "created_at", "updated_at"
    )
    int_columns: ClassVar[Tuple[str, ...]] = ("physician_id", "patient_id")
