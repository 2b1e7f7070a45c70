"""Patient entity."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, List, Tuple

from ....core.entities import BaseEntity

if TYPE_CHECKING:
    from ...appointments.entities import Appointment
    from ...physicians.entities import Physician


@dataclass
class Patient(BaseEntity):
    name: str = ""

    appointments: List["Appointment"] = field(default_factory=list)
    physicians: List["Physician"] = field(default_factory=list)

    columns: ClassVar[Tuple[str, ...]] = ("name", "created_at", "updated_at")
    text_columns: ClassVar[Tuple[str, ...]] = ("name",)
