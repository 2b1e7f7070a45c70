"""Physician entity with its validation rules."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Dict, List, Tuple

from ....core.entities import BaseEntity
from ....core.exceptions import EntityValidationError

if TYPE_CHECKING:
    from ...appointments.entities import Appointment
    from ...patients.entities import Patient
    from ...pictures.entities import Picture

NAME_MIN_LENGTH = 6
NAME_MAX_LENGTH = 15


@dataclass
class Physician(BaseEntity):
    """A physician; has many appointments, patients through appointments and pictures."""

    name: str = ""
    introduction: str = ""

    appointments: List["Appointment"] = field(default_factory=list)
    patients: List["Patient"] = field(default_factory=list)
    pictures: List["Picture"] = field(default_factory=list)

    columns: ClassVar[Tuple[str, ...]] = ("name", "introduction", "created_at", "updated_at")
    text_columns: ClassVar[Tuple[str, ...]] = ("name", "introduction")

    def validation_errors(self) -> Dict[str, List[str]]:
        """Collect every failing rule, keyed by field."""
        errors: Dict[str, List[str]] = {}
        if not self.name:
            errors.setdefault("name", []).append("name is required")
        elif not NAME_MIN_LENGTH <= len(self.name) <= NAME_MAX_LENGTH:
            errors.setdefault("name", []).append(
                f"name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
            )
        if not self.introduction:
            errors.setdefault("introduction", []).append("introduction is required")
        return errors

    def validate(self) -> None:
        """Raise EntityValidationError if any rule fails."""
        errors = self.validation_errors()
        if errors:
            raise EntityValidationError("Physician", errors)
