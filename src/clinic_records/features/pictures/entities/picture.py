"""Picture entity.

Pictures belong to a polymorphic owner identified by
(``imageable_type``, ``imageable_id``), e.g. ``("Physician", 3)``.
"""

from dataclasses import dataclass
from typing import ClassVar, Tuple

from ....core.entities import BaseEntity


@dataclass
class Picture(BaseEntity):
    name: str = ""
    url: str = ""
    imageable_id: int = 0
    imageable_type: str = ""

    columns: ClassVar[Tuple[str, ...]] = (
        "name", "url", "imageable_id", "imageable_type", "created_at", "updated_at"
    )
    text_columns: ClassVar[Tuple[str, ...]] = ("name", "url", "imageable_type")
    int_columns: ClassVar[Tuple[str, ...]] = ("imageable_id",)
