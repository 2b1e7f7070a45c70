"""Base class for table-backed domain entities."""

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type, TypeVar

E = TypeVar('E', bound='BaseEntity')


@dataclass
class BaseEntity:
    """Identity and audit columns common to every table.

    Subclasses list their persisted columns (everything except ``id``) in
    ``columns``; other dataclass fields hold preloaded associations.
    """

    id: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    columns: ClassVar[Tuple[str, ...]] = ("created_at", "updated_at")
    text_columns: ClassVar[Tuple[str, ...]] = ()
    int_columns: ClassVar[Tuple[str, ...]] = ()

    @classmethod
    def from_record(cls: Type[E], data: Mapping[str, Any]) -> E:
        """Build an entity from a row mapping, ignoring unknown keys."""
        names = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in names})

    def to_record(self) -> Dict[str, Any]:
        """Persisted column values (without id)."""
        return {column: getattr(self, column) for column in self.columns}

    @property
    def is_new(self) -> bool:
        return self.id == 0
