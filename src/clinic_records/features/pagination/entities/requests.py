"""Pagination request entities and enums."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Tuple, Union

from ....core.exceptions import InvalidDirectionError
from ....database.expressions import validate_column


class SortOrder(str, Enum):
    """Sort order enumeration."""
    ASC = "asc"
    DESC = "desc"

    def to_sql(self) -> str:
        """Convert to SQL ORDER BY keyword."""
        return "ASC" if self == SortOrder.ASC else "DESC"

    def reversed(self) -> "SortOrder":
        return SortOrder.DESC if self == SortOrder.ASC else SortOrder.ASC

    @classmethod
    def parse(cls, value: Union[str, "SortOrder"]) -> "SortOrder":
        """Accept 'asc'/'desc' in any case."""
        if isinstance(value, SortOrder):
            return value
        return cls(str(value).strip().lower())


class PageDirection(str, Enum):
    """Navigation directions understood by the paginator."""
    PREVIOUS = "previous"
    CURRENT = "current"
    NEXT = "next"

    @classmethod
    def parse(cls, value: Union[str, "PageDirection"]) -> "PageDirection":
        if isinstance(value, PageDirection):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidDirectionError(value) from None


@dataclass(frozen=True)
class SortField:
    """Sort field specification with validation."""

    field: str
    order: SortOrder = SortOrder.ASC

    def __post_init__(self):
        """Validate field name for SQL injection prevention."""
        validate_column(self.field)
        object.__setattr__(self, "order", SortOrder.parse(self.order))

    def to_sql(self) -> str:
        """Convert to SQL ORDER BY clause fragment."""
        return f"{self.field} {self.order.to_sql()}"

    def reversed(self) -> "SortField":
        return SortField(self.field, self.order.reversed())


SortSpec = Tuple[SortField, ...]

SortInput = Union[
    Mapping[str, Union[str, SortOrder]],
    Iterable[Union[SortField, Tuple[str, Union[str, SortOrder]]]],
]


def normalize_sort_spec(order: SortInput) -> SortSpec:
    """Turn caller sort input into an ordered tuple of SortField.

    Sequences keep the caller's column order. Mappings carry no meaningful
    order, so their columns are sorted lexicographically.
    """
    if isinstance(order, Mapping):
        items = [(column, order[column]) for column in sorted(order)]
    else:
        items = list(order)

    spec = []
    seen = set()
    for item in items:
        sort_field = item if isinstance(item, SortField) else SortField(item[0], item[1])
        if sort_field.field in seen:
            continue
        seen.add(sort_field.field)
        spec.append(sort_field)
    return tuple(spec)


def order_by_sql(spec: SortSpec) -> str:
    """Get SQL ORDER BY clause; empty string for an empty spec."""
    if not spec:
        return ""
    return f"ORDER BY {', '.join(sort_field.to_sql() for sort_field in spec)}"
