"""Pytest configuration and fixtures for clinic-records tests."""

import operator
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence
from unittest.mock import AsyncMock

import pytest

from clinic_records.database.expressions import AllOf, Condition, Expression
from clinic_records.features.pagination import SortField, SortOrder, normalize_sort_spec


COMPARATORS = {
    "=": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def _like(value: Any, pattern: str, flags: int = 0) -> bool:
    regex = "^" + re.escape(pattern).replace("%", ".*").replace("_", ".") + "$"
    return value is not None and re.match(regex, str(value), flags) is not None


def matches(row: Any, expression: Optional[Expression]) -> bool:
    """Evaluate a predicate expression against an object's attributes."""
    if expression is None:
        return True
    if isinstance(expression, AllOf):
        return all(matches(row, condition) for condition in expression.conditions)
    if not isinstance(expression, Condition):
        raise NotImplementedError(f"In-memory source cannot evaluate {expression!r}")

    value = getattr(row, expression.column)
    if expression.operator == "IS NULL":
        return value is None
    if expression.operator == "IS NOT NULL":
        return value is not None
    if expression.operator == "IN":
        return value in list(expression.value)
    if expression.operator == "LIKE":
        return _like(value, expression.value)
    if expression.operator == "ILIKE":
        return _like(value, expression.value, re.IGNORECASE)
    return COMPARATORS[expression.operator](value, expression.value)


@dataclass
class Item:
    """Row type served by the in-memory source."""

    id: int
    name: str = ""
    category: str = "a"


class InMemoryRowSource:
    """RowSource over a list of rows, recording every call."""

    def __init__(self, rows: Sequence[Any]):
        self.rows = list(rows)
        self.count_calls: List[Optional[Expression]] = []
        self.find_calls: List[dict] = []
        self.fail_with: Optional[Exception] = None

    @property
    def calls(self) -> int:
        return len(self.count_calls) + len(self.find_calls)

    async def count_where(self, where: Optional[Expression] = None) -> int:
        self.count_calls.append(where)
        if self.fail_with:
            raise self.fail_with
        return sum(1 for row in self.rows if matches(row, where))

    async def find_where(
        self,
        where: Optional[Expression] = None,
        order_by=(),
        limit: Optional[int] = None
    ) -> List[Any]:
        self.find_calls.append({"where": where, "order_by": order_by, "limit": limit})
        if self.fail_with:
            raise self.fail_with
        rows = [row for row in self.rows if matches(row, where)]
        # Stable sorts applied from the least significant key
        for sort_field in reversed(normalize_sort_spec(order_by or ())):
            rows.sort(
                key=lambda row: getattr(row, sort_field.field),
                reverse=sort_field.order == SortOrder.DESC
            )
        return rows[:limit] if limit is not None else rows


@pytest.fixture
def mock_database():
    """Mock database handle for repository tests."""
    mock_db = AsyncMock()
    mock_db.fetch = AsyncMock(return_value=[])
    mock_db.fetchrow = AsyncMock(return_value=None)
    mock_db.fetchval = AsyncMock(return_value=None)
    mock_db.execute = AsyncMock(return_value="UPDATE 1")
    return mock_db


@pytest.fixture
def items():
    """25 rows with ids 1..25, alternating categories."""
    return [
        Item(id=i, name=f"item-{i:02d}", category="a" if i % 2 else "b")
        for i in range(1, 26)
    ]


@pytest.fixture
def row_source(items):
    return InMemoryRowSource(items)


@pytest.fixture
def id_asc():
    return [SortField("id", SortOrder.ASC)]


@pytest.fixture
def id_desc():
    return [SortField("id", SortOrder.DESC)]


@pytest.fixture
def now():
    return datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def physician_row(now):
    return {
        "id": 3,
        "name": "Dr. Watson",
        "introduction": "General practice",
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def patient_row(now):
    return {"id": 7, "name": "Ada Lovelace", "created_at": now, "updated_at": now}


@pytest.fixture
def appointment_row(now):
    return {
        "id": 11,
        "appointment_date": now,
        "physician_id": 3,
        "patient_id": 7,
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def picture_row(now):
    return {
        "id": 21,
        "name": "portrait",
        "url": "https://example.com/p.png",
        "imageable_id": 3,
        "imageable_type": "Physician",
        "created_at": now,
        "updated_at": now,
    }
