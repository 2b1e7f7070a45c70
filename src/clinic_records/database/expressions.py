"""
Parameterized predicate expressions for WHERE clauses.

Every WHERE clause built by the repositories and the paginator is composed
from these value objects and rendered to PostgreSQL ``$n`` placeholders, so
caller input only ever reaches the database as bound parameters.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from ..core.exceptions import InvalidColumnError, QueryError

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")

COMPARISON_OPERATORS = ("=", "!=", "<", "<=", ">", ">=", "LIKE", "ILIKE")
NULL_OPERATORS = ("IS NULL", "IS NOT NULL")
OPERATORS = COMPARISON_OPERATORS + NULL_OPERATORS + ("IN",)

# Suffix lookups accepted by Condition.from_lookup, e.g. {"name__ilike": "smith"}
LOOKUP_SUFFIXES = {
    "ne": "!=",
    "lt": "<",
    "lte": "<=",
    "gt": ">",
    "gte": ">=",
    "like": "LIKE",
    "ilike": "ILIKE",
    "in": "IN",
}


def validate_column(column: str) -> str:
    """Return column unchanged if it is a plain (optionally table-qualified) identifier."""
    if not isinstance(column, str) or not _IDENTIFIER.match(column):
        raise InvalidColumnError(str(column))
    return column


def rebind(sql: str, start: int = 1) -> Tuple[str, int]:
    """Replace ``?`` placeholders with ``$n`` placeholders.

    Question marks inside single-quoted string literals are left alone.

    Returns:
        Tuple of (rebound_sql, next_placeholder_index)
    """
    parts: List[str] = []
    index = start
    in_literal = False
    for char in sql:
        if char == "'":
            in_literal = not in_literal
            parts.append(char)
        elif char == "?" and not in_literal:
            parts.append(f"${index}")
            index += 1
        else:
            parts.append(char)
    return "".join(parts), index


@dataclass(frozen=True)
class Condition:
    """A single ``column <operator> value`` predicate."""

    column: str
    operator: str
    value: Any = None

    def __post_init__(self):
        validate_column(self.column)
        operator = self.operator.upper()
        if operator not in OPERATORS:
            raise QueryError(f"Unsupported operator: {self.operator}")
        object.__setattr__(self, "operator", operator)

    @classmethod
    def from_lookup(cls, lookup: str, value: Any) -> "Condition":
        """Build a condition from a ``field__suffix`` lookup key."""
        column, _, suffix = lookup.partition("__")
        if not suffix:
            return cls(column, "=", value)
        if suffix == "is_null":
            return cls(column, "IS NULL" if value else "IS NOT NULL")
        if suffix not in LOOKUP_SUFFIXES:
            raise QueryError(f"Unsupported lookup: {lookup}")
        operator = LOOKUP_SUFFIXES[suffix]
        if operator == "ILIKE" and isinstance(value, str) and "%" not in value:
            value = f"%{value}%"
        return cls(column, operator, value)

    def render(self, start: int = 1) -> Tuple[str, List[Any], int]:
        if self.operator in NULL_OPERATORS:
            return f"{self.column} {self.operator}", [], start
        if self.operator == "IN":
            return f"{self.column} = ANY(${start})", [list(self.value)], start + 1
        return f"{self.column} {self.operator} ${start}", [self.value], start + 1


@dataclass(frozen=True)
class RawCondition:
    """A caller-written SQL fragment with ``?`` placeholders and its parameters."""

    sql: str
    params: Tuple[Any, ...] = ()

    def __post_init__(self):
        if not self.sql or not self.sql.strip():
            raise QueryError("A blank SQL condition")
        expected = rebind(self.sql)[1] - 1
        if expected != len(self.params):
            raise QueryError(
                f"Condition expects {expected} parameters, got {len(self.params)}"
            )
        object.__setattr__(self, "params", tuple(self.params))

    def render(self, start: int = 1) -> Tuple[str, List[Any], int]:
        sql, next_index = rebind(self.sql.strip(), start)
        return f"({sql})", list(self.params), next_index


@dataclass(frozen=True)
class AllOf:
    """Conjunction of expressions."""

    conditions: Tuple["Expression", ...] = field(default_factory=tuple)

    def render(self, start: int = 1) -> Tuple[str, List[Any], int]:
        fragments = []
        params: List[Any] = []
        index = start
        for condition in self.conditions:
            sql, condition_params, index = condition.render(index)
            fragments.append(sql)
            params.extend(condition_params)
        return " AND ".join(fragments), params, index


Expression = Union[Condition, RawCondition, AllOf]


def and_(*expressions: Optional[Expression]) -> Optional[Expression]:
    """Conjoin expressions, flattening nested conjunctions and skipping None."""
    flat: List[Expression] = []
    for expression in expressions:
        if expression is None:
            continue
        if isinstance(expression, AllOf):
            flat.extend(expression.conditions)
        else:
            flat.append(expression)
    if not flat:
        return None
    if len(flat) == 1:
        return flat[0]
    return AllOf(tuple(flat))


def raw(sql: str, *params: Any) -> RawCondition:
    """Shorthand for RawCondition, e.g. ``raw("name = ? AND age > ?", "John", 18)``."""
    return RawCondition(sql, params)


def where(**lookups: Any) -> Optional[Expression]:
    """Build a conjunction from keyword lookups, e.g. ``where(physician_id=3, name__ilike="an")``."""
    return filters_to_expression(lookups)


def filters_to_expression(filters: Optional[Dict[str, Any]]) -> Optional[Expression]:
    """Convert a filter dictionary to an expression; None values are skipped."""
    if not filters:
        return None
    return and_(*(
        Condition.from_lookup(lookup, value)
        for lookup, value in filters.items()
        if value is not None
    ))


def render(expression: Optional[Expression], start: int = 1) -> Tuple[str, List[Any], int]:
    """Render an expression to SQL.

    Returns:
        Tuple of (sql, parameters, next_placeholder_index); sql is empty for None
    """
    if expression is None:
        return "", [], start
    return expression.render(start)
