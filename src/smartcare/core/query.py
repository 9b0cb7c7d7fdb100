"""Composable WHERE-clause predicates for list endpoints.

List endpoints build their WHERE clause from an ordered list of
predicates instead of mutating a query string in place. Each predicate
carries a SQL fragment with ``{}`` slots and the values for those slots;
``compile_where`` numbers the slots into asyncpg ``$n`` placeholders.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, TypeVar
from uuid import UUID

from smartcare.core.exceptions import FilterValidationError


@dataclass(frozen=True)
class Predicate:
    """A single SQL condition.

    Attributes:
        sql: Fragment with one ``{}`` slot per parameter.
        params: Values bound to the slots, in order.
    """

    sql: str
    params: tuple[Any, ...] = ()

    def render(self, start: int) -> str:
        """Render the fragment with placeholders starting at ``$start``."""
        slots = [f"${start + i}" for i in range(len(self.params))]
        return self.sql.format(*slots)


F = TypeVar("F")

# A predicate builder turns a typed filter set into zero or one predicate
PredicateBuilder = Callable[[F], Predicate | None]


def eq(column: str, value: Any) -> Predicate:
    """Exact-match predicate."""
    return Predicate(f"{column} = {{}}", (value,))


def ilike(column: str, value: str) -> Predicate:
    """Case-insensitive substring predicate."""
    return Predicate(f"{column} ILIKE {{}} ESCAPE '\\'", (contains_pattern(value),))


def gte(column: str, value: Any) -> Predicate:
    """Inclusive lower bound."""
    return Predicate(f"{column} >= {{}}", (value,))


def lte(column: str, value: Any) -> Predicate:
    """Inclusive upper bound."""
    return Predicate(f"{column} <= {{}}", (value,))


def on_day(column: str, day: date) -> Predicate:
    """Match timestamps falling on a calendar day."""
    return Predicate(f"{column}::date = {{}}", (day,))


def contains_pattern(value: str) -> str:
    """Build an ILIKE pattern matching ``value`` literally anywhere.

    ``%``, ``_`` and the escape character are escaped so user input is
    never interpreted as a wildcard.
    """
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def compile_where(predicates: Iterable[Predicate], start: int = 1) -> tuple[str, list[Any]]:
    """Combine predicates with AND.

    Args:
        predicates: Predicates in application order.
        start: Number of the first placeholder.

    Returns:
        Tuple of (where_clause, params). An empty predicate list yields
        ``"TRUE"`` so callers can always emit ``WHERE {clause}``.
    """
    clauses: list[str] = []
    params: list[Any] = []
    param_idx = start

    for predicate in predicates:
        clauses.append(predicate.render(param_idx))
        params.extend(predicate.params)
        param_idx += len(predicate.params)

    if not clauses:
        return "TRUE", params
    return " AND ".join(clauses), params


def apply_builders(filters: F, builders: Iterable[PredicateBuilder[F]]) -> list[Predicate]:
    """Run each builder against ``filters`` and keep the predicates produced."""
    predicates = []
    for build in builders:
        predicate = build(filters)
        if predicate is not None:
            predicates.append(predicate)
    return predicates


# Raw query-string parsing


def text_param(params: Mapping[str, str], key: str) -> str | None:
    """Return a non-empty string parameter or None."""
    value = params.get(key)
    return value or None


def int_param(params: Mapping[str, str], key: str) -> int | None:
    """Parse an integer parameter; empty means absent."""
    value = params.get(key)
    if not value:
        return None
    try:
        return int(value.strip())
    except ValueError:
        raise FilterValidationError(key, f"'{key}' must be an integer, got {value!r}") from None


def uuid_param(params: Mapping[str, str], key: str) -> UUID | None:
    """Parse a UUID parameter; empty means absent."""
    value = params.get(key)
    if not value:
        return None
    try:
        return UUID(value.strip())
    except ValueError:
        raise FilterValidationError(key, f"'{key}' must be a UUID, got {value!r}") from None


def bool_literal_param(params: Mapping[str, str], key: str) -> bool | None:
    """Parse ``"true"``/``"false"``; any other value is ignored."""
    value = params.get(key)
    if value == "true":
        return True
    if value == "false":
        return False
    return None


def datetime_param(params: Mapping[str, str], key: str) -> datetime | None:
    """Parse an ISO date or datetime; a bare date means midnight."""
    value = params.get(key)
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        raise FilterValidationError(
            key, f"'{key}' must be an ISO date or datetime, got {value!r}"
        ) from None


def date_param(params: Mapping[str, str], key: str) -> date | None:
    """Parse the calendar day of an ISO date or datetime."""
    parsed = datetime_param(params, key)
    return parsed.date() if parsed else None
