"""Access-scoped query builder for the ticket listing."""

from __future__ import annotations

from typing import Any

from smartcare.core.auth.types import Principal
from smartcare.core.query import (
    Predicate,
    PredicateBuilder,
    apply_builders,
    compile_where,
    eq,
    ilike,
    on_day,
)
from smartcare.core.tickets.types import TicketFilters

TICKET_COLUMNS = """t.id, t.external_id, t.title, t.description, t.category_id, t.type_id,
               t.module_id, t.status_id, t.priority_id, t.partner_id, t.project_id,
               t.created_by, t.is_closed, t.is_private, t.created_at,
               t.planned_end_date, t.actual_end_date"""

# Filter attributes share their column name on the tickets table
_TEXT_FILTERS = ("external_id", "title", "description")
_EXACT_FILTERS = (
    "category_id",
    "type_id",
    "module_id",
    "status_id",
    "priority_id",
    "partner_id",
    "project_id",
    "created_by",
    "is_closed",
    "is_private",
)
_DAY_FILTERS = ("created_at", "planned_end_date", "actual_end_date")


def visibility_predicate(principal: Principal) -> Predicate | None:
    """Bound the tickets a principal may see.

    Same rule as the user listing, except that a principal without a
    partner sees the tickets they opened.
    """
    if principal.is_unrestricted_admin:
        return None
    if principal.partner_id is not None:
        return eq("t.partner_id", principal.partner_id)
    return eq("t.created_by", principal.id)


def _text_builder(field: str) -> PredicateBuilder[TicketFilters]:
    def build(f: TicketFilters) -> Predicate | None:
        value = getattr(f, field)
        return ilike(f"t.{field}", value) if value else None

    return build


def _exact_builder(field: str) -> PredicateBuilder[TicketFilters]:
    def build(f: TicketFilters) -> Predicate | None:
        value = getattr(f, field)
        return eq(f"t.{field}", value) if value is not None else None

    return build


def _day_builder(field: str) -> PredicateBuilder[TicketFilters]:
    def build(f: TicketFilters) -> Predicate | None:
        value = getattr(f, field)
        return on_day(f"t.{field}", value) if value is not None else None

    return build


TICKET_FILTER_BUILDERS: tuple[PredicateBuilder[TicketFilters], ...] = (
    *(_text_builder(field) for field in _TEXT_FILTERS),
    *(_exact_builder(field) for field in _EXACT_FILTERS),
    *(_day_builder(field) for field in _DAY_FILTERS),
)


def ticket_predicates(principal: Principal, filters: TicketFilters) -> list[Predicate]:
    """Visibility predicate followed by the caller's filters."""
    predicates = []
    scope = visibility_predicate(principal)
    if scope is not None:
        predicates.append(scope)
    predicates.extend(apply_builders(filters, TICKET_FILTER_BUILDERS))
    return predicates


def build_ticket_query(principal: Principal, filters: TicketFilters) -> tuple[str, list[Any]]:
    """Build the ticket listing query for a principal."""
    where_clause, params = compile_where(ticket_predicates(principal, filters))
    query = f"""
        SELECT {TICKET_COLUMNS}
        FROM tickets t
        WHERE {where_clause}
        ORDER BY t.created_at DESC
    """
    return query, params
