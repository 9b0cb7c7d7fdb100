"""Access-scoped query builder for the user listing.

The visibility predicate is always placed first and every caller
filter is ANDed after it, so filters can only narrow a principal's
scope and never widen it.
"""

from __future__ import annotations

from typing import Any

from smartcare.core.auth.types import Principal
from smartcare.core.query import (
    Predicate,
    PredicateBuilder,
    apply_builders,
    compile_where,
    eq,
    gte,
    ilike,
    lte,
)
from smartcare.core.users.types import UserFilters

USER_COLUMNS = """u.id, u.first_name, u.last_name, u.email, u.is_client, u.tel_contact,
               u.partner_id, u.role, u.created_at, u.is_active,
               p.partner_desc AS partner_desc"""


def visibility_predicate(principal: Principal) -> Predicate | None:
    """Bound the rows a principal may see.

    Unrestricted admins see everything. Anyone else is confined to their
    partner, or to their own row when they have no partner.
    """
    if principal.is_unrestricted_admin:
        return None
    if principal.partner_id is not None:
        return eq("u.partner_id", principal.partner_id)
    return eq("u.id", principal.id)


def _first_name(f: UserFilters) -> Predicate | None:
    return ilike("u.first_name", f.first_name) if f.first_name else None


def _last_name(f: UserFilters) -> Predicate | None:
    return ilike("u.last_name", f.last_name) if f.last_name else None


def _email(f: UserFilters) -> Predicate | None:
    return ilike("u.email", f.email) if f.email else None


def _tel_contact(f: UserFilters) -> Predicate | None:
    return ilike("u.tel_contact", f.tel_contact) if f.tel_contact else None


def _partner_desc(f: UserFilters) -> Predicate | None:
    return ilike("p.partner_desc", f.partner_desc) if f.partner_desc else None


def _role(f: UserFilters) -> Predicate | None:
    return eq("u.role", f.role) if f.role is not None else None


def _is_client(f: UserFilters) -> Predicate | None:
    return eq("u.is_client", f.is_client) if f.is_client is not None else None


def _created_at_start(f: UserFilters) -> Predicate | None:
    return gte("u.created_at", f.created_at_start) if f.created_at_start else None


def _created_at_end(f: UserFilters) -> Predicate | None:
    return lte("u.created_at", f.created_at_end) if f.created_at_end else None


def _is_active(f: UserFilters) -> Predicate | None:
    return eq("u.is_active", f.is_active) if f.is_active is not None else None


def _partner_id(f: UserFilters) -> Predicate | None:
    return eq("u.partner_id", f.partner_id) if f.partner_id is not None else None


USER_FILTER_BUILDERS: tuple[PredicateBuilder[UserFilters], ...] = (
    _first_name,
    _last_name,
    _email,
    _tel_contact,
    _partner_desc,
    _role,
    _is_client,
    _created_at_start,
    _created_at_end,
    _is_active,
    _partner_id,
)


def user_predicates(principal: Principal, filters: UserFilters) -> list[Predicate]:
    """Visibility predicate followed by the caller's filters."""
    predicates = []
    scope = visibility_predicate(principal)
    if scope is not None:
        predicates.append(scope)
    predicates.extend(apply_builders(filters, USER_FILTER_BUILDERS))
    return predicates


def build_user_query(principal: Principal, filters: UserFilters) -> tuple[str, list[Any]]:
    """Build the listing query for a principal.

    Args:
        principal: The requesting principal.
        filters: Parsed caller filters.

    Returns:
        Tuple of (sql, params) ready for asyncpg.
    """
    where_clause, params = compile_where(user_predicates(principal, filters))
    query = f"""
        SELECT {USER_COLUMNS}
        FROM users u
        LEFT JOIN partners p ON p.id = u.partner_id
        WHERE {where_clause}
        ORDER BY u.created_at DESC
    """
    return query, params
