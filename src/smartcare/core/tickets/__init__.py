"""Ticket ("chamado") listing domain."""

from smartcare.core.tickets.query import (
    TICKET_FILTER_BUILDERS,
    build_ticket_query,
    ticket_predicates,
    visibility_predicate,
)
from smartcare.core.tickets.types import TICKET_FILTER_PARAMS, TicketFilters, TicketRecord

__all__ = [
    "TICKET_FILTER_BUILDERS",
    "TICKET_FILTER_PARAMS",
    "TicketFilters",
    "TicketRecord",
    "build_ticket_query",
    "ticket_predicates",
    "visibility_predicate",
]
