"""Ticket ("chamado") listing types."""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from smartcare.core.query import (
    bool_literal_param,
    date_param,
    int_param,
    text_param,
    uuid_param,
)

TICKET_FILTER_PARAMS = (
    "external_id",
    "title",
    "description",
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
    "created_at",
    "planned_end_date",
    "actual_end_date",
)


class TicketFilters(BaseModel):
    """Caller-supplied ticket filters, already parsed."""

    model_config = ConfigDict(frozen=True)

    external_id: str | None = None
    title: str | None = None
    description: str | None = None
    category_id: int | None = None
    type_id: int | None = None
    module_id: int | None = None
    status_id: int | None = None
    priority_id: int | None = None
    partner_id: UUID | None = None
    project_id: int | None = None
    created_by: UUID | None = None
    is_closed: bool | None = None
    is_private: bool | None = None
    created_at: date | None = None
    planned_end_date: date | None = None
    actual_end_date: date | None = None

    @classmethod
    def from_query_params(cls, params: Mapping[str, str]) -> "TicketFilters":
        """Parse raw query-string values.

        Raises:
            FilterValidationError: If an id or date cannot be parsed.
        """
        return cls(
            external_id=text_param(params, "external_id"),
            title=text_param(params, "title"),
            description=text_param(params, "description"),
            category_id=int_param(params, "category_id"),
            type_id=int_param(params, "type_id"),
            module_id=int_param(params, "module_id"),
            status_id=int_param(params, "status_id"),
            priority_id=int_param(params, "priority_id"),
            partner_id=uuid_param(params, "partner_id"),
            project_id=int_param(params, "project_id"),
            created_by=uuid_param(params, "created_by"),
            is_closed=bool_literal_param(params, "is_closed"),
            is_private=bool_literal_param(params, "is_private"),
            created_at=date_param(params, "created_at"),
            planned_end_date=date_param(params, "planned_end_date"),
            actual_end_date=date_param(params, "actual_end_date"),
        )


class TicketRecord(BaseModel):
    """A ticket row as returned by the listing."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    external_id: str | None = None
    title: str
    description: str | None = None
    category_id: int | None = None
    type_id: int | None = None
    module_id: int | None = None
    status_id: int | None = None
    priority_id: int | None = None
    partner_id: UUID | None = None
    project_id: int | None = None
    created_by: UUID | None = None
    is_closed: bool = False
    is_private: bool = False
    created_at: datetime
    planned_end_date: datetime | date | None = None
    actual_end_date: datetime | date | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "TicketRecord":
        """Build a record from a tickets row."""
        return cls.model_validate(dict(row))
