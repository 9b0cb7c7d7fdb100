"""Filter form state for list screens.

The form keeps two copies of its filters: ``pending`` holds what the
operator is typing and ``applied`` holds what was last searched. Edits
never trigger a fetch; only ``submit`` and ``clear`` do, and the result
set always reflects the last applied filters.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from smartcare.core.tickets import TICKET_FILTER_PARAMS
from smartcare.core.users import USER_FILTER_PARAMS

logger = structlog.get_logger()

FetchFn = Callable[[dict[str, str]], Awaitable[list[dict[str, Any]]]]

USER_FILTER_LABELS = {
    "search": "Search",
    "first_name": "First name",
    "last_name": "Last name",
    "email": "Email",
    "tel_contact": "Phone",
    "partner_desc": "Partner",
    "role": "Role",
    "is_client": "Client",
    "created_at_start": "Created from",
    "created_at_end": "Created until",
    "active": "Active",
    "partner_id": "Partner ID",
}

TICKET_FILTER_LABELS = {
    "external_id": "ID",
    "title": "Title",
    "description": "Description",
    "category_id": "Category",
    "type_id": "Type",
    "module_id": "Module",
    "status_id": "Status",
    "priority_id": "Priority",
    "partner_id": "Partner",
    "project_id": "Project",
    "created_by": "Created by",
    "is_closed": "Closed",
    "is_private": "Private",
    "created_at": "Created at",
    "planned_end_date": "Planned end",
    "actual_end_date": "Actual end",
}


def build_query_params(values: Mapping[str, str]) -> dict[str, str]:
    """Keep only the filters that have a value."""
    return {key: value for key, value in values.items() if value}


@dataclass(frozen=True)
class FilterDraft:
    """Draft (pending) and committed (applied) filter values.

    Transitions return new drafts and never touch the current one.
    """

    pending: Mapping[str, str] = field(default_factory=dict)
    applied: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def empty(cls, fields: Sequence[str]) -> FilterDraft:
        """A draft with every field blank."""
        blank = {name: "" for name in fields}
        return cls(pending=dict(blank), applied=dict(blank))

    def edit(self, key: str, value: str) -> FilterDraft:
        """Change one pending value."""
        return FilterDraft(pending={**self.pending, key: value}, applied=self.applied)

    def commit(self) -> FilterDraft:
        """Make the pending values the applied ones."""
        return FilterDraft(pending=self.pending, applied=dict(self.pending))

    @property
    def is_dirty(self) -> bool:
        """Whether there are edits not yet applied."""
        return dict(self.pending) != dict(self.applied)


class FilterFormController:
    """Holds filter state for a list screen and fetches on demand."""

    def __init__(
        self,
        fields: Sequence[str],
        fetch: FetchFn,
        labels: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            fields: Filter keys the form exposes.
            fetch: Coroutine function returning the rows for a set of
                query parameters.
            labels: Display labels used by the active filter summary.
        """
        self.fields = tuple(fields)
        self.labels = dict(labels or {})
        self._fetch = fetch
        self.draft = FilterDraft.empty(self.fields)
        self.results: list[dict[str, Any]] = []
        self.loading = False
        self._latest_fetch = 0

    @property
    def pending(self) -> Mapping[str, str]:
        """Values being edited."""
        return self.draft.pending

    @property
    def applied(self) -> Mapping[str, str]:
        """Values used by the last fetch."""
        return self.draft.applied

    @property
    def busy(self) -> bool:
        """Whether the primary action is disabled."""
        return self.loading

    def set_field(self, key: str, value: str) -> None:
        """Edit a pending value. Never fetches.

        Raises:
            KeyError: If ``key`` is not one of the form's fields.
        """
        if key not in self.fields:
            raise KeyError(key)
        self.draft = self.draft.edit(key, value)

    async def load(self) -> list[dict[str, Any]]:
        """Fetch using the applied filters, e.g. on first display."""
        return await self._refresh()

    async def submit(self) -> list[dict[str, Any]]:
        """Apply the pending filters and fetch once.

        Ignored while a fetch is already in flight.
        """
        if self.busy:
            logger.debug("filter_submit_ignored_busy")
            return self.results
        self.draft = self.draft.commit()
        return await self._refresh()

    async def clear(self) -> list[dict[str, Any]]:
        """Blank every filter and fetch the unfiltered list."""
        self.draft = FilterDraft.empty(self.fields)
        return await self._refresh()

    async def _refresh(self) -> list[dict[str, Any]]:
        # Only the most recent fetch may publish results or end the loading state
        self._latest_fetch += 1
        token = self._latest_fetch
        filters = build_query_params(self.applied)
        self.loading = True
        rows: list[dict[str, Any]] = []
        try:
            rows = await self._fetch(filters)
        except Exception as e:
            logger.error("filter_fetch_failed", filters=filters, error=str(e))
        finally:
            if token == self._latest_fetch:
                self.results = rows
                self.loading = False
            else:
                logger.debug("filter_fetch_superseded", filters=filters)
        return self.results

    def active_filters_summary(self) -> str:
        """One-line description of the pending filters."""
        summary = [
            f"{self.labels.get(key, key)}: {value}"
            for key, value in self.pending.items()
            if value
        ]
        return ", ".join(summary) if summary else "No active filters"


def user_filter_form(fetch: FetchFn) -> FilterFormController:
    """Filter form for the user listing."""
    return FilterFormController(USER_FILTER_PARAMS, fetch, USER_FILTER_LABELS)


def ticket_filter_form(fetch: FetchFn) -> FilterFormController:
    """Filter form for the ticket listing."""
    return FilterFormController(TICKET_FILTER_PARAMS, fetch, TICKET_FILTER_LABELS)
