"""Tests for the filter form controller."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import pytest

from smartcare.client.filter_form import (
    FilterDraft,
    FilterFormController,
    build_query_params,
    ticket_filter_form,
    user_filter_form,
)
from smartcare.core.users import USER_FILTER_PARAMS

ROWS = [{"id": "1", "first_name": "Ana"}]


class TestBuildQueryParams:
    """Tests for build_query_params."""

    def test_drops_empty_values(self) -> None:
        """Only non-empty values become query parameters."""
        assert build_query_params({"role": "", "email": "x", "search": ""}) == {"email": "x"}


class TestFilterDraft:
    """Tests for FilterDraft transitions."""

    def test_edit_leaves_applied(self) -> None:
        """Edits only touch the pending values."""
        draft = FilterDraft.empty(["role"]).edit("role", "2")

        assert draft.pending == {"role": "2"}
        assert draft.applied == {"role": ""}
        assert draft.is_dirty

    def test_commit(self) -> None:
        """Committing copies pending into applied."""
        draft = FilterDraft.empty(["role"]).edit("role", "2").commit()

        assert draft.applied == {"role": "2"}
        assert not draft.is_dirty

    def test_transitions_are_pure(self) -> None:
        """The original draft is never changed."""
        original = FilterDraft.empty(["role"])

        original.edit("role", "2").commit()

        assert original.pending == {"role": ""}
        assert original.applied == {"role": ""}


class TestFilterFormController:
    """Tests for FilterFormController."""

    @pytest.fixture
    def fetch(self) -> AsyncMock:
        """Return a fetch function."""
        return AsyncMock(return_value=ROWS)

    @pytest.fixture
    def form(self, fetch: AsyncMock) -> FilterFormController:
        """Return a user filter form."""
        return user_filter_form(fetch)

    async def test_set_field_never_fetches(
        self, form: FilterFormController, fetch: AsyncMock
    ) -> None:
        """Typing does not trigger a request."""
        form.set_field("first_name", "A")
        form.set_field("first_name", "An")
        form.set_field("role", "2")

        fetch.assert_not_called()
        assert form.pending["first_name"] == "An"
        assert form.applied["first_name"] == ""

    def test_set_field_unknown(self, form: FilterFormController) -> None:
        """Only the form's own fields can be edited."""
        with pytest.raises(KeyError):
            form.set_field("colour", "red")

    async def test_submit_fetches_once(
        self, form: FilterFormController, fetch: AsyncMock
    ) -> None:
        """Submitting applies the pending values and fetches once."""
        form.set_field("first_name", "Ana")
        form.set_field("role", "2")

        results = await form.submit()

        fetch.assert_awaited_once_with({"first_name": "Ana", "role": "2"})
        assert results == ROWS
        assert form.applied["first_name"] == "Ana"
        assert not form.busy

    async def test_results_follow_applied_not_pending(
        self, form: FilterFormController, fetch: AsyncMock
    ) -> None:
        """Edits after a submit do not change the results or applied values."""
        form.set_field("email", "a@")
        await form.submit()
        form.set_field("email", "b@")

        assert form.applied["email"] == "a@"
        assert form.results == ROWS
        assert fetch.await_count == 1

    async def test_submit_ignored_while_busy(self, fetch: AsyncMock) -> None:
        """A second submit during a fetch does nothing."""
        release = asyncio.Event()

        async def slow_fetch(params: dict[str, str]) -> list[dict[str, Any]]:
            await release.wait()
            return ROWS

        slow = AsyncMock(side_effect=slow_fetch)
        form = user_filter_form(slow)

        first = asyncio.create_task(form.submit())
        await asyncio.sleep(0)
        assert form.busy

        second = await form.submit()
        release.set()
        await first

        assert second == []
        assert slow.await_count == 1
        assert not form.busy

    async def test_stale_submit_does_not_override_clear(self) -> None:
        """A slow submit finishing after a clear leaves the cleared results."""
        gates = [asyncio.Event(), asyncio.Event()]
        calls: list[dict[str, str]] = []

        async def gated_fetch(params: dict[str, str]) -> list[dict[str, Any]]:
            index = len(calls)
            calls.append(params)
            await gates[index].wait()
            return [{"call": index, "params": params}]

        form = ticket_filter_form(gated_fetch)
        form.set_field("title", "x")
        submitting = asyncio.create_task(form.submit())
        await asyncio.sleep(0)
        clearing = asyncio.create_task(form.clear())
        await asyncio.sleep(0)

        gates[1].set()
        await clearing
        gates[0].set()
        await submitting

        assert calls == [{"title": "x"}, {}]
        assert form.applied["title"] == ""
        assert form.results == [{"call": 1, "params": {}}]
        assert not form.busy

    async def test_busy_until_latest_fetch_finishes(self) -> None:
        """An older fetch finishing first does not end the loading state."""
        gates = [asyncio.Event(), asyncio.Event()]
        calls: list[dict[str, str]] = []

        async def gated_fetch(params: dict[str, str]) -> list[dict[str, Any]]:
            index = len(calls)
            calls.append(params)
            await gates[index].wait()
            return [{"call": index}]

        form = ticket_filter_form(gated_fetch)
        form.set_field("title", "x")
        submitting = asyncio.create_task(form.submit())
        await asyncio.sleep(0)
        clearing = asyncio.create_task(form.clear())
        await asyncio.sleep(0)

        gates[0].set()
        await submitting

        assert form.busy
        assert form.results == []
        assert await form.submit() == []
        assert len(calls) == 2

        gates[1].set()
        await clearing

        assert not form.busy
        assert form.results == [{"call": 1}]

    async def test_failed_fetch_gives_empty_results(self) -> None:
        """Fetch errors leave an empty list and clear the busy flag."""
        failing = AsyncMock(side_effect=RuntimeError("network down"))
        form = user_filter_form(failing)

        results = await form.submit()

        assert results == []
        assert form.results == []
        assert not form.busy

    async def test_clear_then_submit_matches_initial_load(
        self, form: FilterFormController, fetch: AsyncMock
    ) -> None:
        """Clearing resets every field and refetches without filters."""
        await form.load()
        form.set_field("role", "2")
        await form.submit()

        await form.clear()
        await form.submit()

        assert fetch.await_args_list[0].args == ({},)
        assert fetch.await_args_list[2].args == ({},)
        assert fetch.await_args_list[3].args == ({},)
        assert all(value == "" for value in form.pending.values())
        assert dict(form.pending) == {name: "" for name in USER_FILTER_PARAMS}

    def test_summary(self, form: FilterFormController) -> None:
        """The summary lists labelled pending values."""
        assert form.active_filters_summary() == "No active filters"

        form.set_field("first_name", "Ana")
        form.set_field("role", "2")

        assert form.active_filters_summary() == "First name: Ana, Role: 2"

    def test_summary_unlabelled_field(self, fetch: AsyncMock) -> None:
        """Fields without a label use their key."""
        form = FilterFormController(["custom"], fetch)
        form.set_field("custom", "x")

        assert form.active_filters_summary() == "custom: x"

    def test_ticket_form_fields(self, fetch: AsyncMock) -> None:
        """The ticket form exposes the ticket filters."""
        form = ticket_filter_form(fetch)

        assert "status_id" in form.pending
        assert "first_name" not in form.pending
