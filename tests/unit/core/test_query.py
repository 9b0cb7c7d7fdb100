"""Tests for predicate compilation and query-string parsing."""

from datetime import date, datetime, timezone
from uuid import UUID

import pytest

from smartcare.core.exceptions import FilterValidationError
from smartcare.core.query import (
    Predicate,
    apply_builders,
    bool_literal_param,
    compile_where,
    contains_pattern,
    date_param,
    datetime_param,
    eq,
    ilike,
    int_param,
    text_param,
    uuid_param,
)


class TestCompileWhere:
    """Tests for compile_where."""

    def test_empty_list_is_true(self) -> None:
        """No predicates yields a tautology and no params."""
        clause, params = compile_where([])

        assert clause == "TRUE"
        assert params == []

    def test_numbers_placeholders_contiguously(self) -> None:
        """Placeholders follow parameter order across predicates."""
        predicates = [
            eq("u.partner_id", "p1"),
            Predicate("u.created_at BETWEEN {} AND {}", ("a", "b")),
            ilike("u.email", "x"),
        ]

        clause, params = compile_where(predicates)

        assert clause == (
            "u.partner_id = $1 AND u.created_at BETWEEN $2 AND $3 "
            "AND u.email ILIKE $4 ESCAPE '\\'"
        )
        assert params == ["p1", "a", "b", "%x%"]

    def test_custom_start(self) -> None:
        """Numbering can start after parameters bound elsewhere."""
        clause, params = compile_where([eq("u.id", 7)], start=3)

        assert clause == "u.id = $3"
        assert params == [7]


class TestContainsPattern:
    """Tests for contains_pattern."""

    def test_wraps_value(self) -> None:
        """Plain text becomes a substring pattern."""
        assert contains_pattern("ana") == "%ana%"

    def test_escapes_wildcards(self) -> None:
        """User supplied wildcards are matched literally."""
        assert contains_pattern("50%_off") == "%50\\%\\_off%"

    def test_escapes_backslash(self) -> None:
        """The escape character itself is escaped first."""
        assert contains_pattern("a\\b") == "%a\\\\b%"


class TestApplyBuilders:
    """Tests for apply_builders."""

    def test_skips_builders_returning_none(self) -> None:
        """Only produced predicates are kept, in builder order."""
        builders = [
            lambda f: eq("a", f["a"]),
            lambda f: None,
            lambda f: eq("b", f["b"]),
        ]

        predicates = apply_builders({"a": 1, "b": 2}, builders)

        assert [p.sql for p in predicates] == ["a = {}", "b = {}"]


class TestParamParsing:
    """Tests for raw query-string parsing helpers."""

    def test_text_param_empty_is_absent(self) -> None:
        """Empty strings are treated as missing."""
        assert text_param({"q": ""}, "q") is None
        assert text_param({}, "q") is None
        assert text_param({"q": "x"}, "q") == "x"

    def test_int_param(self) -> None:
        """Numeric strings parse to int."""
        assert int_param({"role": "2"}, "role") == 2
        assert int_param({"role": ""}, "role") is None

    def test_int_param_rejects_text(self) -> None:
        """Non-numeric input is a client error."""
        with pytest.raises(FilterValidationError) as exc_info:
            int_param({"role": "admin"}, "role")

        assert exc_info.value.field == "role"

    def test_uuid_param(self) -> None:
        """UUID strings parse, garbage raises."""
        value = "11111111-1111-1111-1111-111111111111"
        assert uuid_param({"partner_id": value}, "partner_id") == UUID(value)
        with pytest.raises(FilterValidationError):
            uuid_param({"partner_id": "P1"}, "partner_id")

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("true", True), ("false", False), ("yes", None), ("TRUE", None), ("", None)],
    )
    def test_bool_literal_param(self, raw: str, expected: bool | None) -> None:
        """Only the exact literals are honoured."""
        assert bool_literal_param({"is_client": raw}, "is_client") is expected

    def test_datetime_param_accepts_date(self) -> None:
        """A bare date means midnight."""
        assert datetime_param({"d": "2024-01-31"}, "d") == datetime(2024, 1, 31)

    def test_datetime_param_accepts_zulu(self) -> None:
        """Trailing Z is read as UTC."""
        parsed = datetime_param({"d": "2024-01-31T10:00:00Z"}, "d")

        assert parsed == datetime(2024, 1, 31, 10, tzinfo=timezone.utc)

    def test_datetime_param_rejects_garbage(self) -> None:
        """Unparseable dates raise."""
        with pytest.raises(FilterValidationError):
            datetime_param({"d": "last week"}, "d")

    def test_date_param(self) -> None:
        """Datetimes collapse to their calendar day."""
        assert date_param({"d": "2024-03-05T23:10:00"}, "d") == date(2024, 3, 5)
