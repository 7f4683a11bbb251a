"""Tests for todolist.dates module."""

from __future__ import annotations

import pytest

from todolist.dates import MAX_DUE_DATE, format_due_date, parse_due_date


class TestParseDueDate:
    """Tests for parse_due_date."""

    def test_empty(self) -> None:
        assert parse_due_date(None) is None
        assert parse_due_date("") is None
        assert parse_due_date("   ") is None

    def test_iso_date(self) -> None:
        assert parse_due_date("2024-01-02") == 1704153600

    def test_dotted_date(self) -> None:
        assert parse_due_date("02.01.2024") == 1704153600

    def test_timestamp_text(self) -> None:
        assert parse_due_date("1700000000") == 1700000000

    def test_int_passthrough(self) -> None:
        assert parse_due_date(42) == 42

    def test_epoch(self) -> None:
        assert parse_due_date("1970-01-01") == 0

    def test_garbage(self) -> None:
        with pytest.raises(ValueError, match="Unrecognised date"):
            parse_due_date("next tuesday")

    def test_impossible_date(self) -> None:
        with pytest.raises(ValueError):
            parse_due_date("2024-02-30")

    def test_timestamp_out_of_range(self) -> None:
        assert parse_due_date(str(MAX_DUE_DATE)) == MAX_DUE_DATE
        with pytest.raises(ValueError, match="out of range"):
            parse_due_date("99999999999999999")
        with pytest.raises(ValueError, match="out of range"):
            parse_due_date(MAX_DUE_DATE + 1)
        with pytest.raises(ValueError, match="out of range"):
            parse_due_date(-1)


class TestFormatDueDate:
    """Tests for format_due_date."""

    def test_none(self) -> None:
        assert format_due_date(None) == ""

    def test_midnight(self) -> None:
        assert format_due_date(1704153600) == "2024-01-02"

    def test_round_trip_date(self) -> None:
        assert format_due_date(parse_due_date("2031-12-31")) == "2031-12-31"

    def test_latest_date(self) -> None:
        assert format_due_date(MAX_DUE_DATE) == "9999-12-31"

    def test_unrepresentable_falls_back_to_number(self) -> None:
        """Test timestamps past year 9999 render as the raw number."""
        assert format_due_date(99999999999999999) == "99999999999999999"
