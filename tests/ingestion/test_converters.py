"""Tests for the tolerant cell converters."""

from datetime import date, datetime

import pytest

from compliance_ingestion.domain.converters import (
    to_bool,
    to_date,
    to_datetime,
    to_int,
    to_text,
)


class TestToText:
    @pytest.mark.parametrize("value", [None, "", "   ", "null", "NULL"])
    def test_blank(self, value):
        assert to_text(value) is None

    def test_strips(self):
        assert to_text("  Acme  ") == "Acme"
        assert to_text(12) == "12"


class TestToInt:
    @pytest.mark.parametrize(
        "value, expected",
        [("12", 12), (" 12 ", 12), ("12abc", 12), ("-3", -3), (7, 7), (7.9, 7)],
    )
    def test_parses(self, value, expected):
        assert to_int(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", True])
    def test_unparseable(self, value):
        assert to_int(value) is None


class TestToBool:
    @pytest.mark.parametrize("value", ["1", "true", "TRUE", "yes", "Y", True])
    def test_true(self, value):
        assert to_bool(value) is True

    @pytest.mark.parametrize("value", ["0", "false", "No", "n", False])
    def test_false(self, value):
        assert to_bool(value) is False

    @pytest.mark.parametrize("value", [None, "", "maybe"])
    def test_unknown(self, value):
        assert to_bool(value) is None


class TestToDatetime:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2025-11-16T10:30:00", datetime(2025, 11, 16, 10, 30)),
            ("2025-11-16 10:30", datetime(2025, 11, 16, 10, 30)),
            ("11/16/2025 10:30:00", datetime(2025, 11, 16, 10, 30)),
            ("11/16/2025 2:15 PM", datetime(2025, 11, 16, 14, 15)),
            ("11/16/2025", datetime(2025, 11, 16)),
            (date(2025, 11, 16), datetime(2025, 11, 16)),
        ],
    )
    def test_formats(self, value, expected):
        assert to_datetime(value) == expected

    def test_offset_is_dropped_keeping_wall_clock(self):
        assert to_datetime("2025-11-16T23:30:00-05:00") == datetime(2025, 11, 16, 23, 30)

    def test_blank(self):
        assert to_datetime("") is None
        assert to_datetime(None) is None

    def test_unrecognised(self):
        with pytest.raises(ValueError, match="Unrecognised date"):
            to_datetime("next tuesday")


class TestToDate:
    def test_drops_time(self):
        assert to_date("2025-11-10 08:00") == date(2025, 11, 10)
        assert to_date(datetime(2025, 11, 10, 8, 0)) == date(2025, 11, 10)

    def test_passes_dates_through(self):
        assert to_date(date(2025, 11, 10)) == date(2025, 11, 10)

    def test_blank(self):
        assert to_date(None) is None
