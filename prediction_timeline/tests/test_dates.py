"""
Tests for date parsing and formatting.
"""

from datetime import date, datetime, timezone

import pytest

from prediction_timeline.utils.dates import (
    format_date,
    format_timestamp,
    parse_date,
    parse_timestamp,
    INVALID_DATE,
)


class TestFormatDate:
    """Tests for format_date."""

    def test_short_month_day_year(self):
        assert format_date(date(2025, 1, 5)) == "Jan 5, 2025"

    def test_no_zero_padding(self):
        assert format_date(date(2025, 7, 2)) == "Jul 2, 2025"

    def test_end_of_year(self):
        assert format_date(date(2025, 12, 31)) == "Dec 31, 2025"

    def test_naive_datetime(self):
        assert format_date(datetime(2025, 3, 14, 23, 30)) == "Mar 14, 2025"

    def test_iso_string(self):
        """Dates as returned by the database service."""
        assert format_date("2025-01-05") == "Jan 5, 2025"

    def test_aware_datetime_uses_display_timezone(self):
        """02:00 UTC on Jan 6 is still Jan 5 in US/Eastern."""
        dt = datetime(2025, 1, 6, 2, 0, tzinfo=timezone.utc)
        assert format_date(dt) == "Jan 5, 2025"

    def test_timestamp_string(self):
        assert format_date("2025-01-05T15:00:00Z") == "Jan 5, 2025"

    @pytest.mark.parametrize("bad", ["not a date", "", "2025-13-45", None, 12345])
    def test_invalid_input_returns_invalid_date(self, bad):
        """Invalid input never raises."""
        assert format_date(bad) == INVALID_DATE


class TestParseDate:
    """Tests for parse_date."""

    def test_iso(self):
        assert parse_date("2025-07-02") == date(2025, 7, 2)

    def test_us_slash(self):
        assert parse_date("07/02/2025") == date(2025, 7, 2)

    def test_us_dash(self):
        assert parse_date("07-02-2025") == date(2025, 7, 2)

    def test_strips_whitespace(self):
        assert parse_date("  2025-07-02 ") == date(2025, 7, 2)

    def test_invalid_raises(self):
        with pytest.raises(ValueError):
            parse_date("July 2nd")


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_zulu(self):
        dt = parse_timestamp("2025-07-02T12:30:00Z")
        assert dt == datetime(2025, 7, 2, 12, 30, tzinfo=timezone.utc)

    def test_postgres_microseconds_and_offset(self):
        dt = parse_timestamp("2025-07-02T12:30:00.123456+00:00")
        assert dt.microsecond == 123456
        assert dt.utcoffset().total_seconds() == 0

    def test_short_fraction(self):
        dt = parse_timestamp("2025-07-02T12:30:00.5+00:00")
        assert dt.microsecond == 500000

    def test_invalid_raises(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")


def test_format_timestamp_converts_aware():
    dt = datetime(2025, 7, 2, 16, 0, tzinfo=timezone.utc)
    assert format_timestamp(dt) == "2025-07-02 12:00:00"
