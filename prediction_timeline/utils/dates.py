"""
Date utilities for Prediction Timeline.

Provides date parsing, display formatting, and timezone helpers.
"""

from datetime import datetime, date, timezone
from typing import Union
import pytz

from prediction_timeline.config import DISPLAY_TIMEZONE


INVALID_DATE = "Invalid Date"

# en-US short month names, independent of the process locale
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

DATE_FORMATS = [
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%m-%d-%Y",
]

DateLike = Union[date, datetime, str]


def get_display_tz():
    """Get the configured display timezone."""
    return pytz.timezone(DISPLAY_TIMEZONE)


def get_local_now() -> datetime:
    """Get current datetime in the display timezone."""
    return datetime.now(get_display_tz())


def parse_date(date_str: str) -> date:
    """
    Parse a date string in various formats.

    Supported formats:
    - YYYY-MM-DD
    - MM/DD/YYYY
    - MM-DD-YYYY

    Args:
        date_str: Date string to parse

    Returns:
        date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    raise ValueError(f"Cannot parse date: {date_str}. Use YYYY-MM-DD format.")


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp as returned by the database service.

    Handles a trailing 'Z' and fractional seconds of any precision
    (Postgres emits microseconds, some clients fewer digits).

    Raises:
        ValueError: If the string is not a timestamp
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    # Normalize fractional seconds to 6 digits for fromisoformat
    if "." in text:
        head, _, rest = text.partition(".")
        digits = ""
        for ch in rest:
            if not ch.isdigit():
                break
            digits += ch
        suffix = rest[len(digits):]
        text = f"{head}.{digits[:6].ljust(6, '0')}{suffix}"

    return datetime.fromisoformat(text)


def _coerce(value: DateLike) -> Union[date, datetime]:
    if isinstance(value, (date, datetime)):
        return value
    if isinstance(value, str):
        try:
            return parse_date(value)
        except ValueError:
            return parse_timestamp(value)
    raise TypeError(f"Not a date: {value!r}")


def format_date(value: DateLike) -> str:
    """
    Format a date as short month, numeric day, numeric year.

    Examples: "Jan 5, 2025", "Dec 31, 2025"

    Accepts date, datetime or a date/timestamp string. Aware datetimes are
    shown in the display timezone. Anything unparseable returns
    "Invalid Date" rather than raising.
    """
    try:
        d = _coerce(value)
    except (TypeError, ValueError):
        return INVALID_DATE

    if isinstance(d, datetime) and d.tzinfo is not None:
        d = d.astimezone(get_display_tz())

    return f"{MONTH_ABBREVIATIONS[d.month - 1]} {d.day}, {d.year}"


def format_timestamp(dt: datetime = None) -> str:
    """Format a datetime for display (defaults to now, display timezone)."""
    if dt is None:
        dt = get_local_now()
    elif dt.tzinfo is not None:
        dt = dt.astimezone(get_display_tz())
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)
