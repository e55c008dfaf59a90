"""Utilities module for Prediction Timeline."""

from .dates import (
    get_local_now,
    parse_date,
    parse_timestamp,
    format_date,
    format_timestamp,
    INVALID_DATE,
)

from .session import (
    generate_session_id,
    generate_session_uuid,
    new_session_id,
    to_base36,
)

__all__ = [
    "get_local_now",
    "parse_date",
    "parse_timestamp",
    "format_date",
    "format_timestamp",
    "INVALID_DATE",
    "generate_session_id",
    "generate_session_uuid",
    "new_session_id",
    "to_base36",
]
