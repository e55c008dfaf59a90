"""Model module for timeline coordinate mapping."""

from .timeline import (
    date_to_position,
    position_to_date,
    Timeline,
    TimelineMarker,
    DegenerateTimelineError,
)

__all__ = [
    'date_to_position',
    'position_to_date',
    'Timeline',
    'TimelineMarker',
    'DegenerateTimelineError',
]
