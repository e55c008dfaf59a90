"""
Timeline coordinate mapping.

Linear transform between calendar dates and pixel offsets on a horizontal
timeline of known width:

    position = (date - start) / (end - start) * width
    date     = start + (position / width) * (end - start)

Durations are measured in fractional days. Neither direction clamps: dates
outside [start, end] map to positions outside [0, width] and vice versa, so
callers can extrapolate (e.g. while dragging past the edge). Callers that
want a bounded marker should check Timeline.contains() first.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterable, List, Optional, Union

from prediction_timeline.config import TIMELINE_START, TIMELINE_END, TIMELINE_WIDTH


SECONDS_PER_DAY = 24 * 60 * 60

DateValue = Union[date, datetime]


class DegenerateTimelineError(ValueError):
    """Raised when the timeline has zero duration or zero width."""


def _reference_tz(*values: DateValue) -> Optional[tzinfo]:
    """The timezone of the first aware datetime among values, if any."""
    for value in values:
        if isinstance(value, datetime) and value.tzinfo is not None:
            return value.tzinfo
    return None


def _as_datetime(value: DateValue, tz: Optional[tzinfo] = None) -> datetime:
    """
    Convert a date to midnight of that day.

    Plain dates become aware in tz when one is given, so they can be
    compared with an aware range. pytz zones need localize() to pick the
    right UTC offset for the day.
    """
    if isinstance(value, datetime):
        return value
    midnight = datetime.combine(value, time.min)
    if tz is None:
        return midnight
    if hasattr(tz, "localize"):
        return tz.localize(midnight)
    return midnight.replace(tzinfo=tz)


def _days_between(start: DateValue, end: DateValue, tz: Optional[tzinfo] = None) -> float:
    if tz is None:
        tz = _reference_tz(start, end)
    delta = _as_datetime(end, tz) - _as_datetime(start, tz)
    return delta.total_seconds() / SECONDS_PER_DAY


def _total_days(start_date: DateValue, end_date: DateValue) -> float:
    total_days = _days_between(start_date, end_date)
    if total_days == 0:
        raise DegenerateTimelineError(
            f"Timeline start and end are the same instant: {start_date}"
        )
    return total_days


def date_to_position(
    value: DateValue,
    start_date: DateValue,
    end_date: DateValue,
    timeline_width: float,
) -> float:
    """
    Map a date to its pixel offset on the timeline.

    Args:
        value: Date to place
        start_date: Date at position 0
        end_date: Date at position timeline_width
        timeline_width: Pixel width of the timeline

    Returns:
        Pixel offset (not clamped to [0, timeline_width])

    Raises:
        DegenerateTimelineError: If start_date == end_date or width is 0
    """
    total_days = _total_days(start_date, end_date)
    if timeline_width == 0:
        raise DegenerateTimelineError("Timeline width is 0")

    days_since_start = _days_between(
        start_date, value, _reference_tz(start_date, end_date, value)
    )
    return (days_since_start / total_days) * timeline_width


def position_to_date(
    position: float,
    start_date: DateValue,
    end_date: DateValue,
    timeline_width: float,
) -> DateValue:
    """
    Map a pixel offset back to a date.

    Returns a datetime when start_date is a datetime, otherwise a date
    (the computed instant truncated to its day). Positions outside
    [0, timeline_width] extrapolate past the range.

    Raises:
        DegenerateTimelineError: If start_date == end_date or width is 0
    """
    total_days = _total_days(start_date, end_date)
    if timeline_width == 0:
        raise DegenerateTimelineError("Timeline width is 0")

    ratio = position / timeline_width
    days_from_start = ratio * total_days
    start = _as_datetime(start_date, _reference_tz(start_date, end_date))
    result = start + timedelta(days=days_from_start)

    if isinstance(start_date, datetime):
        return result
    return result.date()


# ============================================================================
# TIMELINE
# ============================================================================

@dataclass(frozen=True)
class TimelineMarker:
    """A prediction placed on the timeline."""
    prediction: object  # storage.db.Prediction
    position: float
    in_range: bool


@dataclass(frozen=True)
class Timeline:
    """A date range laid out over a fixed pixel width."""
    start_date: DateValue = TIMELINE_START
    end_date: DateValue = TIMELINE_END
    width: float = TIMELINE_WIDTH

    def __post_init__(self):
        _total_days(self.start_date, self.end_date)
        if self.width == 0:
            raise DegenerateTimelineError("Timeline width is 0")

    @property
    def total_days(self) -> float:
        return _days_between(self.start_date, self.end_date)

    def position_of(self, value: DateValue) -> float:
        return date_to_position(value, self.start_date, self.end_date, self.width)

    def date_at(self, position: float) -> DateValue:
        return position_to_date(position, self.start_date, self.end_date, self.width)

    def contains(self, value: DateValue) -> bool:
        """Check if a date falls within [start_date, end_date]."""
        tz = _reference_tz(self.start_date, self.end_date, value)
        lo, hi = sorted([_as_datetime(self.start_date, tz), _as_datetime(self.end_date, tz)])
        return lo <= _as_datetime(value, tz) <= hi

    def layout(self, predictions: Iterable) -> List[TimelineMarker]:
        """
        Place predictions on the timeline, ordered by position.

        Out-of-range predictions are kept with in_range=False.
        """
        markers = [
            TimelineMarker(
                prediction=p,
                position=self.position_of(p.prediction_date),
                in_range=self.contains(p.prediction_date),
            )
            for p in predictions
        ]
        markers.sort(key=lambda m: m.position)
        return markers
