"""Registration timeline aggregation.

Turns sparse per-day registration counts into a dense daily series for the
admin dashboard chart. Days are calendar dates in UTC; both window bounds
are inclusive, so a 30-day trailing window yields 31 entries.
"""

import logging
import re
from collections.abc import Iterator, Mapping
from datetime import UTC, date, datetime, timedelta

from ..models.analytics import DailyCount
from .errors import InvalidWindowError

logger = logging.getLogger(__name__)

ISO_DAY = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DayLike = date | datetime | str


def as_day(value: DayLike) -> date:
    """Normalize a date, datetime or ISO day string to a calendar date.

    Aware datetimes are converted to UTC before the time of day is dropped.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and ISO_DAY.match(value):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    raise InvalidWindowError(f"Not a calendar day: {value!r}")


def _parse_key(key: object) -> date | None:
    if isinstance(key, (date, datetime)):
        return as_day(key)
    if isinstance(key, str) and ISO_DAY.match(key):
        try:
            return date.fromisoformat(key)
        except ValueError:
            return None
    return None


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def fill_daily_series(
    start: DayLike, end: DayLike, observations: Mapping[object, int]
) -> list[DailyCount]:
    """Build a gap-filled daily series over [start, end].

    Args:
        start: First day of the window
        end: Last day of the window (inclusive)
        observations: Registration counts keyed by ISO day string (or date)

    Returns:
        One DailyCount per day in ascending order; days without an
        observation get a count of 0. Observations outside the window and
        keys that are not calendar days are ignored.

    Raises:
        InvalidWindowError: If start is after end or a bound is not a day
    """
    start_day = as_day(start)
    end_day = as_day(end)
    if start_day > end_day:
        raise InvalidWindowError(
            f"Window start {start_day.isoformat()} is after end {end_day.isoformat()}"
        )

    counts: dict[date, int] = {}
    for key, count in observations.items():
        day = _parse_key(key)
        if day is None:
            logger.debug(f"Ignoring malformed registration day key: {key!r}")
            continue
        counts[day] = int(count)

    return [
        DailyCount(date=day, count=counts.get(day, 0)) for day in iter_days(start_day, end_day)
    ]


def trailing_window(today: DayLike, days: int) -> tuple[date, date]:
    """Return (start, end) for a window ending today and reaching back `days` days."""
    end = as_day(today)
    return end - timedelta(days=days), end
