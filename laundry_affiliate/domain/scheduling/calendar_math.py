"""Calendar utilities for availability scheduling.

All helpers work on calendar days in the affiliate's configured timezone so
that a pickup requested at 11pm local time is never keyed to the next day
because the server runs in UTC.
"""

from datetime import date, datetime, timedelta
from typing import Iterator, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .schemas import DayName

DateLike = Union[date, datetime]

# Indexed by date.weekday() (Monday == 0)
_WEEKDAY_NAMES = (
    DayName.MONDAY,
    DayName.TUESDAY,
    DayName.WEDNESDAY,
    DayName.THURSDAY,
    DayName.FRIDAY,
    DayName.SATURDAY,
    DayName.SUNDAY,
)


def get_zone(timezone: str) -> ZoneInfo:
    """Resolve an IANA timezone name, raising ValueError for unknown zones"""
    try:
        return ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError, TypeError) as e:
        raise ValueError(f"Unknown timezone: {timezone}") from e


def date_only(value: DateLike, timezone: str = "UTC") -> date:
    """
    Strip the time of day from a date or datetime.

    Aware datetimes are converted into *timezone* first. Naive datetimes are
    taken to already be local to the affiliate.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(get_zone(timezone))
        return value.date()
    return value


def day_of_week_key(value: DateLike, timezone: str = "UTC") -> DayName:
    """Map a date to its weekly template key"""
    return _WEEKDAY_NAMES[date_only(value, timezone).weekday()]


def today_in(timezone: str) -> date:
    """Today's calendar date in the given timezone"""
    return datetime.now(get_zone(timezone)).date()


def parse_calendar_date(text: str, timezone: str = "UTC") -> date:
    """
    Parse a request date into a calendar date.

    Accepts YYYY-MM-DD as well as full ISO-8601 datetimes (including a
    trailing Z), which are normalized into *timezone*.

    Raises:
        ValueError: If the value is not a recognizable date
    """
    if not text or not isinstance(text, str):
        raise ValueError("Invalid date format")

    text = text.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        return date_only(parsed, timezone)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Invalid date format: {text}") from e


class DayRange:
    """
    Inclusive, ascending range of calendar days.

    Iteration is lazy and the range can be iterated any number of times.
    """

    def __init__(self, start: date, end: date):
        self.start = start
        self.end = end

    def __iter__(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            # Stop before stepping past date.max
            if current == self.end:
                break
            current += timedelta(days=1)

    def __len__(self) -> int:
        return max((self.end - self.start).days + 1, 0)

    def __repr__(self) -> str:
        return f"DayRange({self.start.isoformat()}, {self.end.isoformat()})"


def days_between(start: DateLike, end: DateLike, timezone: str = "UTC") -> DayRange:
    """Every calendar day from start to end, both inclusive"""
    return DayRange(date_only(start, timezone), date_only(end, timezone))
