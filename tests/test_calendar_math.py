from datetime import date, datetime, timedelta, timezone

import pytest

from laundry_affiliate.domain.scheduling.calendar_math import (
    date_only,
    day_of_week_key,
    days_between,
    parse_calendar_date,
)
from laundry_affiliate.domain.scheduling.schemas import DayName

from .helpers import MONDAY, SATURDAY, SUNDAY


@pytest.mark.parametrize(
    "day, expected",
    [(SUNDAY, DayName.SUNDAY), (MONDAY, DayName.MONDAY), (SATURDAY, DayName.SATURDAY)],
)
def test_day_of_week_key(day, expected):
    assert day_of_week_key(day) == expected


def test_day_of_week_key_uses_affiliate_timezone():
    # 03:00 UTC on Monday is still Sunday evening in Chicago
    instant = datetime(2025, 1, 20, 3, 0, tzinfo=timezone.utc)
    assert day_of_week_key(instant, "America/Chicago") == DayName.SUNDAY
    assert day_of_week_key(instant, "UTC") == DayName.MONDAY


def test_date_only_normalizes_same_day():
    morning = datetime(2025, 1, 20, 8, 15)
    evening = datetime(2025, 1, 20, 19, 45)
    assert date_only(morning) == date_only(evening) == MONDAY
    assert date_only(MONDAY) == MONDAY


def test_days_between_is_inclusive_and_restartable():
    days = days_between(date(2025, 1, 30), date(2025, 2, 2))

    assert list(days) == [date(2025, 1, 30), date(2025, 1, 31), date(2025, 2, 1), date(2025, 2, 2)]
    assert list(days) == list(days)
    assert len(days) == 4


def test_days_between_single_day_and_reversed():
    assert list(days_between(MONDAY, MONDAY)) == [MONDAY]
    reversed_range = days_between(MONDAY, SUNDAY)
    assert list(reversed_range) == []
    assert len(reversed_range) == 0


def test_days_between_ends_at_last_representable_date():
    days = days_between(date.max - timedelta(days=1), date.max)

    assert list(days) == [date(9999, 12, 30), date(9999, 12, 31)]
    assert len(days) == 2


def test_parse_calendar_date_out_of_range_datetime():
    # Converting into Chicago would step before date.min
    with pytest.raises(ValueError):
        parse_calendar_date("0001-01-01T00:00:00Z", "America/Chicago")
    with pytest.raises(ValueError):
        parse_calendar_date("9999-12-31T23:00:00-05:00", "UTC")


def test_parse_calendar_date_formats():
    assert parse_calendar_date("2025-01-20") == MONDAY
    assert parse_calendar_date("2025-01-20T15:30:00") == MONDAY
    # Midnight UTC is the previous evening in Chicago
    assert parse_calendar_date("2025-01-20T00:00:00.000Z", "America/Chicago") == SUNDAY


@pytest.mark.parametrize("text", ["", "not-a-date", "2025-13-40"])
def test_parse_calendar_date_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_calendar_date(text)
