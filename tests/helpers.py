from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from laundry_affiliate.domain.scheduling.schemas import (
    AvailabilitySchedule,
    DateException,
    DayRule,
    ExceptionType,
    SlotMap,
    WeeklyTemplate,
)

# Known weekdays
SATURDAY = date(2025, 1, 18)
SUNDAY = date(2025, 1, 19)
MONDAY = date(2025, 1, 20)
FRIDAY = date(2025, 1, 24)


def next_weekday(weekday: int, timezone: str = "America/Chicago") -> date:
    """Next future date with the given weekday (Monday == 0)"""
    today = datetime.now(ZoneInfo(timezone)).date()
    days_ahead = (weekday - today.weekday()) % 7 or 7
    return today + timedelta(days=days_ahead)


def slots(morning: bool, afternoon: bool, evening: bool) -> SlotMap:
    return SlotMap(morning=morning, afternoon=afternoon, evening=evening)


def make_schedule(template_overrides=None, exceptions=(), timezone="America/Chicago"):
    """Default schedule with some days replaced and exceptions added"""
    template = WeeklyTemplate.default()
    if template_overrides:
        rules = {**dict(template), **template_overrides}
        template = WeeklyTemplate(**rules)
    schedule = AvailabilitySchedule.default(timezone).with_template(template)
    for exception in exceptions:
        schedule = schedule.with_exception(exception)
    return schedule


def block(day: date, reason: str = "Holiday") -> DateException:
    return DateException(date=day, type=ExceptionType.BLOCK, reason=reason)


def override(day: date, time_slots: SlotMap) -> DateException:
    return DateException(date=day, type=ExceptionType.OVERRIDE, timeSlots=time_slots)


def rule(enabled: bool, morning: bool = True, afternoon: bool = True, evening: bool = True):
    return DayRule(enabled=enabled, timeSlots=slots(morning, afternoon, evening))
