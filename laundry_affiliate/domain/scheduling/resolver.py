"""Availability resolution over an affiliate's schedule.

Layers, highest priority first:
1. a block exception on the date closes every slot
2. an override exception on the date replaces the weekly template verbatim
3. the weekly template rule for the day of week

These functions are pure: they never touch the database and never raise for
well-formed input.
"""

import logging
from datetime import date
from typing import Optional

from .calendar_math import DateLike, date_only, day_of_week_key, days_between
from .schemas import (
    SLOT_ORDER,
    AvailabilitySchedule,
    AvailableDate,
    ExceptionType,
    Slot,
    SlotMap,
)

logger = logging.getLogger(__name__)


class RangeTooLargeError(ValueError):
    """Raised when a caller asks for more days than it allows itself"""

    def __init__(self, days: int, max_days: int):
        self.days = days
        self.max_days = max_days
        super().__init__(f"Date range cannot exceed {max_days} days")


def _resolve_slot_map(schedule: AvailabilitySchedule, day: date) -> Optional[SlotMap]:
    """Effective slot flags for a calendar day, or None when the whole day is closed"""
    exception = schedule.exception_for(day)
    if exception is not None:
        if exception.type == ExceptionType.BLOCK:
            return None
        return exception.timeSlots

    day_key = day_of_week_key(day)
    rule = schedule.weeklyTemplate.rule_for(day_key)
    if rule is None or rule.timeSlots is None:
        logger.warning(f"⚠️ No weekly template rule for {day_key.value}, treating {day} as closed")
        return None
    if not rule.enabled:
        return None
    return rule.timeSlots


def is_available(schedule: AvailabilitySchedule, value: DateLike, slot: Slot) -> bool:
    """Whether a single slot on a date can be booked"""
    slot = Slot(slot)
    slot_map = _resolve_slot_map(schedule, date_only(value, schedule.timezone))
    return slot_map is not None and slot_map.is_open(slot)


def available_slots(schedule: AvailabilitySchedule, value: DateLike) -> list[Slot]:
    """Bookable slots on a date in morning, afternoon, evening order"""
    slot_map = _resolve_slot_map(schedule, date_only(value, schedule.timezone))
    if slot_map is None:
        return []
    return slot_map.open_slots()


def available_dates(
    schedule: AvailabilitySchedule,
    start: DateLike,
    end: DateLike,
    max_days: Optional[int] = None,
) -> list[AvailableDate]:
    """
    Every bookable day between start and end (inclusive).

    Days without a single open slot are left out entirely, so callers must not
    expect one entry per day in the range.

    Raises:
        RangeTooLargeError: If max_days is given and the range is longer
    """
    days = days_between(start, end, schedule.timezone)
    if max_days is not None and len(days) - 1 > max_days:
        raise RangeTooLargeError(len(days) - 1, max_days)

    result = []
    for day in days:
        slots = available_slots(schedule, day)
        if not slots:
            continue
        result.append(
            AvailableDate(
                date=day,
                dayOfWeek=day_of_week_key(day),
                timeSlots=slots,
                allDay=len(slots) == len(SLOT_ORDER),
            )
        )
    return result
