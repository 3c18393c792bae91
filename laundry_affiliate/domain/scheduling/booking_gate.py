"""Booking gate used by order creation.

Only answers whether a requested pickup slot is open. Nothing is reserved or
locked: two orders for the same slot may both pass, and capacity is managed
by the affiliate.
"""

import logging

from .calendar_math import DateLike, date_only
from .resolver import is_available
from .schemas import AvailabilitySchedule, Slot

logger = logging.getLogger(__name__)

TIMESLOT_UNAVAILABLE = "TIMESLOT_UNAVAILABLE"


class TimeslotUnavailableError(Exception):
    """A well-formed booking request for a slot the affiliate does not offer"""

    code = TIMESLOT_UNAVAILABLE

    def __init__(self, message: str, details: dict):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "success": False,
            "error": {"code": self.code, "details": self.details},
            "message": self.message,
        }


def check_booking(schedule: AvailabilitySchedule, value: DateLike, slot: Slot) -> None:
    """
    Accept or reject a requested pickup.

    Raises:
        TimeslotUnavailableError: If the slot is closed on that date
    """
    slot = Slot(slot)
    if is_available(schedule, value, slot):
        return

    day = date_only(value, schedule.timezone)
    logger.info(f"🚫 Rejected booking for {day.isoformat()} {slot.value}: slot unavailable")
    raise TimeslotUnavailableError(
        message=(
            f"The selected time slot ({slot.value}) on {day.isoformat()} is not available. "
            "Please choose a different date or time."
        ),
        details={"date": day.isoformat(), "timeSlot": slot.value},
    )
