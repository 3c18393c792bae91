"""Schedule service - Business logic for affiliate availability"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import ensure_affiliate_access
from ...config import MAX_AVAILABILITY_RANGE_DAYS
from ...models import Affiliate, User
from .calendar_math import day_of_week_key, get_zone, parse_calendar_date, today_in
from .conflicts import ConflictValidator
from .repository import ScheduleRepository
from .resolver import RangeTooLargeError, available_dates, is_available
from .schemas import (
    SLOT_ORDER,
    AvailabilitySchedule,
    DateException,
    DateExceptionCreate,
    DayName,
    DayRule,
    ExceptionType,
    ScheduleSettings,
    ScheduleSettingsUpdate,
    Slot,
    SlotMap,
    WeeklyTemplate,
    WeeklyTemplateUpdate,
)

logger = logging.getLogger(__name__)

VALID_TIME_SLOTS = [slot.value for slot in SLOT_ORDER]


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=400, detail=detail)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_slot(value: Optional[str]) -> Slot:
    """Validate a slot name from a request"""
    try:
        return Slot(value)
    except ValueError as e:
        raise _bad_request("Invalid time slot. Must be morning, afternoon, or evening") from e


def _validate_slot_flags(raw: Any, field: str) -> dict[str, bool]:
    if not isinstance(raw, dict):
        raise _bad_request(f"{field} must be an object of time slot flags")
    for slot, flag in raw.items():
        if slot not in VALID_TIME_SLOTS:
            raise _bad_request(f"Invalid time slot: {slot}")
        if not isinstance(flag, bool):
            raise _bad_request(f"Time slot {slot} must be a boolean")
    return raw


class ScheduleService:
    """Service layer for schedule editing and availability queries"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ScheduleRepository()

    def _get_affiliate(self, affiliate_id: str) -> Affiliate:
        affiliate = self.repo.get_affiliate(self.db, affiliate_id)
        if not affiliate:
            raise HTTPException(status_code=404, detail="Affiliate not found")
        return affiliate

    def _load(self, affiliate_id: str, user: Optional[User] = None, action: str = "update"):
        # Reads answer 404 before 403; edits refuse non-owners before the lookup
        if user is not None and action != "view":
            ensure_affiliate_access(user, affiliate_id, action)
        affiliate = self._get_affiliate(affiliate_id)
        if user is not None and action == "view":
            ensure_affiliate_access(user, affiliate_id, action)
        return affiliate, self.repo.load_schedule(affiliate)

    # ------------------------------------------------------------------
    # Affiliate-facing schedule editing
    # ------------------------------------------------------------------

    def get_schedule(self, affiliate_id: str, user: User) -> dict:
        """Full schedule document for the owning affiliate"""
        _, schedule = self._load(affiliate_id, user, action="view")
        return {"success": True, **schedule.to_document()}

    def update_weekly_template(
        self, affiliate_id: str, data: WeeklyTemplateUpdate, user: User
    ) -> dict:
        """Merge a partial per-day update into the weekly template"""
        affiliate, schedule = self._load(affiliate_id, user)

        updates = data.weeklyTemplate
        if not updates or not isinstance(updates, dict):
            raise _bad_request("Weekly template is required")

        rules = {day.value: schedule.weeklyTemplate.rule_for(day) for day in DayName}
        for day, day_config in updates.items():
            try:
                day_name = DayName(day)
            except ValueError as e:
                raise _bad_request(f"Invalid day: {day}") from e
            if not isinstance(day_config, dict):
                raise _bad_request(f"Configuration for {day} must be an object")

            current = rules[day_name.value]
            enabled = day_config.get("enabled", current.enabled)
            if not isinstance(enabled, bool):
                raise _bad_request(f"enabled must be a boolean for {day}")

            slot_updates = {}
            if day_config.get("timeSlots") is not None:
                slot_updates = _validate_slot_flags(day_config["timeSlots"], f"timeSlots for {day}")

            rules[day_name.value] = DayRule(
                enabled=enabled,
                timeSlots=SlotMap(**{**current.timeSlots.model_dump(), **slot_updates}),
            )

        schedule = self.repo.save_schedule(
            self.db, affiliate, schedule.with_template(WeeklyTemplate(**rules))
        )
        logger.info(f"📅 Weekly template updated for affiliate {affiliate_id}: {sorted(updates)}")
        return {"success": True, "weeklyTemplate": schedule.weeklyTemplate.model_dump(mode="json")}

    def add_date_exception(self, affiliate_id: str, data: DateExceptionCreate, user: User) -> dict:
        """
        Block a date or override its slots.

        Active orders in slots the exception closes are reported as a warning;
        the exception is stored regardless. An existing exception on the same
        date is replaced.
        """
        affiliate, schedule = self._load(affiliate_id, user)
        tz = schedule.timezone

        if not data.date:
            raise _bad_request("Date is required")
        try:
            exception_date = parse_calendar_date(data.date, tz)
        except ValueError as e:
            raise _bad_request("Invalid date format") from e

        if exception_date < today_in(tz):
            raise _bad_request("Cannot add exceptions for past dates")

        try:
            exception_type = ExceptionType(data.type)
        except ValueError as e:
            raise _bad_request('Invalid exception type. Must be "block" or "override"') from e

        time_slots = None
        closed_slots = list(SLOT_ORDER)
        if exception_type == ExceptionType.OVERRIDE:
            if data.timeSlots is None:
                raise _bad_request("timeSlots are required for override exceptions")
            flags = _validate_slot_flags(data.timeSlots, "timeSlots")
            missing = [slot for slot in VALID_TIME_SLOTS if slot not in flags]
            if missing:
                raise _bad_request(f"timeSlots must set every slot; missing: {', '.join(missing)}")
            time_slots = SlotMap(**flags)
            closed_slots = [slot for slot in SLOT_ORDER if not time_slots.is_open(slot)]

        report = ConflictValidator(self.db, tz).validate_slots(
            affiliate_id, exception_date, closed_slots
        )

        exception = DateException(
            date=exception_date,
            type=exception_type,
            timeSlots=time_slots,
            reason=(data.reason or "").strip(),
            createdAt=datetime.now(timezone.utc),
        )
        if schedule.exception_for(exception_date) is not None:
            logger.info(f"🔁 Replacing existing exception on {exception_date} for {affiliate_id}")

        self.repo.save_schedule(self.db, affiliate, schedule.with_exception(exception))
        logger.info(
            f"📅 Added {exception_type.value} exception on {exception_date} for affiliate {affiliate_id}"
        )

        result = {"success": True, "exception": exception.model_dump(mode="json")}
        warning = report.warning()
        if warning:
            result["warning"] = warning
            result["conflictingOrders"] = [order.order_id for order in report.conflicts]
        return result

    def delete_date_exception(self, affiliate_id: str, exception_id: str, user: User) -> dict:
        affiliate, schedule = self._load(affiliate_id, user)

        if schedule.find_exception(exception_id) is None:
            raise HTTPException(status_code=404, detail="Exception not found")

        self.repo.save_schedule(self.db, affiliate, schedule.without_exception(exception_id))
        logger.info(f"🗑️ Removed exception {exception_id} for affiliate {affiliate_id}")
        return {"success": True}

    def update_schedule_settings(
        self, affiliate_id: str, data: ScheduleSettingsUpdate, user: User
    ) -> dict:
        affiliate, schedule = self._load(affiliate_id, user)
        updates = {}

        if data.advanceBookingDays is not None:
            if not _is_int(data.advanceBookingDays) or not 0 <= data.advanceBookingDays <= 30:
                raise _bad_request("advanceBookingDays must be between 0 and 30")
            updates["advanceBookingDays"] = data.advanceBookingDays

        if data.maxBookingDays is not None:
            if not _is_int(data.maxBookingDays) or not 1 <= data.maxBookingDays <= 90:
                raise _bad_request("maxBookingDays must be between 1 and 90")
            updates["maxBookingDays"] = data.maxBookingDays

        if data.timezone is not None:
            try:
                get_zone(data.timezone)
            except ValueError as e:
                raise _bad_request(f"Unknown timezone: {data.timezone}") from e
            updates["timezone"] = data.timezone

        settings = ScheduleSettings(**{**schedule.scheduleSettings.model_dump(), **updates})
        self.repo.save_schedule(self.db, affiliate, schedule.with_settings(settings))
        logger.info(f"⚙️ Schedule settings updated for affiliate {affiliate_id}: {updates}")
        return {"success": True, "scheduleSettings": settings.model_dump(mode="json")}

    # ------------------------------------------------------------------
    # Public availability queries
    # ------------------------------------------------------------------

    def get_available_slots(
        self, affiliate_id: str, start_date: Optional[str], end_date: Optional[str]
    ) -> dict:
        """Bookable days between two dates, for rendering a booking calendar"""
        if not start_date or not end_date:
            raise _bad_request("Both startDate and endDate are required")

        _, schedule = self._load(affiliate_id)
        try:
            start = parse_calendar_date(start_date, schedule.timezone)
            end = parse_calendar_date(end_date, schedule.timezone)
        except ValueError as e:
            raise _bad_request("Invalid date format") from e

        if end < start:
            raise _bad_request("endDate must be on or after startDate")

        try:
            days = available_dates(schedule, start, end, max_days=MAX_AVAILABILITY_RANGE_DAYS)
        except RangeTooLargeError as e:
            raise _bad_request(str(e)) from e

        return {
            "success": True,
            "availableDates": [
                {
                    "date": day.date.isoformat(),
                    "dayOfWeek": day.dayOfWeek.value,
                    "availableSlots": [slot.value for slot in day.timeSlots],
                    "timeSlots": [slot.value for slot in day.timeSlots],
                    "allDay": day.allDay,
                }
                for day in days
            ],
            "affiliateSettings": schedule.scheduleSettings.model_dump(mode="json"),
        }

    def check_slot_availability(
        self, affiliate_id: str, date: Optional[str], time_slot: Optional[str]
    ) -> dict:
        if not date or not time_slot:
            raise _bad_request("Both date and timeSlot are required")
        slot = parse_slot(time_slot)

        _, schedule = self._load(affiliate_id)
        try:
            check_date = parse_calendar_date(date, schedule.timezone)
        except ValueError as e:
            raise _bad_request("Invalid date format") from e

        return {
            "success": True,
            "available": is_available(schedule, check_date, slot),
            "date": check_date.isoformat(),
            "dayOfWeek": day_of_week_key(check_date).value,
            "timeSlot": slot.value,
        }

    def load_schedule_for_booking(self, affiliate_id: str) -> AvailabilitySchedule:
        """Schedule used by order creation; 404 when the affiliate is unknown"""
        _, schedule = self._load(affiliate_id)
        return schedule
