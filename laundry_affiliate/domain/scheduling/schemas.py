"""Scheduling domain schemas - availability value objects and request bodies"""

import datetime as dt
import logging
import uuid
from enum import Enum
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    StrictBool,
    ValidationError,
    field_validator,
    model_validator,
)

from ...config import DEFAULT_TIMEZONE

logger = logging.getLogger(__name__)


class Slot(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


# Fixed display order of the daily slots
SLOT_ORDER = (Slot.MORNING, Slot.AFTERNOON, Slot.EVENING)


class DayName(str, Enum):
    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"


class ExceptionType(str, Enum):
    BLOCK = "block"
    OVERRIDE = "override"


class SlotMap(BaseModel):
    """Per-slot open/closed flags; all three slots are always present"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    morning: StrictBool
    afternoon: StrictBool
    evening: StrictBool

    @classmethod
    def all_open(cls) -> "SlotMap":
        return cls(morning=True, afternoon=True, evening=True)

    @classmethod
    def all_closed(cls) -> "SlotMap":
        return cls(morning=False, afternoon=False, evening=False)

    def is_open(self, slot: Slot) -> bool:
        return getattr(self, Slot(slot).value)

    def open_slots(self) -> list[Slot]:
        return [slot for slot in SLOT_ORDER if self.is_open(slot)]


class DayRule(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: StrictBool
    timeSlots: SlotMap

    @classmethod
    def closed(cls) -> "DayRule":
        return cls(enabled=False, timeSlots=SlotMap.all_closed())


class WeeklyTemplate(BaseModel):
    """Recurring availability, one rule per day of the week"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    sunday: DayRule
    monday: DayRule
    tuesday: DayRule
    wednesday: DayRule
    thursday: DayRule
    friday: DayRule
    saturday: DayRule

    @classmethod
    def default(cls) -> "WeeklyTemplate":
        """Monday through Saturday fully open, Sunday closed"""
        open_day = DayRule(enabled=True, timeSlots=SlotMap.all_open())
        rules = {day.value: open_day for day in DayName}
        rules[DayName.SUNDAY.value] = DayRule.closed()
        return cls(**rules)

    @classmethod
    def from_document(cls, raw: Any) -> "WeeklyTemplate":
        """
        Load a stored template, closing any day whose rule is missing or
        malformed instead of rejecting the whole document.
        """
        if not isinstance(raw, dict):
            logger.warning(
                f"⚠️ Malformed weekly template ({type(raw).__name__}), treating every day as closed"
            )
            return cls(**{day.value: DayRule.closed() for day in DayName})

        rules = {}
        for day in DayName:
            try:
                rules[day.value] = DayRule.model_validate(raw.get(day.value))
            except ValidationError:
                logger.warning(f"⚠️ Malformed weekly template rule for {day.value}, treating as closed")
                rules[day.value] = DayRule.closed()
        return cls(**rules)

    def rule_for(self, day: DayName) -> Optional[DayRule]:
        return getattr(self, DayName(day).value, None)


class DateException(BaseModel):
    """A single-date block or full override of the weekly template"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    date: dt.date
    type: ExceptionType
    timeSlots: Optional[SlotMap] = None
    reason: str = ""
    createdAt: Optional[dt.datetime] = None

    @model_validator(mode="after")
    def check_time_slots(self):
        if self.type == ExceptionType.BLOCK and self.timeSlots is not None:
            raise ValueError("Block exceptions cannot carry time slots")
        if self.type == ExceptionType.OVERRIDE and self.timeSlots is None:
            raise ValueError("Override exceptions require morning, afternoon and evening time slots")
        return self


class ScheduleSettings(BaseModel):
    """Booking window settings, returned to callers but not enforced per slot"""

    model_config = ConfigDict(frozen=True)

    advanceBookingDays: int = Field(default=1, ge=0, le=30)
    maxBookingDays: int = Field(default=30, ge=1, le=90)
    timezone: str = DEFAULT_TIMEZONE

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v):
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v


def _stored_date(value: Any) -> Any:
    # Older documents stored exception dates as full ISO timestamps
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


class AvailabilitySchedule(BaseModel):
    """
    An affiliate's complete availability document.

    Immutable: edits return a new schedule which the repository persists.
    Exceptions are indexed by date on construction.
    """

    model_config = ConfigDict(frozen=True)

    weeklyTemplate: WeeklyTemplate = Field(default_factory=WeeklyTemplate.default)
    dateExceptions: tuple[DateException, ...] = ()
    scheduleSettings: ScheduleSettings = Field(default_factory=ScheduleSettings)

    _exceptions_by_date: dict = PrivateAttr(default_factory=dict)

    @model_validator(mode="after")
    def check_one_exception_per_date(self):
        seen = set()
        for exception in self.dateExceptions:
            if exception.date in seen:
                raise ValueError(f"Only one exception is allowed per date ({exception.date})")
            seen.add(exception.date)
        return self

    def model_post_init(self, __context: Any) -> None:
        self._exceptions_by_date = {exc.date: exc for exc in self.dateExceptions}

    @property
    def timezone(self) -> str:
        return self.scheduleSettings.timezone

    @classmethod
    def default(cls, timezone: Optional[str] = None) -> "AvailabilitySchedule":
        return cls(scheduleSettings=ScheduleSettings(timezone=timezone or DEFAULT_TIMEZONE))

    @classmethod
    def from_document(cls, raw: Any) -> "AvailabilitySchedule":
        """Build a schedule from the JSON stored on the affiliate row"""
        if not isinstance(raw, dict):
            return cls.default()

        exceptions = []
        seen = set()
        for item in raw.get("dateExceptions") or []:
            if not isinstance(item, dict):
                continue
            item = dict(item)
            item["date"] = _stored_date(item.get("date"))
            if item.get("type") == ExceptionType.BLOCK.value:
                item.pop("timeSlots", None)
            try:
                exception = DateException.model_validate(item)
            except ValidationError as e:
                logger.warning(f"⚠️ Skipping malformed date exception {item.get('id')}: {e}")
                continue
            if exception.date in seen:
                logger.warning(f"⚠️ Duplicate date exception for {exception.date}, keeping the first")
                continue
            seen.add(exception.date)
            exceptions.append(exception)

        try:
            settings = ScheduleSettings.model_validate(raw.get("scheduleSettings") or {})
        except ValidationError as e:
            logger.warning(f"⚠️ Invalid schedule settings, using defaults: {e}")
            settings = ScheduleSettings()

        return cls(
            weeklyTemplate=WeeklyTemplate.from_document(raw.get("weeklyTemplate")),
            dateExceptions=tuple(exceptions),
            scheduleSettings=settings,
        )

    def to_document(self) -> dict:
        return self.model_dump(mode="json")

    def exception_for(self, day: dt.date) -> Optional[DateException]:
        return self._exceptions_by_date.get(day)

    def find_exception(self, exception_id: str) -> Optional[DateException]:
        for exception in self.dateExceptions:
            if exception.id == exception_id:
                return exception
        return None

    def with_template(self, template: WeeklyTemplate) -> "AvailabilitySchedule":
        return AvailabilitySchedule(
            weeklyTemplate=template,
            dateExceptions=self.dateExceptions,
            scheduleSettings=self.scheduleSettings,
        )

    def with_settings(self, settings: ScheduleSettings) -> "AvailabilitySchedule":
        return AvailabilitySchedule(
            weeklyTemplate=self.weeklyTemplate,
            dateExceptions=self.dateExceptions,
            scheduleSettings=settings,
        )

    def with_exception(self, exception: DateException) -> "AvailabilitySchedule":
        """Add an exception, replacing any existing one on the same date"""
        kept = tuple(exc for exc in self.dateExceptions if exc.date != exception.date)
        exceptions = tuple(sorted(kept + (exception,), key=lambda exc: exc.date))
        return AvailabilitySchedule(
            weeklyTemplate=self.weeklyTemplate,
            dateExceptions=exceptions,
            scheduleSettings=self.scheduleSettings,
        )

    def without_exception(self, exception_id: str) -> "AvailabilitySchedule":
        return AvailabilitySchedule(
            weeklyTemplate=self.weeklyTemplate,
            dateExceptions=tuple(exc for exc in self.dateExceptions if exc.id != exception_id),
            scheduleSettings=self.scheduleSettings,
        )


class AvailableDate(BaseModel):
    """One bookable day in a range query"""

    date: dt.date
    dayOfWeek: DayName
    timeSlots: list[Slot]
    allDay: bool


# Request bodies are loosely typed; the schedule service validates them and
# answers 400 naming the offending field.


class WeeklyTemplateUpdate(BaseModel):
    weeklyTemplate: Optional[dict[str, Any]] = None


class DateExceptionCreate(BaseModel):
    date: Optional[str] = None
    type: Optional[str] = None
    timeSlots: Optional[dict[str, Any]] = None
    reason: Optional[str] = None


class ScheduleSettingsUpdate(BaseModel):
    advanceBookingDays: Optional[Any] = None
    maxBookingDays: Optional[Any] = None
    timezone: Optional[str] = None
