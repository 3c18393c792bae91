"""Conflict detection between schedule edits and booked orders.

Advisory only: a conflict produces a warning for the affiliate, it never
prevents the schedule edit from being saved.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable

from sqlalchemy.orm import Session

from ...models import Order
from ..orders.repository import OrderRepository
from .calendar_math import DateLike, date_only
from .schemas import Slot

logger = logging.getLogger(__name__)


@dataclass
class ConflictReport:
    valid: bool = True
    conflicts: list[Order] = field(default_factory=list)

    def warning(self) -> str | None:
        if self.valid:
            return None
        return (
            f"Warning: There are {len(self.conflicts)} existing order(s) on this date "
            "that may be affected."
        )


class ConflictValidator:
    """Looks up active orders that a schedule change would strand"""

    def __init__(self, db: Session, timezone: str = "UTC"):
        self.db = db
        self.timezone = timezone
        self.repo = OrderRepository()

    def validate_schedule_change(
        self, affiliate_id: str, value: DateLike, slot: Slot
    ) -> ConflictReport:
        """Active orders for the affiliate on this date and slot"""
        day = date_only(value, self.timezone)
        conflicts = self.repo.get_active_orders_for_slot(
            self.db, affiliate_id, day, Slot(slot).value
        )
        return ConflictReport(valid=not conflicts, conflicts=conflicts)

    def validate_slots(
        self, affiliate_id: str, value: DateLike, slots: Iterable[Slot]
    ) -> ConflictReport:
        """Combined report for every slot an edit would close"""
        conflicts = []
        for slot in slots:
            conflicts.extend(self.validate_schedule_change(affiliate_id, value, slot).conflicts)

        if conflicts:
            logger.info(
                f"⚠️ Schedule change for affiliate {affiliate_id} on {date_only(value, self.timezone)} "
                f"conflicts with {len(conflicts)} order(s)"
            )
        return ConflictReport(valid=not conflicts, conflicts=conflicts)
