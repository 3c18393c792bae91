"""Schedule router - FastAPI endpoints for affiliate availability"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import DateExceptionCreate, ScheduleSettingsUpdate, WeeklyTemplateUpdate
from .service import ScheduleService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/affiliates", tags=["Affiliate Schedule"])


def get_schedule_service(db: Session = Depends(get_db)) -> ScheduleService:
    """Dependency injection for ScheduleService"""
    return ScheduleService(db)


# ============================================================================
# AFFILIATE SCHEDULE MANAGEMENT (owner or admin)
# ============================================================================


@router.get("/{affiliate_id}/schedule")
async def get_schedule(
    affiliate_id: str,
    current_user: User = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Get the affiliate's weekly template, date exceptions and settings"""
    return service.get_schedule(affiliate_id, current_user)


@router.put("/{affiliate_id}/schedule/template")
async def update_weekly_template(
    affiliate_id: str,
    data: WeeklyTemplateUpdate,
    current_user: User = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Merge-update one or more days of the weekly template"""
    return service.update_weekly_template(affiliate_id, data, current_user)


@router.post("/{affiliate_id}/schedule/exceptions", status_code=201)
async def add_date_exception(
    affiliate_id: str,
    data: DateExceptionCreate,
    current_user: User = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Block a date or override its time slots"""
    return service.add_date_exception(affiliate_id, data, current_user)


@router.delete("/{affiliate_id}/schedule/exceptions/{exception_id}")
async def delete_date_exception(
    affiliate_id: str,
    exception_id: str,
    current_user: User = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Remove a date exception"""
    return service.delete_date_exception(affiliate_id, exception_id, current_user)


@router.put("/{affiliate_id}/schedule/settings")
async def update_schedule_settings(
    affiliate_id: str,
    data: ScheduleSettingsUpdate,
    current_user: User = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Update booking window settings"""
    return service.update_schedule_settings(affiliate_id, data, current_user)


# ============================================================================
# PUBLIC AVAILABILITY (no auth, used by the booking calendar)
# ============================================================================


@router.get("/{affiliate_id}/available-slots")
async def get_available_slots(
    affiliate_id: str,
    startDate: Optional[str] = Query(None),
    endDate: Optional[str] = Query(None),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Available dates and slots in a range of at most 90 days"""
    return service.get_available_slots(affiliate_id, startDate, endDate)


@router.get("/{affiliate_id}/available-slots/check")
async def check_slot_availability(
    affiliate_id: str,
    date: Optional[str] = Query(None),
    timeSlot: Optional[str] = Query(None),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Check a single date and time slot"""
    return service.check_slot_availability(affiliate_id, date, timeSlot)
