"""Affiliate service - Business logic for affiliate registration"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import ensure_affiliate_access
from ...models import Affiliate, User
from ..scheduling.calendar_math import get_zone
from ..scheduling.schemas import AvailabilitySchedule
from .repository import AffiliateRepository
from .schemas import AffiliateCreate, AffiliateResponse

logger = logging.getLogger(__name__)


def to_response(affiliate: Affiliate) -> AffiliateResponse:
    schedule = AvailabilitySchedule.from_document(affiliate.availability_schedule)
    return AffiliateResponse(
        affiliateId=affiliate.affiliate_id,
        firstName=affiliate.first_name,
        lastName=affiliate.last_name,
        email=affiliate.email,
        phone=affiliate.phone,
        businessName=affiliate.business_name,
        serviceArea=affiliate.service_area,
        isActive=affiliate.is_active,
        scheduleSettings=schedule.scheduleSettings.model_dump(mode="json"),
        createdAt=affiliate.created_at,
    )


class AffiliateService:
    """Service layer for affiliate business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AffiliateRepository()

    def create_affiliate(self, data: AffiliateCreate, user: User) -> Affiliate:
        """Register an affiliate with the default availability schedule"""
        if user.affiliate_id:
            raise HTTPException(status_code=409, detail="User is already registered as an affiliate")
        if self.repo.get_affiliate_by_email(self.db, data.email):
            raise HTTPException(status_code=409, detail="An affiliate with this email already exists")

        if data.timezone:
            try:
                get_zone(data.timezone)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=f"Unknown timezone: {data.timezone}") from e

        schedule = AvailabilitySchedule.default(data.timezone)
        affiliate = self.repo.create_affiliate(
            self.db,
            user,
            affiliate_id=self.repo.unused_affiliate_id(self.db),
            first_name=data.firstName,
            last_name=data.lastName,
            email=data.email,
            phone=data.phone,
            business_name=data.businessName,
            service_area=data.serviceArea,
            availability_schedule=schedule.to_document(),
        )
        logger.info(f"✅ Affiliate {affiliate.affiliate_id} registered by user {user.id}")
        return affiliate

    def get_affiliate(self, affiliate_id: str, user: User) -> Affiliate:
        ensure_affiliate_access(user, affiliate_id, action="view", resource="affiliate")
        affiliate = self.repo.get_affiliate_by_public_id(self.db, affiliate_id)
        if not affiliate:
            raise HTTPException(status_code=404, detail="Affiliate not found")
        return affiliate
