"""Schedule repository - loads and stores availability documents"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Affiliate
from .schemas import AvailabilitySchedule


class ScheduleRepository:
    """Repository for affiliate schedule database operations"""

    @staticmethod
    def get_affiliate(db: Session, affiliate_id: str) -> Optional[Affiliate]:
        """Get an affiliate by its public AFF identifier"""
        return db.query(Affiliate).filter(Affiliate.affiliate_id == affiliate_id).first()

    @staticmethod
    def load_schedule(affiliate: Affiliate) -> AvailabilitySchedule:
        """Schedule value for an affiliate, defaults when none is stored"""
        return AvailabilitySchedule.from_document(affiliate.availability_schedule)

    @staticmethod
    def save_schedule(
        db: Session, affiliate: Affiliate, schedule: AvailabilitySchedule
    ) -> AvailabilitySchedule:
        """Replace the stored schedule document (last write wins)"""
        affiliate.availability_schedule = schedule.to_document()
        db.commit()
        db.refresh(affiliate)
        return schedule
