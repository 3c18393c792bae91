"""Affiliate repository - Database operations for affiliates"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Affiliate, User, generate_affiliate_id


class AffiliateRepository:
    """Repository for affiliate database operations"""

    @staticmethod
    def get_affiliate_by_public_id(db: Session, affiliate_id: str) -> Optional[Affiliate]:
        """Get an affiliate by its public AFF identifier"""
        return db.query(Affiliate).filter(Affiliate.affiliate_id == affiliate_id).first()

    @staticmethod
    def get_affiliate_by_email(db: Session, email: str) -> Optional[Affiliate]:
        return db.query(Affiliate).filter(Affiliate.email == email).first()

    @staticmethod
    def unused_affiliate_id(db: Session) -> str:
        """Generate a public identifier that is not taken yet"""
        while True:
            candidate = generate_affiliate_id()
            if not db.query(Affiliate.id).filter(Affiliate.affiliate_id == candidate).first():
                return candidate

    @staticmethod
    def create_affiliate(db: Session, owner: User, **affiliate_data) -> Affiliate:
        """Create an affiliate and link the registering user to it"""
        affiliate = Affiliate(**affiliate_data)
        db.add(affiliate)
        db.flush()

        user = db.get(User, owner.id)
        user.role = "affiliate"
        user.affiliate_id = affiliate.affiliate_id
        db.commit()
        db.refresh(affiliate)
        return affiliate
