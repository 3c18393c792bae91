"""
Add the default availability schedule to affiliates that have none

Default schedule:
- Monday-Saturday: morning, afternoon and evening available
- Sunday: unavailable
- Booking settings: 1 day advance, 30 days max, DEFAULT_TIMEZONE

Run with: python migrations/add_affiliate_schedule_defaults.py [--dry-run] [--verbose]
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from laundry_affiliate.database import Base, SessionLocal, engine
from laundry_affiliate.domain.scheduling.schemas import AvailabilitySchedule
from laundry_affiliate.models import Affiliate

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def needs_schedule(affiliate: Affiliate) -> bool:
    document = affiliate.availability_schedule
    return not isinstance(document, dict) or not document.get("weeklyTemplate")


def upgrade(dry_run: bool = False, verbose: bool = False) -> int:
    """Backfill schedules, returning how many affiliates were updated"""
    Base.metadata.create_all(bind=engine, checkfirst=True)
    db = SessionLocal()
    try:
        affiliates = [a for a in db.query(Affiliate).all() if needs_schedule(a)]
        logger.info(f"Found {len(affiliates)} affiliates without schedule")

        if not affiliates:
            logger.info("ℹ️  All affiliates already have availability schedules")
            return 0

        for affiliate in affiliates:
            if verbose:
                logger.info(f"  - {affiliate.affiliate_id} ({affiliate.email})")
            if not dry_run:
                affiliate.availability_schedule = AvailabilitySchedule.default().to_document()

        if dry_run:
            logger.info("** DRY RUN - no changes were made **")
            return 0

        db.commit()
        logger.info(f"✅ Added default schedule to {len(affiliates)} affiliates")
        return len(affiliates)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--dry-run", action="store_true", help="Show what would change")
    parser.add_argument("--verbose", action="store_true", help="List every affiliate updated")
    args = parser.parse_args()

    upgrade(dry_run=args.dry_run, verbose=args.verbose)
