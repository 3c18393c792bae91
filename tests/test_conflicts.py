from datetime import datetime, timezone

from laundry_affiliate.domain.scheduling.conflicts import ConflictReport, ConflictValidator
from laundry_affiliate.domain.scheduling.schemas import SLOT_ORDER, Slot
from laundry_affiliate.models import Affiliate, Order

from .helpers import MONDAY, SATURDAY


def add_order(db, affiliate_id, day=MONDAY, slot="morning", status="pending", customer="uid-c"):
    order = Order(
        customer_id=customer,
        affiliate_id=affiliate_id,
        pickup_date=day,
        pickup_time=slot,
        status=status,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


def test_pending_order_is_a_conflict(db, affiliate):
    order = add_order(db, affiliate.affiliate_id)

    report = ConflictValidator(db).validate_schedule_change(affiliate.affiliate_id, MONDAY, Slot.MORNING)

    assert report.valid is False
    assert [o.order_id for o in report.conflicts] == [order.order_id]
    assert report.warning() == (
        "Warning: There are 1 existing order(s) on this date that may be affected."
    )


def test_processing_and_processed_orders_conflict(db, affiliate):
    add_order(db, affiliate.affiliate_id, status="processing")
    add_order(db, affiliate.affiliate_id, status="processed")

    report = ConflictValidator(db).validate_schedule_change(affiliate.affiliate_id, MONDAY, "morning")

    assert len(report.conflicts) == 2


def test_terminal_orders_never_conflict(db, affiliate):
    add_order(db, affiliate.affiliate_id, status="complete")
    add_order(db, affiliate.affiliate_id, status="cancelled")

    report = ConflictValidator(db).validate_schedule_change(affiliate.affiliate_id, MONDAY, "morning")

    assert report.valid is True
    assert report.conflicts == []
    assert report.warning() is None


def test_other_slot_date_or_affiliate_is_not_a_conflict(db, affiliate):
    other = Affiliate(affiliate_id="AFF200002", first_name="O", last_name="A", email="o@example.com")
    db.add(other)
    db.commit()
    add_order(db, affiliate.affiliate_id, slot="evening")
    add_order(db, affiliate.affiliate_id, day=SATURDAY)
    add_order(db, other.affiliate_id)

    report = ConflictValidator(db).validate_schedule_change(affiliate.affiliate_id, MONDAY, "morning")

    assert report.valid is True


def test_validate_slots_aggregates(db, affiliate):
    add_order(db, affiliate.affiliate_id, slot="morning")
    add_order(db, affiliate.affiliate_id, slot="evening")
    add_order(db, affiliate.affiliate_id, slot="evening", customer="uid-d")

    report = ConflictValidator(db).validate_slots(affiliate.affiliate_id, MONDAY, SLOT_ORDER)

    assert report.valid is False
    assert len(report.conflicts) == 3
    assert "3 existing order(s)" in report.warning()


def test_aware_datetime_uses_validator_timezone(db, affiliate):
    # Tuesday 03:00 UTC is still Monday evening in Chicago
    add_order(db, affiliate.affiliate_id, slot="evening")
    instant = datetime(2025, 1, 21, 3, 0, tzinfo=timezone.utc)

    chicago = ConflictValidator(db, "America/Chicago").validate_schedule_change(
        affiliate.affiliate_id, instant, "evening"
    )
    utc = ConflictValidator(db).validate_schedule_change(affiliate.affiliate_id, instant, "evening")

    assert chicago.valid is False
    assert utc.valid is True


def test_empty_report_defaults():
    report = ConflictReport()
    assert report.valid is True
    assert report.conflicts == []
