"""Order service - Business logic for pickup orders"""

import logging
from datetime import datetime, timezone

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Order, User
from ..scheduling.booking_gate import check_booking
from ..scheduling.calendar_math import parse_calendar_date
from ..scheduling.service import ScheduleService, parse_slot
from .repository import OrderRepository
from .schemas import VALID_STATUS_TRANSITIONS, OrderCreate, OrderResponse, OrderStatus

logger = logging.getLogger(__name__)


def to_response(order: Order) -> OrderResponse:
    return OrderResponse(
        orderId=order.order_id,
        customerId=order.customer_id,
        affiliateId=order.affiliate_id,
        pickupDate=order.pickup_date,
        pickupTime=order.pickup_time,
        specialPickupInstructions=order.special_pickup_instructions,
        status=order.status,
        createdAt=order.created_at,
    )


class OrderService:
    """Service layer for order business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepository()

    def create_order(self, data: OrderCreate, user: User) -> Order:
        """
        Create a pickup order after the booking gate accepts the slot.

        A rejected slot raises TimeslotUnavailableError, which the app turns
        into a 400 with the TIMESLOT_UNAVAILABLE code.
        """
        slot = parse_slot(data.pickupTime)
        schedule = ScheduleService(self.db).load_schedule_for_booking(data.affiliateId)

        try:
            pickup_date = parse_calendar_date(data.pickupDate, schedule.timezone)
        except ValueError as e:
            raise HTTPException(status_code=400, detail="Invalid pickupDate format") from e

        check_booking(schedule, pickup_date, slot)

        order = self.repo.create_order(
            self.db,
            customer_id=user.firebase_uid,
            affiliate_id=data.affiliateId,
            pickup_date=pickup_date,
            pickup_time=slot.value,
            special_pickup_instructions=data.specialPickupInstructions,
            status=OrderStatus.PENDING.value,
        )
        logger.info(
            f"✅ Order {order.order_id} booked with {data.affiliateId} for {pickup_date} {slot.value}"
        )
        return order

    def get_order(self, order_id: str, user: User) -> Order:
        order = self.repo.get_order_by_public_id(self.db, order_id)
        if not order:
            raise HTTPException(status_code=404, detail="Order not found")

        if not (
            user.is_admin
            or order.customer_id == user.firebase_uid
            or order.affiliate_id == user.affiliate_id
        ):
            raise HTTPException(status_code=403, detail="Not authorized to view this order")
        return order

    def update_status(self, order_id: str, status: str, user: User) -> Order:
        """Move an order along pending -> processing -> processed -> complete"""
        try:
            new_status = OrderStatus(status)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid order status: {status}") from e

        order = self.get_order(order_id, user)
        if not (user.is_admin or order.affiliate_id == user.affiliate_id):
            raise HTTPException(status_code=403, detail="Not authorized to update this order")

        current = OrderStatus(order.status)
        if new_status not in VALID_STATUS_TRANSITIONS[current]:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid status transition from {current.value} to {new_status.value}",
            )

        updates = {"status": new_status.value}
        now = datetime.now(timezone.utc)
        if new_status == OrderStatus.CANCELLED:
            updates["cancelled_at"] = now
        elif new_status == OrderStatus.COMPLETE:
            updates["completed_at"] = now

        order = self.repo.update_order(self.db, order, **updates)
        logger.info(f"📦 Order {order_id} moved from {current.value} to {new_status.value}")
        return order
