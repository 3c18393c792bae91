"""Order repository - Database operations for orders"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Order
from .schemas import ACTIVE_ORDER_STATUSES


class OrderRepository:
    """Repository for order database operations"""

    @staticmethod
    def get_order_by_public_id(db: Session, order_id: str) -> Optional[Order]:
        """Get an order by its public ORD identifier"""
        return db.query(Order).filter(Order.order_id == order_id).first()

    @staticmethod
    def create_order(db: Session, **order_data) -> Order:
        """Create a new order"""
        order = Order(**order_data)
        db.add(order)
        db.commit()
        db.refresh(order)
        return order

    @staticmethod
    def update_order(db: Session, order: Order, **updates) -> Order:
        """Update an order with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(order, key):
                setattr(order, key, value)

        db.commit()
        db.refresh(order)
        return order

    @staticmethod
    def get_active_orders_for_slot(
        db: Session, affiliate_id: str, pickup_date: date, pickup_time: str
    ) -> list[Order]:
        """Non-terminal orders booked into one affiliate's date and slot"""
        return (
            db.query(Order)
            .filter(
                Order.affiliate_id == affiliate_id,
                Order.pickup_date == pickup_date,
                Order.pickup_time == pickup_time,
                Order.status.in_([status.value for status in ACTIVE_ORDER_STATUSES]),
            )
            .order_by(Order.created_at.asc(), Order.id.asc())
            .all()
        )

    @staticmethod
    def get_orders_for_affiliate(db: Session, affiliate_id: str) -> list[Order]:
        """All orders for an affiliate, soonest pickup first"""
        return (
            db.query(Order)
            .filter(Order.affiliate_id == affiliate_id)
            .order_by(Order.pickup_date.asc(), Order.id.asc())
            .all()
        )
