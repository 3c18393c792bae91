"""Order router - FastAPI endpoints for pickup orders"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import OrderCreate, OrderStatusUpdate
from .service import OrderService, to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["Orders"])


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    """Dependency injection for OrderService"""
    return OrderService(db)


@router.post("", status_code=201)
async def create_order(
    data: OrderCreate,
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Create a pickup order; rejected with TIMESLOT_UNAVAILABLE if the slot is closed"""
    order = service.create_order(data, current_user)
    return {
        "success": True,
        "message": "Order created successfully",
        **to_response(order).model_dump(mode="json"),
    }


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Get a specific order"""
    return to_response(service.get_order(order_id, current_user))


@router.patch("/{order_id}/status")
async def update_order_status(
    order_id: str,
    data: OrderStatusUpdate,
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Advance or cancel an order"""
    order = service.update_status(order_id, data.status, current_user)
    return {"success": True, "orderId": order.order_id, "status": order.status}
