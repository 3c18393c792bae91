"""Order domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    PROCESSED = "processed"
    COMPLETE = "complete"
    CANCELLED = "cancelled"


# Active orders occupy their pickup slot; terminal ones never do
ACTIVE_ORDER_STATUSES = (OrderStatus.PENDING, OrderStatus.PROCESSING, OrderStatus.PROCESSED)
TERMINAL_ORDER_STATUSES = (OrderStatus.COMPLETE, OrderStatus.CANCELLED)

VALID_STATUS_TRANSITIONS = {
    OrderStatus.PENDING: (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
    OrderStatus.PROCESSING: (OrderStatus.PROCESSED, OrderStatus.CANCELLED),
    OrderStatus.PROCESSED: (OrderStatus.COMPLETE, OrderStatus.CANCELLED),
    OrderStatus.COMPLETE: (),
    OrderStatus.CANCELLED: (),
}


class OrderCreate(BaseModel):
    """Schema for creating a pickup order"""

    affiliateId: str
    pickupDate: str
    pickupTime: str
    specialPickupInstructions: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    status: str


class OrderResponse(BaseModel):
    """Schema for order response"""

    orderId: str
    customerId: str
    affiliateId: str
    pickupDate: date
    pickupTime: str
    specialPickupInstructions: Optional[str] = None
    status: str
    createdAt: Optional[datetime] = None

    class Config:
        from_attributes = True
