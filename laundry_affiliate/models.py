import random

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_affiliate_id():
    """Generate a public affiliate identifier such as AFF123456"""
    return f"AFF{random.randint(100000, 999999)}"


def generate_order_id():
    """Generate a public order identifier such as ORD123456"""
    return f"ORD{random.randint(100000, 999999)}"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(String(50), default="customer", nullable=False)  # admin, affiliate, customer
    # Set once the user registers as an affiliate
    affiliate_id = Column(String(20), ForeignKey("affiliates.affiliate_id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    affiliate = relationship("Affiliate", back_populates="users")

    @property
    def is_admin(self) -> bool:
        return self.role in ("admin", "administrator")


class Affiliate(Base):
    __tablename__ = "affiliates"

    id = Column(Integer, primary_key=True, index=True)
    affiliate_id = Column(
        String(20), unique=True, index=True, nullable=False, default=generate_affiliate_id
    )
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(50), nullable=True)
    business_name = Column(String(255), nullable=True)
    service_area = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    # Weekly template, date exceptions and booking settings as one document
    availability_schedule = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    users = relationship("User", back_populates="affiliate")
    orders = relationship("Order", back_populates="affiliate")


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String(20), unique=True, index=True, nullable=False, default=generate_order_id)
    customer_id = Column(String(255), index=True, nullable=False)  # Firebase UID of the customer
    affiliate_id = Column(
        String(20), ForeignKey("affiliates.affiliate_id"), index=True, nullable=False
    )
    pickup_date = Column(Date, index=True, nullable=False)  # Calendar date in affiliate timezone
    pickup_time = Column(String(20), nullable=False)  # morning, afternoon, evening
    special_pickup_instructions = Column(Text, nullable=True)
    # pending, processing, processed, complete, cancelled
    status = Column(String(50), default="pending", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    affiliate = relationship("Affiliate", back_populates="orders")
