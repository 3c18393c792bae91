"""Affiliate domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email, validate_us_phone


class AffiliateCreate(BaseModel):
    """Schema for registering an affiliate"""

    firstName: str
    lastName: str
    email: str
    phone: Optional[str] = None
    businessName: Optional[str] = None
    serviceArea: Optional[str] = None
    timezone: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v:
            return validate_us_phone(v)
        return v


class AffiliateResponse(BaseModel):
    """Schema for affiliate response"""

    affiliateId: str
    firstName: str
    lastName: str
    email: str
    phone: Optional[str] = None
    businessName: Optional[str] = None
    serviceArea: Optional[str] = None
    isActive: bool
    scheduleSettings: dict
    createdAt: Optional[datetime] = None
