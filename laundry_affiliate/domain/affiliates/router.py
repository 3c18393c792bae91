"""Affiliate router - FastAPI endpoints for affiliate registration"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import AffiliateCreate, AffiliateResponse
from .service import AffiliateService, to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/affiliates", tags=["Affiliates"])


def get_affiliate_service(db: Session = Depends(get_db)) -> AffiliateService:
    """Dependency injection for AffiliateService"""
    return AffiliateService(db)


@router.post("", response_model=AffiliateResponse, status_code=201)
async def create_affiliate(
    data: AffiliateCreate,
    current_user: User = Depends(get_current_user),
    service: AffiliateService = Depends(get_affiliate_service),
):
    """Register the current user as an affiliate"""
    return to_response(service.create_affiliate(data, current_user))


@router.get("/{affiliate_id}", response_model=AffiliateResponse)
async def get_affiliate(
    affiliate_id: str,
    current_user: User = Depends(get_current_user),
    service: AffiliateService = Depends(get_affiliate_service),
):
    """Get an affiliate profile"""
    return to_response(service.get_affiliate(affiliate_id, current_user))
