# giftpool/routers/campaigns.py

from typing import List

from fastapi import APIRouter, Depends, status

from giftpool.common.deps import get_campaign_service, get_current_user, require_admin
from giftpool.models.campaign import (
    CampaignCreate,
    CampaignDetail,
    CampaignRead,
    CampaignStatus,
    CampaignUpdate,
)
from giftpool.models.user import User
from giftpool.services.campaign_service import CampaignService

router = APIRouter()


# campaigns I take part in, newest first
@router.get("", response_model=List[CampaignRead])
def list_campaigns(
    current_user: User = Depends(get_current_user),
    service: CampaignService = Depends(get_campaign_service),
):
    return service.list_for_user(current_user)


@router.post("", response_model=CampaignRead, status_code=status.HTTP_201_CREATED)
def create_campaign(
    campaign_in: CampaignCreate,
    admin: User = Depends(require_admin),
    service: CampaignService = Depends(get_campaign_service),
):
    return service.create_campaign(campaign_in, admin)


@router.get("/{campaign_id}", response_model=CampaignDetail)
def get_campaign(
    campaign_id: str,
    current_user: User = Depends(get_current_user),
    service: CampaignService = Depends(get_campaign_service),
):
    return service.get_detail(campaign_id, current_user)


@router.patch("/{campaign_id}", response_model=CampaignRead)
def update_campaign(
    campaign_id: str,
    campaign_in: CampaignUpdate,
    admin: User = Depends(require_admin),
    service: CampaignService = Depends(get_campaign_service),
):
    return service.update_campaign(campaign_id, campaign_in)


@router.get("/{campaign_id}/status", response_model=CampaignStatus)
def get_campaign_status(
    campaign_id: str,
    admin: User = Depends(require_admin),
    service: CampaignService = Depends(get_campaign_service),
):
    return service.get_status(campaign_id)
