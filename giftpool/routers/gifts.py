# giftpool/routers/gifts.py

from typing import List

from fastapi import APIRouter, Depends, Response, status

from giftpool.common.deps import get_current_user, get_gift_service
from giftpool.models.gift import GiftCreate, GiftRead, GiftUpdate, ReceivedGift
from giftpool.models.user import User
from giftpool.services.gift_service import GiftService

router = APIRouter()


@router.get("", response_model=List[GiftRead])
def list_given_gifts(
    campaign_id: str,
    current_user: User = Depends(get_current_user),
    service: GiftService = Depends(get_gift_service),
):
    return service.list_given(campaign_id, current_user)


# anonymous on purpose: the response model has no giver fields
@router.get("/received", response_model=List[ReceivedGift])
def list_received_gifts(
    campaign_id: str,
    current_user: User = Depends(get_current_user),
    service: GiftService = Depends(get_gift_service),
):
    return service.list_received(campaign_id, current_user)


@router.post("", response_model=GiftRead, status_code=status.HTTP_201_CREATED)
def create_gift(
    campaign_id: str,
    gift_in: GiftCreate,
    current_user: User = Depends(get_current_user),
    service: GiftService = Depends(get_gift_service),
):
    return service.create_gift(campaign_id, current_user, gift_in)


@router.put("/{gift_id}", response_model=GiftRead)
def update_gift(
    campaign_id: str,
    gift_id: str,
    gift_in: GiftUpdate,
    current_user: User = Depends(get_current_user),
    service: GiftService = Depends(get_gift_service),
):
    return service.update_gift(campaign_id, gift_id, current_user, gift_in)


@router.delete("/{gift_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_gift(
    campaign_id: str,
    gift_id: str,
    current_user: User = Depends(get_current_user),
    service: GiftService = Depends(get_gift_service),
):
    service.delete_gift(campaign_id, gift_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
