# giftpool/services/campaign_service.py

import logging
from typing import Optional

from pydantic.alias_generators import to_camel
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from giftpool.common.errors import BadRequestError, ForbiddenError, NotFoundError
from giftpool.models.campaign import (
    Campaign,
    CampaignCreate,
    CampaignDetail,
    CampaignHeader,
    CampaignRead,
    CampaignStatus,
    CampaignUpdate,
    ParticipantStatus,
    as_utc,
)
from giftpool.models.gift import Gift
from giftpool.models.participant import CampaignParticipant
from giftpool.models.user import User, UserBrief

logger = logging.getLogger(__name__)


def get_campaign_or_404(db: Session, campaign_id: str) -> Campaign:
    campaign = db.get(Campaign, campaign_id)
    if campaign is None:
        raise NotFoundError("Campaign not found")
    return campaign


def is_participant(db: Session, campaign_id: str, user_id: str) -> bool:
    return db.get(CampaignParticipant, (campaign_id, user_id)) is not None


def gifted_total(db: Session, campaign_id: str, giver_id: str, exclude_gift_id: Optional[str] = None) -> int:
    """Sum of what ``giver_id`` has handed out in a campaign, in cents."""
    query = db.query(func.coalesce(func.sum(Gift.amount), 0)).filter(
        Gift.campaign_id == campaign_id,
        Gift.giver_id == giver_id,
    )
    if exclude_gift_id is not None:
        query = query.filter(Gift.id != exclude_gift_id)
    return int(query.scalar())


class CampaignService:

    def __init__(self, db: Session):
        self.db = db

    def list_for_user(self, user: User):
        return (
            self.db.query(Campaign)
            .join(CampaignParticipant, CampaignParticipant.campaign_id == Campaign.id)
            .filter(CampaignParticipant.user_id == user.id)
            .order_by(Campaign.created_at.desc())
            .all()
        )

    def create_campaign(self, campaign_in: CampaignCreate, creator: User) -> Campaign:
        campaign = Campaign(**campaign_in.model_dump(), created_by=creator.id)
        self.db.add(campaign)
        self.db.commit()
        self.db.refresh(campaign)
        logger.info("Campaign %s (%r) created by %s", campaign.id, campaign.title, creator.email)
        return campaign

    def update_campaign(self, campaign_id: str, campaign_in: CampaignUpdate) -> Campaign:
        campaign = get_campaign_or_404(self.db, campaign_id)

        # fields left out of the request stay as they are
        update_data = campaign_in.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            if value is None and key != "description":
                raise BadRequestError(f"{to_camel(key)} cannot be null")
        for key, value in update_data.items():
            setattr(campaign, key, value)

        if as_utc(campaign.close_date) <= as_utc(campaign.open_date):
            self.db.rollback()
            raise BadRequestError("Close date must be after open date")

        if "budget_per_user" in update_data:
            largest = self.largest_giver_total(campaign.id)
            if campaign.budget_per_user < largest:
                self.db.rollback()
                raise BadRequestError(
                    f"Budget cannot drop below the {largest} cents a participant has already gifted"
                )

        self.db.add(campaign)
        self.db.commit()
        self.db.refresh(campaign)
        logger.info("Campaign %s updated: %s", campaign.id, sorted(update_data))
        return campaign

    def largest_giver_total(self, campaign_id: str) -> int:
        totals = (
            self.db.query(func.sum(Gift.amount).label("total"))
            .filter(Gift.campaign_id == campaign_id)
            .group_by(Gift.giver_id)
            .subquery()
        )
        return int(self.db.query(func.coalesce(func.max(totals.c.total), 0)).scalar())

    def get_detail(self, campaign_id: str, user: User) -> CampaignDetail:
        """The campaign plus the caller's own budget position."""
        campaign = get_campaign_or_404(self.db, campaign_id)
        if not is_participant(self.db, campaign.id, user.id) and not user.is_admin:
            raise ForbiddenError("Not a participant in this campaign")

        total = gifted_total(self.db, campaign.id, user.id)
        return CampaignDetail(
            **CampaignRead.model_validate(campaign).model_dump(),
            total_gifted=total,
            remaining_budget=campaign.budget_per_user - total,
        )

    def get_status(self, campaign_id: str) -> CampaignStatus:
        campaign = get_campaign_or_404(self.db, campaign_id)

        participants = (
            self.db.query(CampaignParticipant)
            .options(joinedload(CampaignParticipant.user))
            .filter(CampaignParticipant.campaign_id == campaign.id)
            .order_by(CampaignParticipant.created_at)
            .all()
        )

        rows = (
            self.db.query(Gift.giver_id, func.sum(Gift.amount), func.count(Gift.id))
            .filter(Gift.campaign_id == campaign.id)
            .group_by(Gift.giver_id)
            .all()
        )
        totals = {giver_id: (int(total or 0), int(count)) for giver_id, total, count in rows}

        participant_status = []
        for p in participants:
            total, count = totals.get(p.user_id, (0, 0))
            participant_status.append(
                ParticipantStatus(
                    user=UserBrief.model_validate(p.user),
                    total_gifted=total,
                    gift_count=count,
                    remaining_budget=campaign.budget_per_user - total,
                )
            )

        return CampaignStatus(
            campaign=CampaignHeader.model_validate(campaign),
            participant_status=participant_status,
        )
