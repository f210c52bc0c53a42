# giftpool/services/gift_service.py

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from giftpool.common.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from giftpool.db.session import run_serializable
from giftpool.models.campaign import Campaign
from giftpool.models.gift import Gift, GiftCreate, GiftUpdate
from giftpool.models.user import User
from giftpool.services.campaign_service import get_campaign_or_404, gifted_total, is_participant

logger = logging.getLogger(__name__)


def format_cents(cents: int) -> str:
    return f"${cents / 100:.2f}"


def assert_campaign_open(db: Session, campaign_id: str, now: Optional[datetime] = None) -> Campaign:
    campaign = get_campaign_or_404(db, campaign_id)
    if not campaign.is_open(now):
        raise BadRequestError("Campaign is not currently open for gifting")
    return campaign


def assert_participant(db: Session, campaign_id: str, user_id: str) -> None:
    if not is_participant(db, campaign_id, user_id):
        raise ForbiddenError("Not a participant in this campaign")


def remaining_budget(db: Session, campaign_id: str, giver_id: str, exclude_gift_id: Optional[str] = None) -> int:
    campaign = get_campaign_or_404(db, campaign_id)
    return campaign.budget_per_user - gifted_total(db, campaign_id, giver_id, exclude_gift_id)


def assert_within_budget(db: Session, campaign_id: str, giver_id: str, amount: int,
                         exclude_gift_id: Optional[str] = None) -> None:
    remaining = remaining_budget(db, campaign_id, giver_id, exclude_gift_id)
    if amount > remaining:
        raise BadRequestError(
            f"Amount exceeds remaining budget. You have {format_cents(remaining)} left."
        )


class GiftService:

    def __init__(self, db: Session):
        self.db = db

    def list_given(self, campaign_id: str, giver: User):
        return (
            self.db.query(Gift)
            .options(joinedload(Gift.recipient))
            .filter(Gift.campaign_id == campaign_id, Gift.giver_id == giver.id)
            .order_by(Gift.created_at.desc())
            .all()
        )

    def list_received(self, campaign_id: str, recipient: User):
        return (
            self.db.query(Gift)
            .filter(Gift.campaign_id == campaign_id, Gift.recipient_id == recipient.id)
            .order_by(Gift.created_at.desc())
            .all()
        )

    def _get_own_gift(self, campaign_id: str, gift_id: str, giver: User) -> Gift:
        gift = self.db.get(Gift, gift_id)
        if gift is None:
            raise NotFoundError("Gift not found")
        if gift.giver_id != giver.id:
            raise ForbiddenError("Not your gift")
        if gift.campaign_id != campaign_id:
            raise NotFoundError("Gift not in this campaign")
        return gift

    def create_gift(self, campaign_id: str, giver: User, gift_in: GiftCreate) -> Gift:
        recipient_id = str(gift_in.recipient_id)

        assert_campaign_open(self.db, campaign_id)
        assert_participant(self.db, campaign_id, giver.id)
        if recipient_id == giver.id:
            raise BadRequestError("Cannot gift to yourself")
        assert_participant(self.db, campaign_id, recipient_id)

        # run_serializable commits (and so expires ORM objects); carry plain ids
        giver_id = giver.id

        def write(db: Session) -> str:
            assert_within_budget(db, campaign_id, giver_id, gift_in.amount)
            gift = Gift(
                campaign_id=campaign_id,
                giver_id=giver_id,
                recipient_id=recipient_id,
                amount=gift_in.amount,
                comment=gift_in.comment,
            )
            db.add(gift)
            try:
                db.flush()
            except IntegrityError:
                raise ConflictError("You already sent a gift to this coworker. Edit it instead.")
            return gift.id

        gift_id = run_serializable(self.db, write)
        logger.info("Gift %s: %s -> %s (%d cents) in campaign %s",
                    gift_id, giver_id, recipient_id, gift_in.amount, campaign_id)
        return self.get_with_recipient(gift_id)

    def update_gift(self, campaign_id: str, gift_id: str, giver: User, gift_in: GiftUpdate) -> Gift:
        assert_campaign_open(self.db, campaign_id)
        self._get_own_gift(campaign_id, gift_id, giver)

        giver_id = giver.id
        update_data = gift_in.model_dump(exclude_unset=True, exclude_none=True)

        def write(db: Session) -> None:
            gift = db.get(Gift, gift_id)
            if gift is None:
                raise NotFoundError("Gift not found")
            if "amount" in update_data:
                assert_within_budget(db, campaign_id, giver_id, update_data["amount"], exclude_gift_id=gift_id)
            for key, value in update_data.items():
                setattr(gift, key, value)
            db.flush()

        run_serializable(self.db, write)
        logger.info("Gift %s updated by %s: %s", gift_id, giver_id, sorted(update_data))
        return self.get_with_recipient(gift_id)

    def delete_gift(self, campaign_id: str, gift_id: str, giver: User) -> None:
        assert_campaign_open(self.db, campaign_id)
        gift = self._get_own_gift(campaign_id, gift_id, giver)

        self.db.delete(gift)
        self.db.commit()
        logger.info("Gift %s deleted by %s", gift_id, giver.id)

    def get_with_recipient(self, gift_id: str) -> Gift:
        return (
            self.db.query(Gift)
            .options(joinedload(Gift.recipient))
            .filter(Gift.id == gift_id)
            .one()
        )
