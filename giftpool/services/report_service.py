# giftpool/services/report_service.py

from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import distinct, func
from sqlalchemy.orm import Session

from giftpool.models.gift import Gift
from giftpool.models.participant import CampaignParticipant
from giftpool.models.report import ReportSummary
from giftpool.services.campaign_service import get_campaign_or_404


def round_half_up(value) -> int:
    # .5 averages go up, never to the nearest even cent
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


class ReportService:

    def __init__(self, db: Session):
        self.db = db

    def summary(self, campaign_id: str) -> ReportSummary:
        campaign = get_campaign_or_404(self.db, campaign_id)

        total_participants = (
            self.db.query(func.count())
            .select_from(CampaignParticipant)
            .filter(CampaignParticipant.campaign_id == campaign.id)
            .scalar()
        )

        givers, gift_count, total_amount, avg_amount = (
            self.db.query(
                func.count(distinct(Gift.giver_id)),
                func.count(Gift.id),
                func.coalesce(func.sum(Gift.amount), 0),
                func.avg(Gift.amount),
            )
            .filter(Gift.campaign_id == campaign.id)
            .one()
        )

        return ReportSummary(
            total_participants=total_participants,
            participants_who_gifted=givers,
            participation_rate=givers / total_participants if total_participants > 0 else 0,
            total_amount_gifted=int(total_amount),
            average_gift_amount=round_half_up(avg_amount or 0),
            total_gifts_count=gift_count,
        )
