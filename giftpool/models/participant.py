# giftpool/models/participant.py

from typing import List

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from giftpool.models.base import Base, CamelModel
from giftpool.models.user import utcnow


class CampaignParticipant(Base):
    __tablename__ = "campaign_participants"

    # the (campaign, user) pair is the key, so a user joins a campaign at most once
    campaign_id = Column(String(36), ForeignKey("campaigns.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    campaign = relationship("Campaign", back_populates="participants")
    user = relationship("User")


class ImportResult(CamelModel):
    users_processed: int
    participants_added: int
    errors: List[str]
