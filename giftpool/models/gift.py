# giftpool/models/gift.py

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from pydantic import Field

from giftpool.models.base import Base, CamelModel, new_id
from giftpool.models.user import UserSummary, utcnow


class Gift(Base):
    __tablename__ = "gifts"
    __table_args__ = (
        UniqueConstraint("campaign_id", "giver_id", "recipient_id", name="uq_gift_campaign_giver_recipient"),
        Index("ix_gift_campaign_giver", "campaign_id", "giver_id"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    campaign_id = Column(String(36), ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False)
    giver_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    recipient_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # integer cents
    amount = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    campaign = relationship("Campaign", back_populates="gifts")
    giver = relationship("User", foreign_keys=[giver_id])
    recipient = relationship("User", foreign_keys=[recipient_id])


class GiftCreate(CamelModel):
    recipient_id: UUID
    amount: int = Field(gt=0)
    comment: str = Field(min_length=1, max_length=1000)


class GiftUpdate(CamelModel):
    amount: Optional[int] = Field(default=None, gt=0)
    comment: Optional[str] = Field(default=None, min_length=1, max_length=1000)


class GiftRead(CamelModel):
    id: str
    campaign_id: str
    giver_id: str
    recipient_id: str
    amount: int
    comment: str
    created_at: datetime
    updated_at: datetime
    recipient: UserSummary


class ReceivedGift(CamelModel):
    """What a recipient sees: no giver information at all."""

    id: str
    amount: int
    comment: str
    created_at: datetime
