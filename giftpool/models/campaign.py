# giftpool/models/campaign.py

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from pydantic import Field, field_validator, model_validator

from giftpool.models.base import Base, CamelModel, new_id
from giftpool.models.user import UserBrief, utcnow


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything we store is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Campaign(Base):
    __tablename__ = "campaigns"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    # integer cents
    budget_per_user = Column(Integer, nullable=False)

    open_date = Column(DateTime(timezone=True), nullable=False)
    close_date = Column(DateTime(timezone=True), nullable=False)

    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    participants = relationship(
        "CampaignParticipant", back_populates="campaign", cascade="all, delete-orphan"
    )
    gifts = relationship("Gift", back_populates="campaign", cascade="all, delete-orphan")

    def is_open(self, now: Optional[datetime] = None) -> bool:
        """Gifting window, both ends inclusive."""
        now = as_utc(now or utcnow())
        return as_utc(self.open_date) <= now <= as_utc(self.close_date)


# --- schemas ---

class CampaignCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    budget_per_user: int = Field(gt=0)
    open_date: datetime
    close_date: datetime

    @field_validator("open_date", "close_date")
    @classmethod
    def normalize_dates(cls, value: datetime) -> datetime:
        return as_utc(value)

    @model_validator(mode="after")
    def check_window(self):
        if self.close_date <= self.open_date:
            raise ValueError("Close date must be after open date")
        return self


class CampaignUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    budget_per_user: Optional[int] = Field(default=None, gt=0)
    open_date: Optional[datetime] = None
    close_date: Optional[datetime] = None

    @field_validator("open_date", "close_date")
    @classmethod
    def normalize_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value) if value is not None else value


class CampaignRead(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    budget_per_user: int
    open_date: datetime
    close_date: datetime
    created_by: str
    created_at: datetime


class CampaignDetail(CampaignRead):
    total_gifted: int
    remaining_budget: int


class CampaignHeader(CamelModel):
    id: str
    title: str
    budget_per_user: int
    open_date: datetime
    close_date: datetime


class ParticipantStatus(CamelModel):
    user: UserBrief
    total_gifted: int
    gift_count: int
    remaining_budget: int


class CampaignStatus(CamelModel):
    campaign: CampaignHeader
    participant_status: List[ParticipantStatus]
