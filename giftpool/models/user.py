# giftpool/models/user.py

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, String
from pydantic import BaseModel

from giftpool.models.base import Base, CamelModel, new_id


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    display_name = Column(String(200), nullable=False)
    avatar_url = Column(String(1024), nullable=True)

    # admins manage campaigns, participants and reports
    is_admin = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class UserRead(CamelModel):
    id: str
    email: str
    display_name: str
    avatar_url: Optional[str] = None
    is_admin: bool
    created_at: datetime


class UserBrief(CamelModel):
    id: str
    email: str
    display_name: str


class UserSummary(CamelModel):
    id: str
    display_name: str
    avatar_url: Optional[str] = None


class Coworker(CamelModel):
    id: str
    email: str
    display_name: str
    avatar_url: Optional[str] = None


class DevLoginRequest(BaseModel):
    email: str


class DevLoginResponse(CamelModel):
    token: str
    user: UserRead
