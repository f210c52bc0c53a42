"""
Shared fixtures: an in-memory SQLite database, a TestClient wired to it,
and small factories for users, campaigns and tokens.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from giftpool.core.security import create_user_token
from giftpool.db.session import get_db
from giftpool.main import app
from giftpool.models.base import Base
from giftpool.models.campaign import Campaign
from giftpool.models.participant import CampaignParticipant
from giftpool.models.user import User

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make(email, display_name=None, is_admin=False, avatar_url=None):
        user = User(
            email=email,
            display_name=display_name or email.split("@")[0].title(),
            is_admin=is_admin,
            avatar_url=avatar_url,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def admin(make_user):
    return make_user("admin@test.com", "Admin", is_admin=True)


@pytest.fixture
def make_campaign(db, admin):
    def _make(participants=(), budget=10000, open_date=None, close_date=None, title="Test"):
        now = datetime.now(timezone.utc)
        campaign = Campaign(
            title=title,
            budget_per_user=budget,
            open_date=open_date or now - timedelta(days=1),
            close_date=close_date or now + timedelta(days=1),
            created_by=admin.id,
        )
        db.add(campaign)
        db.flush()
        for user in participants:
            db.add(CampaignParticipant(campaign_id=campaign.id, user_id=user.id))
        db.commit()
        db.refresh(campaign)
        return campaign
    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_user_token(user)}"}
    return _headers


@pytest.fixture
def giver(make_user):
    return make_user("giver@test.com", "Giver")


@pytest.fixture
def recipient(make_user):
    return make_user("recipient@test.com", "Recipient")


@pytest.fixture
def recipient2(make_user):
    return make_user("recipient2@test.com", "Recipient 2")


@pytest.fixture
def open_campaign(make_campaign, giver, recipient, recipient2):
    return make_campaign(participants=[giver, recipient, recipient2])
