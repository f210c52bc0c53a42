# giftpool/seed.py
"""
Load demo data: an admin, five coworkers, one campaign and a few gifts.

Safe to run repeatedly; existing rows are left alone.

    python -m giftpool.seed
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from giftpool.core.logging_setup import configure_logging
from giftpool.db.session import SessionLocal, engine
from giftpool.models.base import Base
from giftpool.models.campaign import Campaign
from giftpool.models.gift import Gift
from giftpool.models.participant import CampaignParticipant
from giftpool.models.user import User

logger = logging.getLogger(__name__)

SEED_CAMPAIGN_ID = "00000000-0000-0000-0000-000000000001"

ADMIN = {"email": "admin@example.com", "display_name": "Admin User", "is_admin": True}

USERS = [
    {"email": "alice@example.com", "display_name": "Alice Johnson"},
    {"email": "bob@example.com", "display_name": "Bob Smith"},
    {"email": "carol@example.com", "display_name": "Carol Williams"},
    {"email": "dave@example.com", "display_name": "Dave Brown"},
    {"email": "eve@example.com", "display_name": "Eve Davis"},
]

# (giver index, recipient index, cents, comment); index -1 is the admin
GIFTS = [
    (0, 1, 2500, "Great teamwork on the Q1 project!"),
    (0, 2, 1500, "Thanks for helping with code reviews"),
    (1, 0, 3000, "Amazing presentation last week!"),
    (2, 3, 2000, "Thanks for mentoring me"),
    (3, 4, 1000, "Great debugging help!"),
    (4, -1, 5000, "Outstanding leadership this quarter"),
]


def get_or_create_user(db: Session, email: str, **fields) -> User:
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(email=email, **fields)
        db.add(user)
        db.flush()
    return user


def seed(db: Session) -> dict:
    admin = get_or_create_user(db, **ADMIN)
    users = [get_or_create_user(db, **u) for u in USERS]

    campaign = db.get(Campaign, SEED_CAMPAIGN_ID)
    if campaign is None:
        campaign = Campaign(
            id=SEED_CAMPAIGN_ID,
            title="Q1 2026 Appreciation",
            description="Show your coworkers some love!",
            budget_per_user=50000,  # $500.00
            open_date=datetime(2026, 1, 1, tzinfo=timezone.utc),
            close_date=datetime(2026, 3, 31, 23, 59, 59, tzinfo=timezone.utc),
            created_by=admin.id,
        )
        db.add(campaign)
        db.flush()

    everyone = [admin] + users
    for user in everyone:
        if db.get(CampaignParticipant, (campaign.id, user.id)) is None:
            db.add(CampaignParticipant(campaign_id=campaign.id, user_id=user.id))
    db.flush()

    created = 0
    for giver_idx, recipient_idx, amount, comment in GIFTS:
        giver = users[giver_idx]
        recipient = admin if recipient_idx == -1 else users[recipient_idx]
        exists = (
            db.query(Gift)
            .filter_by(campaign_id=campaign.id, giver_id=giver.id, recipient_id=recipient.id)
            .first()
        )
        if exists:
            continue
        db.add(Gift(
            campaign_id=campaign.id,
            giver_id=giver.id,
            recipient_id=recipient.id,
            amount=amount,
            comment=comment,
        ))
        created += 1

    db.commit()
    return {"users": len(everyone), "campaigns": 1, "gifts": created}


def main():
    configure_logging()
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        counts = seed(db)
    finally:
        db.close()
    logger.info("Seeded: %(users)d users, %(campaigns)d campaign, %(gifts)d new gifts", counts)


if __name__ == "__main__":
    main()
