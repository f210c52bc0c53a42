# giftpool/services/participant_service.py

import csv
import io
import json
import logging

from sqlalchemy.orm import Session

from giftpool.common.errors import BadRequestError, NotFoundError
from giftpool.models.participant import CampaignParticipant, ImportResult
from giftpool.models.user import User
from giftpool.services.campaign_service import get_campaign_or_404

logger = logging.getLogger(__name__)


def parse_participant_csv(content: bytes) -> list[dict]:
    """
    Parse an uploaded participant list.

    Expects a header row; the columns we read are ``email`` and ``display_name``.
    Cells and headers are stripped and blank lines skipped.
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise BadRequestError("CSV file must be UTF-8 encoded")

    reader = csv.DictReader(io.StringIO(text), skipinitialspace=True)
    if reader.fieldnames is None:
        return []
    reader.fieldnames = [name.strip() for name in reader.fieldnames]

    records = []
    for row in reader:
        record = {
            key: (value or "").strip()
            for key, value in row.items()
            if key is not None
        }
        if not any(record.values()):
            continue
        records.append(record)
    return records


class ParticipantService:

    def __init__(self, db: Session):
        self.db = db

    def list_coworkers(self, campaign_id: str, current_user: User):
        """Everybody in the campaign except the caller."""
        return (
            self.db.query(User)
            .join(CampaignParticipant, CampaignParticipant.user_id == User.id)
            .filter(
                CampaignParticipant.campaign_id == campaign_id,
                CampaignParticipant.user_id != current_user.id,
            )
            .order_by(User.display_name)
            .all()
        )

    def upsert_user(self, email: str, display_name: str) -> User:
        user = self.db.query(User).filter(User.email == email).first()
        if user is None:
            user = User(email=email, display_name=display_name)
            self.db.add(user)
        else:
            user.display_name = display_name
        self.db.flush()
        return user

    def add_participant(self, campaign_id: str, user_id: str) -> bool:
        """Returns False when the user was already in the campaign."""
        if self.db.get(CampaignParticipant, (campaign_id, user_id)) is not None:
            return False
        self.db.add(CampaignParticipant(campaign_id=campaign_id, user_id=user_id))
        self.db.flush()
        return True

    def import_csv(self, campaign_id: str, content: bytes) -> ImportResult:
        campaign = get_campaign_or_404(self.db, campaign_id)
        records = parse_participant_csv(content)

        processed = 0
        added = 0
        errors = []
        for record in records:
            email = record.get("email", "")
            if not email:
                errors.append(f"Row missing email: {json.dumps(record)}")
                continue

            user = self.upsert_user(email, record.get("display_name") or email)
            processed += 1

            if self.add_participant(campaign.id, user.id):
                added += 1

        self.db.commit()
        logger.info(
            "CSV import into campaign %s: %d users processed, %d participants added, %d errors",
            campaign.id, processed, added, len(errors),
        )
        return ImportResult(users_processed=processed, participants_added=added, errors=errors)

    def remove_participant(self, campaign_id: str, user_id: str) -> None:
        get_campaign_or_404(self.db, campaign_id)
        participant = self.db.get(CampaignParticipant, (campaign_id, user_id))
        if participant is None:
            raise NotFoundError("Participant not found")
        self.db.delete(participant)
        self.db.commit()
        logger.info("User %s removed from campaign %s", user_id, campaign_id)
