# giftpool/common/deps.py

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from giftpool.common.errors import ForbiddenError, UnauthorizedError
from giftpool.core.security import decode_access_token
from giftpool.db.session import get_db
from giftpool.models.user import User
from giftpool.services.campaign_service import CampaignService
from giftpool.services.gift_service import GiftService
from giftpool.services.google_oauth import GoogleOAuthClient, google_client
from giftpool.services.participant_service import ParticipantService
from giftpool.services.report_service import ReportService

# auto_error=False so a missing header gets our own 401 body
bearer_scheme = HTTPBearer(auto_error=False)


def get_campaign_service(db: Session = Depends(get_db)) -> CampaignService:
    return CampaignService(db=db)


def get_participant_service(db: Session = Depends(get_db)) -> ParticipantService:
    return ParticipantService(db=db)


def get_gift_service(db: Session = Depends(get_db)) -> GiftService:
    return GiftService(db=db)


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    return ReportService(db=db)


def get_google_client() -> GoogleOAuthClient:
    return google_client


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError("Missing or invalid authorization header")

    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError:
        raise UnauthorizedError("Invalid token")

    user_id = payload.get("id") or payload.get("sub")
    if not user_id:
        raise UnauthorizedError("Invalid token")

    user = db.get(User, user_id)
    if user is None:
        raise UnauthorizedError("Invalid token")
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise ForbiddenError("Admin access required")
    return current_user
