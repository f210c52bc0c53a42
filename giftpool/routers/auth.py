# giftpool/routers/auth.py

import logging
from typing import Optional
from urllib.parse import urlencode

import requests
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from giftpool.common.deps import get_current_user, get_google_client
from giftpool.common.errors import BadRequestError, ForbiddenError, NotFoundError
from giftpool.core.config import settings
from giftpool.core.security import create_user_token
from giftpool.db.session import get_db
from giftpool.models.user import DevLoginRequest, DevLoginResponse, User, UserRead
from giftpool.services.google_oauth import GoogleOAuthClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/login")
def login(google: GoogleOAuthClient = Depends(get_google_client)):
    """Send the browser off to Google's consent screen."""
    if not google.configured:
        return JSONResponse(status_code=500, content={"error": "OAuth not configured"})
    return RedirectResponse(google.get_authorize_url())


@router.get("/callback")
def oauth_callback(
    code: Optional[str] = None,
    db: Session = Depends(get_db),
    google: GoogleOAuthClient = Depends(get_google_client),
):
    if not code:
        raise BadRequestError("Missing authorization code")

    try:
        tokens = google.exchange_code_for_token(code)
        user_info = google.get_user_info(tokens["access_token"])
    except (requests.RequestException, KeyError, ValueError):
        logger.exception("OAuth callback error")
        return JSONResponse(status_code=500, content={"error": "Authentication failed"})

    # accounts must be pre-imported by an admin
    email = user_info.get("email")
    user = db.query(User).filter(User.email == email).first() if email else None
    if user is None:
        logger.info("OAuth login refused for unregistered email %s", email)
        raise ForbiddenError("User not registered. Contact your admin.")

    picture = user_info.get("picture")
    if picture and picture != user.avatar_url:
        user.avatar_url = picture
        db.commit()
        db.refresh(user)

    token = create_user_token(user)
    logger.info("User %s signed in with Google", user.email)
    query = urlencode({"token": token})
    return RedirectResponse(f"{settings.CORS_ORIGIN}/auth/callback?{query}")


@router.get("/me", response_model=UserRead)
def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user


def dev_login(body: DevLoginRequest, db: Session = Depends(get_db)):
    """Issue a token for any registered email. Never mounted in production."""
    user = db.query(User).filter(User.email == body.email).first()
    if not user:
        raise NotFoundError("User not found")
    return DevLoginResponse(token=create_user_token(user), user=UserRead.model_validate(user))


if not settings.is_production:
    router.add_api_route("/dev-login", dev_login, methods=["POST"], response_model=DevLoginResponse)
