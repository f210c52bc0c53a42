# giftpool/core/security.py

from datetime import datetime, timedelta, timezone
from typing import Any, Union

from jose import jwt

from giftpool.core.config import settings


def build_token_claims(user) -> dict:
    """Claims carried by every access token we issue for a user."""
    return {
        "sub": user.id,
        "id": user.id,
        "email": user.email,
        "displayName": user.display_name,
        "isAdmin": bool(user.is_admin),
    }


def create_access_token(data: dict, expires_delta: Union[timedelta, None] = None) -> str:
    """
    Sign a JWT (HS256 by default) with an expiry, 24 hours unless told otherwise.
    """
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_user_token(user) -> str:
    return create_access_token(build_token_claims(user))


def decode_access_token(token: str) -> dict[str, Any]:
    # raises jose.JWTError (ExpiredSignatureError included) on anything invalid
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
