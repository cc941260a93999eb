"""
Password hashing and token signing.

Access and refresh tokens are HS256 JWTs carrying the user id under ``id``,
each signed with its own secret so a refresh token can never be replayed as
an access token.
"""
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from app.config import Settings

JWT_ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _encode(user_id: int, secret: str, expires_delta: timedelta) -> str:
    payload = {
        "id": user_id,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def _decode(token: str, secret: str) -> int:
    """
    Return the user id stored in *token*.

    Raises ``jwt.InvalidTokenError`` (or a subclass such as
    ``ExpiredSignatureError``) for a bad signature, an expired token or a
    payload without an integer ``id``.
    """
    payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    user_id = payload.get("id")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise jwt.InvalidTokenError("Invalid token payload")
    return user_id


def create_access_token(user_id: int, settings: Settings) -> str:
    return _encode(
        user_id,
        settings.JWT_ACCESS_TOKEN_SECRET,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(user_id: int, settings: Settings) -> str:
    return _encode(
        user_id,
        settings.JWT_REFRESH_TOKEN_SECRET,
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def generate_tokens(user_id: int, settings: Settings) -> tuple[str, str]:
    """Return a fresh ``(access_token, refresh_token)`` pair."""
    return create_access_token(user_id, settings), create_refresh_token(user_id, settings)


def verify_access_token(token: str, settings: Settings) -> int:
    return _decode(token, settings.JWT_ACCESS_TOKEN_SECRET)


def verify_refresh_token(token: str, settings: Settings) -> int:
    return _decode(token, settings.JWT_REFRESH_TOKEN_SECRET)
