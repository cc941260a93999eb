import logging

import jwt
from fastapi import APIRouter, Cookie, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import ACCESS_TOKEN_COOKIE_NAME, REFRESH_TOKEN_COOKIE_NAME, Settings
from app.database import get_db
from app.dependencies import get_settings
from app.errors import UnauthorizedError
from app.models import User
from app.schemas import LoginBody, RegisterBody, UserResponse
from app.security import generate_tokens, verify_refresh_token
from app.services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_token_cookies(response: Response, user_id: int, settings: Settings) -> None:
    access_token, refresh_token = generate_tokens(user_id, settings)
    secure = settings.is_production

    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE_NAME,
        value=access_token,
        httponly=True,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax",
        secure=secure,
        path="/",
    )
    response.set_cookie(
        key=REFRESH_TOKEN_COOKIE_NAME,
        value=refresh_token,
        httponly=True,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        samesite="lax",
        secure=secure,
        path="/",
    )


@router.post("/register", status_code=201, response_model=UserResponse)
async def register(data: RegisterBody, db: AsyncSession = Depends(get_db)):
    return await user_service.register_user(db, data)


@router.post("/login", response_model=UserResponse)
async def login(
    data: LoginBody,
    response: Response,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = await user_service.authenticate_user(db, data.email, data.password)
    _set_token_cookies(response, user.id, settings)
    logger.info("User %s logged in", user.id)
    return user_service.user_to_dict(user)


@router.post("/logout")
async def logout():
    response = Response(status_code=200)
    response.delete_cookie(ACCESS_TOKEN_COOKIE_NAME, path="/")
    response.delete_cookie(REFRESH_TOKEN_COOKIE_NAME, path="/")
    return response


@router.post("/refresh", response_model=UserResponse)
async def refresh(
    response: Response,
    refresh_token: str | None = Cookie(None, alias=REFRESH_TOKEN_COOKIE_NAME),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Exchange a valid refresh-token cookie for a fresh pair of cookies."""
    if not refresh_token:
        raise UnauthorizedError()
    try:
        user_id = verify_refresh_token(refresh_token, settings)
    except jwt.InvalidTokenError as exc:
        logger.debug("Rejected refresh token: %s", exc)
        raise UnauthorizedError() from exc

    user = await db.get(User, user_id)
    if user is None:
        raise UnauthorizedError()

    _set_token_cookies(response, user.id, settings)
    return user_service.user_to_dict(user)
