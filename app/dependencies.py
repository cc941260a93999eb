import logging

import jwt
from fastapi import Cookie, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import ACCESS_TOKEN_COOKIE_NAME, Settings
from app.database import get_db
from app.errors import UnauthorizedError
from app.models import User
from app.security import verify_access_token

logger = logging.getLogger(__name__)

# Keeps (page - 1) * pageSize inside a 32-bit integer for the largest page size.
MAX_PAGE = 2**31 // 100


def get_settings(request: Request) -> Settings:
    """Settings built once by ``create_app`` and kept on ``app.state``."""
    return request.app.state.settings


class PaginationParams:
    """
    Reusable FastAPI dependency that parses offset pagination query
    parameters for list endpoints.

    Attributes
    ----------
    page:
        1-based page number (minimum 1).
    page_size:
        Number of items per page (``pageSize`` in the query string), clamped
        to ``Settings.MAX_PAGE_SIZE``.
    order_by:
        ``"recent"`` for newest first; any other value, or none, sorts by
        ascending id (``orderBy`` in the query string).
    keyword:
        Optional case-insensitive substring filter.
    """

    def __init__(
        self,
        request: Request,
        page: int = Query(
            1,
            ge=1,
            le=MAX_PAGE,
            description="Page number (1-based).",
        ),
        page_size: int | None = Query(
            None,
            alias="pageSize",
            ge=1,
            le=100,
            description="Number of items returned per page (max 100).",
        ),
        order_by: str | None = Query(
            None,
            alias="orderBy",
            description="'recent' for newest first; ascending id otherwise.",
        ),
        keyword: str | None = Query(
            None,
            description="Case-insensitive substring filter.",
        ),
    ) -> None:
        settings = get_settings(request)
        self.page = page
        self.page_size = min(page_size or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
        self.order_by = order_by
        self.keyword = keyword or None


class CursorParams:
    """Query parameters for cursor pagination: ``cursor`` and ``limit``."""

    def __init__(
        self,
        cursor: int | None = Query(None, ge=1, description="Comment id to start from."),
        limit: int = Query(10, ge=1, le=100, description="Maximum items returned."),
    ) -> None:
        self.cursor = cursor
        self.limit = limit


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

async def get_optional_user(
    request: Request,
    access_token: str | None = Cookie(None, alias=ACCESS_TOKEN_COOKIE_NAME),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User | None:
    """
    Resolve the caller from the access-token cookie.

    A missing cookie, a token that fails verification and a token whose
    user no longer exists all resolve to ``None``.
    """
    if not access_token:
        return None
    try:
        user_id = verify_access_token(access_token, settings)
    except jwt.InvalidTokenError as exc:
        logger.debug("Rejected access token: %s", exc)
        return None
    user = await db.get(User, user_id)
    if user is not None:
        request.state.user_id = user.id
    return user


async def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    if user is None:
        raise UnauthorizedError()
    return user
