"""
Like service: a user's like on an article.

Likes are not upserts: liking twice or unliking an article that is not
liked is a client error.  The existence check and the insert are not
atomic; two concurrent likes by the same user are stopped only by the
``uq_likes_article_id_user_id`` constraint, and the loser surfaces as a
persistence error.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import BadRequestError
from app.models import Article, Like, User
from app.services.common import get_or_404


async def _find_like(db: AsyncSession, article_id: int, user_id: int) -> Like | None:
    q = select(Like).where(Like.article_id == article_id, Like.user_id == user_id)
    return (await db.execute(q)).scalar_one_or_none()


async def create_like(db: AsyncSession, user: User, article_id: int) -> None:
    await get_or_404(db, Article, article_id, "article")

    if await _find_like(db, article_id, user.id) is not None:
        raise BadRequestError("Already liked")

    db.add(Like(article_id=article_id, user_id=user.id))
    await db.flush()


async def delete_like(db: AsyncSession, user: User, article_id: int) -> None:
    await get_or_404(db, Article, article_id, "article")

    like = await _find_like(db, article_id, user.id)
    if like is None:
        raise BadRequestError("Not liked")

    await db.delete(like)
    await db.flush()
