"""
Comment service: comments on articles, listed with cursor pagination.

A page is read as ``limit + 1`` rows in (created_at DESC, id DESC) order.
The extra row is never returned; its id becomes ``next_cursor``, and the
next request starts *at* that comment.  This detects "has more" without a
second query.
"""
from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Article, Comment, User
from app.schemas import CreateCommentBody, UpdateCommentBody
from app.services.common import apply_updates, ensure_owner, get_or_404


def _comment_to_dict(comment: Comment) -> dict:
    return {
        "id": comment.id,
        "content": comment.content,
        "article_id": comment.article_id,
        "user_id": comment.user_id,
        "created_at": comment.created_at,
        "updated_at": comment.updated_at,
    }


async def add_comment(
    db: AsyncSession,
    user: User,
    article_id: int,
    data: CreateCommentBody,
) -> dict:
    """Append a comment by *user* to the article identified by *article_id*."""
    await get_or_404(db, Article, article_id, "article")

    comment = Comment(
        content=data.content,
        article_id=article_id,
        user_id=user.id,
    )
    db.add(comment)
    await db.flush()
    await db.refresh(comment)
    return _comment_to_dict(comment)


async def get_comments(
    db: AsyncSession,
    article_id: int,
    cursor: int | None = None,
    limit: int = 10,
) -> dict:
    """
    Return up to *limit* comments of an article, newest first, starting at
    the comment *cursor* (inclusive) when given.

    Raises ``NotFoundError`` when the article does not exist.  A cursor
    that does not belong to the article yields an empty page.
    """
    await get_or_404(db, Article, article_id, "article")

    q = select(Comment).where(Comment.article_id == article_id)

    if cursor is not None:
        anchor = (
            await db.execute(
                select(Comment.created_at, Comment.id).where(
                    Comment.id == cursor, Comment.article_id == article_id
                )
            )
        ).one_or_none()
        if anchor is None:
            return {"list": [], "next_cursor": None}
        q = q.where(
            or_(
                Comment.created_at < anchor.created_at,
                and_(Comment.created_at == anchor.created_at, Comment.id <= anchor.id),
            )
        )

    q = q.order_by(Comment.created_at.desc(), Comment.id.desc()).limit(limit + 1)
    rows = (await db.execute(q)).scalars().all()

    page = rows[:limit]
    next_cursor = rows[limit].id if len(rows) > limit else None
    return {
        "list": [_comment_to_dict(c) for c in page],
        "next_cursor": next_cursor,
    }


async def update_comment(
    db: AsyncSession, user: User, comment_id: int, data: UpdateCommentBody
) -> dict:
    comment = await get_or_404(db, Comment, comment_id, "comment")
    ensure_owner(comment, user, "comment")

    apply_updates(comment, data.model_dump(exclude_unset=True))
    await db.flush()
    await db.refresh(comment)
    return _comment_to_dict(comment)


async def delete_comment(db: AsyncSession, user: User, comment_id: int) -> None:
    comment = await get_or_404(db, Comment, comment_id, "comment")
    ensure_owner(comment, user, "comment")

    await db.delete(comment)
    await db.flush()
