"""
Article service: business logic for the Article aggregate.

Design notes
------------
- List and detail reads eager-load ``likes`` with ``selectinload`` so the
  like count and the caller's like state come from one extra query instead
  of one per article.
- Those reads set ``populate_existing`` so a session that already holds
  the article still gets its current likes.
- The list total is a separate ``COUNT`` over the same predicate as the
  page query, never derived from the page itself.
- Mutations follow a fixed order: authentication is enforced by the router
  dependency, then existence (404), then ownership (403).
- Service functions flush but do not commit; the transaction boundary is
  owned by the ``get_db`` dependency.
"""
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.errors import NotFoundError
from app.models import Article, User
from app.schemas import CreateArticleBody, UpdateArticleBody
from app.services.common import apply_updates, ensure_owner, get_or_404, keyword_filter


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _article_to_dict(article: Article) -> dict:
    return {
        "id": article.id,
        "title": article.title,
        "content": article.content,
        "image": article.image,
        "user_id": article.user_id,
        "created_at": article.created_at,
        "updated_at": article.updated_at,
    }


def _article_with_likes(article: Article, user: User | None) -> dict:
    """
    Attach ``like_count`` and ``is_liked`` to the article dict.

    ``is_liked`` is None for anonymous callers.  Requires ``article.likes``
    to have been eager-loaded.
    """
    data = _article_to_dict(article)
    data["like_count"] = len(article.likes)
    data["is_liked"] = (
        any(like.user_id == user.id for like in article.likes) if user else None
    )
    return data


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_articles(
    db: AsyncSession,
    user: User | None,
    page: int = 1,
    page_size: int = 10,
    order_by: str | None = None,
    keyword: str | None = None,
) -> dict:
    """
    Return one page of articles and the total number matching *keyword*.

    ``recent`` orders by creation time (newest first); anything else orders
    by ascending id.
    """
    predicate = keyword_filter(keyword, Article.title)

    count_q = select(func.count()).select_from(Article)
    articles_q = (
        select(Article)
        .options(selectinload(Article.likes))
        .execution_options(populate_existing=True)
    )
    if predicate is not None:
        count_q = count_q.where(predicate)
        articles_q = articles_q.where(predicate)

    if order_by == "recent":
        articles_q = articles_q.order_by(Article.created_at.desc(), Article.id.desc())
    else:
        articles_q = articles_q.order_by(Article.id.asc())

    total: int = (await db.execute(count_q)).scalar_one()
    result = await db.execute(
        articles_q.offset((page - 1) * page_size).limit(page_size)
    )
    articles = result.scalars().all()

    return {
        "list": [_article_with_likes(a, user) for a in articles],
        "total_count": total,
    }


async def get_article(db: AsyncSession, article_id: int, user: User | None) -> dict:
    q = (
        select(Article)
        .where(Article.id == article_id)
        .options(selectinload(Article.likes))
        .execution_options(populate_existing=True)
    )
    article = (await db.execute(q)).scalar_one_or_none()
    if article is None:
        raise NotFoundError("article", article_id)
    return _article_with_likes(article, user)


async def create_article(db: AsyncSession, user: User, data: CreateArticleBody) -> dict:
    article = Article(
        title=data.title,
        content=data.content,
        image=data.image,
        user_id=user.id,
    )
    db.add(article)
    await db.flush()
    await db.refresh(article)
    return _article_to_dict(article)


async def update_article(
    db: AsyncSession, user: User, article_id: int, data: UpdateArticleBody
) -> dict:
    """
    Partially update an article owned by *user*.

    Only fields explicitly present in the request body are written
    (``model_dump(exclude_unset=True)``).
    """
    article = await get_or_404(db, Article, article_id, "article")
    ensure_owner(article, user, "article")

    apply_updates(article, data.model_dump(exclude_unset=True))
    await db.flush()
    await db.refresh(article)
    return _article_to_dict(article)


async def delete_article(db: AsyncSession, user: User, article_id: int) -> None:
    """Delete an article owned by *user*; comments and likes cascade."""
    article = await get_or_404(db, Article, article_id, "article")
    ensure_owner(article, user, "article")

    await db.delete(article)
    await db.flush()
