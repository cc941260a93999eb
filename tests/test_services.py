"""
Direct service-layer tests: exercises business logic without HTTP overhead.

These tests call service functions with a database session, covering the
query paths and error signalling that endpoint tests only see through the
HTTP error mapping.
"""
import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import BadRequestError, ForbiddenError, NotFoundError, UnauthorizedError
from app.models import Comment, Like, User
from app.schemas import (
    CreateArticleBody,
    CreateCommentBody,
    CreateProductBody,
    RegisterBody,
    UpdateArticleBody,
)
from app.security import hash_password, verify_password
from app.services import (
    article_service,
    comment_service,
    favorite_service,
    like_service,
    product_service,
    user_service,
)
from app.services.common import keyword_filter


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _create_user(db: AsyncSession, email: str = "svc@example.com") -> User:
    user = User(email=email, nickname="svc", password=hash_password("password123"))
    db.add(user)
    await db.flush()
    return user


# ---------------------------------------------------------------------------
# article_service
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_articles_empty(db_session: AsyncSession):
    result = await article_service.get_articles(db_session, None)
    assert result == {"list": [], "total_count": 0}


@pytest.mark.asyncio
async def test_article_crud_via_service(db_session: AsyncSession):
    user = await _create_user(db_session)
    created = await article_service.create_article(
        db_session, user, CreateArticleBody(title="Service", content="Body")
    )
    assert created["user_id"] == user.id

    updated = await article_service.update_article(
        db_session, user, created["id"], UpdateArticleBody(content="Changed")
    )
    assert updated["title"] == "Service"
    assert updated["content"] == "Changed"

    await article_service.delete_article(db_session, user, created["id"])
    with pytest.raises(NotFoundError):
        await article_service.get_article(db_session, created["id"], user)


@pytest.mark.asyncio
async def test_update_article_checks_owner(db_session: AsyncSession):
    owner = await _create_user(db_session, "owner@example.com")
    other = await _create_user(db_session, "other@example.com")
    created = await article_service.create_article(
        db_session, owner, CreateArticleBody(title="Mine", content="Body")
    )

    with pytest.raises(ForbiddenError) as exc_info:
        await article_service.update_article(
            db_session, other, created["id"], UpdateArticleBody(title="Theirs")
        )
    assert exc_info.value.message == "Should be the owner of the article"


@pytest.mark.asyncio
async def test_delete_article_cascades(db_session: AsyncSession):
    user = await _create_user(db_session)
    created = await article_service.create_article(
        db_session, user, CreateArticleBody(title="Doomed", content="Body")
    )
    await comment_service.add_comment(db_session, user, created["id"], CreateCommentBody(content="c"))
    await like_service.create_like(db_session, user, created["id"])

    await article_service.delete_article(db_session, user, created["id"])

    comments = (await db_session.execute(select(Comment))).scalars().all()
    likes = (await db_session.execute(select(Like))).scalars().all()
    assert comments == []
    assert likes == []


# ---------------------------------------------------------------------------
# comment_service
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_comments_cursor_is_inclusive(db_session: AsyncSession):
    user = await _create_user(db_session)
    article = await article_service.create_article(
        db_session, user, CreateArticleBody(title="A", content="B")
    )
    ids = []
    for i in range(3):
        comment = await comment_service.add_comment(
            db_session, user, article["id"], CreateCommentBody(content=f"c{i}")
        )
        ids.append(comment["id"])

    page = await comment_service.get_comments(db_session, article["id"], cursor=ids[1], limit=5)
    assert [c["id"] for c in page["list"]] == [ids[1], ids[0]]
    assert page["next_cursor"] is None


@pytest.mark.asyncio
async def test_get_comments_missing_article(db_session: AsyncSession):
    with pytest.raises(NotFoundError):
        await comment_service.get_comments(db_session, 404)


# ---------------------------------------------------------------------------
# like_service / favorite_service
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_like_errors(db_session: AsyncSession):
    user = await _create_user(db_session)
    article = await article_service.create_article(
        db_session, user, CreateArticleBody(title="A", content="B")
    )

    with pytest.raises(BadRequestError, match="Not liked"):
        await like_service.delete_like(db_session, user, article["id"])

    await like_service.create_like(db_session, user, article["id"])
    with pytest.raises(BadRequestError, match="Already liked"):
        await like_service.create_like(db_session, user, article["id"])

    with pytest.raises(NotFoundError):
        await like_service.create_like(db_session, user, 999)


@pytest.mark.asyncio
async def test_favorite_errors(db_session: AsyncSession):
    user = await _create_user(db_session)
    product = await product_service.create_product(
        db_session, user, CreateProductBody(name="Lamp", description="Warm", price=10)
    )

    await favorite_service.create_favorite(db_session, user, product["id"])
    with pytest.raises(BadRequestError, match="Already favorited"):
        await favorite_service.create_favorite(db_session, user, product["id"])

    await favorite_service.delete_favorite(db_session, user, product["id"])
    with pytest.raises(BadRequestError, match="Not favorited"):
        await favorite_service.delete_favorite(db_session, user, product["id"])


# ---------------------------------------------------------------------------
# product_service
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_products_filters(db_session: AsyncSession):
    seller = await _create_user(db_session, "seller@example.com")
    buyer = await _create_user(db_session, "buyer@example.com")
    lamp = await product_service.create_product(
        db_session, seller, CreateProductBody(name="Lamp", description="Warm light", price=10)
    )
    await product_service.create_product(
        db_session, seller, CreateProductBody(name="Desk", description="Oak", price=20)
    )
    await favorite_service.create_favorite(db_session, buyer, lamp["id"])

    by_owner = await product_service.get_products(db_session, seller, owner_id=seller.id)
    assert by_owner["total_count"] == 2

    favorites = await product_service.get_products(db_session, buyer, favorited_by=buyer.id)
    assert [p["id"] for p in favorites["list"]] == [lamp["id"]]
    assert favorites["list"][0]["is_favorited"] is True

    searched = await product_service.get_products(db_session, None, keyword="LIGHT")
    assert searched["total_count"] == 1
    assert searched["list"][0]["is_favorited"] is None


# ---------------------------------------------------------------------------
# user_service
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_register_and_authenticate(db_session: AsyncSession):
    created = await user_service.register_user(
        db_session,
        RegisterBody(email="reg@example.com", nickname="reg", password="long-enough"),
    )
    assert "password" not in created

    user = await user_service.authenticate_user(db_session, "reg@example.com", "long-enough")
    assert user.id == created["id"]
    assert verify_password("long-enough", user.password)

    with pytest.raises(UnauthorizedError):
        await user_service.authenticate_user(db_session, "reg@example.com", "wrong-password")

    with pytest.raises(BadRequestError, match="User already exists"):
        await user_service.register_user(
            db_session,
            RegisterBody(email="reg@example.com", nickname="again", password="long-enough"),
        )


# ---------------------------------------------------------------------------
# common
# ---------------------------------------------------------------------------

def test_keyword_filter_without_keyword():
    from app.models import Article

    assert keyword_filter(None, Article.title) is None
    assert keyword_filter("", Article.title) is None
