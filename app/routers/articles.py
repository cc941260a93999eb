from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import CursorParams, PaginationParams, get_current_user, get_optional_user
from app.models import User
from app.schemas import (
    ArticleListResponse,
    ArticleResponse,
    ArticleWithLikes,
    CommentListResponse,
    CommentResponse,
    CreateArticleBody,
    CreateCommentBody,
    UpdateArticleBody,
)
from app.services import article_service, comment_service, like_service

router = APIRouter(prefix="/articles", tags=["articles"])


@router.post("", status_code=201, response_model=ArticleResponse)
async def create_article(
    data: CreateArticleBody,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.create_article(db, user, data)


@router.get("", response_model=ArticleListResponse)
async def list_articles(
    pagination: PaginationParams = Depends(),
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.get_articles(
        db,
        user,
        pagination.page,
        pagination.page_size,
        pagination.order_by,
        pagination.keyword,
    )


@router.get("/{article_id}", response_model=ArticleWithLikes)
async def get_article(
    article_id: int,
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.get_article(db, article_id, user)


@router.patch("/{article_id}", response_model=ArticleResponse)
async def update_article(
    article_id: int,
    data: UpdateArticleBody,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.update_article(db, user, article_id, data)


@router.delete("/{article_id}", status_code=204)
async def delete_article(
    article_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await article_service.delete_article(db, user, article_id)
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

@router.post("/{article_id}/comments", status_code=201, response_model=CommentResponse)
async def create_comment(
    article_id: int,
    data: CreateCommentBody,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.add_comment(db, user, article_id, data)


@router.get("/{article_id}/comments", response_model=CommentListResponse)
async def list_comments(
    article_id: int,
    params: CursorParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.get_comments(db, article_id, params.cursor, params.limit)


# ---------------------------------------------------------------------------
# Likes
# ---------------------------------------------------------------------------

@router.post("/{article_id}/likes", status_code=201)
async def create_like(
    article_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await like_service.create_like(db, user, article_id)
    return Response(status_code=201)


@router.delete("/{article_id}/likes", status_code=204)
async def delete_like(
    article_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await like_service.delete_like(db, user, article_id)
    return Response(status_code=204)
