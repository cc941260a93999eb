from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import PaginationParams, get_current_user
from app.models import User
from app.schemas import ProductListResponse, UpdateMeBody, UpdatePasswordBody, UserResponse
from app.services import product_service, user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    return user_service.user_to_dict(user)


@router.patch("/me", response_model=UserResponse)
async def update_me(
    data: UpdateMeBody,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.update_me(db, user, data)


@router.patch("/me/password")
async def update_my_password(
    data: UpdatePasswordBody,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await user_service.update_password(db, user, data)
    return Response(status_code=200)


@router.get("/me/products", response_model=ProductListResponse)
async def list_my_products(
    pagination: PaginationParams = Depends(),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await product_service.get_products(
        db,
        user,
        pagination.page,
        pagination.page_size,
        pagination.order_by,
        pagination.keyword,
        owner_id=user.id,
    )


@router.get("/me/favorites", response_model=ProductListResponse)
async def list_my_favorites(
    pagination: PaginationParams = Depends(),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await product_service.get_products(
        db,
        user,
        pagination.page,
        pagination.page_size,
        pagination.order_by,
        pagination.keyword,
        favorited_by=user.id,
    )
