from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import PaginationParams, get_current_user, get_optional_user
from app.models import User
from app.schemas import (
    CreateProductBody,
    ProductListResponse,
    ProductResponse,
    ProductWithFavorites,
    UpdateProductBody,
)
from app.services import favorite_service, product_service

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", status_code=201, response_model=ProductResponse)
async def create_product(
    data: CreateProductBody,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await product_service.create_product(db, user, data)


@router.get("", response_model=ProductListResponse)
async def list_products(
    pagination: PaginationParams = Depends(),
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    return await product_service.get_products(
        db,
        user,
        pagination.page,
        pagination.page_size,
        pagination.order_by,
        pagination.keyword,
    )


@router.get("/{product_id}", response_model=ProductWithFavorites)
async def get_product(
    product_id: int,
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    return await product_service.get_product(db, product_id, user)


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    data: UpdateProductBody,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await product_service.update_product(db, user, product_id, data)


@router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await product_service.delete_product(db, user, product_id)
    return Response(status_code=204)


@router.post("/{product_id}/favorites", status_code=201)
async def create_favorite(
    product_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await favorite_service.create_favorite(db, user, product_id)
    return Response(status_code=201)


@router.delete("/{product_id}/favorites", status_code=204)
async def delete_favorite(
    product_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await favorite_service.delete_favorite(db, user, product_id)
    return Response(status_code=204)
