"""
Favorite service: a user's favorite on a product.

Same contract as likes: no upsert, duplicates and missing favorites are
client errors, and the ``uq_favorites_product_id_user_id`` constraint is
the only guard against a concurrent duplicate.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import BadRequestError
from app.models import Favorite, Product, User
from app.services.common import get_or_404


async def _find_favorite(db: AsyncSession, product_id: int, user_id: int) -> Favorite | None:
    q = select(Favorite).where(Favorite.product_id == product_id, Favorite.user_id == user_id)
    return (await db.execute(q)).scalar_one_or_none()


async def create_favorite(db: AsyncSession, user: User, product_id: int) -> None:
    await get_or_404(db, Product, product_id, "product")

    if await _find_favorite(db, product_id, user.id) is not None:
        raise BadRequestError("Already favorited")

    db.add(Favorite(product_id=product_id, user_id=user.id))
    await db.flush()


async def delete_favorite(db: AsyncSession, user: User, product_id: int) -> None:
    await get_or_404(db, Product, product_id, "product")

    favorite = await _find_favorite(db, product_id, user.id)
    if favorite is None:
        raise BadRequestError("Not favorited")

    await db.delete(favorite)
    await db.flush()
