"""
Product service: business logic for the Product aggregate.

``get_products`` serves three endpoints: the public product list, the
caller's own products (``owner_id``) and the products the caller favorited
(``favorited_by``).  All three share the keyword filter on name OR
description and the offset pagination contract.
"""
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.errors import NotFoundError
from app.models import Favorite, Product, User
from app.schemas import CreateProductBody, UpdateProductBody
from app.services.common import apply_updates, ensure_owner, get_or_404, keyword_filter


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _product_to_dict(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "tags": list(product.tags or []),
        "images": list(product.images or []),
        "user_id": product.user_id,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


def _product_with_favorites(product: Product, user: User | None) -> dict:
    """Requires ``product.favorites`` to have been eager-loaded."""
    data = _product_to_dict(product)
    data["favorite_count"] = len(product.favorites)
    data["is_favorited"] = (
        any(fav.user_id == user.id for fav in product.favorites) if user else None
    )
    return data


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_products(
    db: AsyncSession,
    user: User | None,
    page: int = 1,
    page_size: int = 10,
    order_by: str | None = None,
    keyword: str | None = None,
    owner_id: int | None = None,
    favorited_by: int | None = None,
) -> dict:
    """
    Return one page of products plus the total matching the same filters.

    ``recent`` orders by descending id, anything else by ascending id.
    """
    predicates = []
    keyword_clause = keyword_filter(keyword, Product.name, Product.description)
    if keyword_clause is not None:
        predicates.append(keyword_clause)
    if owner_id is not None:
        predicates.append(Product.user_id == owner_id)
    if favorited_by is not None:
        predicates.append(Product.favorites.any(Favorite.user_id == favorited_by))

    count_q = select(func.count()).select_from(Product).where(*predicates)
    total: int = (await db.execute(count_q)).scalar_one()

    order_expr = Product.id.desc() if order_by == "recent" else Product.id.asc()
    products_q = (
        select(Product)
        .where(*predicates)
        .options(selectinload(Product.favorites))
        .execution_options(populate_existing=True)
        .order_by(order_expr)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    products = (await db.execute(products_q)).scalars().all()

    return {
        "list": [_product_with_favorites(p, user) for p in products],
        "total_count": total,
    }


async def get_product(db: AsyncSession, product_id: int, user: User | None) -> dict:
    q = (
        select(Product)
        .where(Product.id == product_id)
        .options(selectinload(Product.favorites))
        .execution_options(populate_existing=True)
    )
    product = (await db.execute(q)).scalar_one_or_none()
    if product is None:
        raise NotFoundError("product", product_id)
    return _product_with_favorites(product, user)


async def create_product(db: AsyncSession, user: User, data: CreateProductBody) -> dict:
    product = Product(**data.model_dump(), user_id=user.id)
    db.add(product)
    await db.flush()
    await db.refresh(product)
    return _product_to_dict(product)


async def update_product(
    db: AsyncSession, user: User, product_id: int, data: UpdateProductBody
) -> dict:
    product = await get_or_404(db, Product, product_id, "product")
    ensure_owner(product, user, "product")

    apply_updates(product, data.model_dump(exclude_unset=True))
    await db.flush()
    await db.refresh(product)
    return _product_to_dict(product)


async def delete_product(db: AsyncSession, user: User, product_id: int) -> None:
    product = await get_or_404(db, Product, product_id, "product")
    ensure_owner(product, user, "product")

    await db.delete(product)
    await db.flush()
