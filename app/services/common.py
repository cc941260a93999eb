"""
Helpers shared by the service modules: existence checks, ownership checks
and keyword filtering.
"""
from typing import Any, TypeVar

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ForbiddenError, NotFoundError
from app.models import User

ModelT = TypeVar("ModelT")


async def get_or_404(db: AsyncSession, model: type[ModelT], entity_id: int, entity: str) -> ModelT:
    """Return the row of *model* with *entity_id* or raise ``NotFoundError``."""
    instance = await db.get(model, entity_id)
    if instance is None:
        raise NotFoundError(entity, entity_id)
    return instance


def ensure_owner(resource: Any, user: User, entity: str) -> None:
    if resource.user_id != user.id:
        raise ForbiddenError(f"Should be the owner of the {entity}")


def keyword_filter(keyword: str | None, *columns):
    """
    Build a case-insensitive substring predicate over *columns*, OR-ed
    together.  Returns None when there is no keyword to filter on.
    """
    if not keyword:
        return None
    clauses = [column.icontains(keyword, autoescape=True) for column in columns]
    return clauses[0] if len(clauses) == 1 else or_(*clauses)


def apply_updates(instance: Any, data: dict) -> None:
    """Copy every explicitly provided field in *data* onto *instance*."""
    for field, value in data.items():
        setattr(instance, field, value)
