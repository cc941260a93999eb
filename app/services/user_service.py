"""
User service: registration, credential checks and profile updates.

The password hash never leaves this module: every function returns either
the ORM instance (for callers that need the id) or the serialised dict
without the ``password`` column.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import BadRequestError, UnauthorizedError
from app.models import User
from app.schemas import RegisterBody, UpdateMeBody, UpdatePasswordBody
from app.security import hash_password, verify_password
from app.services.common import apply_updates


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def user_to_dict(user: User) -> dict:
    """Serialise a User ORM instance, omitting the password hash."""
    return {
        "id": user.id,
        "email": user.email,
        "nickname": user.nickname,
        "image": user.image,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


async def _get_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def register_user(db: AsyncSession, data: RegisterBody) -> dict:
    if await _get_by_email(db, data.email) is not None:
        raise BadRequestError("User already exists")

    user = User(
        email=data.email,
        nickname=data.nickname,
        password=hash_password(data.password),
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user_to_dict(user)


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User:
    """
    Return the user whose credentials match.

    An unknown email and a wrong password raise the same error so the
    response does not reveal which accounts exist.
    """
    user = await _get_by_email(db, email)
    if user is None or not verify_password(password, user.password):
        raise UnauthorizedError("Invalid credentials")
    return user


async def update_me(db: AsyncSession, user: User, data: UpdateMeBody) -> dict:
    update_data = data.model_dump(exclude_unset=True)

    new_email = update_data.get("email")
    if new_email is not None and new_email != user.email:
        if await _get_by_email(db, new_email) is not None:
            raise BadRequestError("Email already in use")

    apply_updates(user, update_data)
    await db.flush()
    await db.refresh(user)
    return user_to_dict(user)


async def update_password(db: AsyncSession, user: User, data: UpdatePasswordBody) -> None:
    if not verify_password(data.password, user.password):
        raise UnauthorizedError("Invalid credentials")

    user.password = hash_password(data.new_password)
    await db.flush()
