"""
User persistence: registration, profile edits, content preferences and admin flags.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nexus.core.errors import ConflictError, NotFoundError
from nexus.core.logging import get_logger
from nexus.core.security import get_password_hash
from nexus.models.user import Users
from nexus.schemas.auth import UserRegisterRequest
from nexus.schemas.base import validate_payload
from nexus.schemas.user import ProfileUpdate
from nexus.services import cascade

logger = get_logger(__name__)


async def get_user(db: AsyncSession, user_id: int) -> Users | None:
    result = await db.execute(select(Users).where(Users.id == user_id))  # type: ignore[arg-type]
    return result.scalar_one_or_none()


async def require_user(db: AsyncSession, user_id: int) -> Users:
    user = await get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def get_user_by_username(db: AsyncSession, username: str) -> Users | None:
    """Case-insensitive lookup; usernames are unique regardless of case."""
    result = await db.execute(
        select(Users).where(func.lower(Users.username) == username.lower())  # type: ignore[arg-type]
    )
    return result.scalar_one_or_none()


async def list_users(db: AsyncSession) -> Sequence[Users]:
    result = await db.execute(select(Users).order_by(Users.id))  # type: ignore[arg-type]
    return result.scalars().all()


async def create_user(db: AsyncSession, data: UserRegisterRequest | Mapping[str, Any]) -> Users:
    """
    Register a new user with a hashed password.

    Raises:
        ValidationError: username or password malformed
        ConflictError: username already taken
    """
    payload = validate_payload(UserRegisterRequest, data)

    if await get_user_by_username(db, payload.username) is not None:
        raise ConflictError("Username already taken")

    user = Users(
        username=payload.username,
        password=get_password_hash(payload.password),
        display_name=payload.display_name or payload.username,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError("Username already taken") from e
    await db.refresh(user)

    logger.info("user_registered", new_user_id=user.id, username=user.username)
    return user


async def update_profile(db: AsyncSession, user_id: int, data: ProfileUpdate | Mapping[str, Any]) -> Users:
    """Apply the profile fields present in `data`."""
    payload = validate_payload(ProfileUpdate, data)
    user = await require_user(db, user_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(user, field, value)

    await db.commit()
    await db.refresh(user)

    logger.info("profile_updated", profile_user_id=user_id)
    return user


async def update_preferences(
    db: AsyncSession,
    user_id: int,
    show_nsfw: bool | None = None,
    show_ai_generated: bool | None = None,
) -> Users:
    """Store content preferences. A None flag leaves the stored value unchanged."""
    user = await require_user(db, user_id)

    if show_nsfw is not None:
        user.show_nsfw = show_nsfw
    if show_ai_generated is not None:
        user.show_ai_generated = show_ai_generated

    await db.commit()
    await db.refresh(user)

    logger.info(
        "preferences_updated",
        profile_user_id=user_id,
        show_nsfw=user.show_nsfw,
        show_ai_generated=user.show_ai_generated,
    )
    return user


async def update_admin_status(
    db: AsyncSession,
    user_id: int,
    is_admin: bool | None = None,
    is_banned: bool | None = None,
) -> Users:
    """Toggle the admin and banned flags. Callers must already be admins."""
    user = await require_user(db, user_id)

    if is_admin is not None:
        user.is_admin = is_admin
    if is_banned is not None:
        user.is_banned = is_banned

    await db.commit()
    await db.refresh(user)

    logger.info("admin_status_updated", target_user_id=user_id, is_admin=user.is_admin, is_banned=user.is_banned)
    return user


async def delete_user(db: AsyncSession, user_id: int) -> cascade.CascadeReport:
    """Delete a user and everything they own (see nexus.services.cascade)."""
    await require_user(db, user_id)
    return await cascade.delete_user(db, user_id)
