"""
Admin API endpoints.

All routes require an admin account (403 otherwise).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from nexus.core.auth import AdminUser
from nexus.core.database import get_db
from nexus.core.errors import ValidationError
from nexus.core.logging import get_logger
from nexus.schemas.user import AdminUserUpdate, UserResponse
from nexus.services import user_store

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[UserResponse]:
    users = await user_store.list_users(db)
    return [UserResponse.model_validate(u) for u in users]


@router.patch("/users/{user_id}", response_model=UserResponse)
async def update_user_status(
    user_id: Annotated[int, Path(description="User ID")],
    body: AdminUserUpdate,
    admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """Grant or revoke admin, ban or unban. Admins cannot ban or demote themselves."""
    await user_store.require_user(db, user_id)
    if user_id == admin.id and (body.is_banned or body.is_admin is False):
        raise ValidationError("Admins cannot ban or demote themselves")

    user = await user_store.update_admin_status(db, user_id, is_admin=body.is_admin, is_banned=body.is_banned)
    logger.info("admin_user_updated", admin_id=admin.id, target_user_id=user_id)
    return UserResponse.model_validate(user)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: Annotated[int, Path(description="User ID")],
    admin: AdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete a user with their artworks, galleries, comments and likes."""
    # Read before the cascade: a skipped step rolls back and expires loaded rows
    admin_id = admin.id
    if user_id == admin_id:
        raise ValidationError("Admins cannot delete themselves")

    report = await user_store.delete_user(db, user_id)
    logger.info("admin_user_deleted", admin_id=admin_id, target_user_id=user_id, skipped=report.skipped)
