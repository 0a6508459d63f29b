"""
User API endpoints: artist directory, profiles, preferences and per-user listings.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from nexus.api.dependencies import ContentFilterParams
from nexus.core.auth import CurrentUser
from nexus.core.database import get_db
from nexus.schemas.artwork import ArtworkResponse
from nexus.schemas.gallery import GalleryResponse
from nexus.schemas.user import PreferencesUpdate, ProfileUpdate, UserResponse
from nexus.services import artwork_store, gallery_store, user_store
from nexus.services.authorization import ensure_self

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=list[UserResponse])
async def list_users(db: Annotated[AsyncSession, Depends(get_db)]) -> list[UserResponse]:
    """All users, for the artists page."""
    users = await user_store.list_users(db)
    return [UserResponse.model_validate(u) for u in users]


@router.patch("/me", response_model=UserResponse)
async def update_my_profile(
    body: ProfileUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """Edit display name, bio and profile/banner images. Omitted fields are unchanged."""
    assert current_user.id is not None
    user = await user_store.update_profile(db, current_user.id, body)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: Annotated[int, Path(description="User ID")],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    user = await user_store.require_user(db, user_id)
    return UserResponse.model_validate(user)


@router.get("/{user_id}/artworks", response_model=list[ArtworkResponse])
async def list_user_artworks(
    user_id: Annotated[int, Path(description="User ID")],
    filters: ContentFilterParams,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[ArtworkResponse]:
    """One artist's artwork, with the same isNsfw / isAiGenerated filters as /artworks."""
    await user_store.require_user(db, user_id)
    artworks = await artwork_store.list_user_artworks(db, user_id, filters)
    return [ArtworkResponse.model_validate(a) for a in artworks]


@router.get("/{user_id}/galleries", response_model=list[GalleryResponse])
async def list_user_galleries(
    user_id: Annotated[int, Path(description="User ID")],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[GalleryResponse]:
    galleries = await gallery_store.list_user_galleries(db, user_id)
    return [GalleryResponse.model_validate(g) for g in galleries]


@router.patch("/{user_id}/preferences", response_model=UserResponse)
async def update_preferences(
    user_id: Annotated[int, Path(description="User ID")],
    body: PreferencesUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """
    Store the caller's content preferences.

    Only the user themself may change them. Omitted flags keep their value.
    """
    await user_store.require_user(db, user_id)
    ensure_self(user_id, current_user)

    user = await user_store.update_preferences(
        db,
        user_id,
        show_nsfw=body.show_nsfw,
        show_ai_generated=body.show_ai_generated,
    )
    return UserResponse.model_validate(user)
