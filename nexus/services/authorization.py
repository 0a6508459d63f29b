"""
Authorization gate.

Ownership and role checks applied before any mutation. Each check either
returns quietly or raises; none of them touch the database state. Existence
is always checked before ownership so a missing resource reads as 404 for
everyone.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from nexus.core.errors import AuthorizationError
from nexus.models.artwork import Artworks
from nexus.models.gallery import Galleries
from nexus.models.user import Users
from nexus.services import artwork_store, gallery_store


class Owned(Protocol):
    user_id: int


def ensure_owner(resource: Owned, user: Users) -> None:
    """Raise AuthorizationError unless `user` owns `resource`."""
    if resource.user_id != user.id:
        raise AuthorizationError("Not authorized")


def ensure_admin(user: Users) -> None:
    if not user.is_admin:
        raise AuthorizationError("Admin privileges required")


def ensure_self(user_id: int, user: Users) -> None:
    """Only the user themself may act on `user_id` (preference updates)."""
    if user_id != user.id:
        raise AuthorizationError("Not authorized")


async def get_owned_artwork(db: AsyncSession, artwork_id: str, user: Users) -> Artworks:
    """
    Load an artwork the caller owns.

    Raises:
        NotFoundError: artwork does not exist
        AuthorizationError: artwork belongs to someone else
    """
    artwork = await artwork_store.require_artwork(db, artwork_id)
    ensure_owner(artwork, user)
    return artwork


async def get_owned_gallery(db: AsyncSession, gallery_id: str, user: Users) -> Galleries:
    """
    Load a gallery the caller owns.

    Raises:
        NotFoundError: gallery does not exist
        AuthorizationError: gallery belongs to someone else
    """
    gallery = await gallery_store.require_gallery(db, gallery_id)
    ensure_owner(gallery, user)
    return gallery
