"""
Gallery persistence and gallery membership.

A gallery may hold artwork by any user; only the gallery's owner may change
its membership (enforced by the routes through the authorization gate).
"""

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nexus.core.errors import NotFoundError
from nexus.core.logging import get_logger
from nexus.models.artwork import Artworks
from nexus.models.gallery import Galleries, GalleryArtworks
from nexus.schemas.base import validate_payload
from nexus.schemas.gallery import GalleryCreate, GalleryUpdate
from nexus.services import cascade
from nexus.services.artwork_store import require_artwork

logger = get_logger(__name__)


async def get_gallery(db: AsyncSession, gallery_id: str) -> Galleries | None:
    result = await db.execute(select(Galleries).where(Galleries.id == gallery_id))  # type: ignore[arg-type]
    return result.scalar_one_or_none()


async def require_gallery(db: AsyncSession, gallery_id: str) -> Galleries:
    gallery = await get_gallery(db, gallery_id)
    if gallery is None:
        raise NotFoundError("Gallery not found")
    return gallery


async def list_galleries(db: AsyncSession) -> Sequence[Galleries]:
    result = await db.execute(select(Galleries))
    return result.scalars().all()


async def list_user_galleries(db: AsyncSession, user_id: int) -> Sequence[Galleries]:
    result = await db.execute(select(Galleries).where(Galleries.user_id == user_id))  # type: ignore[arg-type]
    return result.scalars().all()


async def create_gallery(
    db: AsyncSession, user_id: int, data: GalleryCreate | Mapping[str, Any]
) -> Galleries:
    """
    Create a gallery owned by `user_id`.

    Raises:
        ValidationError: name missing or malformed
    """
    payload = validate_payload(GalleryCreate, data)

    gallery = Galleries(user_id=user_id, **payload.model_dump())
    db.add(gallery)
    await db.commit()
    await db.refresh(gallery)

    logger.info("gallery_created", gallery_id=gallery.id, owner_id=user_id)
    return gallery


async def update_gallery(
    db: AsyncSession, gallery_id: str, data: GalleryUpdate | Mapping[str, Any]
) -> Galleries:
    """Rename or re-describe a gallery. Only the fields present in `data` change."""
    payload = validate_payload(GalleryUpdate, data)
    gallery = await require_gallery(db, gallery_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        if field == "name" and value is None:
            continue
        setattr(gallery, field, value)

    await db.commit()
    await db.refresh(gallery)

    logger.info("gallery_updated", gallery_id=gallery_id)
    return gallery


async def delete_gallery(db: AsyncSession, gallery_id: str) -> cascade.CascadeReport:
    """Delete a gallery and its membership rows; member artworks survive."""
    return await cascade.delete_gallery(db, gallery_id)


async def _find_membership(db: AsyncSession, gallery_id: str, artwork_id: str) -> GalleryArtworks | None:
    result = await db.execute(
        select(GalleryArtworks).where(
            GalleryArtworks.gallery_id == gallery_id,  # type: ignore[arg-type]
            GalleryArtworks.artwork_id == artwork_id,  # type: ignore[arg-type]
        )
    )
    return result.scalar_one_or_none()


async def add_artwork(db: AsyncSession, gallery_id: str, artwork_id: str) -> tuple[GalleryArtworks, bool]:
    """
    Add an artwork to a gallery. Idempotent.

    Returns:
        (membership, created) where created is False if the pair was already present

    Raises:
        NotFoundError: gallery or artwork does not exist
    """
    await require_gallery(db, gallery_id)
    await require_artwork(db, artwork_id)

    existing = await _find_membership(db, gallery_id, artwork_id)
    if existing is not None:
        return existing, False

    membership = GalleryArtworks(gallery_id=gallery_id, artwork_id=artwork_id)
    db.add(membership)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with an identical insert; the pair is present either way
        await db.rollback()
        existing = await _find_membership(db, gallery_id, artwork_id)
        if existing is None:
            raise
        return existing, False

    await db.refresh(membership)
    logger.info("gallery_artwork_added", gallery_id=gallery_id, artwork_id=artwork_id)
    return membership, True


async def remove_artwork(db: AsyncSession, gallery_id: str, artwork_id: str) -> None:
    """
    Remove an artwork from a gallery. The artwork itself is not deleted.

    Raises:
        NotFoundError: gallery absent, or the artwork is not a member
    """
    await require_gallery(db, gallery_id)

    if await _find_membership(db, gallery_id, artwork_id) is None:
        raise NotFoundError("Artwork is not in this gallery")

    await db.execute(
        delete(GalleryArtworks).where(
            GalleryArtworks.gallery_id == gallery_id,  # type: ignore[arg-type]
            GalleryArtworks.artwork_id == artwork_id,  # type: ignore[arg-type]
        )
    )
    await db.commit()

    logger.info("gallery_artwork_removed", gallery_id=gallery_id, artwork_id=artwork_id)


async def list_gallery_artworks(db: AsyncSession, gallery_id: str) -> Sequence[Artworks]:
    """
    Artworks in a gallery, in the order they were added.

    Membership rows whose artwork no longer exists are dropped by the inner join.
    """
    result = await db.execute(
        select(Artworks)
        .join(GalleryArtworks, GalleryArtworks.artwork_id == Artworks.id)  # type: ignore[arg-type]
        .where(GalleryArtworks.gallery_id == gallery_id)  # type: ignore[arg-type]
        .order_by(GalleryArtworks.added_at, GalleryArtworks.artwork_id)  # type: ignore[arg-type]
    )
    return result.scalars().all()
