"""
Artwork persistence.

Typed async accessors over the artworks table and the likes that hang off it.
Every function takes the session first. Single-row writes commit immediately.
Authorization is not checked here; routes go through the authorization gate
before calling the mutating functions.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nexus.core.errors import NotFoundError
from nexus.core.logging import get_logger
from nexus.models.artwork import Artworks
from nexus.models.like import ArtworkLikes
from nexus.schemas.artwork import ArtworkCreate, ArtworkUpdate
from nexus.schemas.base import validate_payload
from nexus.services import cascade
from nexus.services.content_filter import ContentFilter, artwork_query

logger = get_logger(__name__)


async def get_artwork(db: AsyncSession, artwork_id: str) -> Artworks | None:
    """Fetch one artwork by id. Reading does not touch any counter."""
    result = await db.execute(select(Artworks).where(Artworks.id == artwork_id))  # type: ignore[arg-type]
    return result.scalar_one_or_none()


async def require_artwork(db: AsyncSession, artwork_id: str) -> Artworks:
    artwork = await get_artwork(db, artwork_id)
    if artwork is None:
        raise NotFoundError("Artwork not found")
    return artwork


async def list_artworks(db: AsyncSession, filters: ContentFilter | None = None) -> Sequence[Artworks]:
    """
    List artworks visible under `filters`.

    With filters=None every artwork is returned. Rows come back in the
    database's natural order.
    """
    result = await db.execute(artwork_query(filters))
    return result.scalars().all()


async def list_user_artworks(
    db: AsyncSession, user_id: int, filters: ContentFilter | None = None
) -> Sequence[Artworks]:
    """Same predicate as list_artworks, restricted to one artist."""
    result = await db.execute(artwork_query(filters, user_id=user_id))
    return result.scalars().all()


async def create_artwork(
    db: AsyncSession, user_id: int, data: ArtworkCreate | Mapping[str, Any]
) -> Artworks:
    """
    Create an artwork owned by `user_id`.

    Args:
        db: Database session
        user_id: Owner; any userId in `data` is ignored
        data: Validated schema or raw mapping

    Raises:
        ValidationError: `data` is missing required fields or malformed
    """
    payload = validate_payload(ArtworkCreate, data)

    artwork = Artworks(user_id=user_id, **payload.model_dump())
    db.add(artwork)
    await db.commit()
    await db.refresh(artwork)

    logger.info("artwork_created", artwork_id=artwork.id, owner_id=user_id)
    return artwork


async def update_artwork(
    db: AsyncSession, artwork_id: str, data: ArtworkUpdate | Mapping[str, Any]
) -> Artworks:
    """
    Replace every mutable field of an artwork.

    Owner, id, counters and creation time are untouched.
    """
    payload = validate_payload(ArtworkUpdate, data)
    artwork = await require_artwork(db, artwork_id)

    for field, value in payload.model_dump().items():
        setattr(artwork, field, value)

    await db.commit()
    await db.refresh(artwork)

    logger.info("artwork_updated", artwork_id=artwork_id)
    return artwork


async def delete_artwork(db: AsyncSession, artwork_id: str) -> cascade.CascadeReport:
    """Delete an artwork and its dependents (see nexus.services.cascade)."""
    return await cascade.delete_artwork(db, artwork_id)


async def _find_like(db: AsyncSession, artwork_id: str, user_id: int) -> ArtworkLikes | None:
    result = await db.execute(
        select(ArtworkLikes).where(
            ArtworkLikes.user_id == user_id,  # type: ignore[arg-type]
            ArtworkLikes.artwork_id == artwork_id,  # type: ignore[arg-type]
        )
    )
    return result.scalar_one_or_none()


async def like_artwork(db: AsyncSession, artwork_id: str, user_id: int) -> tuple[Artworks, bool]:
    """
    Like an artwork. Idempotent.

    Returns:
        (artwork, created) where created is False if the like already existed
    """
    artwork = await require_artwork(db, artwork_id)

    if await _find_like(db, artwork_id, user_id) is not None:
        return artwork, False

    db.add(ArtworkLikes(user_id=user_id, artwork_id=artwork_id))
    await db.execute(
        update(Artworks)
        .where(Artworks.id == artwork_id)  # type: ignore[arg-type]
        .values(like_count=Artworks.like_count + 1)
        .execution_options(synchronize_session=False)
    )
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent request inserted the same like first
        await db.rollback()
        await db.refresh(artwork)
        return artwork, False

    await db.refresh(artwork)
    logger.info("artwork_liked", artwork_id=artwork_id, like_count=artwork.like_count)
    return artwork, True


async def unlike_artwork(db: AsyncSession, artwork_id: str, user_id: int) -> Artworks:
    """
    Remove the caller's like.

    Raises:
        NotFoundError: artwork absent, or the caller had not liked it
    """
    artwork = await require_artwork(db, artwork_id)

    if await _find_like(db, artwork_id, user_id) is None:
        raise NotFoundError("Like not found")

    await db.execute(
        delete(ArtworkLikes).where(
            ArtworkLikes.user_id == user_id,  # type: ignore[arg-type]
            ArtworkLikes.artwork_id == artwork_id,  # type: ignore[arg-type]
        )
    )
    await db.execute(
        update(Artworks)
        .where(Artworks.id == artwork_id, Artworks.like_count > 0)  # type: ignore[arg-type]
        .values(like_count=Artworks.like_count - 1)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    await db.refresh(artwork)

    logger.info("artwork_unliked", artwork_id=artwork_id, like_count=artwork.like_count)
    return artwork
