"""
Cascade deletion.

Deleting an artwork, gallery or user first removes the rows that depend on it,
then the row itself. Dependent steps are soft: each runs as its own statement
and commit, and a step that fails (for example because a dependent table does
not exist yet on an older database) is rolled back, logged and skipped so the
cascade can carry on. Deleting the primary row is not soft; its failure
propagates to the caller.

There is no transaction spanning the whole cascade. A crash between steps can
leave orphaned dependents behind.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from nexus.core.logging import get_logger
from nexus.models.artwork import Artworks
from nexus.models.comment import Comments
from nexus.models.gallery import Galleries, GalleryArtworks
from nexus.models.like import ArtworkLikes
from nexus.models.user import Users

logger = get_logger(__name__)


@dataclass
class CascadeReport:
    """Outcome of a cascade: which dependent steps ran and which were skipped."""

    target: str
    target_id: str | int
    completed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def merge(self, other: "CascadeReport") -> None:
        prefix = f"{other.target}:{other.target_id}:"
        self.completed.extend(prefix + step for step in other.completed)
        self.skipped.extend(prefix + step for step in other.skipped)


async def _run_step(db: AsyncSession, report: CascadeReport, step: str, statements: Sequence[Any]) -> None:
    """Execute and commit one dependent step, recording a failure instead of raising."""
    try:
        for statement in statements:
            await db.execute(statement)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.warning(
            "cascade_step_failed",
            target=report.target,
            target_id=report.target_id,
            step=step,
            error=str(e),
        )
        report.skipped.append(step)
    else:
        report.completed.append(step)


async def _delete_primary(db: AsyncSession, statement: Any) -> None:
    await db.execute(statement)
    await db.commit()


async def delete_artwork(db: AsyncSession, artwork_id: str) -> CascadeReport:
    """
    Delete an artwork with its comments, gallery memberships and likes.

    The caller has already checked that the artwork exists and that the
    requester owns it.
    """
    report = CascadeReport(target="artwork", target_id=artwork_id)

    await _run_step(
        db, report, "comments", [delete(Comments).where(Comments.artwork_id == artwork_id)]  # type: ignore[arg-type]
    )
    await _run_step(
        db,
        report,
        "gallery_memberships",
        [delete(GalleryArtworks).where(GalleryArtworks.artwork_id == artwork_id)],  # type: ignore[arg-type]
    )
    await _run_step(
        db, report, "likes", [delete(ArtworkLikes).where(ArtworkLikes.artwork_id == artwork_id)]  # type: ignore[arg-type]
    )

    await _delete_primary(db, delete(Artworks).where(Artworks.id == artwork_id))  # type: ignore[arg-type]

    logger.info("artwork_deleted", artwork_id=artwork_id, skipped=report.skipped)
    return report


async def delete_gallery(db: AsyncSession, gallery_id: str) -> CascadeReport:
    """Delete a gallery and its membership rows. The member artworks are untouched."""
    report = CascadeReport(target="gallery", target_id=gallery_id)

    await _run_step(
        db,
        report,
        "gallery_memberships",
        [delete(GalleryArtworks).where(GalleryArtworks.gallery_id == gallery_id)],  # type: ignore[arg-type]
    )

    await _delete_primary(db, delete(Galleries).where(Galleries.id == gallery_id))  # type: ignore[arg-type]

    logger.info("gallery_deleted", gallery_id=gallery_id, skipped=report.skipped)
    return report


async def delete_user(db: AsyncSession, user_id: int) -> CascadeReport:
    """
    Delete a user and everything they own.

    Order: each owned artwork (with its own cascade), each owned gallery (with
    its own cascade), the user's comments on other artwork, the user's likes
    (decrementing the liked artworks' counters), then the user row.
    """
    report = CascadeReport(target="user", target_id=user_id)

    # Collect ids up front; a rolled back step expires loaded objects
    artwork_ids = list(
        (await db.execute(select(Artworks.id).where(Artworks.user_id == user_id))).scalars().all()  # type: ignore[call-overload,arg-type]
    )
    gallery_ids = list(
        (await db.execute(select(Galleries.id).where(Galleries.user_id == user_id))).scalars().all()  # type: ignore[call-overload,arg-type]
    )

    for artwork_id in artwork_ids:
        report.merge(await delete_artwork(db, artwork_id))
    for gallery_id in gallery_ids:
        report.merge(await delete_gallery(db, gallery_id))

    await _run_step(
        db, report, "comments", [delete(Comments).where(Comments.user_id == user_id)]  # type: ignore[arg-type]
    )

    liked = select(ArtworkLikes.artwork_id).where(ArtworkLikes.user_id == user_id)  # type: ignore[call-overload,arg-type]
    await _run_step(
        db,
        report,
        "likes",
        [
            update(Artworks)
            .where(Artworks.id.in_(liked), Artworks.like_count > 0)  # type: ignore[attr-defined,operator]
            .values(like_count=Artworks.like_count - 1)
            .execution_options(synchronize_session="fetch"),
            delete(ArtworkLikes).where(ArtworkLikes.user_id == user_id),  # type: ignore[arg-type]
        ],
    )

    await _delete_primary(db, delete(Users).where(Users.id == user_id))  # type: ignore[arg-type]

    logger.info(
        "user_deleted",
        deleted_user_id=user_id,
        artworks=len(artwork_ids),
        galleries=len(gallery_ids),
        skipped=report.skipped,
    )
    return report
