"""
Comment persistence.
"""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nexus.core.logging import get_logger
from nexus.models.comment import Comments
from nexus.models.user import Users
from nexus.schemas.comment import CommentResponse
from nexus.schemas.user import UserSummary
from nexus.services.artwork_store import require_artwork

logger = get_logger(__name__)


async def create_comment(db: AsyncSession, artwork_id: str, user_id: int, content: str) -> Comments:
    """
    Attach a comment to an artwork.

    Raises:
        NotFoundError: artwork does not exist
    """
    await require_artwork(db, artwork_id)

    comment = Comments(artwork_id=artwork_id, user_id=user_id, content=content)
    db.add(comment)
    await db.commit()
    await db.refresh(comment)

    logger.info("comment_created", comment_id=comment.id, artwork_id=artwork_id)
    return comment


async def list_artwork_comments(db: AsyncSession, artwork_id: str) -> Sequence[Comments]:
    """
    Comments on an artwork, newest first.

    Raises:
        NotFoundError: artwork does not exist
    """
    await require_artwork(db, artwork_id)

    result = await db.execute(
        select(Comments)
        .where(Comments.artwork_id == artwork_id)  # type: ignore[arg-type]
        .order_by(Comments.created_at.desc(), Comments.id.desc())  # type: ignore[attr-defined,union-attr]
    )
    return result.scalars().all()


async def with_authors(db: AsyncSession, comments: Sequence[Comments]) -> list[CommentResponse]:
    """
    Build responses with the author embedded, using one query for all authors.
    """
    user_ids = {c.user_id for c in comments}
    authors: dict[int, Users] = {}
    if user_ids:
        result = await db.execute(select(Users).where(Users.id.in_(user_ids)))  # type: ignore[union-attr]
        authors = {u.id: u for u in result.scalars().all()}  # type: ignore[misc]

    responses = []
    for comment in comments:
        response = CommentResponse.model_validate(comment)
        author = authors.get(comment.user_id)
        if author is not None:
            response.user = UserSummary.model_validate(author)
        responses.append(response)
    return responses
