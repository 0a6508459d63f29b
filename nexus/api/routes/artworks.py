"""
Artwork API endpoints: browse, CRUD, comments and likes.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from nexus.api.dependencies import ContentFilterParams
from nexus.core.auth import CurrentUser
from nexus.core.database import get_db
from nexus.schemas.artwork import ArtworkCreate, ArtworkResponse, ArtworkUpdate, LikeResponse
from nexus.schemas.comment import CommentCreate, CommentResponse
from nexus.services import artwork_store, comment_store
from nexus.services.authorization import get_owned_artwork

router = APIRouter(prefix="/artworks", tags=["Artworks"])


@router.get("", response_model=list[ArtworkResponse])
async def list_artworks(
    filters: ContentFilterParams,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[ArtworkResponse]:
    """
    List artworks.

    - no parameters: every artwork
    - isNsfw=false (or omitted alongside isAiGenerated): NSFW artwork hidden
    - isNsfw=true: NSFW artwork allowed, safe artwork still listed
    - isAiGenerated=true|false: exact match on the AI-generated flag
    """
    artworks = await artwork_store.list_artworks(db, filters)
    return [ArtworkResponse.model_validate(a) for a in artworks]


@router.get("/{artwork_id}", response_model=ArtworkResponse)
async def get_artwork(
    artwork_id: Annotated[str, Path(description="Artwork ID")],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ArtworkResponse:
    artwork = await artwork_store.require_artwork(db, artwork_id)
    return ArtworkResponse.model_validate(artwork)


@router.post("", response_model=ArtworkResponse, status_code=status.HTTP_201_CREATED)
async def create_artwork(
    body: ArtworkCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ArtworkResponse:
    """Create an artwork owned by the caller, whatever userId the body claims."""
    assert current_user.id is not None
    artwork = await artwork_store.create_artwork(db, current_user.id, body)
    return ArtworkResponse.model_validate(artwork)


@router.patch("/{artwork_id}", response_model=ArtworkResponse)
async def update_artwork(
    artwork_id: Annotated[str, Path(description="Artwork ID")],
    body: ArtworkUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ArtworkResponse:
    """Replace all mutable fields. Owner only."""
    await get_owned_artwork(db, artwork_id, current_user)
    artwork = await artwork_store.update_artwork(db, artwork_id, body)
    return ArtworkResponse.model_validate(artwork)


@router.delete("/{artwork_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_artwork(
    artwork_id: Annotated[str, Path(description="Artwork ID")],
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete an artwork with its comments, gallery memberships and likes. Owner only."""
    await get_owned_artwork(db, artwork_id, current_user)
    await artwork_store.delete_artwork(db, artwork_id)


@router.get("/{artwork_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    artwork_id: Annotated[str, Path(description="Artwork ID")],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[CommentResponse]:
    """Comments on an artwork, newest first."""
    comments = await comment_store.list_artwork_comments(db, artwork_id)
    return await comment_store.with_authors(db, comments)


@router.post(
    "/{artwork_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    artwork_id: Annotated[str, Path(description="Artwork ID")],
    body: CommentCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CommentResponse:
    assert current_user.id is not None
    comment = await comment_store.create_comment(db, artwork_id, current_user.id, body.content)
    [response] = await comment_store.with_authors(db, [comment])
    return response


@router.post("/{artwork_id}/likes", response_model=LikeResponse, status_code=status.HTTP_201_CREATED)
async def like_artwork(
    artwork_id: Annotated[str, Path(description="Artwork ID")],
    current_user: CurrentUser,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> LikeResponse:
    """
    Like an artwork.

    Idempotent: returns 201 for a new like and 200 if the caller already liked it.
    """
    assert current_user.id is not None
    artwork, created = await artwork_store.like_artwork(db, artwork_id, current_user.id)
    if not created:
        response.status_code = status.HTTP_200_OK
    return LikeResponse(artwork_id=artwork.id, liked=True, like_count=artwork.like_count)


@router.delete("/{artwork_id}/likes", response_model=LikeResponse)
async def unlike_artwork(
    artwork_id: Annotated[str, Path(description="Artwork ID")],
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> LikeResponse:
    """Remove the caller's like. 404 if there was none."""
    assert current_user.id is not None
    artwork = await artwork_store.unlike_artwork(db, artwork_id, current_user.id)
    return LikeResponse(artwork_id=artwork.id, liked=False, like_count=artwork.like_count)
