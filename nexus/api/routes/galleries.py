"""
Gallery API endpoints: CRUD and membership curation.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from nexus.core.auth import CurrentUser
from nexus.core.database import get_db
from nexus.schemas.artwork import ArtworkResponse
from nexus.schemas.gallery import GalleryArtworkResponse, GalleryCreate, GalleryResponse, GalleryUpdate
from nexus.services import gallery_store
from nexus.services.authorization import get_owned_gallery

router = APIRouter(prefix="/galleries", tags=["Galleries"])


@router.get("", response_model=list[GalleryResponse])
async def list_galleries(db: Annotated[AsyncSession, Depends(get_db)]) -> list[GalleryResponse]:
    galleries = await gallery_store.list_galleries(db)
    return [GalleryResponse.model_validate(g) for g in galleries]


@router.get("/{gallery_id}", response_model=GalleryResponse)
async def get_gallery(
    gallery_id: Annotated[str, Path(description="Gallery ID")],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> GalleryResponse:
    gallery = await gallery_store.require_gallery(db, gallery_id)
    return GalleryResponse.model_validate(gallery)


@router.post("", response_model=GalleryResponse, status_code=status.HTTP_201_CREATED)
async def create_gallery(
    body: GalleryCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> GalleryResponse:
    """Create a gallery owned by the caller."""
    assert current_user.id is not None
    gallery = await gallery_store.create_gallery(db, current_user.id, body)
    return GalleryResponse.model_validate(gallery)


@router.patch("/{gallery_id}", response_model=GalleryResponse)
async def update_gallery(
    gallery_id: Annotated[str, Path(description="Gallery ID")],
    body: GalleryUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> GalleryResponse:
    """Rename or re-describe a gallery. Owner only."""
    await get_owned_gallery(db, gallery_id, current_user)
    gallery = await gallery_store.update_gallery(db, gallery_id, body)
    return GalleryResponse.model_validate(gallery)


@router.delete("/{gallery_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_gallery(
    gallery_id: Annotated[str, Path(description="Gallery ID")],
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete a gallery and its memberships. The artworks stay. Owner only."""
    await get_owned_gallery(db, gallery_id, current_user)
    await gallery_store.delete_gallery(db, gallery_id)


@router.get("/{gallery_id}/artworks", response_model=list[ArtworkResponse])
async def list_gallery_artworks(
    gallery_id: Annotated[str, Path(description="Gallery ID")],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[ArtworkResponse]:
    """Artworks in the gallery, oldest addition first."""
    await gallery_store.require_gallery(db, gallery_id)
    artworks = await gallery_store.list_gallery_artworks(db, gallery_id)
    return [ArtworkResponse.model_validate(a) for a in artworks]


@router.post(
    "/{gallery_id}/artworks/{artwork_id}",
    response_model=GalleryArtworkResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_artwork_to_gallery(
    gallery_id: Annotated[str, Path(description="Gallery ID")],
    artwork_id: Annotated[str, Path(description="Artwork ID")],
    current_user: CurrentUser,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> GalleryArtworkResponse:
    """
    Add any user's artwork to a gallery the caller owns.

    Idempotent: returns 201 when added and 200 if it was already there.
    """
    await get_owned_gallery(db, gallery_id, current_user)
    membership, created = await gallery_store.add_artwork(db, gallery_id, artwork_id)
    if not created:
        response.status_code = status.HTTP_200_OK
    return GalleryArtworkResponse.model_validate(membership)


@router.delete("/{gallery_id}/artworks/{artwork_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_artwork_from_gallery(
    gallery_id: Annotated[str, Path(description="Gallery ID")],
    artwork_id: Annotated[str, Path(description="Artwork ID")],
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Remove an artwork from a gallery the caller owns. The artwork is not deleted."""
    await get_owned_gallery(db, gallery_id, current_user)
    await gallery_store.remove_artwork(db, gallery_id, artwork_id)
