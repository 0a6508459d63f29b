"""
File upload endpoint.
"""

from fastapi import APIRouter, File, UploadFile, status

from nexus.core.auth import CurrentUser
from nexus.schemas.upload import UploadResponse
from nexus.services.upload import save_upload

router = APIRouter(tags=["Upload"])


@router.post("/upload", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    current_user: CurrentUser,
    file: UploadFile = File(..., description="Image file (jpg, png, gif, webp)"),
) -> UploadResponse:
    """
    Store an image and return the URL it is served from.

    The URL is what goes into an artwork's imageUrl or a profile/banner image.
    """
    filename, url = await save_upload(file)
    return UploadResponse(url=url, filename=filename)
