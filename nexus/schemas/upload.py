"""
Pydantic schemas for the upload endpoint
"""

from nexus.schemas.base import ApiModel


class UploadResponse(ApiModel):
    """Where the stored file can be fetched from."""

    url: str
    filename: str
