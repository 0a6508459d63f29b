"""
Pydantic schemas for Gallery endpoints
"""

from pydantic import Field, field_validator

from nexus.schemas.base import ApiModel, UTCDatetime


def _strip_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name cannot be blank")
    return v


class GalleryCreate(ApiModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_name(v)


class GalleryUpdate(ApiModel):
    """Partial update; omitted fields keep their value."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return _strip_name(v) if v is not None else None


class GalleryResponse(ApiModel):
    id: str
    user_id: int
    name: str
    description: str | None = None
    is_featured: bool
    created_at: UTCDatetime


class GalleryArtworkResponse(ApiModel):
    """A membership row."""

    gallery_id: str
    artwork_id: str
    added_at: UTCDatetime
