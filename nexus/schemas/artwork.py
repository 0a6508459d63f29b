"""
Pydantic schemas for Artwork endpoints
"""

from pydantic import Field, field_validator

from nexus.config import ArtworkLimits
from nexus.schemas.base import ApiModel, UTCDatetime


class ArtworkCreate(ApiModel):
    """
    Schema for creating an artwork.

    Any userId in the body is ignored; the owner is always the caller.
    """

    title: str = Field(min_length=1, max_length=ArtworkLimits.TITLE_MAX_LENGTH)
    description: str | None = None
    image_url: str = Field(min_length=1, max_length=500)
    is_nsfw: bool = False
    is_ai_generated: bool = False
    tags: list[str] = Field(default_factory=list, max_length=ArtworkLimits.MAX_TAGS)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be blank")
        return v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        """Trim each tag; empty or overlong tags are rejected."""
        cleaned = []
        for tag in v:
            tag = tag.strip()
            if not tag:
                raise ValueError("Tags cannot be blank")
            if len(tag) > ArtworkLimits.TAG_MAX_LENGTH:
                raise ValueError(f"Tags must be at most {ArtworkLimits.TAG_MAX_LENGTH} characters")
            cleaned.append(tag)
        return cleaned


class ArtworkUpdate(ArtworkCreate):
    """
    Schema for PATCH /artworks/{id}.

    Full replace: every mutable field must be sent. An omitted flag is a 400,
    never a silent reset to the creation default.
    """

    description: str | None
    is_nsfw: bool
    is_ai_generated: bool
    tags: list[str] = Field(max_length=ArtworkLimits.MAX_TAGS)


class ArtworkResponse(ApiModel):
    id: str
    user_id: int
    title: str
    description: str | None = None
    image_url: str
    is_nsfw: bool
    is_ai_generated: bool
    tags: list[str]
    view_count: int
    like_count: int
    created_at: UTCDatetime


class LikeResponse(ApiModel):
    """Like state of an artwork for the caller."""

    artwork_id: str
    liked: bool
    like_count: int
