"""
Pydantic schemas for Comment endpoints
"""

from pydantic import Field, field_validator

from nexus.config import CommentLimits
from nexus.schemas.base import ApiModel, UTCDatetime
from nexus.schemas.user import UserSummary


class CommentCreate(ApiModel):
    """Schema for creating a new comment. Artwork and author come from the URL and session."""

    content: str = Field(min_length=1, max_length=CommentLimits.CONTENT_MAX_LENGTH)

    @field_validator("content")
    @classmethod
    def sanitize_content(cls, v: str) -> str:
        """Trim whitespace; a comment of only whitespace is rejected."""
        v = v.strip()
        if not v:
            raise ValueError("Comment cannot be blank")
        return v


class CommentResponse(ApiModel):
    id: int
    artwork_id: str
    user_id: int
    content: str
    created_at: UTCDatetime
    user: UserSummary | None = None  # Embedded author to avoid a lookup per comment
