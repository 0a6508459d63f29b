"""
Pydantic schemas for User endpoints
"""

from pydantic import Field, field_validator

from nexus.schemas.base import ApiModel, UTCDatetime


class UserResponse(ApiModel):
    """Schema for user response - never includes the password hash"""

    id: int
    username: str
    display_name: str | None = None
    bio: str | None = None
    profile_image: str | None = None
    banner_image: str | None = None
    is_admin: bool
    is_banned: bool
    show_nsfw: bool
    show_ai_generated: bool
    created_at: UTCDatetime


class UserSummary(ApiModel):
    """
    Minimal user information for embedding in comment responses.
    """

    id: int
    username: str
    display_name: str | None = None
    profile_image: str | None = None


class ProfileUpdate(ApiModel):
    """Schema for updating your own profile - all fields optional"""

    display_name: str | None = Field(default=None, max_length=100)
    bio: str | None = None
    profile_image: str | None = Field(default=None, max_length=500)
    banner_image: str | None = Field(default=None, max_length=500)

    @field_validator("display_name", "bio")
    @classmethod
    def sanitize_text_fields(cls, v: str | None) -> str | None:
        """Just trims whitespace."""
        if v is None:
            return v
        return v.strip()


class PreferencesUpdate(ApiModel):
    """Body of PATCH /users/{id}/preferences; omitted flags are left unchanged."""

    show_nsfw: bool | None = None
    show_ai_generated: bool | None = None


class AdminUserUpdate(ApiModel):
    is_admin: bool | None = None
    is_banned: bool | None = None
