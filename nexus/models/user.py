"""
SQLModel-based User models with inheritance for security

UserBase (public profile fields)
    └─> Users (database table, adds credentials and moderation flags)

API schemas live in nexus/schemas/user.py and never include the password hash.
"""

from datetime import datetime

from sqlalchemy import Column, String, Text
from sqlmodel import Field, SQLModel

from nexus.utils import utcnow


class UserBase(SQLModel):
    """
    Public profile fields shared by the table and the API schemas.
    """

    username: str = Field(sa_column=Column(String(30), unique=True, nullable=False, index=True))
    display_name: str | None = Field(default=None, max_length=100)
    bio: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    profile_image: str | None = Field(default=None, max_length=500)
    banner_image: str | None = Field(default=None, max_length=500)

    # Content preferences (server-side defaults for the client resolver)
    show_nsfw: bool = Field(default=True)
    show_ai_generated: bool = Field(default=True)


class Users(UserBase, table=True):
    """
    Database table for users.

    Internal fields (should NOT be exposed via public API):
    - password: bcrypt hash
    """

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    password: str = Field(max_length=255)

    is_admin: bool = Field(default=False)
    is_banned: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utcnow)
