"""
SQLModel-based Artwork models

ArtworkBase (fields supplied by the uploader)
    └─> Artworks (database table, adds identity, owner and counters)
"""

from datetime import datetime

from sqlalchemy import JSON, Column, ForeignKeyConstraint, Index, String, Text
from sqlmodel import Field, SQLModel

from nexus.utils import new_uuid, utcnow


class ArtworkBase(SQLModel):
    """
    Mutable artwork fields. A PATCH replaces all of them at once.
    """

    title: str = Field(max_length=200)
    description: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    image_url: str = Field(max_length=500)
    is_nsfw: bool = Field(default=False, index=True)
    is_ai_generated: bool = Field(default=False, index=True)


class Artworks(ArtworkBase, table=True):
    """
    Database table for artworks.

    `tags` is a JSON list of strings. `like_count` is maintained by the like
    endpoints and never drops below zero.
    """

    __tablename__ = "artworks"

    __table_args__ = (
        ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_artworks_user_id"),
        Index("fk_artworks_user_id", "user_id"),
    )

    id: str = Field(default_factory=new_uuid, sa_column=Column(String(36), primary_key=True))
    user_id: int

    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    view_count: int = Field(default=0)
    like_count: int = Field(default=0)

    created_at: datetime = Field(default_factory=utcnow)

    # Note: Relationships are intentionally omitted.
    # Joins against users, comments and galleries are written explicitly in
    # the store modules.
