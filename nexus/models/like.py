"""
Artwork likes.

One row per (user, artwork). Artworks.like_count mirrors the number of rows.
"""

from datetime import datetime

from sqlalchemy import Column, ForeignKeyConstraint, Index, String
from sqlmodel import Field, SQLModel

from nexus.utils import utcnow


class ArtworkLikes(SQLModel, table=True):
    __tablename__ = "artwork_likes"

    __table_args__ = (
        ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_artwork_likes_user_id"),
        ForeignKeyConstraint(["artwork_id"], ["artworks.id"], name="fk_artwork_likes_artwork_id"),
        Index("fk_artwork_likes_artwork_id", "artwork_id"),
    )

    # Composite primary key (user_id, artwork_id)
    user_id: int = Field(primary_key=True)
    artwork_id: str = Field(sa_column=Column(String(36), primary_key=True))
    created_at: datetime = Field(default_factory=utcnow)
