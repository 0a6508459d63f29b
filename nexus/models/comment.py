"""
SQLModel-based Comment models

CommentBase (text supplied by the author)
    └─> Comments (database table, adds author, artwork and timestamp)
"""

from datetime import datetime

from sqlalchemy import Column, ForeignKeyConstraint, Index, String, Text
from sqlmodel import Field, SQLModel

from nexus.utils import utcnow


class CommentBase(SQLModel):
    content: str = Field(sa_column=Column(Text, nullable=False))


class Comments(CommentBase, table=True):
    __tablename__ = "comments"

    __table_args__ = (
        ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_comments_user_id"),
        ForeignKeyConstraint(["artwork_id"], ["artworks.id"], name="fk_comments_artwork_id"),
        Index("idx_comments_artwork_created", "artwork_id", "created_at"),
    )

    id: int | None = Field(default=None, primary_key=True)
    user_id: int
    artwork_id: str = Field(sa_column=Column(String(36), nullable=False))
    created_at: datetime = Field(default_factory=utcnow)
