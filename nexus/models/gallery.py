"""
SQLModel-based Gallery models

A gallery is a named, ordered collection of artworks owned by one user. The
artworks themselves may belong to anyone; membership rows live in
gallery_artworks with a composite primary key so a pair can appear only once.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKeyConstraint, Index, String, Text
from sqlalchemy.dialects.mysql import DATETIME
from sqlmodel import Field, SQLModel

from nexus.utils import new_uuid, utcnow


class GalleryBase(SQLModel):
    name: str = Field(max_length=100)
    description: str | None = Field(default=None, sa_column=Column(Text, nullable=True))


class Galleries(GalleryBase, table=True):
    __tablename__ = "galleries"

    __table_args__ = (
        ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_galleries_user_id"),
        Index("fk_galleries_user_id", "user_id"),
    )

    id: str = Field(default_factory=new_uuid, sa_column=Column(String(36), primary_key=True))
    user_id: int
    is_featured: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow)


class GalleryArtworks(SQLModel, table=True):
    """
    Membership of an artwork in a gallery.

    `added_at` drives the display order of a gallery's artworks.
    """

    __tablename__ = "gallery_artworks"

    __table_args__ = (
        ForeignKeyConstraint(["gallery_id"], ["galleries.id"], name="fk_gallery_artworks_gallery_id"),
        ForeignKeyConstraint(["artwork_id"], ["artworks.id"], name="fk_gallery_artworks_artwork_id"),
        Index("fk_gallery_artworks_artwork_id", "artwork_id"),
    )

    gallery_id: str = Field(sa_column=Column(String(36), primary_key=True))
    artwork_id: str = Field(sa_column=Column(String(36), primary_key=True))
    # Microseconds on MariaDB, where DATETIME defaults to whole seconds
    added_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime().with_variant(DATETIME(fsp=6), "mysql", "mariadb"), nullable=False),
    )
