"""
Database models.

Importing this package registers every table on SQLModel.metadata, which is
what boot-time table creation and the test fixtures rely on.
"""

from nexus.models.artwork import Artworks
from nexus.models.comment import Comments
from nexus.models.gallery import Galleries, GalleryArtworks
from nexus.models.like import ArtworkLikes
from nexus.models.user import Users

__all__ = [
    "ArtworkLikes",
    "Artworks",
    "Comments",
    "Galleries",
    "GalleryArtworks",
    "Users",
]
