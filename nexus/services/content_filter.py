"""
Content filter composition for artwork listings.

Turns the optional `isNsfw` / `isAiGenerated` browse parameters into SQL
conditions. The two flags behave differently:

- is_nsfw is a permit gate. False hides NSFW artwork; True adds no condition,
  so safe artwork is still listed alongside NSFW artwork.
- is_ai_generated is an exact match when given. True lists only AI-generated
  artwork, False only human-made artwork, None leaves the column alone.

A missing filter (None) means "no filters": every artwork is returned.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Select, select
from sqlalchemy.sql.elements import ColumnElement

from nexus.models.artwork import Artworks


class ContentFilter(BaseModel):
    """Immutable browse filter."""

    model_config = ConfigDict(frozen=True)

    is_nsfw: bool = False
    is_ai_generated: bool | None = None

    @classmethod
    def from_query(cls, is_nsfw: bool | None, is_ai_generated: bool | None) -> "ContentFilter | None":
        """
        Build a filter from optional query parameters.

        Returns None when neither parameter was supplied. When at least one is
        present, an absent isNsfw defaults to False (hide NSFW).
        """
        if is_nsfw is None and is_ai_generated is None:
            return None
        return cls(is_nsfw=bool(is_nsfw), is_ai_generated=is_ai_generated)


def visibility_conditions(filters: ContentFilter | None) -> tuple[ColumnElement[bool], ...]:
    """Conditions to AND together for the given filter."""
    if filters is None:
        return ()

    conditions: list[ColumnElement[bool]] = []
    if not filters.is_nsfw:
        conditions.append(Artworks.is_nsfw == False)  # type: ignore[arg-type]  # noqa: E712
    if filters.is_ai_generated is not None:
        conditions.append(Artworks.is_ai_generated == filters.is_ai_generated)  # type: ignore[arg-type]
    return tuple(conditions)


def artwork_query(filters: ContentFilter | None, user_id: int | None = None) -> Select[Any]:
    """
    Finished SELECT over artworks for a listing.

    Args:
        filters: Browse filter, or None for everything
        user_id: Restrict to one artist's artwork
    """
    conditions = list(visibility_conditions(filters))
    if user_id is not None:
        conditions.append(Artworks.user_id == user_id)  # type: ignore[arg-type]

    query = select(Artworks)
    if conditions:
        query = query.where(*conditions)
    return query


def to_query_params(filters: ContentFilter | None) -> dict[str, str]:
    """Inverse of from_query: the query string that reproduces `filters`."""
    if filters is None:
        return {}
    params = {"isNsfw": "true" if filters.is_nsfw else "false"}
    if filters.is_ai_generated is not None:
        params["isAiGenerated"] = "true" if filters.is_ai_generated else "false"
    return params
