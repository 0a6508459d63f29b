"""
Dependencies shared by several routers.
"""

from typing import Annotated

from fastapi import Depends, Query

from nexus.services.content_filter import ContentFilter


def content_filter_params(
    is_nsfw: Annotated[bool | None, Query(alias="isNsfw", description="Include NSFW artwork")] = None,
    is_ai_generated: Annotated[
        bool | None, Query(alias="isAiGenerated", description="Only AI-generated (true) or only human-made (false)")
    ] = None,
) -> ContentFilter | None:
    """Browse filter from the query string; None when no filter parameter is given."""
    return ContentFilter.from_query(is_nsfw, is_ai_generated)


ContentFilterParams = Annotated[ContentFilter | None, Depends(content_filter_params)]
