"""
Async client library for the Furrys Nexus API.

Does not load server settings; safe to import without a configured database.
"""

from nexus.client.api import ApiError, NexusClient
from nexus.client.preferences import (
    ContentPreferenceResolver,
    ContentPreferences,
    FilePreferenceCache,
    MemoryPreferenceCache,
    PreferenceCache,
)
from nexus.client.query_cache import QueryCache

__all__ = [
    "ApiError",
    "ContentPreferenceResolver",
    "ContentPreferences",
    "FilePreferenceCache",
    "MemoryPreferenceCache",
    "NexusClient",
    "PreferenceCache",
    "QueryCache",
]
