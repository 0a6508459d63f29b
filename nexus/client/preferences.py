"""
Content preference resolver.

A user's NSFW / AI-generated visibility preference lives in three layers:

1. the in-memory value the UI reads,
2. a durable per-user cache on the client (keyed by user id),
3. the authoritative value on the server's user record.

On load the cached value wins over the server's; with no cached value the
server's is adopted and written to the cache. Updates are optimistic: memory
and cache change first, then the server is told. If the server call fails,
memory and cache are rolled back and the error is re-raised.

The cache is not reconciled with the server afterwards, so a change made on
another device is not picked up while a cached value exists.
"""

import json
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Protocol

import structlog
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from nexus.client.api import NexusClient
from nexus.services.content_filter import ContentFilter

logger = structlog.get_logger(__name__)


class ContentPreferences(BaseModel):
    """What a user wants to see while browsing."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    show_nsfw: bool = True
    show_ai_generated: bool = True

    def to_filter(self) -> ContentFilter:
        """
        Browse filter for these preferences.

        Showing NSFW opens the permit gate; hiding AI-generated work asks for
        human-made work only.
        """
        return ContentFilter(
            is_nsfw=self.show_nsfw,
            is_ai_generated=None if self.show_ai_generated else False,
        )


class PreferenceCache(Protocol):
    def load(self, user_id: int) -> ContentPreferences | None: ...

    def save(self, user_id: int, preferences: ContentPreferences) -> None: ...


def cache_key(user_id: int) -> str:
    return f"user_prefs_{user_id}"


class MemoryPreferenceCache:
    """Process-local cache, for tests and embedding."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}

    def load(self, user_id: int) -> ContentPreferences | None:
        raw = self._store.get(cache_key(user_id))
        return ContentPreferences.model_validate_json(raw) if raw is not None else None

    def save(self, user_id: int, preferences: ContentPreferences) -> None:
        self._store[cache_key(user_id)] = preferences.model_dump_json(by_alias=True)


class FilePreferenceCache:
    """
    One JSON file per user: <directory>/user_prefs_<id>.json.

    An unreadable or malformed file counts as no cached value.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, user_id: int) -> Path:
        return self.directory / f"{cache_key(user_id)}.json"

    def load(self, user_id: int) -> ContentPreferences | None:
        path = self._path(user_id)
        if not path.exists():
            return None
        try:
            return ContentPreferences.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, PydanticValidationError) as e:
            logger.warning("preference_cache_unreadable", path=str(path), error=str(e))
            return None

    def save(self, user_id: int, preferences: ContentPreferences) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(user_id).write_text(
            json.dumps(preferences.model_dump(by_alias=True)),
            encoding="utf-8",
        )


PreferenceListener = Callable[[ContentPreferences], None]


class ContentPreferenceResolver:
    """Keeps the in-memory, cached and server copies of one user's preferences in step."""

    def __init__(self, client: NexusClient, cache: PreferenceCache) -> None:
        self._client = client
        self._cache = cache
        self._user_id: int | None = None
        self._preferences = ContentPreferences()
        self._listeners: list[PreferenceListener] = []

    @property
    def user_id(self) -> int | None:
        return self._user_id

    @property
    def preferences(self) -> ContentPreferences:
        return self._preferences

    def browse_filter(self) -> ContentFilter:
        return self._preferences.to_filter()

    def subscribe(self, listener: PreferenceListener) -> Callable[[], None]:
        """Call `listener` with the new value on every change, rollbacks included."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def load(self, user: Mapping[str, Any]) -> ContentPreferences:
        """
        Adopt preferences for a freshly loaded user record (camelCase API shape).

        A cached value for this user id takes precedence over the record's.
        """
        user_id = int(user["id"])
        cached = self._cache.load(user_id)
        if cached is not None:
            preferences = cached
            source = "cache"
        else:
            preferences = ContentPreferences(
                show_nsfw=user.get("showNsfw", True),
                show_ai_generated=user.get("showAiGenerated", True),
            )
            self._cache.save(user_id, preferences)
            source = "server"

        self._user_id = user_id
        self._set(preferences)
        logger.debug("preferences_loaded", user_id=user_id, source=source)
        return preferences

    async def sync(self) -> ContentPreferences:
        """Fetch the logged-in user and load their preferences."""
        return self.load(await self._client.me())

    async def update(
        self,
        show_nsfw: bool | None = None,
        show_ai_generated: bool | None = None,
    ) -> ContentPreferences:
        """
        Change preferences optimistically.

        Raises:
            RuntimeError: no user has been loaded
            ApiError / httpx.HTTPError: the server rejected or never got the change;
                the previous value has been restored
        """
        if self._user_id is None:
            raise RuntimeError("No user loaded")
        user_id = self._user_id

        changes: dict[str, bool] = {}
        if show_nsfw is not None:
            changes["show_nsfw"] = show_nsfw
        if show_ai_generated is not None:
            changes["show_ai_generated"] = show_ai_generated

        previous = self._preferences
        updated = previous.model_copy(update=changes)

        self._set(updated)
        self._cache.save(user_id, updated)

        try:
            await self._client.update_preferences(
                user_id, show_nsfw=show_nsfw, show_ai_generated=show_ai_generated
            )
        except Exception as e:
            self._set(previous)
            self._cache.save(user_id, previous)
            logger.warning("preferences_update_rolled_back", user_id=user_id, error=str(e))
            raise

        return updated

    def _set(self, preferences: ContentPreferences) -> None:
        self._preferences = preferences
        for listener in list(self._listeners):
            listener(preferences)
