"""Tests for the content preference resolver and its caches."""

import json
from pathlib import Path

import httpx
import pytest

from nexus.client import (
    ApiError,
    ContentPreferenceResolver,
    ContentPreferences,
    FilePreferenceCache,
    MemoryPreferenceCache,
    NexusClient,
)
from nexus.services.content_filter import ContentFilter

USER = {"id": 7, "username": "fox", "showNsfw": False, "showAiGenerated": True}


def _client(status_code: int = 200, requests: list[httpx.Request] | None = None) -> NexusClient:
    """Client whose PATCH requests answer with `status_code`."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        if request.method == "PATCH" and status_code >= 400:
            return httpx.Response(status_code, json={"detail": "Internal Server Error"})
        if request.method == "PATCH":
            return httpx.Response(200, json={**USER, **json.loads(request.content)})
        return httpx.Response(200, json=USER)

    return NexusClient("http://test", transport=httpx.MockTransport(handler))


class TestContentPreferences:
    @pytest.mark.parametrize(
        ("show_nsfw", "show_ai_generated", "expected"),
        [
            (True, True, ContentFilter(is_nsfw=True, is_ai_generated=None)),
            (False, True, ContentFilter(is_nsfw=False, is_ai_generated=None)),
            (True, False, ContentFilter(is_nsfw=True, is_ai_generated=False)),
            (False, False, ContentFilter(is_nsfw=False, is_ai_generated=False)),
        ],
    )
    def test_to_filter(self, show_nsfw: bool, show_ai_generated: bool, expected: ContentFilter):
        preferences = ContentPreferences(show_nsfw=show_nsfw, show_ai_generated=show_ai_generated)
        assert preferences.to_filter() == expected

    def test_defaults_show_everything(self):
        assert ContentPreferences() == ContentPreferences(show_nsfw=True, show_ai_generated=True)


class TestFilePreferenceCache:
    def test_round_trip(self, tmp_path: Path):
        cache = FilePreferenceCache(tmp_path)
        cache.save(7, ContentPreferences(show_nsfw=False))

        assert (tmp_path / "user_prefs_7.json").exists()
        assert cache.load(7) == ContentPreferences(show_nsfw=False)

    def test_missing_file(self, tmp_path: Path):
        assert FilePreferenceCache(tmp_path).load(7) is None

    def test_malformed_file_is_a_miss(self, tmp_path: Path):
        (tmp_path / "user_prefs_7.json").write_text("{not json", encoding="utf-8")
        assert FilePreferenceCache(tmp_path).load(7) is None

    def test_users_are_separate(self, tmp_path: Path):
        cache = FilePreferenceCache(tmp_path)
        cache.save(7, ContentPreferences(show_nsfw=False))
        assert cache.load(8) is None


class TestLoad:
    def test_adopts_server_value_and_caches_it(self):
        cache = MemoryPreferenceCache()
        resolver = ContentPreferenceResolver(_client(), cache)

        preferences = resolver.load(USER)

        assert preferences == ContentPreferences(show_nsfw=False, show_ai_generated=True)
        assert resolver.user_id == 7
        assert cache.load(7) == preferences

    def test_cached_value_wins(self):
        cache = MemoryPreferenceCache()
        cache.save(7, ContentPreferences(show_nsfw=True, show_ai_generated=False))
        resolver = ContentPreferenceResolver(_client(), cache)

        preferences = resolver.load(USER)

        assert preferences == ContentPreferences(show_nsfw=True, show_ai_generated=False)
        assert resolver.browse_filter() == ContentFilter(is_nsfw=True, is_ai_generated=False)

    async def test_sync_uses_me(self):
        requests: list[httpx.Request] = []
        resolver = ContentPreferenceResolver(_client(requests=requests), MemoryPreferenceCache())

        await resolver.sync()

        assert requests[0].url.path == "/api/auth/me"
        assert resolver.preferences.show_nsfw is False


class TestUpdate:
    async def test_update_success(self):
        requests: list[httpx.Request] = []
        cache = MemoryPreferenceCache()
        resolver = ContentPreferenceResolver(_client(requests=requests), cache)
        resolver.load(USER)

        updated = await resolver.update(show_nsfw=True)

        assert updated == ContentPreferences(show_nsfw=True, show_ai_generated=True)
        assert resolver.preferences == updated
        assert cache.load(7) == updated
        assert requests[-1].method == "PATCH"
        assert requests[-1].url.path == "/api/users/7/preferences"
        assert json.loads(requests[-1].content) == {"showNsfw": True}

    async def test_rollback_on_server_error(self):
        cache = MemoryPreferenceCache()
        resolver = ContentPreferenceResolver(_client(status_code=500), cache)
        resolver.load(USER)
        original = resolver.preferences

        seen: list[ContentPreferences] = []
        resolver.subscribe(seen.append)

        with pytest.raises(ApiError) as exc_info:
            await resolver.update(show_nsfw=True)

        assert exc_info.value.status_code == 500
        assert resolver.preferences == original
        assert cache.load(7) == original
        # Optimistic value first, then the rollback
        assert [p.show_nsfw for p in seen] == [True, False]

    async def test_update_without_user(self):
        resolver = ContentPreferenceResolver(_client(), MemoryPreferenceCache())
        with pytest.raises(RuntimeError):
            await resolver.update(show_nsfw=False)

    async def test_unsubscribe(self):
        resolver = ContentPreferenceResolver(_client(), MemoryPreferenceCache())
        seen: list[ContentPreferences] = []
        unsubscribe = resolver.subscribe(seen.append)
        unsubscribe()

        resolver.load(USER)
        assert seen == []
