"""
Async HTTP client for the Furrys Nexus API.

Every non-2xx response raises ApiError; nothing is retried. GET results are
read through a QueryCache, and each successful mutation invalidates the cache
keys whose results it may have changed.
"""

from collections.abc import Hashable, Mapping
from typing import Any

import httpx
import structlog

from nexus.client.query_cache import QueryCache, QueryKey
from nexus.services.content_filter import ContentFilter, to_query_params

logger = structlog.get_logger(__name__)


class ApiError(Exception):
    """A request completed with a non-2xx status."""

    def __init__(self, status_code: int, text: str) -> None:
        self.status_code = status_code
        self.text = text
        super().__init__(f"{status_code}: {text}")


def _params_key(params: Mapping[str, str]) -> tuple[Hashable, ...]:
    return tuple(sorted(params.items()))


class NexusClient:
    """
    Thin async wrapper over the REST API.

    Usage:
        async with NexusClient("http://localhost:5000") as client:
            await client.login("fox", "password123")
            artworks = await client.list_artworks(ContentFilter(is_nsfw=False))
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        *,
        cache: QueryCache | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        token: str | None = None,
        timeout: float = 10.0,
        api_prefix: str = "/api",
    ) -> None:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, headers=headers, timeout=timeout)
        self._prefix = api_prefix.rstrip("/")
        self.cache = cache if cache is not None else QueryCache()

    async def __aenter__(self) -> "NexusClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def set_token(self, token: str | None) -> None:
        if token:
            self._http.headers["Authorization"] = f"Bearer {token}"
        else:
            self._http.headers.pop("Authorization", None)

    # -- plumbing ---------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Mapping[str, str] | None = None,
        files: Any = None,
    ) -> Any:
        response = await self._http.request(method, self._prefix + path, json=json, params=params, files=files)
        if not response.is_success:
            logger.warning("api_request_failed", method=method, path=path, status=response.status_code)
            raise ApiError(response.status_code, response.text or response.reason_phrase)
        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None
        return response.json()

    async def _get(self, key: QueryKey, path: str, params: Mapping[str, str] | None = None) -> Any:
        async def load() -> Any:
            return await self._request("GET", path, params=params)

        return await self.cache.fetch(key, load)

    def _invalidate(self, *keys: QueryKey) -> None:
        for key in keys:
            self.cache.invalidate(key)

    # -- auth -------------------------------------------------------------

    async def register(self, username: str, password: str, display_name: str | None = None) -> dict[str, Any]:
        body = {"username": username, "password": password}
        if display_name is not None:
            body["displayName"] = display_name
        user = await self._request("POST", "/auth/register", json=body)
        self._invalidate(("users",))
        return user

    async def login(self, username: str, password: str) -> dict[str, Any]:
        """Log in and send the returned token on every later request."""
        data = await self._request("POST", "/auth/login", json={"username": username, "password": password})
        self.set_token(data["accessToken"])
        return data["user"]

    async def logout(self) -> None:
        await self._request("POST", "/auth/logout")
        self.set_token(None)
        self.cache.clear()

    async def me(self) -> dict[str, Any]:
        # Not cached: depends on the token, not just the URL
        return await self._request("GET", "/auth/me")

    # -- artworks ---------------------------------------------------------

    async def list_artworks(self, filters: ContentFilter | None = None) -> list[dict[str, Any]]:
        params = to_query_params(filters)
        return await self._get(("artworks", "list", _params_key(params)), "/artworks", params)

    async def get_artwork(self, artwork_id: str) -> dict[str, Any]:
        return await self._get(("artworks", artwork_id), f"/artworks/{artwork_id}")

    async def create_artwork(self, data: Mapping[str, Any]) -> dict[str, Any]:
        artwork = await self._request("POST", "/artworks", json=dict(data))
        self._invalidate(("artworks", "list"), ("users", artwork["userId"], "artworks"))
        return artwork

    async def update_artwork(self, artwork_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        artwork = await self._request("PATCH", f"/artworks/{artwork_id}", json=dict(data))
        self._invalidate(
            ("artworks", "list"),
            ("artworks", artwork_id),
            ("users", artwork["userId"], "artworks"),
            ("galleries",),
        )
        return artwork

    async def delete_artwork(self, artwork_id: str) -> None:
        await self._request("DELETE", f"/artworks/{artwork_id}")
        self._invalidate(("artworks",), ("users",), ("galleries",))

    async def list_comments(self, artwork_id: str) -> list[dict[str, Any]]:
        return await self._get(("artworks", artwork_id, "comments"), f"/artworks/{artwork_id}/comments")

    async def add_comment(self, artwork_id: str, content: str) -> dict[str, Any]:
        comment = await self._request("POST", f"/artworks/{artwork_id}/comments", json={"content": content})
        self._invalidate(("artworks", artwork_id, "comments"))
        return comment

    async def like_artwork(self, artwork_id: str) -> dict[str, Any]:
        result = await self._request("POST", f"/artworks/{artwork_id}/likes")
        self._invalidate(("artworks",), ("users",), ("galleries",))
        return result

    async def unlike_artwork(self, artwork_id: str) -> dict[str, Any]:
        result = await self._request("DELETE", f"/artworks/{artwork_id}/likes")
        self._invalidate(("artworks",), ("users",), ("galleries",))
        return result

    async def upload(self, filename: str, content: bytes, content_type: str) -> dict[str, Any]:
        """Upload an image; returns {"url", "filename"}."""
        return await self._request("POST", "/upload", files={"file": (filename, content, content_type)})

    # -- users ------------------------------------------------------------

    async def list_users(self) -> list[dict[str, Any]]:
        return await self._get(("users", "list"), "/users")

    async def get_user(self, user_id: int) -> dict[str, Any]:
        return await self._get(("users", user_id), f"/users/{user_id}")

    async def list_user_artworks(self, user_id: int, filters: ContentFilter | None = None) -> list[dict[str, Any]]:
        params = to_query_params(filters)
        return await self._get(
            ("users", user_id, "artworks", _params_key(params)), f"/users/{user_id}/artworks", params
        )

    async def list_user_galleries(self, user_id: int) -> list[dict[str, Any]]:
        return await self._get(("users", user_id, "galleries"), f"/users/{user_id}/galleries")

    async def update_profile(self, data: Mapping[str, Any]) -> dict[str, Any]:
        user = await self._request("PATCH", "/users/me", json=dict(data))
        self._invalidate(("users", user["id"]), ("users", "list"))
        return user

    async def update_preferences(
        self,
        user_id: int,
        *,
        show_nsfw: bool | None = None,
        show_ai_generated: bool | None = None,
    ) -> dict[str, Any]:
        body: dict[str, bool] = {}
        if show_nsfw is not None:
            body["showNsfw"] = show_nsfw
        if show_ai_generated is not None:
            body["showAiGenerated"] = show_ai_generated
        user = await self._request("PATCH", f"/users/{user_id}/preferences", json=body)
        self._invalidate(("users", user_id), ("users", "list"))
        return user

    # -- galleries --------------------------------------------------------

    async def list_galleries(self) -> list[dict[str, Any]]:
        return await self._get(("galleries", "list"), "/galleries")

    async def get_gallery(self, gallery_id: str) -> dict[str, Any]:
        return await self._get(("galleries", gallery_id), f"/galleries/{gallery_id}")

    async def list_gallery_artworks(self, gallery_id: str) -> list[dict[str, Any]]:
        return await self._get(("galleries", gallery_id, "artworks"), f"/galleries/{gallery_id}/artworks")

    async def create_gallery(self, name: str, description: str | None = None) -> dict[str, Any]:
        gallery = await self._request("POST", "/galleries", json={"name": name, "description": description})
        self._invalidate(("galleries", "list"), ("users", gallery["userId"], "galleries"))
        return gallery

    async def update_gallery(self, gallery_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        gallery = await self._request("PATCH", f"/galleries/{gallery_id}", json=dict(data))
        self._invalidate(
            ("galleries", "list"),
            ("galleries", gallery_id),
            ("users", gallery["userId"], "galleries"),
        )
        return gallery

    async def delete_gallery(self, gallery_id: str) -> None:
        await self._request("DELETE", f"/galleries/{gallery_id}")
        self._invalidate(("galleries",), ("users",))

    async def add_to_gallery(self, gallery_id: str, artwork_id: str) -> dict[str, Any]:
        membership = await self._request("POST", f"/galleries/{gallery_id}/artworks/{artwork_id}")
        self._invalidate(("galleries", gallery_id, "artworks"))
        return membership

    async def remove_from_gallery(self, gallery_id: str, artwork_id: str) -> None:
        await self._request("DELETE", f"/galleries/{gallery_id}/artworks/{artwork_id}")
        self._invalidate(("galleries", gallery_id, "artworks"))
