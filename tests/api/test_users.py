"""
Tests for user API endpoints.

These tests cover:
- Artist directory and profile lookup
- Per-user artwork listing with filters
- Profile edits
- Preference updates (self only)
"""

import pytest
from httpx import AsyncClient


@pytest.mark.api
class TestUserLookup:
    async def test_list_users(self, client: AsyncClient):
        response = await client.get("/api/users")
        assert response.status_code == 200
        assert [u["username"] for u in response.json()] == ["testuser", "testuser2", "adminuser"]

    async def test_get_user_hides_password(self, client: AsyncClient):
        response = await client.get("/api/users/1")
        assert response.status_code == 200
        data = response.json()
        assert data["username"] == "testuser"
        assert data["showNsfw"] is True
        assert data["showAiGenerated"] is True
        assert "password" not in data

    async def test_get_missing_user(self, client: AsyncClient):
        response = await client.get("/api/users/999")
        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"


@pytest.mark.api
class TestUserArtworks:
    async def test_lists_only_that_users_artwork(self, client: AsyncClient, make_artwork):
        mine = await make_artwork(user_id=1, title="Mine")
        await make_artwork(user_id=2, title="Theirs")

        response = await client.get("/api/users/1/artworks")
        assert response.status_code == 200
        assert [a["id"] for a in response.json()] == [mine.id]

    async def test_filters_apply(self, client: AsyncClient, make_artwork):
        safe = await make_artwork(user_id=1, title="Safe")
        await make_artwork(user_id=1, title="Spicy", is_nsfw=True)

        response = await client.get("/api/users/1/artworks", params={"isNsfw": "false"})
        assert [a["id"] for a in response.json()] == [safe.id]

        response = await client.get("/api/users/1/artworks")
        assert len(response.json()) == 2

    async def test_missing_user(self, client: AsyncClient):
        response = await client.get("/api/users/999/artworks")
        assert response.status_code == 404


@pytest.mark.api
class TestProfileUpdate:
    async def test_update_own_profile(self, client: AsyncClient, auth_headers: dict):
        response = await client.patch(
            "/api/users/me",
            json={"displayName": "  Foxy  ", "bio": "I draw foxes", "bannerImage": "/uploads/b.png"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["displayName"] == "Foxy"
        assert data["bio"] == "I draw foxes"
        assert data["bannerImage"] == "/uploads/b.png"
        assert data["profileImage"] is None

    async def test_requires_auth(self, client: AsyncClient):
        response = await client.patch("/api/users/me", json={"bio": "anon"})
        assert response.status_code == 401


@pytest.mark.api
class TestPreferences:
    """Tests for PATCH /api/users/{id}/preferences."""

    async def test_update_own_preferences(self, client: AsyncClient, auth_headers: dict):
        response = await client.patch("/api/users/1/preferences", json={"showNsfw": False}, headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["showNsfw"] is False
        assert data["showAiGenerated"] is True

        response = await client.get("/api/users/1")
        assert response.json()["showNsfw"] is False

    async def test_omitted_flags_unchanged(self, client: AsyncClient, auth_headers: dict):
        await client.patch("/api/users/1/preferences", json={"showAiGenerated": False}, headers=auth_headers)
        response = await client.patch("/api/users/1/preferences", json={}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["showAiGenerated"] is False

    async def test_cannot_update_someone_else(self, client: AsyncClient, other_auth_headers: dict):
        response = await client.patch(
            "/api/users/1/preferences", json={"showNsfw": False}, headers=other_auth_headers
        )
        assert response.status_code == 403

        response = await client.get("/api/users/1")
        assert response.json()["showNsfw"] is True

    async def test_missing_user(self, client: AsyncClient, auth_headers: dict):
        response = await client.patch("/api/users/999/preferences", json={"showNsfw": False}, headers=auth_headers)
        assert response.status_code == 404

    async def test_requires_auth(self, client: AsyncClient):
        response = await client.patch("/api/users/1/preferences", json={"showNsfw": False})
        assert response.status_code == 401

    async def test_non_boolean_rejected(self, client: AsyncClient, auth_headers: dict):
        response = await client.patch(
            "/api/users/1/preferences", json={"showNsfw": "sometimes"}, headers=auth_headers
        )
        assert response.status_code == 400
