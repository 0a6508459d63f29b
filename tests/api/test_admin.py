"""
Tests for admin endpoints.

These tests cover /api/admin/users: listing, ban/admin toggles and deletion
with cascade.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from nexus.models.artwork import Artworks
from nexus.models.comment import Comments
from nexus.models.gallery import Galleries, GalleryArtworks
from nexus.models.like import ArtworkLikes


@pytest.mark.api
class TestAdminAccess:
    @pytest.mark.parametrize(
        ("method", "url"),
        [
            ("GET", "/api/admin/users"),
            ("PATCH", "/api/admin/users/2"),
            ("DELETE", "/api/admin/users/2"),
        ],
    )
    async def test_non_admin_forbidden(self, client: AsyncClient, auth_headers: dict, method: str, url: str):
        response = await client.request(method, url, json={"isBanned": True} if method == "PATCH" else None,
                                        headers=auth_headers)
        assert response.status_code == 403

    async def test_anonymous_unauthenticated(self, client: AsyncClient):
        response = await client.get("/api/admin/users")
        assert response.status_code == 401

    async def test_admin_lists_users(self, client: AsyncClient, admin_headers: dict):
        response = await client.get("/api/admin/users", headers=admin_headers)
        assert response.status_code == 200
        assert len(response.json()) == 3


@pytest.mark.api
class TestAdminUpdateUser:
    async def test_ban_user_blocks_actions(
        self, client: AsyncClient, admin_headers: dict, other_auth_headers: dict, sample_artwork_data: dict
    ):
        response = await client.patch("/api/admin/users/2", json={"isBanned": True}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["isBanned"] is True

        response = await client.post("/api/artworks", json=sample_artwork_data, headers=other_auth_headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "Account is banned"

    async def test_unban_restores_access(self, client: AsyncClient, admin_headers: dict, other_auth_headers: dict):
        await client.patch("/api/admin/users/2", json={"isBanned": True}, headers=admin_headers)
        await client.patch("/api/admin/users/2", json={"isBanned": False}, headers=admin_headers)

        response = await client.get("/api/auth/me", headers=other_auth_headers)
        assert response.status_code == 200

    async def test_grant_admin(self, client: AsyncClient, admin_headers: dict, auth_headers: dict):
        response = await client.patch("/api/admin/users/1", json={"isAdmin": True}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["isAdmin"] is True

        response = await client.get("/api/admin/users", headers=auth_headers)
        assert response.status_code == 200

    async def test_admin_cannot_ban_self(self, client: AsyncClient, admin_headers: dict):
        response = await client.patch("/api/admin/users/3", json={"isBanned": True}, headers=admin_headers)
        assert response.status_code == 400

    async def test_update_missing_user(self, client: AsyncClient, admin_headers: dict):
        response = await client.patch("/api/admin/users/999", json={"isBanned": True}, headers=admin_headers)
        assert response.status_code == 404


@pytest.mark.api
class TestAdminDeleteUser:
    async def test_delete_user_cascades(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        admin_headers: dict,
        auth_headers: dict,
        other_auth_headers: dict,
        make_artwork,
        make_gallery,
    ):
        # User 2 owns an artwork and a gallery, comments on and likes user 1's artwork
        theirs = await make_artwork(user_id=2, title="Theirs")
        mine = await make_artwork(user_id=1, title="Mine")
        their_gallery = await make_gallery(user_id=2, name="Their gallery")
        my_gallery = await make_gallery(user_id=1, name="My gallery")
        theirs_id, mine_id, my_gallery_id = theirs.id, mine.id, my_gallery.id

        await client.post(f"/api/galleries/{their_gallery.id}/artworks/{mine_id}", headers=other_auth_headers)
        await client.post(f"/api/galleries/{my_gallery_id}/artworks/{theirs_id}", headers=auth_headers)
        await client.post(f"/api/artworks/{mine_id}/comments", json={"content": "nice"}, headers=other_auth_headers)
        await client.post(f"/api/artworks/{mine_id}/likes", headers=other_auth_headers)

        response = await client.delete("/api/admin/users/2", headers=admin_headers)
        assert response.status_code == 204

        assert (await client.get("/api/users/2")).status_code == 404
        assert (await client.get(f"/api/artworks/{theirs_id}")).status_code == 404

        # User 1's artwork survives with the like and comment removed
        response = await client.get(f"/api/artworks/{mine_id}")
        assert response.status_code == 200
        assert response.json()["likeCount"] == 0
        assert (await client.get(f"/api/artworks/{mine_id}/comments")).json() == []

        # User 1's gallery no longer lists the deleted artwork
        response = await client.get(f"/api/galleries/{my_gallery_id}/artworks")
        assert response.json() == []

        for model in (Comments, ArtworkLikes, GalleryArtworks):
            assert await db_session.scalar(select(func.count()).select_from(model)) == 0
        assert await db_session.scalar(select(func.count()).select_from(Galleries)) == 1
        assert await db_session.scalar(select(func.count()).select_from(Artworks)) == 1

    async def test_admin_cannot_delete_self(self, client: AsyncClient, admin_headers: dict):
        response = await client.delete("/api/admin/users/3", headers=admin_headers)
        assert response.status_code == 400

    async def test_delete_missing_user(self, client: AsyncClient, admin_headers: dict):
        response = await client.delete("/api/admin/users/999", headers=admin_headers)
        assert response.status_code == 404
