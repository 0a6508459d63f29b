"""
Tests for artwork comment endpoints.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from nexus.models.comment import Comments
from nexus.utils import utcnow


@pytest.mark.api
class TestCreateComment:
    async def test_create_comment(self, client: AsyncClient, auth_headers: dict, test_artwork):
        response = await client.post(
            f"/api/artworks/{test_artwork.id}/comments",
            json={"content": "  Love the colours  ", "userId": 2},
            headers=auth_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["content"] == "Love the colours"
        assert data["userId"] == 1
        assert data["artworkId"] == test_artwork.id
        assert data["user"]["username"] == "testuser"

    async def test_requires_auth(self, client: AsyncClient, test_artwork):
        response = await client.post(f"/api/artworks/{test_artwork.id}/comments", json={"content": "Hi"})
        assert response.status_code == 401

    async def test_missing_artwork(self, client: AsyncClient, auth_headers: dict):
        response = await client.post("/api/artworks/missing/comments", json={"content": "Hi"}, headers=auth_headers)
        assert response.status_code == 404

    @pytest.mark.parametrize("content", ["", "   ", "x" * 2001])
    async def test_invalid_content(self, client: AsyncClient, auth_headers: dict, test_artwork, content: str):
        response = await client.post(
            f"/api/artworks/{test_artwork.id}/comments", json={"content": content}, headers=auth_headers
        )
        assert response.status_code == 400


@pytest.mark.api
class TestListComments:
    async def test_newest_first(self, client: AsyncClient, db_session: AsyncSession, test_artwork):
        now = utcnow()
        for offset, text in [(3, "oldest"), (1, "newest"), (2, "middle")]:
            db_session.add(
                Comments(
                    artwork_id=test_artwork.id,
                    user_id=2,
                    content=text,
                    created_at=now - timedelta(minutes=offset),
                )
            )
        await db_session.commit()

        response = await client.get(f"/api/artworks/{test_artwork.id}/comments")
        assert response.status_code == 200
        assert [c["content"] for c in response.json()] == ["newest", "middle", "oldest"]

    async def test_same_timestamp_newest_id_first(self, client: AsyncClient, db_session: AsyncSession, test_artwork):
        now = utcnow()
        for text in ["first", "second"]:
            db_session.add(Comments(artwork_id=test_artwork.id, user_id=1, content=text, created_at=now))
            await db_session.commit()

        response = await client.get(f"/api/artworks/{test_artwork.id}/comments")
        assert [c["content"] for c in response.json()] == ["second", "first"]

    async def test_embeds_author(self, client: AsyncClient, auth_headers: dict, test_artwork):
        await client.post(f"/api/artworks/{test_artwork.id}/comments", json={"content": "Hi"}, headers=auth_headers)
        response = await client.get(f"/api/artworks/{test_artwork.id}/comments")
        [comment] = response.json()
        assert comment["user"] == {"id": 1, "username": "testuser", "displayName": "Test User", "profileImage": None}

    async def test_only_that_artworks_comments(self, client: AsyncClient, auth_headers: dict, make_artwork):
        first = await make_artwork(title="First")
        second = await make_artwork(title="Second")
        await client.post(f"/api/artworks/{first.id}/comments", json={"content": "on first"}, headers=auth_headers)

        response = await client.get(f"/api/artworks/{second.id}/comments")
        assert response.json() == []

    async def test_missing_artwork(self, client: AsyncClient):
        response = await client.get("/api/artworks/missing/comments")
        assert response.status_code == 404
