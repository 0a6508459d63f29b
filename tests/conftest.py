"""
Pytest configuration and shared fixtures.

Tests run against a fresh in-memory SQLite database per test function. The
environment is prepared before the application is imported, because
nexus.config reads it at import time.
"""

import os
import tempfile
from collections.abc import AsyncGenerator, Generator

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production-use-0123456789")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="nexus-test-uploads-"))
os.environ.setdefault("ENVIRONMENT", "development")

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

import nexus.models  # noqa: E402, F401
from nexus.core.database import get_db  # noqa: E402
from nexus.core.security import create_access_token, get_password_hash  # noqa: E402
from nexus.main import app as main_app  # noqa: E402
from nexus.models.artwork import Artworks  # noqa: E402
from nexus.models.gallery import Galleries  # noqa: E402
from nexus.models.user import Users  # noqa: E402

TEST_PASSWORD = "password123"
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Create an in-memory database engine for each test function.

    StaticPool keeps a single connection, so every session sees the same
    in-memory database.
    """
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture(scope="function")
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a new database session for each test.

    Creates test users 1 and 2 (regular) and 3 (admin), all with password
    TEST_PASSWORD.
    """
    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        session.add(Users(id=1, username="testuser", password=TEST_PASSWORD_HASH, display_name="Test User"))
        session.add(Users(id=2, username="testuser2", password=TEST_PASSWORD_HASH, display_name="Test User 2"))
        session.add(
            Users(id=3, username="adminuser", password=TEST_PASSWORD_HASH, display_name="Admin", is_admin=True)
        )
        await session.commit()

        yield session

        await session.rollback()


@pytest.fixture(scope="function")
def app(db_session: AsyncSession) -> Generator[FastAPI, None, None]:
    """
    FastAPI app with the database dependency pointed at the test session.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    main_app.dependency_overrides[get_db] = override_get_db

    yield main_app

    main_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for testing API endpoints.

    Usage:
        async def test_endpoint(client):
            response = await client.get("/api/artworks")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# =============================================================================
# Auth Fixtures
# =============================================================================


def bearer(user_id: int) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Headers authenticating as user 1."""
    return bearer(1)


@pytest.fixture
def other_auth_headers() -> dict[str, str]:
    """Headers authenticating as user 2."""
    return bearer(2)


@pytest.fixture
def admin_headers() -> dict[str, str]:
    """Headers authenticating as user 3 (admin)."""
    return bearer(3)


# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
def sample_artwork_data() -> dict:
    """Request body for creating an artwork."""
    return {
        "title": "Neon Fox",
        "description": "A fox under city lights",
        "imageUrl": "https://x/1.png",
        "isNsfw": False,
        "isAiGenerated": True,
        "tags": ["fox", "neon"],
    }


@pytest.fixture
def make_artwork(db_session: AsyncSession):
    """
    Factory inserting an artwork directly, bypassing the API.

    Usage:
        async def test_listing(make_artwork):
            artwork = await make_artwork(title="Night Sky", is_nsfw=True)
    """

    async def _make(
        user_id: int = 1,
        title: str = "Artwork",
        is_nsfw: bool = False,
        is_ai_generated: bool = False,
        **extra,
    ) -> Artworks:
        artwork = Artworks(
            user_id=user_id,
            title=title,
            image_url=f"/uploads/{title.lower().replace(' ', '-')}.png",
            is_nsfw=is_nsfw,
            is_ai_generated=is_ai_generated,
            **extra,
        )
        db_session.add(artwork)
        await db_session.commit()
        await db_session.refresh(artwork)
        return artwork

    return _make


@pytest.fixture
def make_gallery(db_session: AsyncSession):
    """Factory inserting a gallery directly."""

    async def _make(user_id: int = 1, name: str = "Gallery") -> Galleries:
        gallery = Galleries(user_id=user_id, name=name)
        db_session.add(gallery)
        await db_session.commit()
        await db_session.refresh(gallery)
        return gallery

    return _make


@pytest.fixture
async def test_artwork(make_artwork) -> Artworks:
    """A safe, human-made artwork owned by user 1."""
    return await make_artwork(title="Test Artwork", tags=["test"])


@pytest.fixture
async def test_gallery(make_gallery) -> Galleries:
    """An empty gallery owned by user 1."""
    return await make_gallery(name="Favorites")
