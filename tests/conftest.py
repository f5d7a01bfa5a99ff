"""
Test fixtures for the NeuroBank API test suite.

This module provides shared fixtures used across all test files:

  - settings: Test configuration (fixed secret, in-memory database URL)
  - database / db_session: Fresh in-memory SQLite database for each test
  - advice_client: Fake language-model client with a canned answer
  - app: An application built by create_app() around the three above
  - client: Async HTTP test client (unauthenticated)
  - authenticated_client: Test client logged in as a registered user
  - second_authenticated_client: A second user, on its own client, for
    cross-user tests

Key design decisions:
  - In-memory SQLite with StaticPool: every session in a test shares the
    one connection, so they all see the same database, and each test gets
    a completely fresh one.
  - The database and advice client are injected through create_app(), the
    same path production uses, so no dependency overrides are needed.
  - authenticated_client registers through the real endpoint, exercising
    the real registration flow (not just DB inserts).
"""

import uuid

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.pool import StaticPool

from app.config import Settings
from app.database import Database
from app.main import create_app
from app.models.user import User


# In-memory SQLite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite://"


class FakeAdviceClient:
    """
    Stand-in for the language model.

    Records every prompt it receives. Returns `payload`, or raises `error`
    when a test sets one.
    """

    def __init__(self):
        self.prompts: list[str] = []
        self.payload = {
            "message": "You are doing well. Keep your spending steady.",
            "suggestedActions": ["Move 50.00 to savings", "Review dining spend"],
            "emotionalSupport": "Small steps add up.",
        }
        self.error: Exception | None = None
        self.closed = False

    async def complete_json(self, prompt: str) -> dict:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.payload

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def settings():
    return Settings(
        SECRET_KEY="test-secret-key-not-for-production",
        DATABASE_URL=TEST_DATABASE_URL,
        _env_file=None,
    )


@pytest_asyncio.fixture
async def database():
    """Create a fresh database with all tables for each test."""
    database = Database(TEST_DATABASE_URL, poolclass=StaticPool)
    await database.create_all()
    yield database
    await database.drop_all()
    await database.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    """Provide an async session for service-level tests."""
    async with database.sessionmaker() as session:
        yield session


@pytest.fixture
def advice_client():
    return FakeAdviceClient()


@pytest.fixture
def app(settings, database, advice_client):
    return create_app(settings=settings, database=database, advice_client=advice_client)


@pytest_asyncio.fixture
async def client(app):
    """Async HTTP test client, not logged in."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


async def _register(ac: AsyncClient, username: str, name: str) -> None:
    response = await ac.post(
        "/api/register",
        json={
            "username": username,
            "email": f"{username}@example.com",
            "name": name,
            "password": "SecurePass123!",
        },
    )
    assert response.status_code == 201, f"Registration failed: {response.text}"
    ac.headers["Authorization"] = f"Bearer {response.json()['token']}"


@pytest_asyncio.fixture
async def authenticated_client(app):
    """Test client logged in as a freshly registered user."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        await _register(ac, "testuser", "Test User")
        yield ac


@pytest_asyncio.fixture
async def second_authenticated_client(app):
    """
    A second logged-in user for cross-user authorization tests.

    Use alongside authenticated_client to verify that User A cannot reach
    User B's data. Each fixture has its own client, so their
    Authorization headers never overwrite each other.
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        await _register(ac, "seconduser", "Second User")
        yield ac


@pytest_asyncio.fixture
async def user(db_session):
    """A user inserted directly, for service-level tests."""
    user = User(
        username=f"svc-{uuid.uuid4().hex[:8]}",
        email=f"svc-{uuid.uuid4().hex[:8]}@example.com",
        name="Service User",
        hashed_password="not-a-real-hash",
    )
    db_session.add(user)
    await db_session.commit()
    return user
