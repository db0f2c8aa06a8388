"""Test fixtures — a fresh in-memory database per test.

Each test builds its own app through create_app() with test settings, so
there is no shared engine and no cross-test pollution. httpx's
ASGITransport does not run the lifespan, so the fixture creates the tables
itself.

bcrypt rounds are lowered to 4 to keep signup/login fast.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from nerv.config import Settings
from nerv.main import create_app


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        environment="test",
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret="test-signing-key-not-for-production",
        bcrypt_rounds=4,
    )


@pytest_asyncio.fixture()
async def app(settings):
    app = create_app(settings)
    await app.state.db.create_all()
    try:
        yield app
    finally:
        await app.state.db.dispose()


@pytest_asyncio.fixture()
async def db_session(app):
    """Session on the same database the app uses — for service-level tests."""
    async with app.state.db.session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(app):
    """HTTP client talking to the app in-process. No auth is attached."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def signup(client: AsyncClient, email: str | None = None, password: str = "secret1") -> dict:
    """Create an account through the API; returns the auth response body."""
    email = email or f"user-{uuid.uuid4().hex[:8]}@example.com"
    r = await client.post("/auth/signup", json={"email": email, "password": password})
    assert r.status_code == 201, r.text
    return r.json()


def bearer(auth: dict) -> dict:
    return {"Authorization": f"Bearer {auth['token']}"}


@pytest_asyncio.fixture()
async def alice(client):
    return await signup(client, "alice@example.com")


@pytest_asyncio.fixture()
async def bob(client):
    return await signup(client, "bob@example.com")
