"""Test fixtures — a fresh in-memory database per test.

Pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own engine on `sqlite+aiosqlite:///:memory:` with a
   StaticPool, so every session in the test shares one connection (and
   therefore one database) that vanishes when the engine is disposed.
2. The app's get_db is overridden to hand out sessions from that engine;
   each request gets its own session, just like production.
3. Auth is NOT mocked: tests sign up and log in through the API and
   replay real session tokens.
"""

import os

os.environ.setdefault("TEAMHUB_ENVIRONMENT", "test")
os.environ.setdefault("TEAMHUB_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("TEAMHUB_BCRYPT_ROUNDS", "4")

import uuid
from types import SimpleNamespace

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from teamhub.db.engine import build_engine, get_db, init_models
from teamhub.main import app


@pytest_asyncio.fixture()
async def db_engine():
    engine = build_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture()
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """A session for poking at the store directly (outside HTTP)."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client against the app, with get_db pointed at the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}@example.com"


@pytest.fixture
def make_user(client):
    """Factory: sign up + log in, return id, email, password, token, headers.

    Cookies from the login response are dropped so each request
    authenticates only with the bearer header it's given.
    """

    async def _make(role: str = "user", name: str = "Test User", password: str = "password_123"):
        email = unique_email(role)
        r = await client.post(
            "/api/auth/signup",
            json={"email": email, "password": password, "name": name, "role": role},
        )
        assert r.status_code == 201, r.text

        r = await client.post("/api/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        client.cookies.clear()

        body = r.json()
        return SimpleNamespace(
            id=body["user"]["id"],
            email=email,
            name=name,
            role=role,
            password=password,
            token=body["token"],
            headers={"Authorization": f"Bearer {body['token']}"},
        )

    return _make


@pytest_asyncio.fixture()
async def admin(make_user):
    return await make_user(role="admin", name="Admin User")


@pytest_asyncio.fixture()
async def member(make_user):
    return await make_user(role="user", name="Member One")


@pytest_asyncio.fixture()
async def other_member(make_user):
    return await make_user(role="user", name="Member Two")
