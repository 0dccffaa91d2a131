"""
NoteVault Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the test suite.
How:   Unit tests use a mocked AsyncSession; API tests build a fresh app per
       test on an in-memory SQLite database and talk to it through an HTTPX
       AsyncClient with ASGITransport (no server, no network).

Fixture Overview:
    ├── test_settings:        Settings for an in-memory DB, fast bcrypt
    ├── mock_db_session:      Mock AsyncSession (unit tests)
    ├── hasher / token_service
    ├── app:                  App from create_app() with tables created
    ├── test_client:          HTTPX AsyncClient bound to `app`
    └── auth_headers / second_auth_headers: Bearer headers for alice / bob
"""

import os

# Environment for anything that reads process settings at import time
# (notevault.main builds a module-level app). Must precede notevault imports.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-signing-secret-that-is-long-enough-0123"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import timedelta
from typing import Dict
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from notevault.config import Settings
from notevault.main import create_app
from notevault.services.password_service import PasswordHasher
from notevault.services.token_service import TokenService

TEST_SECRET = "test-signing-secret-that-is-long-enough-0123"


@pytest.fixture
def test_settings() -> Settings:
    """In-memory SQLite and the minimum bcrypt cost so tests stay fast."""
    return Settings(
        database_url="sqlite+aiosqlite://",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        log_level="WARNING",
        cors_origins="http://localhost:3000",
    )


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
        result = await note_service.get_note(mock_db_session, identity, note_id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(secret=TEST_SECRET, expires_in=timedelta(hours=1))


@pytest_asyncio.fixture
async def app(test_settings):
    """A fresh application with its own empty in-memory database."""
    application = create_app(test_settings)
    await application.state.database.create_all()
    yield application
    await application.state.database.dispose()


@pytest_asyncio.fixture
async def test_client(app):
    """
    Async HTTP client routed straight into `app`.

    Usage:
        async def test_root(test_client):
            response = await test_client.get("/")
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def user_data() -> Dict[str, str]:
    return {"username": "alice", "email": "alice@x.com", "password": "pw1"}


@pytest.fixture
def second_user_data() -> Dict[str, str]:
    return {"username": "bob", "email": "bob@x.com", "password": "pw2"}


async def register_and_login(client: AsyncClient, username: str, email: str, password: str) -> str:
    """Register a user and return a bearer token for them."""
    r1 = await client.post(
        "/register", json={"username": username, "email": email, "password": password}
    )
    assert r1.status_code == 201, r1.text

    r2 = await client.post("/login", json={"email": email, "password": password})
    assert r2.status_code == 200, r2.text
    return r2.json()["token"]


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def auth_headers(test_client, user_data):
    token = await register_and_login(test_client, **user_data)
    return bearer(token)


@pytest_asyncio.fixture
async def second_auth_headers(test_client, second_user_data):
    token = await register_and_login(test_client, **second_user_data)
    return bearer(token)
