"""Test fixtures — a fresh in-memory database per test and fake identities.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test connects the real Database holder to a brand-new in-memory
   SQLite engine (StaticPool keeps the single connection alive) and
   creates the schema from the ORM models.
2. The token verifier dependency is replaced with a static token→subject
   map. The real get_current_user still runs, so header parsing and the
   401 paths are exercised on every request.
3. After the test the engine is disposed and the data is gone.
"""

import os

# Required settings must exist before the app module is imported
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client.apps.googleusercontent.com")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from apikey_manager.auth.dependencies import get_token_verifier
from apikey_manager.auth.google import TokenError
from apikey_manager.db.engine import database
from apikey_manager.db.models import Base
from apikey_manager.main import app

TEST_DB_URL = "sqlite+aiosqlite://"

ALICE = "alice-google-sub-1001"
BOB = "bob-google-sub-2002"

TOKENS = {
    "alice-token": ALICE,
    "bob-token": BOB,
}


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class StaticTokenVerifier:
    """Stands in for GoogleTokenVerifier: known tokens map to fixed subjects."""

    def __init__(self):
        self.calls = 0

    def verify(self, token: str) -> dict:
        self.calls += 1
        try:
            return {"sub": TOKENS[token], "iss": "accounts.google.com"}
        except KeyError:
            raise TokenError("unknown test token")


@pytest_asyncio.fixture()
async def db():
    """Connect the app's Database holder to a fresh in-memory SQLite."""
    await database.connect(TEST_DB_URL, poolclass=StaticPool)
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield database
    finally:
        await database.disconnect()


@pytest.fixture()
def verifier():
    return StaticTokenVerifier()


@pytest_asyncio.fixture()
async def bare_client(verifier):
    """HTTP client with fake identities but NO database connected."""
    app.dependency_overrides[get_token_verifier] = lambda: verifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(db, bare_client):
    """HTTP client with fake identities and a live database."""
    yield bare_client
