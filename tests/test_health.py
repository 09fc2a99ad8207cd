"""Health endpoint tests."""

from types import SimpleNamespace

import pytest
from sqlalchemy import text

from apikey_manager.db.engine import database


@pytest.mark.asyncio
async def test_health_returns_ok(client):
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "OK"
    assert data["database"] == "connected"
    assert "version" in data


@pytest.mark.asyncio
async def test_health_reports_lost_connection(client, db):
    """The readiness flag is read as-is; no query is attempted."""
    db.connected = False

    resp = await client.get("/api/health")
    assert resp.status_code == 503
    data = resp.json()
    assert data["status"] == "SERVICE_UNAVAILABLE"
    assert data["database"] == "disconnected"


@pytest.mark.asyncio
async def test_health_without_database(bare_client):
    assert not database.ready

    resp = await bare_client.get("/api/health")
    assert resp.status_code == 503
    assert resp.json()["status"] == "SERVICE_UNAVAILABLE"


@pytest.mark.asyncio
async def test_health_follows_driver_disconnects(client, db):
    """A driver-reported disconnect flips health to 503; a new pool
    connection flips it back."""
    sync_engine = db.engine.sync_engine
    assert (await client.get("/api/health")).status_code == 200

    # Ordinary errors leave the flag alone
    sync_engine.dialect.dispatch.handle_error(SimpleNamespace(is_disconnect=False))
    assert (await client.get("/api/health")).status_code == 200

    sync_engine.dialect.dispatch.handle_error(SimpleNamespace(is_disconnect=True))
    assert not db.ready
    assert (await client.get("/api/health")).status_code == 503

    # Drop the pooled connection so the next checkout opens a fresh one
    await db.engine.dispose()
    async with db.engine.connect() as conn:
        await conn.execute(text("SELECT 1"))

    assert db.ready
    assert (await client.get("/api/health")).status_code == 200
