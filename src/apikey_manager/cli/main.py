"""API Key Manager CLI — run the server and prepare the database.

Usage:
    apikey-manager serve                  # Validate config, start uvicorn
    apikey-manager serve --port 8080      # Override PORT
    apikey-manager init-db                # Create the keys table (local dev)
"""

from __future__ import annotations

import asyncio
import sys
from typing import Optional

import click
import structlog
from pydantic import ValidationError

from apikey_manager import __version__
from apikey_manager.config import Settings, get_settings

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_settings() -> Settings:
    """Load settings or exit(1) with the missing/invalid variables listed."""
    try:
        return get_settings()
    except ValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]).upper() for err in e.errors()]
        logger.critical("config.invalid", variables=missing)
        click.secho(
            f"FATAL: invalid or missing configuration: {', '.join(missing)}",
            fg="red",
            err=True,
        )
        sys.exit(1)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="apikey-manager")
def main():
    """API Key Manager backend."""


@main.command()
@click.option("--host", default=None, help="Bind address (default: HOST or 0.0.0.0)")
@click.option("--port", "-p", type=int, default=None, help="Port (default: PORT or 3001)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Start the HTTP server."""
    settings = _load_settings()

    import uvicorn

    uvicorn.run(
        "apikey_manager.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command("init-db")
def init_db():
    """Create the keys table if it does not exist.

    Production databases are managed with Alembic; this is for local
    development against SQLite or a scratch Postgres.
    """
    settings = _load_settings()
    asyncio.run(_init_db_impl(settings))
    click.secho("keys table ready", fg="green")


async def _init_db_impl(settings: Settings):
    from apikey_manager.db.engine import database, engine_options
    from apikey_manager.db.models import Base

    await database.connect(settings.database_url, **engine_options(settings))
    try:
        async with database.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await database.disconnect()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
