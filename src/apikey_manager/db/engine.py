"""Async SQLAlchemy engine and session factory.

Learn: One engine (one connection pool) per process, opened in the FastAPI
lifespan and reused by every request. Unlike a bare module-level engine,
the Database holder tracks readiness explicitly:

- connect() fails loudly if the first round-trip fails, so the server
  refuses to start instead of serving errors.
- A disconnect reported by the driver clears the `connected` flag and a
  fresh pool connection sets it again. The health probe reads the flag
  without issuing a query.
"""

from collections.abc import AsyncIterator

import structlog
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from apikey_manager.errors import StoreUnavailable

logger = structlog.get_logger()


class Database:
    """Process-wide database state: engine, session factory, readiness."""

    def __init__(self) -> None:
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None
        self.connected = False

    @property
    def ready(self) -> bool:
        return self.engine is not None and self.connected

    async def connect(self, url: str, **engine_kwargs) -> None:
        """Create the engine and prove it works with SELECT 1.

        Raises whatever the driver raises; callers treat that as fatal.
        """
        engine = create_async_engine(url, **engine_kwargs)
        self._watch(engine)
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception:
            await engine.dispose()
            raise

        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self.connected = True
        logger.info("db.connected", dialect=engine.dialect.name)

    async def disconnect(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("db.disconnected")
        self.engine = None
        self.session_factory = None
        self.connected = False

    def _watch(self, engine: AsyncEngine) -> None:
        sync_engine = engine.sync_engine

        @event.listens_for(sync_engine, "handle_error")
        def _on_error(context):
            if context.is_disconnect and self.connected:
                self.connected = False
                logger.warning("db.connection_lost")

        @event.listens_for(sync_engine.pool, "connect")
        def _on_connect(dbapi_connection, connection_record):
            if self.engine is not None and not self.connected:
                self.connected = True
                logger.info("db.connection_restored")


# Singleton — initialized by the app lifespan
database = Database()


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency — yields a session per request, auto-closes."""
    if database.session_factory is None:
        raise StoreUnavailable()
    async with database.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


def engine_options(settings) -> dict:
    """Engine kwargs for the configured URL.

    SQLite (local dev, tests) has no real pool to size.
    """
    options = {"echo": settings.debug}
    if not settings.database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,
        )
    return options
