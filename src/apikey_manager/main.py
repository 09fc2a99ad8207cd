"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan opens the one database pool at startup and closes it
at shutdown. Middleware, CORS, error handlers, and routers are all
registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apikey_manager import __version__
from apikey_manager.api import api_router
from apikey_manager.api.error_handlers import register_error_handlers
from apikey_manager.config import get_settings
from apikey_manager.db.engine import database, engine_options
from apikey_manager.middleware.request_id import RequestIdMiddleware
from apikey_manager.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: If the database cannot be reached at startup the exception
    propagates out of the lifespan, uvicorn aborts, and the process never
    accepts traffic.
    """
    settings = get_settings()
    logger.info(
        "apikey_manager.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    try:
        await database.connect(settings.database_url, **engine_options(settings))
    except Exception as e:
        logger.critical("apikey_manager.db_connect_failed", error=str(e))
        raise

    yield

    logger.info("apikey_manager.shutdown")
    await database.disconnect()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title="API Key Manager",
        description="Per-user storage for API keys, scoped by Google account",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RequestId → Security → handler
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    register_error_handlers(app)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: apikey_manager.main:app)
app = create_app()
