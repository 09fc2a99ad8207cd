"""Application configuration via environment variables.

Uses pydantic-settings to load config from plain env vars (GOOGLE_CLIENT_ID,
DATABASE_URL, PORT, ...) so existing deployments keep working unchanged.
An optional .env file is read for local development.

Learn: Required fields have no default. If either is missing (or empty),
Settings() raises a ValidationError, and the CLI turns that into exit(1)
before the server ever binds a port.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

GOOGLE_CERTS_URL = "https://www.googleapis.com/oauth2/v3/certs"


class Settings(BaseSettings):
    """All app configuration. Set via env vars."""

    # Identity provider
    google_client_id: str = Field(..., min_length=1)
    google_certs_url: str = GOOGLE_CERTS_URL

    # Database (SQLAlchemy async URL)
    database_url: str = Field(..., min_length=1)
    db_pool_size: int = 5
    db_max_overflow: int = 10

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3001

    # CORS — the web client may be served from any origin
    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Build the settings once per process."""
    return Settings()
