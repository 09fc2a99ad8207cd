"""FastAPI auth dependencies.

Learn: get_current_user is used as Depends() on every protected route.
It is a plain `def`, so FastAPI runs it in the threadpool: the first
verification may fetch Google's keys over the network, and that must not
block the event loop.

Whatever goes wrong during verification, the caller only ever sees
"Invalid token". The detailed reason goes to the log.
"""

from functools import lru_cache
from typing import Optional

import structlog
from fastapi import Depends, Header

from apikey_manager.auth.google import GoogleTokenVerifier, TokenError
from apikey_manager.config import get_settings
from apikey_manager.errors import AuthenticationError

logger = structlog.get_logger()

BEARER_PREFIX = "Bearer "


class CurrentIdentity:
    """The verified caller. user_id is the owner key for all records."""

    def __init__(self, user_id: str):
        self.user_id = user_id


@lru_cache
def get_token_verifier() -> GoogleTokenVerifier:
    settings = get_settings()
    return GoogleTokenVerifier(
        client_id=settings.google_client_id,
        certs_url=settings.google_certs_url,
    )


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Pull the token out of an Authorization header or raise 401."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthenticationError("No token provided")
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthenticationError("No token provided")
    return token


def get_current_user(
    authorization: Optional[str] = Header(None),
    verifier: GoogleTokenVerifier = Depends(get_token_verifier),
) -> CurrentIdentity:
    """Resolve the caller from the bearer token (required — 401 otherwise)."""
    token = extract_bearer_token(authorization)
    try:
        payload = verifier.verify(token)
    except TokenError as e:
        logger.info("auth.token_rejected", reason=str(e))
        raise AuthenticationError("Invalid token")

    return CurrentIdentity(user_id=payload["sub"])
