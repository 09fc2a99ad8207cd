"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. Router-level dependencies run before the
endpoint's own parameters, so a request without a valid token is
rejected before a database session is ever opened. Health is open.
"""

from fastapi import APIRouter, Depends

from apikey_manager.api.health import router as health_router
from apikey_manager.api.keys import router as keys_router
from apikey_manager.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api")

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])

# Protected routes — require a valid Google ID token
api_router.include_router(keys_router, tags=["keys"], dependencies=_auth)
