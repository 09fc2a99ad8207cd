"""Health check endpoint.

Learn: Liveness probe for load balancers. It reports the database
readiness flag kept by the Database holder and never runs a query,
so a struggling database is not hammered by probes.
"""

import time

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from apikey_manager import __version__
from apikey_manager.db.engine import database

router = APIRouter()

_started_at = time.monotonic()


@router.get("/health")
async def health_check():
    """Report server status and database connectivity."""
    body = {
        "version": __version__,
        "uptime_seconds": round(time.monotonic() - _started_at, 1),
    }
    if not database.ready:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "SERVICE_UNAVAILABLE", "database": "disconnected", **body},
        )
    return {"status": "OK", "database": "connected", **body}
