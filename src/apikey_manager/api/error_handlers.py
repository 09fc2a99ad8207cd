"""Error handlers — global exception handlers for the key API.

Invariants:
    - AppError → {"error": message} with the error's own status code
    - RequestValidationError → 400 (never 422), same body shape
    - 401 responses carry WWW-Authenticate: Bearer
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from apikey_manager.errors import AppError, AuthenticationError

logger = structlog.get_logger()


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "api.error",
            error_type=type(exc).__name__,
            status_code=exc.status_code,
            path=request.url.path,
            message=exc.message,
        )
        headers = None
        if isinstance(exc, AuthenticationError):
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code, content=exc.to_response(), headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        message = _summarize(exc)
        logger.warning("api.validation_error", path=request.url.path, message=message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"error": message},
        )


def _summarize(exc: RequestValidationError) -> str:
    """Collapse pydantic's error list into one readable line."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request body"
