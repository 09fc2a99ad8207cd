"""Error hierarchy for the key API.

Invariants:
    - Every error carries the HTTP status it maps to
    - Messages are safe to return to the caller as {"error": message}
    - "Does not exist" and "not yours" share one error, so responses never
      reveal whether another user owns a given key id
"""


class AppError(Exception):
    """Base exception for all API Key Manager errors."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_response(self) -> dict:
        return {"error": self.message}


class AuthenticationError(AppError):
    """Missing, malformed, or rejected bearer credential."""

    status_code = 401


class ValidationError(AppError):
    """Request body is malformed or not allowed."""

    status_code = 400


class NotFoundOrUnauthorized(AppError):
    """No record matches both the key id and the caller."""

    status_code = 404

    def __init__(self, message: str = "Key not found or user not authorized"):
        super().__init__(message)


class StoreError(AppError):
    """Persistence failure. 500 on reads, 400 on writes."""

    @classmethod
    def on_read(cls, message: str) -> "StoreError":
        return cls(message, status_code=500)

    @classmethod
    def on_write(cls, message: str) -> "StoreError":
        return cls(message, status_code=400)


class StoreUnavailable(AppError):
    """The database was never initialized for this process."""

    status_code = 503

    def __init__(self, message: str = "Database is not available"):
        super().__init__(message)
