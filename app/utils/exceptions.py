"""
Method errors.

Services raise these instead of HTTPException so the same code can be
called from routes, scripts and tests. `app.main` renders them as
`{"error": ..., "reason": ...}` with `status_code`.
"""

from typing import Optional


class MethodError(Exception):
    """Structured, user-presentable failure of a method call."""

    status_code = 500
    default_error = "500"

    def __init__(self, reason: str, error: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(reason)
        self.reason = reason
        self.error = error or self.default_error
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {"error": self.error, "reason": self.reason}

    def __repr__(self):
        return f"{type(self).__name__}(error={self.error!r}, reason={self.reason!r})"


class InvalidArgument(MethodError):
    """Argument has the wrong shape or type."""
    status_code = 400
    default_error = "400"


class ValidationFailed(MethodError):
    """Schema rejected field values or the discriminator is missing."""
    status_code = 400
    default_error = "400"


class Unauthorized(MethodError):
    status_code = 403
    default_error = "403"


class Conflict(MethodError):
    """Unique key already taken."""
    status_code = 400
    default_error = "400"


class NotFound(MethodError):
    status_code = 404
    default_error = "404"


class StoreFailure(MethodError):
    status_code = 500
    default_error = "500"
