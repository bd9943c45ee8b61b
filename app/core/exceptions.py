# app/core/exceptions.py
from __future__ import annotations

"""
Creator Studio — Application Exceptions
=======================================
A small, consistent layer on top of FastAPI/Starlette's `HTTPException` that
lets us attach structured metadata and integrate cleanly with the result
envelope rendered by `app.core.exception_handlers` and the service boundary
(`app.services.creator.boundary`).

Key ideas
---------
- One base `AppException` that carries a string `code`, `message`, `details`.
- The pipeline taxonomy (authentication, not-found, validation, quota,
  state conflict, publish, suspension, store) inherits from it with a fixed
  HTTP status each.
- `to_error()` renders the `error` member of the `{success, data, error}`
  envelope.

Usage
-----
    raise QuotaExceededError("Daily upload limit reached (4 uploads per day)")

    raise StateConflictError("Submission is not pending", details={"status": "approved"})
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

__all__ = [
    "AppException",
    "AuthenticationError",
    "NotFoundError",
    "ValidationError",
    "QuotaExceededError",
    "StateConflictError",
    "PublishError",
    "SuspensionError",
    "StoreError",
    "ForbiddenError",
]


# ──────────────────────────────────────────────────────────────
# 📦 Core: AppException
# ──────────────────────────────────────────────────────────────
class AppException(HTTPException):
    """Base application-level exception with optional metadata.

    Attributes
    -----------
    status_code : int
        HTTP status code used when the error reaches the HTTP layer.
    message : str
        Human-readable error message (serialized as `detail` as well).
    code : str
        Stable, machine-readable error name (e.g. ``"QuotaExceededError"``).
    details : dict | list | str | None
        Machine-readable details (e.g., validation errors, constraints, ids).
    headers : dict | None
        Optional headers (e.g., `{"WWW-Authenticate": "Bearer"}`).
    """

    default_status: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        message = message or self.default_message
        status_code = status_code or self.default_status
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.code: str = code or type(self).__name__
        self.message: str = message
        self.details: Optional[Any] = details

    # ── [Helper] Envelope body used by handlers and the service boundary ────
    def to_error(self) -> Dict[str, Any]:
        """Return the `error` member of the result envelope."""
        body: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body

    def __str__(self) -> str:  # pragma: no cover - used in log lines only
        return f"{self.code}: {self.message}"


# ──────────────────────────────────────────────────────────────
# 🧭 Pipeline taxonomy
# ──────────────────────────────────────────────────────────────
class AuthenticationError(AppException):
    """Caller could not be identified."""

    default_status = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"

    def __init__(self, message: Optional[str] = None, **kwargs: Any) -> None:
        kwargs.setdefault("headers", {"WWW-Authenticate": "Bearer"})
        super().__init__(message, **kwargs)


class NotFoundError(AppException):
    """Referenced request, submission, profile or user is absent."""

    default_status = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ValidationError(AppException):
    """Field constraints unmet."""

    default_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Validation failed"


class QuotaExceededError(AppException):
    """Daily upload or storage cap would be exceeded."""

    default_status = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Daily quota exceeded"


class StateConflictError(AppException):
    """Entity is not in the state the operation expects (e.g. double approve)."""

    default_status = status.HTTP_409_CONFLICT
    default_message = "Conflicting state"


class PublishError(AppException):
    """Slug/title dedup exhausted or a catalog insert failed."""

    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to publish submission"


class SuspensionError(AppException):
    """Creator is not active."""

    default_status = status.HTTP_403_FORBIDDEN
    default_message = "Your creator account is suspended"


class StoreError(AppException):
    """Unexpected persistence failure; the whole operation is void."""

    default_status = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Storage temporarily unavailable"


class ForbiddenError(AppException):
    """Caller is authenticated but lacks the required role."""

    default_status = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions"
