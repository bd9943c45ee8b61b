from __future__ import annotations

"""
Result-envelope exception handlers.

FastAPI integrates these via app/main.py. Every error that escapes a route is
rendered in the same `{success: false, error: {code, message, details?}}`
shape that service operations return, so clients parse one format.
"""

import logging

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppException

logger = logging.getLogger(__name__)

# HTTP status → taxonomy name for plain HTTPExceptions (auth guards etc.)
_STATUS_CODES = {
    status.HTTP_401_UNAUTHORIZED: "AuthenticationError",
    status.HTTP_403_FORBIDDEN: "PermissionDenied",
    status.HTTP_404_NOT_FOUND: "NotFoundError",
    status.HTTP_409_CONFLICT: "StateConflictError",
    status.HTTP_422_UNPROCESSABLE_ENTITY: "ValidationError",
    status.HTTP_429_TOO_MANY_REQUESTS: "RateLimited",
}


def _envelope(status_code: int, error: dict, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"success": False, "data": None, "error": error}),
        headers=headers,
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:  # type: ignore
    return _envelope(exc.status_code, exc.to_error(), headers=getattr(exc, "headers", None))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:  # type: ignore
    if isinstance(exc, AppException):
        return await app_exception_handler(request, exc)
    code = _STATUS_CODES.get(exc.status_code, "HTTPError")
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _envelope(exc.status_code, {"code": code, "message": detail}, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # type: ignore
    return _envelope(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        {"code": "ValidationError", "message": "Validation failed", "details": exc.errors()},
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:  # type: ignore
    limit = getattr(exc, "limit", None)
    detail = str(getattr(limit, "limit", "") or exc.detail)
    return _envelope(
        status.HTTP_429_TOO_MANY_REQUESTS,
        {"code": "RateLimited", "message": f"Rate limit exceeded: {detail}"},
        headers={"Retry-After": "60"},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # type: ignore
    # Hide internals; the traceback goes to the log only.
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"code": "InternalError", "message": "An unexpected error occurred."},
    )


__all__ = [
    "app_exception_handler",
    "http_exception_handler",
    "validation_exception_handler",
    "rate_limit_exceeded_handler",
    "global_exception_handler",
]
