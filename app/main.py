# app/main.py
from __future__ import annotations

"""
# Creator Studio API — Application Entrypoint (FastAPI)

ASGI application factory and lifecycle for the creator content submission
pipeline (eligibility → intake → moderation → publish).

## Design Goals
- Deterministic, testable **app factory** (`create_app`) with explicit lifespan.
- Explicit **middleware order**:
  1) request id → 2) security headers → 3) CORS → 4) gzip → 5) rate limits
  → 6) strip `Server` header.
- One error shape: every failure leaves as `{success: false, error}`.
- Best-effort infra: Redis is optional, the app boots without it.

## Probes
- `/healthz` — liveness (process up).
- `/readyz` — readiness (DB + Redis checks).
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from redis.exceptions import RedisError
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.gzip import GZipMiddleware
from starlette.responses import JSONResponse, Response

from app.api.v1.routers import build_v1_router
from app.core.config import settings
from app.core.exception_handlers import (
    app_exception_handler,
    global_exception_handler,
    http_exception_handler,
    rate_limit_exceeded_handler,
    validation_exception_handler,
)
from app.core.exceptions import AppException
from app.core.limiter import install_rate_limiter
from app.core.logger import configure_logging
from app.core.redis_client import redis_wrapper
from app.db.session import async_engine, db_healthcheck
from app.middleware.request_id import RequestIDMiddleware
from app.security_headers import SecurityHeadersMiddleware, configure_cors

configure_logging()

logger = logging.getLogger("creator_studio")


# ─────────────────────────────────────────────────────────────────────────────
# 🔄 Lifespan: startup & shutdown
# ─────────────────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Startup:
        - Best-effort connect to Redis (cache invalidation, idempotency).

    Shutdown:
        - Dispose the DB engine and close Redis.
    """
    logger.info("✅ Creator Studio API starting up")

    if settings.REDIS_ENABLED:
        try:
            await redis_wrapper.connect()
            logger.info("🔌 Redis connected")
        except (RedisError, OSError, RuntimeError):
            logger.exception("Redis connect failed (continuing in degraded mode)")

    try:
        yield
    finally:
        try:
            await async_engine.dispose()
            logger.info("🛑 Database engine disposed")
        except SQLAlchemyError:
            logger.exception("Error disposing DB engine")

        try:
            await redis_wrapper.close()
        except (RedisError, OSError):
            logger.exception("Error closing Redis client")

        logger.info("🛑 Creator Studio API shutting down")


# ─────────────────────────────────────────────────────────────────────────────
# 🏗️ App factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app() -> FastAPI:
    """Build the FastAPI app: middleware, exception handlers, routers, probes."""
    docs = settings.ENABLE_DOCS
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        docs_url="/docs" if docs else None,
        redoc_url="/redoc" if docs else None,
        openapi_url="/openapi.json" if docs else None,
        lifespan=lifespan,
    )

    # ── Middlewares (order matters) ─────────────────────────────────────────
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    configure_cors(app)
    app.add_middleware(GZipMiddleware, minimum_size=1024)
    install_rate_limiter(app)

    @app.middleware("http")
    async def _strip_server_header(request: Request, call_next: Callable) -> Response:
        """Remove the `Server` header to avoid leaking implementation details."""
        response: Response = await call_next(request)
        if "server" in response.headers:
            del response.headers["server"]
        return response

    # ── Exception handlers (all render the result envelope) ─────────────────
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, global_exception_handler)  # type: ignore[arg-type]

    # ── Routers (versioned API) ─────────────────────────────────────────────
    app.include_router(build_v1_router(), prefix=settings.API_V1_STR)

    # ── Meta endpoints ──────────────────────────────────────────────────────
    @app.get("/healthz", tags=["meta"])
    async def healthz() -> dict[str, bool]:
        """Liveness probe. No external checks."""
        return {"ok": True}

    @app.get("/readyz", tags=["meta"])
    async def readyz() -> dict[str, object]:
        """Readiness probe. Redis counts as ready when it is disabled by config."""
        db_ok = await db_healthcheck()
        redis_ok = True
        if settings.REDIS_ENABLED:
            try:
                redis_ok = await redis_wrapper.is_connected()
            except (RedisError, OSError):
                redis_ok = False
        return {"ready": bool(db_ok and redis_ok), "checks": {"db": db_ok, "redis": redis_ok}}

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        return JSONResponse(
            {"name": settings.PROJECT_NAME, "docs": app.docs_url or "", "version": settings.VERSION}
        )

    return app


# ─────────────────────────────────────────────────────────────────────────────
# 🚀 Module-level ASGI app for Uvicorn/Gunicorn
# ─────────────────────────────────────────────────────────────────────────────
app = create_app()
__all__ = ["create_app", "app"]


# Local dev runner (prefer: `uvicorn app.main:app --reload`)
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "1") == "1",
        workers=int(os.getenv("WORKERS", "1")),
        log_level=os.getenv("LOG_LEVEL", "info"),
    )
