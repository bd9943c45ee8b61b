# app/security_headers.py
from __future__ import annotations

"""
# Creator Studio — Security Headers & CORS

Small security-header layer for a JSON API plus the CORS installer.

## What you get
- **Headers**: HSTS (non-dev), X-Content-Type-Options, X-Frame-Options,
  Referrer-Policy and a locked-down CSP suitable for JSON responses.
- **CORS installer**: strict allow-list from settings (localhost defaults in dev).
- **Cache helper**: `set_sensitive_cache()` so mutating creator/admin
  responses are never stored by intermediaries.

## Quick start
    app.add_middleware(SecurityHeadersMiddleware)
    configure_cors(app)

    @router.post("/creator/submissions")
    async def submit(request: Request, response: Response):
        set_sensitive_cache(response)
"""

from typing import Iterable, List, Optional, Tuple

from fastapi import Response
from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.core.config import settings

_DEV_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


def _static_headers() -> List[Tuple[bytes, bytes]]:
    headers = [
        (b"x-content-type-options", b"nosniff"),
        (b"x-frame-options", b"DENY"),
        (b"referrer-policy", b"strict-origin-when-cross-origin"),
        (b"content-security-policy", b"default-src 'none'; frame-ancestors 'none'"),
    ]
    if settings.ENV not in ("development", "test"):
        headers.append((b"strict-transport-security", b"max-age=31536000; includeSubDomains"))
    return headers


class SecurityHeadersMiddleware:
    """Append security headers at response start unless the handler set them."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app
        self.headers = _static_headers()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            return await self.app(scope, receive, send)

        async def _send_wrapper(message: Message) -> None:
            if message.get("type") == "http.response.start":
                raw = list(message.get("headers", []))
                present = {k.lower() for k, _ in raw}
                raw.extend((k, v) for k, v in self.headers if k not in present)
                message["headers"] = raw
            await send(message)

        await self.app(scope, receive, _send_wrapper)


def set_sensitive_cache(response: Response, *, seconds: int = 0) -> None:
    """Mark a response as non-cacheable (or privately cacheable for `seconds`)."""
    if seconds <= 0:
        response.headers["Cache-Control"] = "no-store"
        response.headers["Pragma"] = "no-cache"
        response.headers["Expires"] = "0"
        return
    response.headers["Cache-Control"] = f"private, max-age={seconds}"
    vary = {v.strip() for v in response.headers.get("Vary", "").split(",") if v.strip()}
    response.headers["Vary"] = ", ".join(sorted(vary | {"Authorization"}))


# ─────────────────────────────────────────────────────────────
# 🌐 CORS installer (allow-list, not '*')
# ─────────────────────────────────────────────────────────────
def configure_cors(
    app,
    *,
    allow_credentials: bool = True,
    allow_methods: Optional[Iterable[str]] = None,
    allow_headers: Optional[Iterable[str]] = None,
) -> None:
    """Install strict CORS based on settings."""
    allow_methods = allow_methods or ["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"]
    allow_headers = allow_headers or ["Authorization", "Content-Type", "X-Request-ID", "Idempotency-Key"]

    origins = settings.frontend_origins_list
    origins_regex = settings.ALLOW_ORIGINS_REGEX or None
    if not origins and not origins_regex:
        origins = _DEV_ORIGINS

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_origin_regex=origins_regex,
        allow_credentials=allow_credentials,
        allow_methods=list(allow_methods),
        allow_headers=list(allow_headers),
        expose_headers=["Location", "Retry-After", "X-Request-ID"],
        max_age=3600,
    )


__all__ = ["SecurityHeadersMiddleware", "set_sensitive_cache", "configure_cors"]
