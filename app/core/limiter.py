from __future__ import annotations

"""
Creator Studio — HTTP Rate Limiting (SlowAPI)
=============================================

Highlights
----------
- **User/IP aware** keying: per-user once auth sets `request.state.user_id`,
  else per-client-IP (X-Forwarded-For / X-Real-IP / client.host).
- **Exemptions**: health/docs paths and a test bypass switch.
- **Backends**: Redis via `RATELIMIT_STORAGE_URI` or in-memory fallback.

Environment
-----------
RATE_LIMIT_ENABLED           default: "true"
DEFAULT_RATE_LIMIT           default: "100/minute"
RATELIMIT_STORAGE_URI        default: "" (falls back to "memory://")
RATE_LIMIT_SKIP_PATHS        default: "/health,/docs,/openapi.json"
RATE_LIMIT_TEST_BYPASS       default: "" (truthy to bypass in tests/CI)

Usage
-----
    from app.core.limiter import install_rate_limiter, rate_limit

    install_rate_limiter(app)

    @router.post("/submissions")
    @rate_limit("10/minute")
    async def submit(request: Request, response: Response, ...): ...
"""

import os
from typing import Callable, List, Optional

from dotenv import load_dotenv
from loguru import logger
from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.requests import Request

load_dotenv()

# ──────────────────────────────────────────────────────────────
# ⚙️ Environment & defaults
# ──────────────────────────────────────────────────────────────
DEFAULT_LIMIT = os.getenv("DEFAULT_RATE_LIMIT", "100/minute").strip()
STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "").strip()
SKIP_PATHS: List[str] = [
    p.strip()
    for p in os.getenv("RATE_LIMIT_SKIP_PATHS", "/health,/docs,/openapi.json").split(",")
    if p.strip()
]

_TRUTHY = {"1", "true", "yes", "on"}


def _enabled() -> bool:
    return os.getenv("RATE_LIMIT_ENABLED", "true").strip().lower() == "true"


def _test_bypass() -> bool:
    return os.getenv("RATE_LIMIT_TEST_BYPASS", "").strip().lower() in _TRUTHY


# ──────────────────────────────────────────────────────────────
# 🧠 Keying & exemptions
# ──────────────────────────────────────────────────────────────
def _client_ip(request: Request) -> str:
    xff = request.headers.get("x-forwarded-for")
    if xff and xff.split(",")[0].strip():
        return xff.split(",")[0].strip()
    xri = request.headers.get("x-real-ip")
    if xri:
        return xri.strip()
    return get_remote_address(request) or "unknown"


def get_user_rate_limit_key(request: Request) -> str:
    """`user:<id>` when authenticated, else `ip:<addr>`."""
    user_id = getattr(request.state, "user_id", None)
    if user_id:
        return f"user:{user_id}"
    return f"ip:{_client_ip(request)}"


def should_exempt_request(request: Optional[Request]) -> bool:
    """Exempt when limiting is off, bypassed for tests, or the path is skipped."""
    if not _enabled() or _test_bypass():
        return True
    if request is None:
        return False
    path = request.url.path
    return any(path == p or path.startswith(p.rstrip("/") + "/") for p in SKIP_PATHS)


# ──────────────────────────────────────────────────────────────
# 🧰 Limiter instance (Redis / memory)
# ──────────────────────────────────────────────────────────────
def _default_limits() -> List[str]:
    return [chunk.strip() for chunk in DEFAULT_LIMIT.split(",") if chunk.strip()]


limiter = Limiter(
    key_func=get_user_rate_limit_key,
    default_limits=_default_limits(),
    headers_enabled=True,
    storage_uri=STORAGE_URI or "memory://",
)


def _exempt_when(request: Optional[Request] = None) -> bool:
    """SlowAPI calls this without arguments; pull the request from its context."""
    req = request
    if req is None:
        try:
            req = limiter._request_context.get()  # type: ignore[attr-defined]
        except (AttributeError, LookupError):
            req = None
    return should_exempt_request(req)


# ──────────────────────────────────────────────────────────────
# 🎛 Decorators
# ──────────────────────────────────────────────────────────────
def rate_limit(*limits: str) -> Callable:
    """
    Apply per-route limits with the shared exemptions.

    Examples
    --------
    @rate_limit("10/minute")
    @rate_limit("5/second", "100/minute")
    """
    selected = list(limits) if limits else _default_limits()
    decorators = [limiter.limit(value, exempt_when=_exempt_when) for value in selected]

    def _apply(fn: Callable) -> Callable:
        for deco in reversed(decorators):
            fn = deco(fn)
        return fn

    return _apply


# ──────────────────────────────────────────────────────────────
# 🔧 Installer
# ──────────────────────────────────────────────────────────────
def install_rate_limiter(app) -> None:
    """Attach SlowAPI state + middleware (skipped when RATE_LIMIT_ENABLED=false)."""
    app.state.limiter = limiter
    if not _enabled():
        logger.info("RateLimiter disabled by env; middleware not installed")
        return
    app.add_middleware(SlowAPIMiddleware)
    logger.info("SlowAPI middleware installed | default={} | storage={}", _default_limits(), STORAGE_URI or "memory://")


__all__ = ["limiter", "rate_limit", "install_rate_limiter", "get_user_rate_limit_key"]
