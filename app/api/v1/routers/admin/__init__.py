"""
Admin router package (v1)
=========================

Admin surface of the creator pipeline, one module per domain:
- creators          : access requests, grants, limits, strikes, suspension, stats
- submissions       : moderation (approve/publish, reject)
- creator_settings  : the creator policy singleton

Design
------
• Each submodule defines its own `APIRouter` (admin guard, rate limits, tags).
• This package aggregates them into a single `router` export.
• Mount with a base path in your app:
    app.include_router(admin.router, prefix="/api/v1/admin")
"""

from typing import Any, Dict, Iterable, Optional

from fastapi import APIRouter, status

from .creator_settings import router as creator_settings_router
from .creators import router as creators_router
from .submissions import router as submissions_router

# ─────────────────────────────────────────────────────────────────────────────
# 📋 Common OpenAPI responses (docs-only; behavior unchanged)
# ─────────────────────────────────────────────────────────────────────────────
COMMON_ADMIN_RESPONSES: Dict[int, Dict[str, Any]] = {
    status.HTTP_401_UNAUTHORIZED: {"description": "Unauthorized"},
    status.HTTP_403_FORBIDDEN: {"description": "Forbidden (admin role required)"},
    status.HTTP_429_TOO_MANY_REQUESTS: {"description": "Rate limit exceeded"},
}


def build_admin_router(
    *,
    extra_responses: Optional[Dict[int, Dict[str, Any]]] = None,
    include: Optional[Iterable[APIRouter]] = None,
) -> APIRouter:
    """Create a fresh admin router aggregate (defaults to every domain router)."""
    r = APIRouter()
    responses = {**COMMON_ADMIN_RESPONSES, **(extra_responses or {})}
    subrouters = list(include) if include is not None else [
        creators_router,
        submissions_router,
        creator_settings_router,
    ]
    for sr in subrouters:
        r.include_router(sr, responses=responses)
    return r


router = build_admin_router()

__all__ = [
    "router",
    "build_admin_router",
    "creators_router",
    "submissions_router",
    "creator_settings_router",
]
