"""
🧭 Creator Studio • API v1 Router Aggregator
===========================================

Exports the **combined `router`** and a `build_v1_router()` factory.

Layout
------
- `/creator/...` : creator self-service (status, access request, submissions, inbox)
- `/admin/...`   : admin review, standing, moderation, settings

Quick usage
-----------
    from app.api.v1.routers import router as v1_router
    app.include_router(v1_router, prefix="/api/v1")

Security notes
--------------
- This layer is a pure aggregator; **auth & rate limits live in child routers**.
"""

from fastapi import APIRouter

from .admin import router as admin_router
from .creator import router as creator_router


def build_v1_router() -> APIRouter:
    """Compose the v1 surface: creator routes as-is, admin routes under `/admin`."""
    r = APIRouter()
    r.include_router(creator_router)
    r.include_router(admin_router, prefix="/admin")
    return r


router = build_v1_router()

__all__ = ["router", "build_v1_router", "admin_router", "creator_router"]
