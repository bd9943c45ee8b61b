# app/cache/invalidation.py
from __future__ import annotations

"""
# Creator Studio — Catalog Cache Invalidation

Best-effort removal of cached catalog views after a publish commits.

## Key properties
- Uses the shared `app.core.redis_client.redis_wrapper` (single pool).
- SCAN + UNLINK through `RedisClient.unlink_matching` (no blocking KEYS).
- Never raises: a missing/unreachable Redis only costs a log line, the
  publish that triggered it is already durable.

## Public API
- catalog_patterns(kind, entity_id, slug=None) -> list[str]
- invalidate_catalog_caches(kind, entity_id, slug=None) -> int
"""

import logging
from typing import List, Optional
from uuid import UUID

from redis.exceptions import RedisError

from app.core.config import settings
from app.core.redis_client import redis_wrapper

logger = logging.getLogger(__name__)

__all__ = ["catalog_patterns", "invalidate_catalog_caches"]


def catalog_patterns(kind: str, entity_id: UUID, slug: Optional[str] = None) -> List[str]:
    """Key patterns touched by publishing one movie/series."""
    patterns = [
        "catalog:*",
        f"{kind}:{entity_id}:*",
        f"{kind}:list:*",
    ]
    if slug:
        patterns.append(f"{kind}:slug:{slug}*")
    return patterns


async def invalidate_catalog_caches(kind: str, entity_id: UUID, slug: Optional[str] = None) -> int:
    """Unlink cached catalog keys; returns the number of keys removed."""
    if not settings.REDIS_ENABLED:
        return 0
    try:
        client_ready = await redis_wrapper.is_connected()
    except RedisError:
        client_ready = False
    if not client_ready:
        logger.debug("Cache invalidation skipped: redis not connected")
        return 0

    removed = 0
    try:
        for pattern in catalog_patterns(kind, entity_id, slug):
            removed += await redis_wrapper.unlink_matching(pattern)
    except (RedisError, RuntimeError, OSError):
        logger.warning("Catalog cache invalidation failed for %s %s", kind, entity_id, exc_info=True)
        return removed

    if removed:
        logger.info("Catalog cache invalidated for %s %s (%d keys)", kind, entity_id, removed)
    return removed
