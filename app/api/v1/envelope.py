from __future__ import annotations

"""
HTTP rendering of service results
=================================
Routers call a service operation, then hand the `OperationResult` to
`respond()`, which copies the result's status onto the injected `Response`
and returns the `{success, data, error}` body. Returning a plain dict (not a
`Response`) keeps headers set on the injected response (cache, rate-limit).

`replay_snapshot` / `store_snapshot` implement best-effort
`Idempotency-Key` replay backed by Redis.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Request, Response
from redis.exceptions import RedisError

from app.core.config import settings
from app.core.redis_client import redis_wrapper
from app.schemas.result import OperationResult

logger = logging.getLogger(__name__)

IDEMPOTENCY_HEADER = "Idempotency-Key"


def respond(result: OperationResult, response: Response) -> Dict[str, Any]:
    response.status_code = result.status_code
    return result.model_dump(mode="json")


def idempotency_key(request: Request, scope: str, owner: Any) -> Optional[str]:
    raw = (request.headers.get(IDEMPOTENCY_HEADER) or "").strip()
    if not raw or len(raw) > 128:
        return None
    return f"idem:{scope}:{owner}:{raw}"


async def replay_snapshot(key: Optional[str], response: Response) -> Optional[Dict[str, Any]]:
    if not key or not settings.REDIS_ENABLED:
        return None
    try:
        snap = await redis_wrapper.idempotency_get(key)
    except (RedisError, RuntimeError):
        logger.warning("Idempotency lookup failed for %s", key, exc_info=True)
        return None
    if not isinstance(snap, dict) or "body" not in snap:
        return None
    response.status_code = int(snap.get("status_code", 200))
    response.headers["Idempotent-Replay"] = "true"
    return snap["body"]


async def store_snapshot(key: Optional[str], body: Dict[str, Any], status_code: int) -> None:
    if not key or not settings.REDIS_ENABLED:
        return
    try:
        await redis_wrapper.idempotency_set(
            key, {"status_code": status_code, "body": body}, ttl_seconds=settings.IDEMPOTENCY_TTL_SECONDS
        )
    except (RedisError, RuntimeError):
        logger.warning("Idempotency snapshot not stored for %s", key, exc_info=True)


__all__ = ["respond", "idempotency_key", "replay_snapshot", "store_snapshot", "IDEMPOTENCY_HEADER"]
