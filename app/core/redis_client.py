# app/core/redis_client.py
from __future__ import annotations

"""
Creator Studio — Redis Client (Async)
=====================================
Central, **single source of truth** for Redis access in the app. Redis is a
side channel here: catalog cache invalidation and idempotent replays for
submission intake. The database remains the authority for every creator
decision, so Redis outages degrade those helpers and never the pipeline.

Public API (imported as `redis_wrapper`)
----------------------------------------
- await redis_wrapper.connect() / await redis_wrapper.close() / await redis_wrapper.is_connected()
- redis_wrapper.client
- await redis_wrapper.idempotency_set(key, value, ttl_seconds=600)
- await redis_wrapper.idempotency_get(key)
- await redis_wrapper.unlink_matching(pattern)
"""

import asyncio
import json
import logging
import os
import random
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from app.core.config import settings

logger = logging.getLogger("redis")

# ─────────────────────────────────────────────────────────────────────────────
# Tunables (env-aware sensible defaults)
# ─────────────────────────────────────────────────────────────────────────────
MAX_RETRIES = int(os.getenv("REDIS_CONNECT_MAX_RETRIES", "3"))
BASE_DELAY = float(os.getenv("REDIS_CONNECT_BASE_DELAY", "0.3"))  # seconds
HEALTH_CHECK_INTERVAL = int(os.getenv("REDIS_HEALTH_CHECK_INTERVAL", "30"))
SOCKET_TIMEOUT = float(os.getenv("REDIS_SOCKET_TIMEOUT", "3"))
CLIENT_NAME = os.getenv("REDIS_CLIENT_NAME", "creator-studio-api")
SCAN_BATCH = 500


class RedisClient:
    """
    Singleton Redis connection manager (asyncio).

    Features
    --------
    • Connect with exponential backoff + jitter
    • Pooled connections, health checks
    • Idempotency JSON helpers
    • Pattern invalidation via SCAN + UNLINK
    """

    def __init__(self, redis_url: str):
        self.redis_url = redis_url
        self._client: Optional[redis.Redis] = None

    # ── lifecycle ────────────────────────────────────────────────────────────
    async def connect(self) -> None:
        """
        Establish a connection with retries.

        Steps
        -----
        - **[Step 1]** Reuse a healthy client when possible.
        - **[Step 2]** Attempt connection with backoff and jitter.
        """
        # ── [Step 1] Reuse an existing healthy client ───────────────────────
        if self._client is not None:
            try:
                await self._client.ping()
                return
            except RedisError:
                self._client = None  # stale client → reconnect

        last_err: Optional[Exception] = None

        # ── [Step 2] Retry with backoff ─────────────────────────────────────
        for attempt in range(1, MAX_RETRIES + 1):
            try:
                client = redis.Redis.from_url(
                    self.redis_url,
                    decode_responses=True,
                    health_check_interval=HEALTH_CHECK_INTERVAL,
                    socket_timeout=SOCKET_TIMEOUT,
                    socket_connect_timeout=SOCKET_TIMEOUT,
                    client_name=CLIENT_NAME,
                )
                await client.ping()
                self._client = client
                logger.info("Connected to Redis")
                return
            except (RedisError, OSError) as e:
                last_err = e
                delay = min(3.0, BASE_DELAY * (2 ** (attempt - 1))) + random.uniform(0, 0.25)
                logger.warning(
                    "Redis connect attempt %s/%s failed: %r (retrying in %.2fs)",
                    attempt, MAX_RETRIES, e, delay,
                )
                await asyncio.sleep(delay)

        logger.error("Redis connection failed after %s retries.", MAX_RETRIES)
        raise RuntimeError("Redis connection failed") from last_err

    async def close(self) -> None:
        """Gracefully close the connection pool."""
        if self._client is None:
            return
        try:
            await self._client.close()
            logger.info("Redis connection closed.")
        except RedisError as e:
            logger.warning("Error closing Redis connection: %s", e)
        finally:
            self._client = None

    async def is_connected(self) -> bool:
        """Return True if `PING` succeeds (healthy connection)."""
        if self._client is None:
            return False
        try:
            return bool(await self._client.ping())
        except RedisError:
            return False

    @property
    def client(self) -> redis.Redis:
        """Low-level client; ensure `connect()` was called at startup."""
        if self._client is None:
            raise RuntimeError("Redis client not initialized. Call connect() first.")
        return self._client

    # ── helpers: idempotency / invalidation ──────────────────────────────────
    async def idempotency_set(self, key: str, value: Any, *, ttl_seconds: int = 600) -> None:
        """Store a JSON snapshot for idempotent responses (atomic SET with EX)."""
        payload = json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
        await self.client.set(key, payload, ex=ttl_seconds)

    async def idempotency_get(self, key: str) -> Optional[Any]:
        """Load a JSON snapshot; tolerant of bytes/str payloads."""
        raw = await self.client.get(key)
        if raw is None:
            return None
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode("utf-8", errors="replace")
        try:
            return json.loads(raw)
        except ValueError:
            return None

    async def unlink_matching(self, pattern: str) -> int:
        """SCAN for `pattern` and UNLINK matches in batches; returns keys removed."""
        removed = 0
        batch: list[str] = []
        async for key in self.client.scan_iter(match=pattern, count=SCAN_BATCH):
            batch.append(key)
            if len(batch) >= SCAN_BATCH:
                removed += int(await self.client.unlink(*batch))
                batch.clear()
        if batch:
            removed += int(await self.client.unlink(*batch))
        return removed


# ─────────────────────────────────────────────────────────────────────────────
# Singleton instance
# ─────────────────────────────────────────────────────────────────────────────
redis_wrapper = RedisClient(settings.REDIS_URL)

__all__ = ["RedisClient", "redis_wrapper"]
