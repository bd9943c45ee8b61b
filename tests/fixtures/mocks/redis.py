from __future__ import annotations

"""
MockRedisClient (async)
=======================
In-memory stand-in for the `redis.asyncio` client behind
`app.core.redis_client.redis_wrapper`. Covers what Creator Studio touches:

KV      : get/set (with EX)
Delete  : delete/unlink
Scan    : keys/scan_iter (glob match), used by catalog cache invalidation
Health  : ping/close/flushall

`fail_with` makes every command raise the given exception, for exercising
the best-effort paths.
"""

import time
from fnmatch import fnmatch
from typing import Any, AsyncIterator, Dict, List, Optional


def _now() -> float:
    return time.time()


class MockRedisClient:
    def __init__(self) -> None:
        self.store: Dict[str, Any] = {}
        self.expirations: Dict[str, float] = {}
        self.fail_with: Optional[BaseException] = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def _purge_expired(self) -> None:
        now = _now()
        for key, exp in list(self.expirations.items()):
            if exp <= now:
                self.store.pop(key, None)
                self.expirations.pop(key, None)

    # ── health ────────────────────────────────────────────────
    async def ping(self) -> bool:
        self._check()
        return True

    async def close(self) -> None:
        return None

    async def flushall(self) -> None:
        self.store.clear()
        self.expirations.clear()

    # ── strings ───────────────────────────────────────────────
    async def get(self, key: str) -> Optional[Any]:
        self._check()
        self._purge_expired()
        return self.store.get(key)

    async def set(self, key: str, value: Any, ex: Optional[int] = None, nx: bool = False) -> bool:
        self._check()
        self._purge_expired()
        if nx and key in self.store:
            return False
        self.store[key] = value
        if ex is not None:
            self.expirations[key] = _now() + int(ex)
        else:
            self.expirations.pop(key, None)
        return True

    async def delete(self, *keys: str) -> int:
        self._check()
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
            self.expirations.pop(key, None)
        return removed

    async def unlink(self, *keys: str) -> int:
        return await self.delete(*keys)

    # ── scan ──────────────────────────────────────────────────
    async def keys(self, pattern: str = "*") -> List[str]:
        self._check()
        self._purge_expired()
        return [k for k in self.store if fnmatch(k, pattern)]

    async def scan_iter(self, match: Optional[str] = None, count: Optional[int] = None) -> AsyncIterator[str]:
        for key in await self.keys(match or "*"):
            yield key
