from __future__ import annotations

"""
Operation boundary
==================
Turns raising service coroutines into envelope-returning operations.

Every public creator operation takes an `AsyncSession` first and is
decorated with `@operation("name")`:

- an `AppException` becomes `OperationResult.fail(exc)` (its own status);
- a `SQLAlchemyError` is logged and becomes a `StoreError` (503);
- in both cases the session is rolled back, so nothing partial persists.

The undecorated coroutine stays reachable as `fn.__wrapped__` for
composition inside a larger unit of work.
"""

import functools
import logging
from typing import Any, Awaitable, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AppException, StoreError
from app.schemas.result import OperationResult

logger = logging.getLogger(__name__)


async def _rollback(db: AsyncSession, name: str) -> None:
    try:
        await db.rollback()
    except SQLAlchemyError:
        logger.warning("[%s] rollback failed", name, exc_info=True)


def operation(name: str, *, status_code: int = 200) -> Callable[..., Callable[..., Awaitable[OperationResult]]]:
    """Decorate an async service function so it returns an `OperationResult`."""

    def decorator(fn: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[OperationResult]]:
        @functools.wraps(fn)
        async def wrapper(db: AsyncSession, *args: Any, **kwargs: Any) -> OperationResult:
            try:
                data = await fn(db, *args, **kwargs)
            except AppException as exc:
                await _rollback(db, name)
                if exc.status_code >= 500:
                    logger.error("[%s] failed: %s", name, exc)
                else:
                    logger.info("[%s] rejected: %s", name, exc)
                return OperationResult.fail(exc)
            except SQLAlchemyError:
                await _rollback(db, name)
                logger.exception("[%s] store failure", name)
                return OperationResult.fail(StoreError())
            return OperationResult.ok(data, status_code=status_code)

        wrapper.operation_name = name  # type: ignore[attr-defined]
        return wrapper

    return decorator


__all__ = ["operation"]
