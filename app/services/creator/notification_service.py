from __future__ import annotations

"""
Creator inbox
=============
`notify()` is fire-and-forget: the row is written inside its own SAVEPOINT
and any store failure is logged and swallowed, so the operation that
triggered it still commits. Delivery (email/push) happens elsewhere.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.db.models.creator_notification import CreatorNotification
from app.schemas.creator import NotificationListOut, NotificationOut
from app.schemas.enums import NotificationType
from app.services.creator.boundary import operation

logger = logging.getLogger(__name__)


async def notify(
    db: AsyncSession,
    *,
    user_id: UUID,
    type: NotificationType,
    title: str,
    message: str,
    submission_id: Optional[UUID] = None,
) -> Optional[CreatorNotification]:
    """Insert one notification; returns None when the insert failed."""
    try:
        async with db.begin_nested():
            row = CreatorNotification(
                user_id=user_id,
                type=type,
                title=title,
                message=message,
                submission_id=submission_id,
                is_read=False,
            )
            db.add(row)
    except SQLAlchemyError:
        logger.warning("Notification dropped (user_id=%s, title=%r)", user_id, title, exc_info=True)
        return None
    return row


async def count_unread(db: AsyncSession, user_id: UUID) -> int:
    unread = await db.scalar(
        select(func.count())
        .select_from(CreatorNotification)
        .where(CreatorNotification.user_id == user_id, CreatorNotification.is_read.is_(False))
    )
    return int(unread or 0)


# ─────────────────────────────────────────────────────────────
# 📬 Inbox operations
# ─────────────────────────────────────────────────────────────
@operation("list_notifications")
async def list_notifications(
    db: AsyncSession, user_id: UUID, *, unread_only: bool = False, limit: int = 50
) -> NotificationListOut:
    stmt = select(CreatorNotification).where(CreatorNotification.user_id == user_id)
    if unread_only:
        stmt = stmt.where(CreatorNotification.is_read.is_(False))
    stmt = stmt.order_by(CreatorNotification.created_at.desc()).limit(max(1, min(limit, 200)))
    rows = (await db.execute(stmt)).scalars().all()

    unread = await count_unread(db, user_id)
    return NotificationListOut(items=[NotificationOut.model_validate(r) for r in rows], unread=unread)


@operation("mark_notification_read")
async def mark_notification_read(db: AsyncSession, user_id: UUID, notification_id: UUID) -> NotificationOut:
    row = (
        await db.execute(
            select(CreatorNotification).where(
                CreatorNotification.id == notification_id,
                CreatorNotification.user_id == user_id,
            )
        )
    ).scalars().first()
    if row is None:
        raise NotFoundError("Notification not found")
    row.is_read = True
    await db.commit()
    return NotificationOut.model_validate(row)


@operation("mark_all_notifications_read")
async def mark_all_notifications_read(db: AsyncSession, user_id: UUID) -> dict[str, int]:
    result = await db.execute(
        update(CreatorNotification)
        .where(CreatorNotification.user_id == user_id, CreatorNotification.is_read.is_(False))
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return {"updated": int(result.rowcount or 0)}


__all__ = ["notify", "count_unread", "list_notifications", "mark_notification_read", "mark_all_notifications_read"]
