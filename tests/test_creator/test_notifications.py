import uuid

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.creator_notification import CreatorNotification
from app.db.models.user import User
from app.schemas.enums import NotificationType
from app.services.creator.notification_service import (
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
    notify,
)
from tests.utils.factory import create_user


async def _seed(db: AsyncSession, user_id, n: int) -> list:
    rows = []
    for i in range(n):
        rows.append(
            await notify(
                db,
                user_id=user_id,
                type=NotificationType.SUBMISSION_APPROVED,
                title=f"Note {i}",
                message=f"Message {i}",
            )
        )
    await db.commit()
    return rows


@pytest.mark.anyio
async def test_notify_inserts_unread_row(db_session: AsyncSession):
    user = await create_user(db_session)

    row = await notify(
        db_session,
        user_id=user.id,
        type=NotificationType.SYSTEM,
        title="Creator Access Approved!",
        message="Welcome aboard.",
    )
    await db_session.commit()

    assert row is not None
    stored = (await db_session.execute(select(CreatorNotification))).scalars().one()
    assert stored.is_read is False
    assert stored.user_id == user.id


@pytest.mark.anyio
async def test_failed_notify_does_not_break_outer_work(db_session: AsyncSession):
    user = await create_user(db_session)
    user.full_name = "After"

    dropped = await notify(
        db_session,
        user_id=user.id,
        type=NotificationType.STRIKE_RECEIVED,
        title="Strike Issued",
        message=None,  # NOT NULL column, the savepoint fails
    )
    await db_session.commit()

    assert dropped is None
    assert (await db_session.execute(select(CreatorNotification))).scalars().all() == []
    name = await db_session.scalar(select(User.full_name).where(User.id == user.id))
    assert name == "After"


@pytest.mark.anyio
async def test_list_is_newest_first_with_unread_count(db_session: AsyncSession):
    user = await create_user(db_session)
    other = await create_user(db_session)
    await _seed(db_session, user.id, 3)
    await _seed(db_session, other.id, 1)

    result = await list_notifications(db_session, user.id)

    assert result.success
    assert result.data.unread == 3
    assert len(result.data.items) == 3
    stamps = [n.created_at for n in result.data.items]
    assert stamps == sorted(stamps, reverse=True)


@pytest.mark.anyio
async def test_mark_one_read_and_filter_unread(db_session: AsyncSession):
    user = await create_user(db_session)
    rows = await _seed(db_session, user.id, 2)

    marked = await mark_notification_read(db_session, user.id, rows[0].id)
    unread = await list_notifications(db_session, user.id, unread_only=True)

    assert marked.data.is_read is True
    assert [n.id for n in unread.data.items] == [rows[1].id]
    assert unread.data.unread == 1


@pytest.mark.anyio
async def test_cannot_mark_someone_elses_notification(db_session: AsyncSession):
    owner = await create_user(db_session)
    stranger = await create_user(db_session)
    owner_id = owner.id
    rows = await _seed(db_session, owner_id, 1)
    note_id = rows[0].id

    result = await mark_notification_read(db_session, stranger.id, note_id)
    missing = await mark_notification_read(db_session, owner_id, uuid.uuid4())

    assert result.error.code == "NotFoundError"
    assert missing.status_code == 404


@pytest.mark.anyio
async def test_mark_all_read(db_session: AsyncSession):
    user = await create_user(db_session)
    user_id = user.id
    await _seed(db_session, user_id, 3)

    result = await mark_all_notifications_read(db_session, user_id)
    again = await mark_all_notifications_read(db_session, user_id)

    assert result.data == {"updated": 3}
    assert again.data == {"updated": 0}
    assert (await list_notifications(db_session, user_id)).data.unread == 0
