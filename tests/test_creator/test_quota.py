from datetime import date, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import QuotaExceededError
from app.db.models.creator_profile import CreatorProfile
from app.db.models.daily_upload_tracking import DailyUploadTracking
from app.services.creator.quota_service import (
    check_quota,
    commit_quota,
    find_daily_tracking,
    format_gb,
    get_or_create_daily_tracking,
    reserve_quota,
    usage_view,
)
from tests.utils.factory import create_creator

DAY = date(2026, 10, 18)


@pytest.mark.parametrize(
    "value,expected",
    [(Decimal("8.000"), "8"), (Decimal("2.500"), "2.5"), (Decimal("0"), "0"), (Decimal("10"), "10")],
)
def test_format_gb_drops_trailing_zeros(value, expected):
    assert format_gb(value) == expected


@pytest.mark.anyio
async def test_tracking_row_is_created_lazily_once_per_day(db_session: AsyncSession):
    _, profile = await create_creator(db_session)
    assert await find_daily_tracking(db_session, profile.id, DAY) is None

    first = await get_or_create_daily_tracking(db_session, profile.id, DAY)
    again = await get_or_create_daily_tracking(db_session, profile.id, DAY)
    await db_session.commit()

    assert first.id == again.id
    assert first.uploads_today == 0
    rows = (await db_session.execute(select(DailyUploadTracking))).scalars().all()
    assert len(rows) == 1


@pytest.mark.anyio
async def test_reserve_charges_both_counters(db_session: AsyncSession):
    _, profile = await create_creator(db_session)

    tracking = await reserve_quota(db_session, profile, uploads=1, storage_gb=Decimal("2.5"), day=DAY)
    await db_session.commit()

    assert tracking.uploads_today == 1
    assert Decimal(tracking.storage_used_today_gb) == Decimal("2.5")


@pytest.mark.anyio
async def test_upload_cap_is_enforced(db_session: AsyncSession):
    _, profile = await create_creator(db_session, daily_upload_limit=2)
    await reserve_quota(db_session, profile, uploads=2, day=DAY)

    with pytest.raises(QuotaExceededError) as exc_info:
        await reserve_quota(db_session, profile, uploads=1, day=DAY)

    assert exc_info.value.message == "Daily upload limit reached (2 uploads per day)"
    assert exc_info.value.status_code == 429


@pytest.mark.anyio
async def test_storage_cap_message_reports_usage_and_limit(db_session: AsyncSession):
    _, profile = await create_creator(db_session, daily_storage_limit_gb=Decimal("8"))
    await reserve_quota(db_session, profile, storage_gb=Decimal("7.5"), day=DAY)

    with pytest.raises(QuotaExceededError) as exc_info:
        await reserve_quota(db_session, profile, storage_gb=Decimal("1"), day=DAY)

    assert exc_info.value.message == "Daily storage limit would be exceeded. Used: 7.50GB, Limit: 8GB"


@pytest.mark.anyio
async def test_exact_limit_is_allowed(db_session: AsyncSession):
    _, profile = await create_creator(db_session, daily_upload_limit=1, daily_storage_limit_gb=Decimal("3"))

    tracking = await reserve_quota(db_session, profile, uploads=1, storage_gb=Decimal("3"), day=DAY)

    assert tracking.uploads_today == 1


@pytest.mark.anyio
async def test_new_day_starts_from_zero(db_session: AsyncSession):
    _, profile = await create_creator(db_session, daily_upload_limit=1)
    await reserve_quota(db_session, profile, day=DAY)

    tomorrow = await reserve_quota(db_session, profile, day=DAY + timedelta(days=1))

    assert tomorrow.uploads_today == 1


def test_check_quota_upload_takes_precedence_over_storage():
    tracking = DailyUploadTracking(uploads_today=4, storage_used_today_gb=Decimal("8"))
    profile = CreatorProfile(daily_upload_limit=4, daily_storage_limit_gb=Decimal("8"))

    with pytest.raises(QuotaExceededError, match="Daily upload limit reached"):
        check_quota(tracking, profile, uploads=1, storage_gb=Decimal("1"))


@pytest.mark.anyio
async def test_usage_view_without_tracking_row(db_session: AsyncSession):
    _, profile = await create_creator(db_session, daily_upload_limit=3, daily_storage_limit_gb=Decimal("5"))

    view = usage_view(profile, None, DAY)

    assert view.uploads_remaining == 3
    assert view.storage_remaining_gb == Decimal("5")
    assert view.uploads_today == 0


@pytest.mark.anyio
async def test_commit_refuses_when_a_concurrent_charge_took_the_last_slot(
    db_session: AsyncSession, other_session: AsyncSession
):
    _, profile = await create_creator(db_session, daily_upload_limit=1)
    profile_id = profile.id
    tracking = await get_or_create_daily_tracking(db_session, profile.id, DAY)
    await db_session.commit()
    check_quota(tracking, profile, uploads=1, storage_gb=Decimal("1"))

    rival = await other_session.get(CreatorProfile, profile.id)
    await reserve_quota(other_session, rival, uploads=1, storage_gb=Decimal("2"), day=DAY)
    await other_session.commit()

    with pytest.raises(QuotaExceededError, match="concurrent submission"):
        await commit_quota(db_session, tracking, profile, uploads=1, storage_gb=Decimal("1"))
    await db_session.rollback()

    stored = await find_daily_tracking(db_session, profile_id, DAY)
    assert stored.uploads_today == 1
    assert Decimal(stored.storage_used_today_gb) == Decimal("2")
