from __future__ import annotations

"""
Quota tracker
=============
Per-creator, per-calendar-day (UTC) counters in `daily_upload_tracking`.

A day's row is created lazily on first use. Charging is check-then-commit:
`check_quota()` gives a precise error naming the cap that would be crossed,
and `commit_quota()` re-asserts both caps inside one conditional
`UPDATE … WHERE counters + n <= limit`, so two concurrent intakes for the
same creator can never both slip past the limit. Quota is charged once, at
intake, and is never refunded.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import QuotaExceededError
from app.db.base_class import utcnow
from app.db.models.creator_profile import CreatorProfile
from app.db.models.daily_upload_tracking import DailyUploadTracking
from app.schemas.creator import DailyUsageOut

logger = logging.getLogger(__name__)

ZERO_GB = Decimal("0")


def format_gb(value: Decimal) -> str:
    """`Decimal('8.000')` → `'8'`, `Decimal('2.500')` → `'2.5'`."""
    return f"{Decimal(value).normalize():f}"


def today_utc() -> date:
    return utcnow().date()


def _tracking_stmt(creator_id: UUID, day: date):
    return (
        select(DailyUploadTracking)
        .where(DailyUploadTracking.creator_id == creator_id, DailyUploadTracking.day == day)
        .execution_options(populate_existing=True)
    )


async def find_daily_tracking(db: AsyncSession, creator_id: UUID, day: Optional[date] = None) -> Optional[DailyUploadTracking]:
    return (await db.execute(_tracking_stmt(creator_id, day or today_utc()))).scalars().first()


async def get_or_create_daily_tracking(
    db: AsyncSession, creator_id: UUID, day: Optional[date] = None
) -> DailyUploadTracking:
    """Return the (creator, day) row, inserting a zeroed one when absent."""
    day = day or today_utc()
    row = (await db.execute(_tracking_stmt(creator_id, day).with_for_update())).scalars().first()
    if row is not None:
        return row

    try:
        async with db.begin_nested():
            row = DailyUploadTracking(
                creator_id=creator_id, day=day, uploads_today=0, storage_used_today_gb=ZERO_GB
            )
            db.add(row)
    except IntegrityError:
        # another request created today's row first
        logger.debug("Daily tracking insert raced for creator_id=%s day=%s", creator_id, day)
        row = (await db.execute(_tracking_stmt(creator_id, day).with_for_update())).scalars().one()
    return row


def check_quota(
    tracking: DailyUploadTracking,
    profile: CreatorProfile,
    *,
    uploads: int = 1,
    storage_gb: Decimal = ZERO_GB,
) -> None:
    """Raise `QuotaExceededError` if charging `uploads`/`storage_gb` would cross a cap."""
    upload_limit = int(profile.daily_upload_limit)
    if tracking.uploads_today + uploads > upload_limit:
        raise QuotaExceededError(
            f"Daily upload limit reached ({upload_limit} uploads per day)",
            details={"uploads_today": tracking.uploads_today, "daily_upload_limit": upload_limit},
        )

    used = Decimal(tracking.storage_used_today_gb)
    storage_limit = Decimal(profile.daily_storage_limit_gb)
    if used + Decimal(storage_gb) > storage_limit:
        raise QuotaExceededError(
            f"Daily storage limit would be exceeded. Used: {used:.2f}GB, Limit: {format_gb(storage_limit)}GB",
            details={
                "storage_used_today_gb": str(used),
                "requested_gb": str(storage_gb),
                "daily_storage_limit_gb": str(storage_limit),
            },
        )


async def commit_quota(
    db: AsyncSession,
    tracking: DailyUploadTracking,
    profile: CreatorProfile,
    *,
    uploads: int = 1,
    storage_gb: Decimal = ZERO_GB,
) -> DailyUploadTracking:
    """Atomically increment both counters, still bounded by the caps."""
    storage_gb = Decimal(storage_gb)
    result = await db.execute(
        update(DailyUploadTracking)
        .where(
            DailyUploadTracking.id == tracking.id,
            DailyUploadTracking.uploads_today + uploads <= profile.daily_upload_limit,
            DailyUploadTracking.storage_used_today_gb + storage_gb <= profile.daily_storage_limit_gb,
        )
        .values(
            uploads_today=DailyUploadTracking.uploads_today + uploads,
            storage_used_today_gb=DailyUploadTracking.storage_used_today_gb + storage_gb,
            updated_at=utcnow(),
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise QuotaExceededError("Daily quota was consumed by a concurrent submission")

    await db.refresh(tracking)
    return tracking


async def reserve_quota(
    db: AsyncSession,
    profile: CreatorProfile,
    *,
    uploads: int = 1,
    storage_gb: Decimal = ZERO_GB,
    day: Optional[date] = None,
) -> DailyUploadTracking:
    """Check and charge in one step for `profile` on `day`."""
    tracking = await get_or_create_daily_tracking(db, profile.id, day)
    check_quota(tracking, profile, uploads=uploads, storage_gb=storage_gb)
    tracking = await commit_quota(db, tracking, profile, uploads=uploads, storage_gb=storage_gb)
    logger.info(
        "Quota charged creator_id=%s day=%s uploads=%s/%s storage=%sGB",
        profile.id,
        tracking.day,
        tracking.uploads_today,
        profile.daily_upload_limit,
        format_gb(tracking.storage_used_today_gb),
    )
    return tracking


def usage_view(profile: CreatorProfile, tracking: Optional[DailyUploadTracking], day: date) -> DailyUsageOut:
    uploads = tracking.uploads_today if tracking else 0
    used = Decimal(tracking.storage_used_today_gb) if tracking else ZERO_GB
    upload_limit = int(profile.daily_upload_limit)
    storage_limit = Decimal(profile.daily_storage_limit_gb)
    return DailyUsageOut(
        day=day,
        uploads_today=uploads,
        storage_used_today_gb=used,
        daily_upload_limit=upload_limit,
        daily_storage_limit_gb=storage_limit,
        uploads_remaining=max(0, upload_limit - uploads),
        storage_remaining_gb=max(ZERO_GB, storage_limit - used),
    )


__all__ = [
    "format_gb",
    "today_utc",
    "find_daily_tracking",
    "get_or_create_daily_tracking",
    "check_quota",
    "commit_quota",
    "reserve_quota",
    "usage_view",
]
