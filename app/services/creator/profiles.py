from __future__ import annotations

"""Creator profile lookups shared by the pipeline services."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, SuspensionError
from app.db.models.creator_profile import CreatorProfile
from app.schemas.creator import CreatorPolicy
from app.schemas.enums import CreatorStatus


async def get_profile(db: AsyncSession, creator_id: UUID, *, for_update: bool = False) -> CreatorProfile:
    """Load a profile by id or raise `NotFoundError`."""
    stmt = select(CreatorProfile).where(CreatorProfile.id == creator_id)
    if for_update:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    profile = (await db.execute(stmt)).scalars().first()
    if profile is None:
        raise NotFoundError("Creator profile not found")
    return profile


async def get_profile_for_user(
    db: AsyncSession, user_id: UUID, *, for_update: bool = False
) -> Optional[CreatorProfile]:
    stmt = select(CreatorProfile).where(CreatorProfile.user_id == user_id)
    if for_update:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    return (await db.execute(stmt)).scalars().first()


def require_active(profile: CreatorProfile) -> None:
    if profile.status != CreatorStatus.ACTIVE:
        raise SuspensionError(details={"status": CreatorStatus(profile.status).value})


def new_profile(user_id: UUID, policy: CreatorPolicy, *, approved_by: Optional[UUID], now: datetime) -> CreatorProfile:
    """Build an active profile seeded with the current policy defaults."""
    return CreatorProfile(
        user_id=user_id,
        status=CreatorStatus.ACTIVE,
        daily_upload_limit=policy.default_daily_upload_limit,
        daily_storage_limit_gb=policy.default_daily_storage_limit_gb,
        is_auto_approve_enabled=policy.auto_approve_new_creators,
        total_uploads=0,
        total_views=0,
        approved_by=approved_by,
        approved_at=now,
    )


__all__ = ["get_profile", "get_profile_for_user", "require_active", "new_profile"]
