from __future__ import annotations

"""
Strikes, suspension & creator limits
====================================
Strikes are append-only. After every insert the total is recounted from the
table (never a cached counter), and an `active` creator whose total has
reached `max_strikes_before_suspension` is suspended on the spot. The
threshold is read from the policy at that moment, so lowering it takes
effect on the next strike.

Suspension and reinstatement are also explicit admin actions, independent
of the strike count. Reinstating does not clear strikes.
"""

import logging
from datetime import datetime
from typing import Any, List, Optional, Union
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StateConflictError, ValidationError
from app.db.base_class import utcnow
from app.db.models.content_submission import ContentSubmission
from app.db.models.creator_profile import CreatorProfile
from app.db.models.creator_request import CreatorRequest
from app.db.models.creator_strike import CreatorStrike
from app.db.models.user import User
from app.schemas.creator import (
    CreatorListItemOut,
    CreatorProfileOut,
    CreatorStatsOut,
    CreatorStrikeOut,
    CreatorUserOut,
    LimitsUpdateIn,
    StrikeResultOut,
)
from app.schemas.enums import CreatorRequestStatus, CreatorStatus, NotificationType
from app.schemas.submission import parse_model
from app.services.creator.boundary import operation
from app.services.creator.notification_service import notify
from app.services.creator.profiles import get_profile
from app.services.creator.quota_service import format_gb
from app.services.creator.settings_service import get_creator_policy

logger = logging.getLogger(__name__)


def auto_suspension_reason(max_strikes: int) -> str:
    return f"Automatically suspended after {max_strikes} strikes"


async def count_strikes(db: AsyncSession, creator_id: UUID) -> int:
    total = await db.scalar(
        select(func.count()).select_from(CreatorStrike).where(CreatorStrike.creator_id == creator_id)
    )
    return int(total or 0)


def _clean_reason(reason: Optional[str]) -> str:
    cleaned = (reason or "").strip()
    if len(cleaned) < 3:
        raise ValidationError("A reason of at least 3 characters is required")
    return cleaned


# ─────────────────────────────────────────────────────────────
# ⚠️ Strikes
# ─────────────────────────────────────────────────────────────
@operation("add_strike", status_code=201)
async def add_strike(
    db: AsyncSession,
    creator_id: UUID,
    reason: str,
    issued_by: Optional[UUID],
    *,
    now: Optional[datetime] = None,
) -> StrikeResultOut:
    reason = _clean_reason(reason)
    profile = await get_profile(db, creator_id, for_update=True)
    policy = await get_creator_policy(db)
    max_strikes = policy.max_strikes_before_suspension

    strike = CreatorStrike(creator_id=profile.id, reason=reason, issued_by=issued_by, issued_at=now or utcnow())
    db.add(strike)
    await db.flush()

    total = await count_strikes(db, profile.id)
    suspended_now = total >= max_strikes and profile.status == CreatorStatus.ACTIVE
    if suspended_now:
        profile.status = CreatorStatus.SUSPENDED
        profile.suspended_reason = auto_suspension_reason(max_strikes)
        await db.flush()

    await notify(
        db,
        user_id=profile.user_id,
        type=NotificationType.STRIKE_RECEIVED,
        title="Strike Issued",
        message=f"You have received a strike. Reason: {reason}. Total strikes: {total}/{max_strikes}",
    )
    if suspended_now:
        await notify(
            db,
            user_id=profile.user_id,
            type=NotificationType.SYSTEM,
            title="Account Suspended",
            message=f"Your creator account has been suspended. Reason: {profile.suspended_reason}",
        )
    await db.commit()

    logger.info("Strike %s issued to creator %s (%s/%s)", strike.id, profile.id, total, max_strikes)
    if suspended_now:
        logger.warning("Creator %s auto-suspended after %s strikes", profile.id, total)

    return StrikeResultOut(
        strike=CreatorStrikeOut.model_validate(strike),
        total_strikes=total,
        max_strikes=max_strikes,
        suspended=profile.status == CreatorStatus.SUSPENDED,
        profile=CreatorProfileOut.model_validate(profile),
    )


# ─────────────────────────────────────────────────────────────
# ⛔ Suspension
# ─────────────────────────────────────────────────────────────
@operation("suspend_creator")
async def suspend_creator(
    db: AsyncSession, creator_id: UUID, reason: str, admin_id: Optional[UUID] = None
) -> CreatorProfileOut:
    reason = _clean_reason(reason)
    profile = await get_profile(db, creator_id, for_update=True)
    if profile.status == CreatorStatus.BANNED:
        raise StateConflictError("Creator is banned", details={"status": CreatorStatus.BANNED.value})

    profile.status = CreatorStatus.SUSPENDED
    profile.suspended_reason = reason
    await db.flush()
    await notify(
        db,
        user_id=profile.user_id,
        type=NotificationType.SYSTEM,
        title="Account Suspended",
        message=f"Your creator account has been suspended. Reason: {reason}",
    )
    await db.commit()
    logger.warning("Creator %s suspended by %s: %s", profile.id, admin_id, reason)
    return CreatorProfileOut.model_validate(profile)


@operation("unsuspend_creator")
async def unsuspend_creator(db: AsyncSession, creator_id: UUID, admin_id: Optional[UUID] = None) -> CreatorProfileOut:
    profile = await get_profile(db, creator_id, for_update=True)
    if profile.status != CreatorStatus.SUSPENDED:
        raise StateConflictError(
            "Creator is not suspended", details={"status": CreatorStatus(profile.status).value}
        )

    profile.status = CreatorStatus.ACTIVE
    profile.suspended_reason = None
    await db.flush()
    await notify(
        db,
        user_id=profile.user_id,
        type=NotificationType.SYSTEM,
        title="Account Reinstated",
        message="Your creator account has been reinstated. You can now upload content again.",
    )
    await db.commit()
    logger.info("Creator %s reinstated by %s", profile.id, admin_id)
    return CreatorProfileOut.model_validate(profile)


# ─────────────────────────────────────────────────────────────
# 📏 Limits
# ─────────────────────────────────────────────────────────────
@operation("update_creator_limits")
async def update_creator_limits(
    db: AsyncSession,
    creator_id: UUID,
    patch: Union[LimitsUpdateIn, dict[str, Any]],
    admin_id: Optional[UUID] = None,
) -> CreatorProfileOut:
    data = parse_model(LimitsUpdateIn, patch)
    changes = data.model_dump(exclude_none=True)
    if not changes:
        raise ValidationError("Provide at least one limit to update")

    profile = await get_profile(db, creator_id, for_update=True)
    for field, value in changes.items():
        setattr(profile, field, value)
    await db.flush()

    await notify(
        db,
        user_id=profile.user_id,
        type=NotificationType.LIMIT_INCREASED,
        title="Limits Updated",
        message=(
            f"Your upload limits have been updated. Daily uploads: {profile.daily_upload_limit}, "
            f"Daily storage: {format_gb(profile.daily_storage_limit_gb)}GB"
        ),
    )
    await db.commit()
    logger.info("Creator %s limits updated by %s: %s", profile.id, admin_id, sorted(changes))
    return CreatorProfileOut.model_validate(profile)


# ─────────────────────────────────────────────────────────────
# 📋 Roster
# ─────────────────────────────────────────────────────────────
@operation("list_creators")
async def list_creators(
    db: AsyncSession, status: Optional[CreatorStatus] = None, *, limit: int = 100
) -> List[CreatorListItemOut]:
    """Creator profiles newest first, each with its user and strike total."""
    strikes = (
        select(CreatorStrike.creator_id, func.count().label("n"))
        .group_by(CreatorStrike.creator_id)
        .subquery()
    )
    stmt = (
        select(CreatorProfile, User, func.coalesce(strikes.c.n, 0))
        .join(User, User.id == CreatorProfile.user_id)
        .outerjoin(strikes, strikes.c.creator_id == CreatorProfile.id)
    )
    if status is not None:
        stmt = stmt.where(CreatorProfile.status == status)
    stmt = stmt.order_by(CreatorProfile.created_at.desc()).limit(max(1, min(limit, 500)))

    items = []
    for profile, user, strike_count in (await db.execute(stmt)).all():
        row = CreatorProfileOut.model_validate(profile).model_dump()
        items.append(
            CreatorListItemOut(**row, user=CreatorUserOut.model_validate(user), strike_count=int(strike_count))
        )
    return items


# ─────────────────────────────────────────────────────────────
# 📊 Stats
# ─────────────────────────────────────────────────────────────
@operation("get_creator_stats")
async def get_creator_stats(db: AsyncSession) -> CreatorStatsOut:
    by_status = {s.value: 0 for s in CreatorStatus}
    for status, n in (
        await db.execute(select(CreatorProfile.status, func.count()).group_by(CreatorProfile.status))
    ).all():
        by_status[CreatorStatus(status).value] = int(n)

    pending = await db.scalar(
        select(func.count())
        .select_from(CreatorRequest)
        .where(CreatorRequest.status == CreatorRequestStatus.PENDING)
    )

    submissions: dict[str, int] = {}
    for status, n in (
        await db.execute(select(ContentSubmission.status, func.count()).group_by(ContentSubmission.status))
    ).all():
        submissions[str(getattr(status, "value", status))] = int(n)

    return CreatorStatsOut(
        total_creators=sum(by_status.values()),
        creators_by_status=by_status,
        pending_requests=int(pending or 0),
        submissions_by_status=submissions,
    )


__all__ = [
    "auto_suspension_reason",
    "count_strikes",
    "add_strike",
    "suspend_creator",
    "unsuspend_creator",
    "update_creator_limits",
    "list_creators",
    "get_creator_stats",
]
