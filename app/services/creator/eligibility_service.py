from __future__ import annotations

"""
Eligibility gate
================
Self-service creator access is a one-shot window on account age:
`min_account_age_days <= age <= max_account_age_days`. Once an account ages
past the window only an admin grant (`grant_creator_access`) can create a
profile.

A user has at most one `pending` request (partial unique index); approving
or rejecting it is terminal.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, StateConflictError, ValidationError
from app.db.base_class import as_utc, utcnow
from app.db.models.content_submission import ContentSubmission
from app.db.models.creator_request import CreatorRequest
from app.db.models.user import User
from app.schemas.creator import (
    CreatorPolicy,
    CreatorProfileOut,
    CreatorRequestOut,
    CreatorStatusOut,
    EligibilityOut,
)
from app.schemas.enums import CreatorRequestStatus, NotificationType, SubmissionStatus
from app.services.creator.boundary import operation
from app.services.creator.notification_service import count_unread, notify
from app.services.creator.profiles import get_profile_for_user, new_profile
from app.services.creator.quota_service import find_daily_tracking, usage_view
from app.services.creator.settings_service import get_creator_policy
from app.services.creator.strike_service import count_strikes

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_REJECTION = "Request rejected by admin"


# ─────────────────────────────────────────────────────────────
# 🧮 Pure helpers
# ─────────────────────────────────────────────────────────────
def account_age_days(created_at: datetime, now: Optional[datetime] = None) -> int:
    """Whole days elapsed since `created_at` (floored, never negative)."""
    delta = as_utc(now or utcnow()) - as_utc(created_at)
    return max(0, delta.days)


def evaluate_eligibility(age_days: int, policy: CreatorPolicy) -> EligibilityOut:
    lo, hi = policy.min_account_age_days, policy.max_account_age_days
    reason = None
    if age_days < lo:
        reason = (
            f"Your account must be at least {lo} days old to request creator access. "
            f"Current age: {age_days} days."
        )
    elif age_days > hi:
        reason = (
            f"Creator requests are only available for accounts between {lo}-{hi} days old. "
            f"Current age: {age_days} days. Please contact support."
        )
    return EligibilityOut(
        account_age_days=age_days,
        min_account_age_days=lo,
        max_account_age_days=hi,
        eligible=reason is None,
        reason=reason,
    )


async def _get_user(db: AsyncSession, user_id: UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def _pending_request(db: AsyncSession, user_id: UUID, *, for_update: bool = False) -> Optional[CreatorRequest]:
    stmt = select(CreatorRequest).where(
        CreatorRequest.user_id == user_id, CreatorRequest.status == CreatorRequestStatus.PENDING
    )
    if for_update:
        stmt = stmt.with_for_update()
    return (await db.execute(stmt)).scalars().first()


async def _load_request(db: AsyncSession, request_id: UUID) -> CreatorRequest:
    stmt = (
        select(CreatorRequest)
        .where(CreatorRequest.id == request_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    req = (await db.execute(stmt)).scalars().first()
    if req is None:
        raise NotFoundError("Creator request not found")
    if req.status != CreatorRequestStatus.PENDING:
        raise StateConflictError(
            f"Request has already been {CreatorRequestStatus(req.status).value}",
            details={"status": CreatorRequestStatus(req.status).value},
        )
    return req


# ─────────────────────────────────────────────────────────────
# 🙋 Self-service
# ─────────────────────────────────────────────────────────────
@operation("request_access", status_code=201)
async def request_access(db: AsyncSession, user_id: UUID, *, now: Optional[datetime] = None) -> CreatorRequestOut:
    policy = await get_creator_policy(db)
    if not policy.is_creator_system_enabled:
        raise StateConflictError("The creator program is not accepting requests right now")

    user = await _get_user(db, user_id)
    if await get_profile_for_user(db, user_id) is not None:
        raise StateConflictError("You are already a creator")
    if await _pending_request(db, user_id) is not None:
        raise StateConflictError("You already have a pending creator request")

    verdict = evaluate_eligibility(account_age_days(user.created_at, now), policy)
    if not verdict.eligible:
        raise ValidationError(verdict.reason, details=verdict.model_dump())

    req = CreatorRequest(
        user_id=user_id,
        status=CreatorRequestStatus.PENDING,
        account_age_days=verdict.account_age_days,
    )
    try:
        async with db.begin_nested():
            db.add(req)
    except IntegrityError as exc:
        raise StateConflictError("You already have a pending creator request") from exc

    await db.commit()
    logger.info("Creator access requested by user %s (age=%s days)", user_id, verdict.account_age_days)
    return CreatorRequestOut.model_validate(req)


# ─────────────────────────────────────────────────────────────
# 🛡️ Admin review
# ─────────────────────────────────────────────────────────────
@operation("approve_request")
async def approve_request(
    db: AsyncSession, request_id: UUID, admin_id: Optional[UUID], *, now: Optional[datetime] = None
) -> CreatorProfileOut:
    now = now or utcnow()
    req = await _load_request(db, request_id)
    policy = await get_creator_policy(db)

    req.status = CreatorRequestStatus.APPROVED
    req.reviewed_by = admin_id
    req.reviewed_at = now

    profile = await get_profile_for_user(db, req.user_id)
    if profile is None:
        profile = new_profile(req.user_id, policy, approved_by=admin_id, now=now)
        db.add(profile)
    await db.flush()

    await notify(
        db,
        user_id=req.user_id,
        type=NotificationType.SYSTEM,
        title="Creator Access Approved!",
        message="Congratulations! Your creator access request has been approved. You can now start uploading content.",
    )
    await db.commit()
    logger.info("Creator request %s approved by %s → profile %s", req.id, admin_id, profile.id)
    return CreatorProfileOut.model_validate(profile)


@operation("reject_request")
async def reject_request(
    db: AsyncSession,
    request_id: UUID,
    admin_id: Optional[UUID],
    reason: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> CreatorRequestOut:
    req = await _load_request(db, request_id)
    reason = (reason or "").strip() or DEFAULT_REQUEST_REJECTION

    req.status = CreatorRequestStatus.REJECTED
    req.rejection_reason = reason
    req.reviewed_by = admin_id
    req.reviewed_at = now or utcnow()
    await db.flush()

    await notify(
        db,
        user_id=req.user_id,
        type=NotificationType.SYSTEM,
        title="Creator Access Request Rejected",
        message=f"Your creator access request has been rejected. Reason: {reason}",
    )
    await db.commit()
    logger.info("Creator request %s rejected by %s", req.id, admin_id)
    return CreatorRequestOut.model_validate(req)


@operation("grant_creator_access", status_code=201)
async def grant_creator_access(
    db: AsyncSession, user_id: UUID, admin_id: Optional[UUID], *, now: Optional[datetime] = None
) -> CreatorProfileOut:
    """Admin override: create a profile regardless of age window or program switch."""
    now = now or utcnow()
    await _get_user(db, user_id)
    if await get_profile_for_user(db, user_id) is not None:
        raise StateConflictError("User is already a creator")

    policy = await get_creator_policy(db)
    profile = new_profile(user_id, policy, approved_by=admin_id, now=now)
    db.add(profile)

    pending = await _pending_request(db, user_id, for_update=True)
    if pending is not None:
        pending.status = CreatorRequestStatus.APPROVED
        pending.reviewed_by = admin_id
        pending.reviewed_at = now
    await db.flush()

    await notify(
        db,
        user_id=user_id,
        type=NotificationType.SYSTEM,
        title="Creator Access Granted!",
        message="An admin has granted you creator access. You can now start uploading content.",
    )
    await db.commit()
    logger.info("Creator access granted to user %s by %s", user_id, admin_id)
    return CreatorProfileOut.model_validate(profile)


# ─────────────────────────────────────────────────────────────
# 🔎 Reads
# ─────────────────────────────────────────────────────────────
@operation("list_creator_requests")
async def list_creator_requests(
    db: AsyncSession, status: Optional[CreatorRequestStatus] = None, *, limit: int = 100
) -> List[CreatorRequestOut]:
    stmt = select(CreatorRequest)
    if status is not None:
        stmt = stmt.where(CreatorRequest.status == status)
    stmt = stmt.order_by(CreatorRequest.created_at.desc()).limit(max(1, min(limit, 500)))
    rows = (await db.execute(stmt)).scalars().all()
    return [CreatorRequestOut.model_validate(r) for r in rows]


async def _submission_counts(db: AsyncSession, creator_id: UUID) -> Dict[str, int]:
    rows = await db.execute(
        select(ContentSubmission.status, func.count())
        .where(ContentSubmission.creator_id == creator_id)
        .group_by(ContentSubmission.status)
    )
    return {str(getattr(status, "value", status)): int(n) for status, n in rows.all()}


@operation("get_creator_status")
async def get_creator_status(db: AsyncSession, user_id: UUID, *, now: Optional[datetime] = None) -> CreatorStatusOut:
    now = now or utcnow()
    user = await _get_user(db, user_id)
    policy = await get_creator_policy(db)

    profile = await get_profile_for_user(db, user_id)
    if profile is not None:
        day = now.date()
        tracking = await find_daily_tracking(db, profile.id, day)
        by_status = await _submission_counts(db, profile.id)
        return CreatorStatusOut(
            is_creator=True,
            is_creator_system_enabled=policy.is_creator_system_enabled,
            profile=CreatorProfileOut.model_validate(profile),
            usage=usage_view(profile, tracking, day),
            strike_count=await count_strikes(db, profile.id),
            approved_count=by_status.get(SubmissionStatus.APPROVED.value, 0),
            pending_count=by_status.get(SubmissionStatus.PENDING.value, 0),
            rejected_count=by_status.get(SubmissionStatus.REJECTED.value, 0),
            unread_notifications=await count_unread(db, user_id),
        )

    latest = (
        await db.execute(
            select(CreatorRequest)
            .where(CreatorRequest.user_id == user_id)
            .order_by(CreatorRequest.created_at.desc())
            .limit(1)
        )
    ).scalars().first()
    return CreatorStatusOut(
        is_creator=False,
        is_creator_system_enabled=policy.is_creator_system_enabled,
        request=CreatorRequestOut.model_validate(latest) if latest else None,
        eligibility=evaluate_eligibility(account_age_days(user.created_at, now), policy),
    )


__all__ = [
    "account_age_days",
    "evaluate_eligibility",
    "request_access",
    "approve_request",
    "reject_request",
    "grant_creator_access",
    "list_creator_requests",
    "get_creator_status",
]
