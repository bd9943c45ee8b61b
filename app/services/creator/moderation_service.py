from __future__ import annotations

"""
Moderation workflow
===================
`pending → approved` or `pending → rejected`; both are terminal.

Approval is a two-step saga:

1. **claim**: lock the row, require `pending`, mark `approved` and commit,
   so a concurrent second approve sees `approved` and gets a conflict;
2. **publish**: materialise catalog rows, link them, notify, commit.

Compensation: if step 2 fails the session is rolled back and the row is
put back to `pending` (review fields cleared) before the error is
surfaced. A submission is never left `approved` without a published
entity.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.cache.invalidation import invalidate_catalog_caches
from app.core.exceptions import AppException, NotFoundError, PublishError, StateConflictError
from app.db.base_class import utcnow
from app.db.models.content_submission import ContentSubmission
from app.db.models.creator_profile import CreatorProfile
from app.schemas.enums import NotificationType, SubmissionStatus, SubmissionType
from app.schemas.submission import ModerationResultOut, SubmissionOut
from app.services.creator.boundary import operation
from app.services.creator.notification_service import notify
from app.services.creator.publisher_service import publish_submission

logger = logging.getLogger(__name__)

DEFAULT_SUBMISSION_REJECTION = "Rejected by admin"


async def _claim_pending(db: AsyncSession, submission_id: UUID) -> ContentSubmission:
    stmt = (
        select(ContentSubmission)
        .where(ContentSubmission.id == submission_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    sub = (await db.execute(stmt)).scalars().first()
    if sub is None:
        raise NotFoundError("Submission not found")
    if sub.status != SubmissionStatus.PENDING:
        raise StateConflictError(
            f"Submission is already {SubmissionStatus(sub.status).value}",
            details={"status": SubmissionStatus(sub.status).value},
        )
    return sub


async def _creator_user_id(db: AsyncSession, creator_id: UUID) -> Optional[UUID]:
    return await db.scalar(select(CreatorProfile.user_id).where(CreatorProfile.id == creator_id))


async def _revert_to_pending(db: AsyncSession, submission_id: UUID) -> None:
    """Compensating action for a failed publish."""
    await db.rollback()
    await db.execute(
        update(ContentSubmission)
        .where(
            ContentSubmission.id == submission_id,
            ContentSubmission.status == SubmissionStatus.APPROVED,
            ContentSubmission.published_movie_id.is_(None),
            ContentSubmission.published_series_id.is_(None),
        )
        .values(status=SubmissionStatus.PENDING, reviewed_by=None, reviewed_at=None, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    logger.warning("Submission %s reverted to pending after failed publish", submission_id)


@operation("approve_submission")
async def approve_submission(
    db: AsyncSession, submission_id: UUID, admin_id: Optional[UUID], *, now: Optional[datetime] = None
) -> ModerationResultOut:
    now = now or utcnow()

    # step 1: claim
    sub = await _claim_pending(db, submission_id)
    sub.status = SubmissionStatus.APPROVED
    sub.reviewed_by = admin_id
    sub.reviewed_at = now
    sub.rejection_reason = None
    await db.commit()

    # step 2: publish
    try:
        published = await publish_submission(db, sub, today=now.date())
        user_id = await _creator_user_id(db, sub.creator_id)
        if user_id is not None:
            await notify(
                db,
                user_id=user_id,
                type=NotificationType.SUBMISSION_APPROVED,
                title="Content Approved!",
                message=f'Your {SubmissionType(sub.type).value} "{sub.title}" has been approved and published!',
                submission_id=sub.id,
            )
        await db.commit()
    except (AppException, SQLAlchemyError) as exc:
        await _revert_to_pending(db, submission_id)
        if isinstance(exc, AppException):
            raise
        raise PublishError("Failed to publish submission", details={"submission_id": str(submission_id)}) from exc

    logger.info("Submission %s approved by %s and published as %s", submission_id, admin_id, published.id)
    await invalidate_catalog_caches(published.kind.value, published.id, published.slug)
    return ModerationResultOut(submission=SubmissionOut.model_validate(sub), published=published)


@operation("reject_submission")
async def reject_submission(
    db: AsyncSession,
    submission_id: UUID,
    admin_id: Optional[UUID],
    reason: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> ModerationResultOut:
    """Terminal rejection; quota charged at intake stays charged, no strike is issued."""
    reason = (reason or "").strip() or DEFAULT_SUBMISSION_REJECTION
    sub = await _claim_pending(db, submission_id)
    sub.status = SubmissionStatus.REJECTED
    sub.rejection_reason = reason
    sub.reviewed_by = admin_id
    sub.reviewed_at = now or utcnow()
    await db.flush()

    user_id = await _creator_user_id(db, sub.creator_id)
    if user_id is not None:
        await notify(
            db,
            user_id=user_id,
            type=NotificationType.SUBMISSION_REJECTED,
            title="Content Rejected",
            message=f'Your {SubmissionType(sub.type).value} "{sub.title}" has been rejected. Reason: {reason}',
            submission_id=sub.id,
        )
    await db.commit()
    logger.info("Submission %s rejected by %s", submission_id, admin_id)
    return ModerationResultOut(submission=SubmissionOut.model_validate(sub))


__all__ = ["approve_submission", "reject_submission"]
