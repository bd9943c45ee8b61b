from __future__ import annotations

"""
Submission intake
=================
`submit_content` runs as one unit of work:

1. lock the creator profile and require `active`;
2. validate the tagged movie/series payload;
3. charge the daily quota (1 upload + total size) atomically;
4. insert the submission (and episodes), bump `total_uploads`;
5. auto-approved creators are published synchronously.

Steps 3–4 commit together or not at all. If the synchronous publish fails
the submission is kept as `pending` (quota stays charged) and goes through
normal moderation.
"""

import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Union
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.cache.invalidation import invalidate_catalog_caches
from app.core.exceptions import AppException, NotFoundError, StateConflictError, ValidationError
from app.db.base_class import utcnow
from app.db.models.content_submission import ContentSubmission
from app.db.models.submission_episode import SubmissionEpisode
from app.schemas.enums import NotificationType, SubmissionStatus, SubmissionType
from app.schemas.submission import (
    AddEpisodesIn,
    AddEpisodesResultOut,
    EpisodeIn,
    MovieSubmissionIn,
    SeriesData,
    SeriesSubmissionIn,
    SubmissionDetailOut,
    SubmissionEpisodeOut,
    SubmissionOut,
    SubmissionUpdateIn,
    SubmitResultOut,
    parse_model,
    parse_submission,
)
from app.services.creator.boundary import operation
from app.services.creator.notification_service import notify
from app.services.creator.profiles import get_profile, require_active
from app.services.creator.publisher_service import publish_submission
from app.services.creator.quota_service import reserve_quota

logger = logging.getLogger(__name__)


def _episode_rows(submission_id: UUID, episodes: Sequence[EpisodeIn]) -> List[SubmissionEpisode]:
    return [
        SubmissionEpisode(
            submission_id=submission_id,
            season_number=ep.season_number,
            episode_number=ep.episode_number,
            title=ep.title,
            description=ep.description,
            video_url=ep.video_url,
            thumbnail_url=ep.thumbnail_url,
            duration_minutes=ep.duration_minutes,
            file_size_gb=ep.file_size_gb,
        )
        for ep in episodes
    ]


def _intake_series_data(data: SeriesSubmissionIn) -> SeriesData:
    provided = data.series_data or SeriesData()
    return SeriesData(
        total_seasons=max(provided.total_seasons, max(ep.season_number for ep in data.episodes)),
        total_episodes=len(data.episodes),
        status=provided.status,
    )


async def _load_submission(
    db: AsyncSession, submission_id: UUID, *, creator_id: Optional[UUID] = None, for_update: bool = False
) -> ContentSubmission:
    stmt = select(ContentSubmission).where(ContentSubmission.id == submission_id)
    if creator_id is not None:
        stmt = stmt.where(ContentSubmission.creator_id == creator_id)
    if for_update:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    sub = (await db.execute(stmt)).scalars().first()
    if sub is None:
        raise NotFoundError("Submission not found")
    return sub


def _require_pending(sub: ContentSubmission) -> None:
    if sub.status != SubmissionStatus.PENDING:
        raise StateConflictError(
            f"Submission is already {SubmissionStatus(sub.status).value}",
            details={"status": SubmissionStatus(sub.status).value},
        )


# ─────────────────────────────────────────────────────────────
# 📥 Intake
# ─────────────────────────────────────────────────────────────
@operation("submit_content", status_code=201)
async def submit_content(
    db: AsyncSession,
    creator_id: UUID,
    payload: Union[MovieSubmissionIn, SeriesSubmissionIn, Dict[str, Any]],
    *,
    now: Optional[datetime] = None,
) -> SubmitResultOut:
    now = now or utcnow()
    profile = await get_profile(db, creator_id, for_update=True)
    require_active(profile)

    data = parse_submission(payload)
    episodes: Sequence[EpisodeIn] = data.episodes if isinstance(data, SeriesSubmissionIn) else ()
    total_size = data.file_size_gb + sum((ep.file_size_gb for ep in episodes), Decimal("0"))

    await reserve_quota(db, profile, uploads=1, storage_gb=total_size, day=now.date())

    auto = bool(profile.is_auto_approve_enabled)
    sub = ContentSubmission(
        id=uuid.uuid4(),
        creator_id=profile.id,
        type=SubmissionType(data.type),
        title=data.title,
        description=data.description,
        genre=data.genre,
        year=data.year,
        thumbnail_url=data.thumbnail_url,
        video_url=data.video_url if isinstance(data, MovieSubmissionIn) else None,
        banner_url=data.banner_url,
        series_data=_intake_series_data(data).model_dump(mode="json") if isinstance(data, SeriesSubmissionIn) else None,
        file_size_gb=total_size,
        status=SubmissionStatus.APPROVED if auto else SubmissionStatus.PENDING,
        reviewed_at=now if auto else None,
    )
    db.add(sub)
    await db.flush()
    db.add_all(_episode_rows(sub.id, episodes))
    profile.total_uploads = (profile.total_uploads or 0) + 1
    await db.flush()

    published = None
    if auto:
        try:
            published = await publish_submission(db, sub, today=now.date())
        except AppException as exc:
            logger.warning("Auto-publish failed for submission %s, left for review: %s", sub.id, exc)
            sub.status = SubmissionStatus.PENDING
            sub.reviewed_at = None
            await db.flush()

    kind = SubmissionType(sub.type).value
    if published is not None:
        await notify(
            db,
            user_id=profile.user_id,
            type=NotificationType.SUBMISSION_APPROVED,
            title="Content Published!",
            message=f'Your {kind} "{sub.title}" has been automatically approved and published!',
            submission_id=sub.id,
        )
    else:
        await notify(
            db,
            user_id=profile.user_id,
            type=NotificationType.SYSTEM,
            title="Content Submitted",
            message=f'Your {kind} "{sub.title}" has been submitted for review.',
            submission_id=sub.id,
        )
    await db.commit()

    logger.info(
        "Submission %s (%s, %s episodes, %sGB) accepted from creator %s as %s",
        sub.id,
        kind,
        len(episodes),
        total_size,
        profile.id,
        SubmissionStatus(sub.status).value,
    )
    if published is not None:
        await invalidate_catalog_caches(published.kind.value, published.id, published.slug)

    return SubmitResultOut(
        submission=SubmissionOut.model_validate(sub),
        auto_approved=published is not None,
        published=published,
    )


@operation("add_episodes_to_submission", status_code=201)
async def add_episodes_to_submission(
    db: AsyncSession,
    submission_id: UUID,
    episodes: Union[AddEpisodesIn, List[Any], Dict[str, Any]],
    *,
    creator_id: UUID,
    now: Optional[datetime] = None,
) -> AddEpisodesResultOut:
    """Append episodes to a pending series; one upload is charged per episode."""
    now = now or utcnow()
    if isinstance(episodes, list):
        episodes = {"episodes": episodes}
    data = parse_model(AddEpisodesIn, episodes)

    profile = await get_profile(db, creator_id, for_update=True)
    require_active(profile)
    sub = await _load_submission(db, submission_id, creator_id=profile.id, for_update=True)
    if sub.type != SubmissionType.SERIES:
        raise ValidationError("Episodes can only be added to series submissions")
    _require_pending(sub)

    existing = (
        await db.execute(
            select(SubmissionEpisode.season_number, SubmissionEpisode.episode_number).where(
                SubmissionEpisode.submission_id == sub.id
            )
        )
    ).all()
    taken = {(s, e) for s, e in existing}
    clashes = sorted(
        (ep.season_number, ep.episode_number) for ep in data.episodes if (ep.season_number, ep.episode_number) in taken
    )
    if clashes:
        raise ValidationError(
            "Episodes already exist: " + ", ".join(f"S{s}E{e}" for s, e in clashes),
            details={"duplicates": [{"season_number": s, "episode_number": e} for s, e in clashes]},
        )

    added_size = sum((ep.file_size_gb for ep in data.episodes), Decimal("0"))
    await reserve_quota(db, profile, uploads=len(data.episodes), storage_gb=added_size, day=now.date())

    db.add_all(_episode_rows(sub.id, data.episodes))

    previous = SeriesData.from_raw(sub.series_data)
    seasons = {s for s, _ in taken} | {ep.season_number for ep in data.episodes}
    series_data = SeriesData(
        total_seasons=max(previous.total_seasons, max(seasons)),
        total_episodes=len(taken) + len(data.episodes),
        status=previous.status,
    )
    sub.series_data = series_data.model_dump(mode="json")
    sub.file_size_gb = Decimal(sub.file_size_gb) + added_size
    await db.commit()

    logger.info("Added %s episodes to submission %s", len(data.episodes), sub.id)
    return AddEpisodesResultOut(
        submission_id=sub.id,
        added=len(data.episodes),
        series_data=series_data,
        file_size_gb=sub.file_size_gb,
    )


# ─────────────────────────────────────────────────────────────
# 🔎 Reads
# ─────────────────────────────────────────────────────────────
@operation("get_submission_details")
async def get_submission_details(
    db: AsyncSession, submission_id: UUID, creator_id: Optional[UUID] = None
) -> SubmissionDetailOut:
    sub = await _load_submission(db, submission_id, creator_id=creator_id)
    episodes = (
        await db.execute(
            select(SubmissionEpisode)
            .where(SubmissionEpisode.submission_id == sub.id)
            .order_by(SubmissionEpisode.season_number, SubmissionEpisode.episode_number)
        )
    ).scalars().all()
    detail = SubmissionDetailOut.model_validate(sub)
    detail.episodes = [SubmissionEpisodeOut.model_validate(ep) for ep in episodes]
    return detail


@operation("list_submissions")
async def list_submissions(
    db: AsyncSession,
    *,
    status: Optional[SubmissionStatus] = None,
    creator_id: Optional[UUID] = None,
    limit: int = 100,
) -> List[SubmissionOut]:
    stmt = select(ContentSubmission)
    if status is not None:
        stmt = stmt.where(ContentSubmission.status == status)
    if creator_id is not None:
        stmt = stmt.where(ContentSubmission.creator_id == creator_id)
    stmt = stmt.order_by(ContentSubmission.created_at.desc()).limit(max(1, min(limit, 500)))
    rows = (await db.execute(stmt)).scalars().all()
    return [SubmissionOut.model_validate(r) for r in rows]


# ─────────────────────────────────────────────────────────────
# ✏️ Owner edits
# ─────────────────────────────────────────────────────────────
@operation("update_submission")
async def update_submission(
    db: AsyncSession,
    submission_id: UUID,
    creator_id: UUID,
    patch: Union[SubmissionUpdateIn, Dict[str, Any]],
) -> SubmissionOut:
    data = parse_model(SubmissionUpdateIn, patch)
    sub = await _load_submission(db, submission_id, creator_id=creator_id, for_update=True)
    _require_pending(sub)

    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is None and field != "year":
            raise ValidationError(f"{field} cannot be empty")
        setattr(sub, field, value)
    await db.commit()
    logger.info("Submission %s edited by creator %s: %s", sub.id, creator_id, sorted(changes))
    return SubmissionOut.model_validate(sub)


@operation("delete_submission")
async def delete_submission(db: AsyncSession, submission_id: UUID, creator_id: UUID) -> Dict[str, str]:
    """Withdraw a pending submission; the day's quota is not refunded."""
    sub = await _load_submission(db, submission_id, creator_id=creator_id, for_update=True)
    _require_pending(sub)

    await db.execute(
        delete(SubmissionEpisode)
        .where(SubmissionEpisode.submission_id == sub.id)
        .execution_options(synchronize_session=False)
    )
    await db.delete(sub)
    await db.commit()
    logger.info("Submission %s withdrawn by creator %s", submission_id, creator_id)
    return {"deleted": str(submission_id)}


__all__ = [
    "submit_content",
    "add_episodes_to_submission",
    "get_submission_details",
    "list_submissions",
    "update_submission",
    "delete_submission",
]
