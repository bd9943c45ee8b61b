from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.models.content_submission import ContentSubmission
from app.db.models.creator_notification import CreatorNotification
from app.db.models.daily_upload_tracking import DailyUploadTracking
from app.db.models.movie import Movie
from app.db.models.submission_episode import SubmissionEpisode
from app.schemas.enums import CreatorStatus, SeriesStatus, SubmissionStatus, SubmissionType
from app.services.creator.submission_service import (
    add_episodes_to_submission,
    delete_submission,
    get_submission_details,
    list_submissions,
    submit_content,
    update_submission,
)
from tests.utils.factory import (
    create_creator,
    create_pending_submission,
    episode_payload,
    movie_payload,
    series_payload,
)

NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


async def _tracking(db: AsyncSession, creator_id) -> DailyUploadTracking:
    return (
        await db.execute(
            select(DailyUploadTracking)
            .where(DailyUploadTracking.creator_id == creator_id)
            .execution_options(populate_existing=True)
        )
    ).scalars().one()


# ─────────────────────────────────────────────────────────────
# 📥 Intake
# ─────────────────────────────────────────────────────────────
@pytest.mark.anyio
async def test_movie_submission_is_pending_and_charges_quota(db_session: AsyncSession):
    user, profile = await create_creator(db_session)

    result = await submit_content(db_session, profile.id, movie_payload(), now=NOW)

    assert result.success, result.error
    assert result.status_code == 201
    data = result.data
    assert data.auto_approved is False
    assert data.published is None
    assert data.submission.status == SubmissionStatus.PENDING
    assert data.submission.file_size_gb == Decimal("1.5")

    tracking = await _tracking(db_session, profile.id)
    assert tracking.uploads_today == 1
    assert Decimal(tracking.storage_used_today_gb) == Decimal("1.5")
    await db_session.refresh(profile)
    assert profile.total_uploads == 1

    note = (
        await db_session.execute(select(CreatorNotification).where(CreatorNotification.user_id == user.id))
    ).scalars().one()
    assert note.title == "Content Submitted"
    assert note.submission_id == data.submission.id


@pytest.mark.anyio
async def test_series_submission_stores_episodes_and_sums_sizes(db_session: AsyncSession):
    _, profile = await create_creator(db_session)
    payload = series_payload([(1, 1), (1, 2), (2, 1)], file_size_gb="0.25")

    result = await submit_content(db_session, profile.id, payload, now=NOW)

    assert result.success, result.error
    sub = result.data.submission
    assert sub.type == SubmissionType.SERIES
    assert sub.video_url is None
    assert sub.file_size_gb == Decimal("1.75")
    assert sub.series_data.total_seasons == 2
    assert sub.series_data.total_episodes == 3

    stored = (
        await db_session.execute(
            select(SubmissionEpisode.season_number, SubmissionEpisode.episode_number)
            .where(SubmissionEpisode.submission_id == sub.id)
            .order_by(SubmissionEpisode.season_number, SubmissionEpisode.episode_number)
        )
    ).all()
    assert [tuple(r) for r in stored] == [(1, 1), (1, 2), (2, 1)]


@pytest.mark.anyio
@pytest.mark.parametrize(
    "blob",
    ["{not json", {"totalSeasons": "abc"}, {"total_seasons": 0}, 42],
)
async def test_malformed_series_data_is_defaulted_at_intake(db_session: AsyncSession, blob):
    _, profile = await create_creator(db_session)

    result = await submit_content(db_session, profile.id, series_payload([(1, 1), (1, 2)], series_data=blob), now=NOW)

    assert result.success, result.error
    data = result.data.submission.series_data
    assert (data.total_seasons, data.total_episodes, data.status) == (1, 2, SeriesStatus.ONGOING)


@pytest.mark.anyio
async def test_fifth_upload_of_the_day_is_refused(db_session: AsyncSession):
    _, profile = await create_creator(db_session, daily_storage_limit_gb=Decimal("100"))
    creator_id = profile.id
    for i in range(4):
        ok = await submit_content(db_session, creator_id, movie_payload(title=f"Reel {i}"), now=NOW)
        assert ok.success, ok.error

    refused = await submit_content(db_session, creator_id, movie_payload(title="Reel 5"), now=NOW)

    assert refused.error.code == "QuotaExceededError"
    assert refused.status_code == 429
    assert refused.error.message == "Daily upload limit reached (4 uploads per day)"
    count = await db_session.scalar(select(func.count()).select_from(ContentSubmission))
    assert count == 4
    assert (await _tracking(db_session, creator_id)).uploads_today == 4


@pytest.mark.anyio
async def test_storage_overflow_is_refused_and_nothing_persists(db_session: AsyncSession):
    _, profile = await create_creator(db_session, daily_storage_limit_gb=Decimal("8"))
    creator_id = profile.id
    assert (await submit_content(db_session, creator_id, movie_payload(file_size_gb="6"), now=NOW)).success

    refused = await submit_content(
        db_session, creator_id, movie_payload(title="Too Big", file_size_gb="2.5"), now=NOW
    )

    assert refused.error.code == "QuotaExceededError"
    assert refused.error.message == "Daily storage limit would be exceeded. Used: 6.00GB, Limit: 8GB"
    tracking = await _tracking(db_session, creator_id)
    assert tracking.uploads_today == 1
    assert Decimal(tracking.storage_used_today_gb) == Decimal("6")


@pytest.mark.anyio
async def test_quota_resets_on_the_next_utc_day(db_session: AsyncSession):
    _, profile = await create_creator(db_session, daily_upload_limit=1)
    creator_id = profile.id
    assert (await submit_content(db_session, creator_id, movie_payload(), now=NOW)).success
    assert not (await submit_content(db_session, creator_id, movie_payload(title="Again"), now=NOW)).success

    tomorrow = await submit_content(
        db_session, creator_id, movie_payload(title="Again"), now=NOW + timedelta(days=1)
    )

    assert tomorrow.success, tomorrow.error


@pytest.mark.anyio
async def test_suspended_creator_cannot_submit(db_session: AsyncSession):
    _, profile = await create_creator(db_session, status=CreatorStatus.SUSPENDED)

    result = await submit_content(db_session, profile.id, movie_payload(), now=NOW)

    assert result.error.code == "SuspensionError"
    assert result.status_code == 403
    assert await db_session.scalar(select(func.count()).select_from(DailyUploadTracking)) == 0


@pytest.mark.anyio
@pytest.mark.parametrize(
    "payload,fragment",
    [
        (movie_payload(video_url=None), "video_url"),
        (movie_payload(title="ab"), "title"),
        (movie_payload(description="too short"), "description"),
        (series_payload([]), "episodes"),
        (series_payload([(1, 1), (1, 1)]), "Duplicate episode S1E1"),
        ({**movie_payload(), "type": "podcast"}, "type"),
    ],
)
async def test_invalid_payloads_are_rejected_before_quota(db_session: AsyncSession, payload, fragment):
    _, profile = await create_creator(db_session)

    result = await submit_content(db_session, profile.id, payload, now=NOW)

    assert result.error.code == "ValidationError"
    assert result.status_code == 422
    assert fragment in result.error.message
    assert await db_session.scalar(select(func.count()).select_from(DailyUploadTracking)) == 0


@pytest.mark.anyio
async def test_auto_approved_creator_is_published_immediately(db_session: AsyncSession, redis_client):
    user, profile = await create_creator(db_session, is_auto_approve_enabled=True)
    await redis_client.set("movie:list:page:1", "[]")

    result = await submit_content(db_session, profile.id, movie_payload(), now=NOW)

    assert result.success, result.error
    data = result.data
    assert data.auto_approved is True
    assert data.submission.status == SubmissionStatus.APPROVED
    assert data.submission.published_movie_id == data.published.id
    movie = await db_session.get(Movie, data.published.id)
    assert movie.slug == "night-train"
    assert await redis_client.get("movie:list:page:1") is None

    titles = (
        await db_session.execute(select(CreatorNotification.title).where(CreatorNotification.user_id == user.id))
    ).scalars().all()
    assert titles == ["Content Published!"]


@pytest.mark.anyio
async def test_auto_publish_failure_leaves_submission_pending(db_session: AsyncSession, monkeypatch):
    monkeypatch.setattr(settings, "PUBLISH_MAX_DEDUP_ATTEMPTS", 1)
    _, profile = await create_creator(db_session, is_auto_approve_enabled=True)
    for slug in ("night-train", "night-train-1"):
        db_session.add(
            Movie(
                title=f"Existing {slug}",
                slug=slug,
                description="Seeded",
                genre="Drama",
                year=2020,
                poster_url="https://cdn.example.com/p.jpg",
                video_url="https://cdn.example.com/v.mp4",
            )
        )
    await db_session.commit()

    result = await submit_content(db_session, profile.id, movie_payload(), now=NOW)

    assert result.success, result.error
    assert result.data.auto_approved is False
    assert result.data.submission.status == SubmissionStatus.PENDING
    assert result.data.submission.published_movie_id is None
    assert await db_session.scalar(select(func.count()).select_from(Movie)) == 2
    assert (await _tracking(db_session, profile.id)).uploads_today == 1


# ─────────────────────────────────────────────────────────────
# ➕ Add episodes
# ─────────────────────────────────────────────────────────────
@pytest.mark.anyio
async def test_add_episodes_appends_and_charges_per_episode(db_session: AsyncSession):
    _, profile = await create_creator(db_session)
    sub = (await submit_content(db_session, profile.id, series_payload([(1, 1)]), now=NOW)).data.submission

    result = await add_episodes_to_submission(
        db_session,
        sub.id,
        [episode_payload(1, 2), episode_payload(2, 1)],
        creator_id=profile.id,
        now=NOW,
    )

    assert result.success, result.error
    assert result.data.added == 2
    assert result.data.series_data.total_seasons == 2
    assert result.data.series_data.total_episodes == 3
    assert result.data.file_size_gb == Decimal("1.5")
    tracking = await _tracking(db_session, profile.id)
    assert tracking.uploads_today == 3
    await db_session.refresh(profile)
    assert profile.total_uploads == 1


@pytest.mark.anyio
async def test_add_episodes_rejects_existing_numbers(db_session: AsyncSession):
    _, profile = await create_creator(db_session)
    sub = (
        await submit_content(db_session, profile.id, series_payload([(1, 1), (1, 2)]), now=NOW)
    ).data.submission

    result = await add_episodes_to_submission(
        db_session, sub.id, [episode_payload(1, 1), episode_payload(1, 3)], creator_id=profile.id, now=NOW
    )

    assert result.error.code == "ValidationError"
    assert result.error.message == "Episodes already exist: S1E1"
    assert (await _tracking(db_session, sub.creator_id)).uploads_today == 1


@pytest.mark.anyio
async def test_add_episodes_only_for_pending_series(db_session: AsyncSession):
    _, profile = await create_creator(db_session)
    movie = await create_pending_submission(db_session, profile)
    approved = await create_pending_submission(
        db_session, profile, type=SubmissionType.SERIES, title="Done Deal",
        episodes=[(1, 1)], status=SubmissionStatus.APPROVED,
    )

    creator_id, movie_id, approved_id = profile.id, movie.id, approved.id

    on_movie = await add_episodes_to_submission(
        db_session, movie_id, [episode_payload(1, 1)], creator_id=creator_id, now=NOW
    )
    on_approved = await add_episodes_to_submission(
        db_session, approved_id, [episode_payload(1, 2)], creator_id=creator_id, now=NOW
    )

    assert on_movie.error.code == "ValidationError"
    assert on_approved.error.code == "StateConflictError"


@pytest.mark.anyio
async def test_add_episodes_respects_upload_cap(db_session: AsyncSession):
    _, profile = await create_creator(db_session, daily_upload_limit=2)
    sub = (await submit_content(db_session, profile.id, series_payload([(1, 1)]), now=NOW)).data.submission

    result = await add_episodes_to_submission(
        db_session, sub.id, [episode_payload(1, 2), episode_payload(1, 3)], creator_id=profile.id, now=NOW
    )

    assert result.error.code == "QuotaExceededError"
    count = await db_session.scalar(
        select(func.count()).select_from(SubmissionEpisode).where(SubmissionEpisode.submission_id == sub.id)
    )
    assert count == 1


@pytest.mark.anyio
async def test_other_creators_submission_is_not_found(db_session: AsyncSession):
    _, owner = await create_creator(db_session)
    _, intruder = await create_creator(db_session)
    sub = await create_pending_submission(db_session, owner, type=SubmissionType.SERIES, episodes=[(1, 1)])

    result = await add_episodes_to_submission(
        db_session, sub.id, [episode_payload(1, 2)], creator_id=intruder.id, now=NOW
    )

    assert result.error.code == "NotFoundError"


# ─────────────────────────────────────────────────────────────
# 🔎 Reads & owner edits
# ─────────────────────────────────────────────────────────────
@pytest.mark.anyio
async def test_details_include_ordered_episodes(db_session: AsyncSession):
    _, profile = await create_creator(db_session)
    sub = await create_pending_submission(
        db_session, profile, type=SubmissionType.SERIES, episodes=[(2, 1), (1, 2), (1, 1)]
    )

    detail = (await get_submission_details(db_session, sub.id, profile.id)).data

    assert [(e.season_number, e.episode_number) for e in detail.episodes] == [(1, 1), (1, 2), (2, 1)]


@pytest.mark.anyio
async def test_list_filters_by_creator_and_status(db_session: AsyncSession):
    _, mine = await create_creator(db_session)
    _, theirs = await create_creator(db_session)
    await create_pending_submission(db_session, mine, title="Mine Pending")
    await create_pending_submission(db_session, mine, title="Mine Rejected", status=SubmissionStatus.REJECTED)
    await create_pending_submission(db_session, theirs, title="Theirs")

    pending = (await list_submissions(db_session, status=SubmissionStatus.PENDING, creator_id=mine.id)).data
    all_mine = (await list_submissions(db_session, creator_id=mine.id)).data

    assert [s.title for s in pending] == ["Mine Pending"]
    assert len(all_mine) == 2


@pytest.mark.anyio
async def test_update_pending_submission(db_session: AsyncSession):
    _, profile = await create_creator(db_session)
    sub = await create_pending_submission(db_session, profile)

    result = await update_submission(db_session, sub.id, profile.id, {"title": "Night Train Redux", "year": None})

    assert result.success, result.error
    assert result.data.title == "Night Train Redux"
    assert result.data.year is None


@pytest.mark.anyio
async def test_update_rejects_non_pending(db_session: AsyncSession):
    _, profile = await create_creator(db_session)
    sub = await create_pending_submission(db_session, profile, status=SubmissionStatus.REJECTED)

    result = await update_submission(db_session, sub.id, profile.id, {"genre": "Noir"})

    assert result.error.code == "StateConflictError"


@pytest.mark.anyio
async def test_delete_withdraws_but_keeps_quota_charged(db_session: AsyncSession):
    _, profile = await create_creator(db_session)
    sub = (await submit_content(db_session, profile.id, series_payload([(1, 1)]), now=NOW)).data.submission

    result = await delete_submission(db_session, sub.id, profile.id)

    assert result.success, result.error
    assert await db_session.scalar(select(func.count()).select_from(ContentSubmission)) == 0
    assert await db_session.scalar(select(func.count()).select_from(SubmissionEpisode)) == 0
    assert (await _tracking(db_session, profile.id)).uploads_today == 1
