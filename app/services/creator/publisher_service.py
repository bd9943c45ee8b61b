from __future__ import annotations

"""
Publisher
=========
Turns an approved submission into canonical catalog rows.

Movie    → one `movies` row.
Series   → one `series` row, one `seasons` row per distinct season number
           (ascending) and one `episodes` row per submitted episode
           (ascending within its season).

Titles and slugs are globally unique per catalog table. Both are probed
independently: the slug gains `-1`, `-2`, … and the title ` (1)`, ` (2)`, …
up to `PUBLISH_MAX_DEDUP_ATTEMPTS`. The unique constraints are the
authority; an `IntegrityError` on insert re-probes and retries once.

Everything is written inside one SAVEPOINT; on any failure it is rolled
back and `PublishError` is raised, so no orphan catalog rows survive. The
back-link on the submission is set only after the savepoint released.
"""

import logging
import uuid
from datetime import date
from itertools import groupby
from operator import attrgetter
from typing import Callable, Optional, Sequence, Tuple, Type, Union

from slugify import slugify
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import PublishError, StateConflictError
from app.db.base_class import utcnow
from app.db.models.content_submission import ContentSubmission
from app.db.models.episode import Episode
from app.db.models.movie import Movie
from app.db.models.season import Season
from app.db.models.series import Series
from app.db.models.submission_episode import SubmissionEpisode
from app.schemas.enums import SubmissionType
from app.schemas.submission import PublishedRefOut, SeriesData

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = "No description available"
DEFAULT_GENRE = "Drama"
DEFAULT_EPISODE_DURATION = 45
EMPTY_SLUG = "untitled"

_SLUG_DISALLOWED = r"[^a-z0-9]+"

CatalogModel = Union[Type[Movie], Type[Series]]


# ─────────────────────────────────────────────────────────────
# 🔤 Naming
# ─────────────────────────────────────────────────────────────
def slugify_title(title: str) -> str:
    """Lowercase, collapse every non-alphanumeric run to one hyphen, trim hyphens."""
    return slugify(title or "", lowercase=True, regex_pattern=_SLUG_DISALLOWED) or EMPTY_SLUG


def _slug_variant(base: str, n: int) -> str:
    return base if n == 0 else f"{base}-{n}"


def _title_variant(base: str, n: int) -> str:
    return base if n == 0 else f"{base} ({n})"


async def _first_free(
    db: AsyncSession,
    column,
    base: str,
    variant: Callable[[str, int], str],
    *,
    start: int = 0,
) -> Tuple[int, str]:
    """Return `(n, value)` for the first unused variant at or after `start`."""
    limit = settings.PUBLISH_MAX_DEDUP_ATTEMPTS
    candidates = [(n, variant(base, n)) for n in range(start, limit + 1)]
    if candidates:
        taken = set(
            (await db.execute(select(column).where(column.in_([value for _, value in candidates])))).scalars()
        )
        for n, value in candidates:
            if value not in taken:
                return n, value
    raise PublishError(
        f"Could not find a unique {column.key} for '{base}' after {limit} attempts",
        details={"field": column.key, "base": base, "attempts": limit},
    )


async def _insert_unique(
    db: AsyncSession,
    model: CatalogModel,
    title: str,
    build: Callable[[str, str], Union[Movie, Series]],
) -> Union[Movie, Series]:
    """Insert a catalog row with deduplicated title/slug; one retry on conflict."""
    base_slug = slugify_title(title)
    slug_n, slug = await _first_free(db, model.slug, base_slug, _slug_variant)
    title_n, final_title = await _first_free(db, model.title, title, _title_variant)

    for attempt in (1, 2):
        row = build(final_title, slug)
        try:
            async with db.begin_nested():
                db.add(row)
            return row
        except IntegrityError as exc:
            if attempt == 2:
                raise PublishError(
                    f"Unique title/slug conflict persisted for '{title}'",
                    details={"title": final_title, "slug": slug},
                ) from exc
            logger.warning("Catalog name conflict on insert (%s, %s); retrying", final_title, slug)
            next_slug = await _first_free(db, model.slug, base_slug, _slug_variant, start=slug_n)
            next_title = await _first_free(db, model.title, title, _title_variant, start=title_n)
            if (next_slug[0], next_title[0]) == (slug_n, title_n):
                next_slug = await _first_free(db, model.slug, base_slug, _slug_variant, start=slug_n + 1)
                next_title = await _first_free(db, model.title, title, _title_variant, start=title_n + 1)
            (slug_n, slug), (title_n, final_title) = next_slug, next_title
    raise AssertionError("unreachable")  # pragma: no cover


# ─────────────────────────────────────────────────────────────
# 🎬 Movie
# ─────────────────────────────────────────────────────────────
async def _publish_movie(db: AsyncSession, sub: ContentSubmission, current_year: int) -> PublishedRefOut:
    if not sub.video_url:
        raise PublishError("Movie submission has no video URL")

    def build(title: str, slug: str) -> Movie:
        return Movie(
            id=uuid.uuid4(),
            title=title,
            slug=slug,
            description=sub.description or DEFAULT_DESCRIPTION,
            genre=sub.genre or DEFAULT_GENRE,
            year=sub.year or current_year,
            poster_url=sub.thumbnail_url,
            banner_url=sub.banner_url,
            video_url=sub.video_url,
            creator_id=sub.creator_id,
        )

    movie = await _insert_unique(db, Movie, sub.title, build)
    return PublishedRefOut(kind=SubmissionType.MOVIE, id=movie.id, title=movie.title, slug=movie.slug)


# ─────────────────────────────────────────────────────────────
# 📺 Series → seasons → episodes
# ─────────────────────────────────────────────────────────────
async def _submission_episodes(db: AsyncSession, submission_id: uuid.UUID) -> Sequence[SubmissionEpisode]:
    stmt = (
        select(SubmissionEpisode)
        .where(SubmissionEpisode.submission_id == submission_id)
        .order_by(SubmissionEpisode.season_number, SubmissionEpisode.episode_number)
    )
    return (await db.execute(stmt)).scalars().all()


async def _publish_series(db: AsyncSession, sub: ContentSubmission, current_year: int) -> PublishedRefOut:
    data = SeriesData.from_raw(sub.series_data)
    episodes = await _submission_episodes(db, sub.id)
    if not episodes:
        raise PublishError("Series submission has no episodes")

    def build(title: str, slug: str) -> Series:
        return Series(
            id=uuid.uuid4(),
            title=title,
            slug=slug,
            description=sub.description or DEFAULT_DESCRIPTION,
            genre=sub.genre or DEFAULT_GENRE,
            release_year=sub.year or current_year,
            status=data.status,
            poster_url=sub.thumbnail_url,
            banner_url=sub.banner_url or sub.thumbnail_url,
            total_seasons=data.total_seasons,
            total_episodes=0,
            creator_id=sub.creator_id,
        )

    series = await _insert_unique(db, Series, sub.title, build)

    season_groups = [
        (season_number, list(group))
        for season_number, group in groupby(episodes, key=attrgetter("season_number"))
    ]
    seasons = []
    for season_number, group in season_groups:
        season = Season(
            id=uuid.uuid4(),
            series_id=series.id,
            season_number=season_number,
            title=f"Season {season_number}",
            total_episodes=len(group),
        )
        db.add(season)
        seasons.append(season)
    # Parents first: no relationship() orders these inserts for us.
    await db.flush()

    for season, (_, group) in zip(seasons, season_groups):
        db.add_all(
            Episode(
                season_id=season.id,
                series_id=series.id,
                episode_number=ep.episode_number,
                title=ep.title or f"Episode {ep.episode_number}",
                description=ep.description,
                video_url=ep.video_url,
                thumbnail_url=ep.thumbnail_url or sub.thumbnail_url,
                duration_minutes=ep.duration_minutes or DEFAULT_EPISODE_DURATION,
            )
            for ep in group
        )

    season_count = len(season_groups)
    episode_count = len(episodes)
    series.total_seasons = season_count
    series.total_episodes = episode_count
    await db.flush()
    logger.debug("Series %s materialised: %s seasons, %s episodes", series.id, season_count, episode_count)
    return PublishedRefOut(
        kind=SubmissionType.SERIES,
        id=series.id,
        title=series.title,
        slug=series.slug,
        total_seasons=season_count,
        total_episodes=episode_count,
    )


# ─────────────────────────────────────────────────────────────
# 🚀 Entry point
# ─────────────────────────────────────────────────────────────
async def publish_submission(
    db: AsyncSession, submission: ContentSubmission, *, today: Optional[date] = None
) -> PublishedRefOut:
    """Materialise `submission` into the catalog and link it back.

    Raises `StateConflictError` if it is already linked and `PublishError`
    when naming is exhausted or a catalog insert fails. The caller owns the
    outer transaction (commit/compensation).
    """
    if submission.published_movie_id or submission.published_series_id:
        raise StateConflictError(
            "Submission has already been published",
            details={"submission_id": str(submission.id), "published_id": str(submission.published_id)},
        )

    current_year = (today or utcnow().date()).year
    kind = SubmissionType(submission.type)
    await db.flush()
    try:
        async with db.begin_nested():
            if kind == SubmissionType.MOVIE:
                published = await _publish_movie(db, submission, current_year)
            else:
                published = await _publish_series(db, submission, current_year)
    except SQLAlchemyError as exc:
        logger.error("Catalog write failed for submission %s", submission.id, exc_info=True)
        raise PublishError(
            "Failed to write catalog entities", details={"submission_id": str(submission.id)}
        ) from exc

    if kind == SubmissionType.MOVIE:
        submission.published_movie_id = published.id
    else:
        submission.published_series_id = published.id
    await db.flush()

    logger.info(
        "Published submission %s as %s %s (title=%r, slug=%s)",
        submission.id,
        kind.value,
        published.id,
        published.title,
        published.slug,
    )
    return published


__all__ = ["slugify_title", "publish_submission", "DEFAULT_DESCRIPTION", "DEFAULT_GENRE"]
