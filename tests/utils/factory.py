# tests/utils/factory.py

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.content_submission import ContentSubmission
from app.db.models.creator_profile import CreatorProfile
from app.db.models.creator_settings import SETTINGS_ROW_ID, CreatorSettings
from app.db.models.submission_episode import SubmissionEpisode
from app.db.models.user import User
from app.schemas.enums import CreatorStatus, OrgRole, SubmissionStatus, SubmissionType


async def create_user(
    session: AsyncSession,
    *,
    email: Optional[str] = None,
    role: OrgRole = OrgRole.USER,
    is_active: bool = True,
    age_days: int = 45,
    now: Optional[datetime] = None,
    **kwargs: Any,
) -> User:
    """
    ✅ Create a user whose account is `age_days` old (relative to `now`).

    The default age sits inside the default 30–90 day eligibility window.
    """
    now = now or datetime.now(timezone.utc)
    user = User(
        id=uuid.uuid4(),
        email=email or f"user_{uuid.uuid4().hex[:10]}@example.com",
        username=f"user_{uuid.uuid4().hex[:8]}",
        full_name="Test User",
        role=role,
        is_active=is_active,
        created_at=now - timedelta(days=age_days),
        updated_at=now,
        **kwargs,
    )
    session.add(user)
    await session.commit()
    return user


async def create_admin(session: AsyncSession, **kwargs: Any) -> User:
    return await create_user(session, role=OrgRole.ADMIN, age_days=400, **kwargs)


async def create_creator(
    session: AsyncSession,
    *,
    user: Optional[User] = None,
    status: CreatorStatus = CreatorStatus.ACTIVE,
    daily_upload_limit: int = 4,
    daily_storage_limit_gb: Decimal = Decimal("8"),
    is_auto_approve_enabled: bool = False,
) -> Tuple[User, CreatorProfile]:
    """Create (or reuse `user`) plus an approved creator profile."""
    user = user or await create_user(session)
    profile = CreatorProfile(
        id=uuid.uuid4(),
        user_id=user.id,
        status=status,
        suspended_reason="Manual" if status == CreatorStatus.SUSPENDED else None,
        daily_upload_limit=daily_upload_limit,
        daily_storage_limit_gb=daily_storage_limit_gb,
        is_auto_approve_enabled=is_auto_approve_enabled,
        total_uploads=0,
        total_views=0,
        approved_at=datetime.now(timezone.utc),
    )
    session.add(profile)
    await session.commit()
    return user, profile


async def save_creator_settings(session: AsyncSession, **values: Any) -> CreatorSettings:
    row = CreatorSettings(id=SETTINGS_ROW_ID, **values)
    session.add(row)
    await session.commit()
    return row


async def create_pending_submission(
    session: AsyncSession,
    profile: CreatorProfile,
    *,
    type: SubmissionType = SubmissionType.MOVIE,
    title: str = "Night Train",
    episodes: Optional[List[Tuple[int, int]]] = None,
    status: SubmissionStatus = SubmissionStatus.PENDING,
    series_data: Optional[Dict[str, Any]] = None,
    video_url: Optional[str] = "https://cdn.example.com/v/night-train.mp4",
) -> ContentSubmission:
    """Insert a submission directly (bypassing intake and quota)."""
    sub = ContentSubmission(
        id=uuid.uuid4(),
        creator_id=profile.id,
        type=type,
        title=title,
        description="A long enough description for the catalog entry.",
        genre="Thriller",
        year=2023,
        thumbnail_url="https://cdn.example.com/t/thumb.jpg",
        video_url=video_url if type == SubmissionType.MOVIE else None,
        series_data=series_data,
        file_size_gb=Decimal("1"),
        status=status,
    )
    session.add(sub)
    await session.flush()
    for season, episode in episodes or []:
        session.add(
            SubmissionEpisode(
                submission_id=sub.id,
                season_number=season,
                episode_number=episode,
                video_url=f"https://cdn.example.com/v/s{season}e{episode}.mp4",
                file_size_gb=Decimal("0.5"),
            )
        )
    await session.commit()
    return sub


# ─────────────────────────────────────────────────────────────
# 📥 Intake payloads
# ─────────────────────────────────────────────────────────────
def movie_payload(**overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "type": "movie",
        "title": "Night Train",
        "description": "A detective chases a ghost across a sleeper train.",
        "genre": "Thriller",
        "year": 2023,
        "thumbnail_url": "https://cdn.example.com/t/night-train.jpg",
        "video_url": "https://cdn.example.com/v/night-train.mp4",
        "file_size_gb": "1.5",
    }
    payload.update(overrides)
    return payload


def episode_payload(season: int, episode: int, **overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "season_number": season,
        "episode_number": episode,
        "video_url": f"https://cdn.example.com/v/s{season}e{episode}.mp4",
        "file_size_gb": "0.5",
    }
    payload.update(overrides)
    return payload


def series_payload(episodes: Optional[List[Tuple[int, int]]] = None, **overrides: Any) -> Dict[str, Any]:
    episodes = episodes if episodes is not None else [(1, 1), (1, 2)]
    payload: Dict[str, Any] = {
        "type": "series",
        "title": "Galaxy Quest",
        "description": "A stranded crew rebuilds their ship one system at a time.",
        "genre": "Sci-Fi",
        "year": 2024,
        "thumbnail_url": "https://cdn.example.com/t/galaxy-quest.jpg",
        "file_size_gb": "0",
        "episodes": [episode_payload(s, e) for s, e in episodes],
    }
    payload.update(overrides)
    return payload
