from __future__ import annotations

"""
🎞️ Creator Studio — Submission Episode
=====================================

Flat episode list attached to a series-type submission. Rows are immutable;
the only mutation path is appending through "add more episodes". The
publisher groups them by `season_number` into catalog seasons.
"""

from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
    text,
)

from app.db.base_class import Base, UUIDPKMixin, utcnow


class SubmissionEpisode(UUIDPKMixin, Base):
    __tablename__ = "submission_episodes"

    submission_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("content_submissions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    season_number = Column(Integer, nullable=False)
    episode_number = Column(Integer, nullable=False)
    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    video_url = Column(String(2048), nullable=False)
    thumbnail_url = Column(String(2048), nullable=True)
    duration_minutes = Column(Integer, nullable=True)
    file_size_gb = Column(Numeric(12, 3), nullable=False, default=Decimal("0"), server_default=text("0"))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    __table_args__ = (
        UniqueConstraint(
            "submission_id", "season_number", "episode_number",
            name="uq_submission_episodes_submission_season_episode",
        ),
        CheckConstraint("season_number >= 1", name="season_ge_1"),
        CheckConstraint("episode_number >= 1", name="episode_ge_1"),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<SubmissionEpisode submission_id={self.submission_id} S{self.season_number}E{self.episode_number}>"
