# app/db/models/episode.py
from __future__ import annotations

"""
🎞️ Creator Studio — Episode Model
================================

An episode within a `Season`. `series_id` is denormalized for cheap
series-wide listings.

- **Clean uniqueness**: `(season_id, episode_number)`.
"""

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    text,
)

from app.db.base_class import Base, TimestampMixin, UUIDPKMixin


class Episode(UUIDPKMixin, TimestampMixin, Base):
    __tablename__ = "episodes"

    season_id = Column(Uuid(as_uuid=True), ForeignKey("seasons.id", ondelete="CASCADE"), nullable=False, index=True)
    series_id = Column(Uuid(as_uuid=True), ForeignKey("series.id", ondelete="CASCADE"), nullable=False, index=True)
    episode_number = Column(Integer, nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    video_url = Column(String(2048), nullable=False)
    thumbnail_url = Column(String(2048), nullable=True)
    duration_minutes = Column(Integer, nullable=False, default=45, server_default=text("45"))
    views = Column(BigInteger, nullable=False, default=0, server_default=text("0"))

    __table_args__ = (
        UniqueConstraint("season_id", "episode_number", name="uq_episodes_season_num"),
        CheckConstraint("episode_number >= 1", name="num_ge_1"),
        CheckConstraint("duration_minutes >= 0", name="duration_ge_0"),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Episode id={self.id} season_id={self.season_id} E{self.episode_number}>"
