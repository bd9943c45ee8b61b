from __future__ import annotations

"""
📦 Creator Studio — Content Submission
=====================================

A creator's proposed movie or series, pending catalog inclusion.

Design highlights
-----------------
• `type` discriminates movie vs series; a movie row always has `video_url`.
• `status` is one-way: `pending` → `approved` | `rejected`.
• `series_data` is a small JSON document (`total_seasons`, `total_episodes`,
  `status`) parsed through `SeriesData.from_raw` on every read, so malformed
  blobs degrade to safe defaults.
• `published_movie_id` / `published_series_id` are written exactly once by
  the publisher and double as its idempotency guard. `ON DELETE SET NULL`
  keeps "non-null iff the catalog row exists".
• `file_size_gb` is the total charged against quota at intake.
"""

from decimal import Decimal

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB

from app.db.base_class import Base, TimestampMixin, UUIDPKMixin, str_enum
from app.schemas.enums import SubmissionStatus, SubmissionType


class ContentSubmission(UUIDPKMixin, TimestampMixin, Base):
    __tablename__ = "content_submissions"

    creator_id = Column(Uuid(as_uuid=True), ForeignKey("creator_profiles.id", ondelete="CASCADE"), nullable=False)
    type = Column(str_enum(SubmissionType, "submission_type", 16), nullable=False)

    # ── Metadata ──────────────────────────────────────────────
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    genre = Column(String(64), nullable=False)
    year = Column(Integer, nullable=True)
    thumbnail_url = Column(String(2048), nullable=False)
    video_url = Column(String(2048), nullable=True)
    banner_url = Column(String(2048), nullable=True)
    series_data = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=True)
    file_size_gb = Column(Numeric(12, 3), nullable=False, default=Decimal("0"), server_default=text("0"))

    # ── Moderation ────────────────────────────────────────────
    status = Column(
        str_enum(SubmissionStatus, "submission_status", 16),
        nullable=False,
        default=SubmissionStatus.PENDING,
        server_default=SubmissionStatus.PENDING.value,
    )
    rejection_reason = Column(Text, nullable=True)
    reviewed_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    # ── Publication back-links ────────────────────────────────
    published_movie_id = Column(Uuid(as_uuid=True), ForeignKey("movies.id", ondelete="SET NULL"), nullable=True)
    published_series_id = Column(Uuid(as_uuid=True), ForeignKey("series.id", ondelete="SET NULL"), nullable=True)

    __table_args__ = (
        CheckConstraint("length(trim(title)) > 0", name="title_not_blank"),
        CheckConstraint("(type <> 'movie') OR (video_url IS NOT NULL)", name="movie_has_video"),
        CheckConstraint(
            "(published_movie_id IS NULL) OR (published_series_id IS NULL)",
            name="single_publication",
        ),
        CheckConstraint("file_size_gb >= 0", name="file_size_ge_0"),
        Index("ix_content_submissions_status_created", "status", "created_at"),
        Index("ix_content_submissions_creator_created", "creator_id", "created_at"),
    )

    @property
    def published_id(self):
        return self.published_movie_id or self.published_series_id

    def __repr__(self) -> str:  # pragma: no cover
        return f"<ContentSubmission id={self.id} type={self.type} status={self.status} title={self.title!r}>"
