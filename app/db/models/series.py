from __future__ import annotations

"""
📺 Creator Studio — Series (canonical catalog)
=============================================

Public-facing series produced by publishing an approved series submission.
Parent of `Season` rows; `total_seasons` / `total_episodes` are written by
the publisher after the season groups are inserted.
"""

from sqlalchemy import BigInteger, CheckConstraint, Column, ForeignKey, Integer, String, Text, Uuid, text

from app.db.base_class import Base, TimestampMixin, UUIDPKMixin, str_enum
from app.schemas.enums import SeriesStatus


class Series(UUIDPKMixin, TimestampMixin, Base):
    __tablename__ = "series"

    title = Column(String(320), nullable=False, unique=True)
    slug = Column(String(320), nullable=False, unique=True)
    description = Column(Text, nullable=False)
    genre = Column(String(64), nullable=False)
    release_year = Column(Integer, nullable=False)
    status = Column(
        str_enum(SeriesStatus, "series_status", 16),
        nullable=False,
        default=SeriesStatus.ONGOING,
        server_default=SeriesStatus.ONGOING.value,
    )
    poster_url = Column(String(2048), nullable=False)
    banner_url = Column(String(2048), nullable=True)
    total_seasons = Column(Integer, nullable=False, default=0, server_default=text("0"))
    total_episodes = Column(Integer, nullable=False, default=0, server_default=text("0"))
    views = Column(BigInteger, nullable=False, default=0, server_default=text("0"))

    creator_id = Column(Uuid(as_uuid=True), ForeignKey("creator_profiles.id", ondelete="SET NULL"), nullable=True, index=True)

    __table_args__ = (
        CheckConstraint("length(trim(slug)) > 0", name="slug_not_blank"),
        CheckConstraint("total_seasons >= 0", name="total_seasons_ge_0"),
        CheckConstraint("total_episodes >= 0", name="total_episodes_ge_0"),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Series id={self.id} slug={self.slug!r} seasons={self.total_seasons}>"
