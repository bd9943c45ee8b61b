from __future__ import annotations

"""
🎬 Creator Studio — Movie (canonical catalog)
============================================

Public-facing movie produced by publishing an approved submission.

Design highlights
-----------------
• `title` and `slug` are **globally unique** among movies; the publisher
  probes for free values and the constraints are the final authority.
• `creator_id` keeps attribution back to the creator profile.
"""

from sqlalchemy import BigInteger, Boolean, CheckConstraint, Column, ForeignKey, Integer, String, Text, Uuid, false, text

from app.db.base_class import Base, TimestampMixin, UUIDPKMixin


class Movie(UUIDPKMixin, TimestampMixin, Base):
    __tablename__ = "movies"

    title = Column(String(320), nullable=False, unique=True)
    slug = Column(String(320), nullable=False, unique=True)
    description = Column(Text, nullable=False)
    genre = Column(String(64), nullable=False)
    year = Column(Integer, nullable=False)
    poster_url = Column(String(2048), nullable=False)
    banner_url = Column(String(2048), nullable=True)
    video_url = Column(String(2048), nullable=False)

    views = Column(BigInteger, nullable=False, default=0, server_default=text("0"))
    is_featured = Column(Boolean, nullable=False, default=False, server_default=false())
    is_trending = Column(Boolean, nullable=False, default=False, server_default=false())

    creator_id = Column(Uuid(as_uuid=True), ForeignKey("creator_profiles.id", ondelete="SET NULL"), nullable=True, index=True)

    __table_args__ = (
        CheckConstraint("length(trim(slug)) > 0", name="slug_not_blank"),
        CheckConstraint("views >= 0", name="views_ge_0"),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Movie id={self.id} slug={self.slug!r}>"
