# app/db/models/season.py
from __future__ import annotations

"""
📺 Creator Studio — Season Model
===============================

A season of a catalog `Series`. One row per distinct `season_number` found in
the published submission's episode list.

- **Integrity**: scoped to exactly one series (`series_id`).
- **Clean uniqueness**: `(series_id, season_number)`.
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String, UniqueConstraint, Uuid, text

from app.db.base_class import Base, TimestampMixin, UUIDPKMixin


class Season(UUIDPKMixin, TimestampMixin, Base):
    """Season container for a series."""

    __tablename__ = "seasons"

    series_id = Column(Uuid(as_uuid=True), ForeignKey("series.id", ondelete="CASCADE"), nullable=False, index=True)
    season_number = Column(Integer, nullable=False, doc="Ordinal season number (1-based).")
    title = Column(String(255), nullable=True)
    total_episodes = Column(Integer, nullable=False, default=0, server_default=text("0"))

    __table_args__ = (
        UniqueConstraint("series_id", "season_number", name="uq_seasons_series_num"),
        CheckConstraint("season_number >= 1", name="num_ge_1"),
        CheckConstraint("total_episodes >= 0", name="total_episodes_ge_0"),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Season id={self.id} series_id={self.series_id} S{self.season_number}>"
