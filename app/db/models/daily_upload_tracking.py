from __future__ import annotations

"""
📊 Creator Studio — Daily Upload Tracking
========================================

Per-creator, per-calendar-day (UTC) quota counters. Rows are created lazily
on the first submission of the day and never reset; a new day simply has no
row yet. `(creator_id, day)` is unique so concurrent first-of-day inserts
collapse onto one row.
"""

from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Integer, Numeric, UniqueConstraint, Uuid, text

from app.db.base_class import Base, TimestampMixin, UUIDPKMixin


class DailyUploadTracking(UUIDPKMixin, TimestampMixin, Base):
    __tablename__ = "daily_upload_tracking"

    creator_id = Column(Uuid(as_uuid=True), ForeignKey("creator_profiles.id", ondelete="CASCADE"), nullable=False)
    day = Column(Date, nullable=False)
    uploads_today = Column(Integer, nullable=False, default=0, server_default=text("0"))
    storage_used_today_gb = Column(Numeric(12, 3), nullable=False, default=Decimal("0"), server_default=text("0"))

    __table_args__ = (
        UniqueConstraint("creator_id", "day", name="uq_daily_upload_tracking_creator_day"),
        CheckConstraint("uploads_today >= 0", name="uploads_ge_0"),
        CheckConstraint("storage_used_today_gb >= 0", name="storage_ge_0"),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<DailyUploadTracking creator_id={self.creator_id} day={self.day} uploads={self.uploads_today}>"
