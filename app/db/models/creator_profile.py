from __future__ import annotations

"""
🎥 Creator Studio — Creator Profile
==================================

One row per user who has been admitted to the creator program. Created by
request approval (or the admin grant override), mutated by quota, limit,
strike and suspension operations, never deleted in normal flow.

Design highlights
-----------------
• `user_id` is **unique**: exactly one profile per user.
• Only `status == active` may submit content.
• Daily caps (`daily_upload_limit`, `daily_storage_limit_gb`) are per
  profile, seeded from `CreatorSettings` at creation.
"""

from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    Text,
    Uuid,
    false,
    text,
)

from app.db.base_class import Base, TimestampMixin, UUIDPKMixin, str_enum
from app.schemas.enums import CreatorStatus


class CreatorProfile(UUIDPKMixin, TimestampMixin, Base):
    """Creator standing, limits and lifetime counters."""

    __tablename__ = "creator_profiles"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    # ── Standing ──────────────────────────────────────────────
    status = Column(
        str_enum(CreatorStatus, "creator_status", 16),
        nullable=False,
        default=CreatorStatus.ACTIVE,
        server_default=CreatorStatus.ACTIVE.value,
        index=True,
    )
    suspended_reason = Column(Text, nullable=True)

    # ── Limits ────────────────────────────────────────────────
    daily_upload_limit = Column(Integer, nullable=False, default=4, server_default=text("4"))
    daily_storage_limit_gb = Column(Numeric(10, 3), nullable=False, default=Decimal("8"), server_default=text("8"))
    is_auto_approve_enabled = Column(Boolean, nullable=False, default=False, server_default=false())

    # ── Lifetime counters ─────────────────────────────────────
    total_uploads = Column(Integer, nullable=False, default=0, server_default=text("0"))
    total_views = Column(BigInteger, nullable=False, default=0, server_default=text("0"))

    # ── Provenance ────────────────────────────────────────────
    approved_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("daily_upload_limit >= 0", name="upload_limit_ge_0"),
        CheckConstraint("daily_storage_limit_gb >= 0", name="storage_limit_ge_0"),
        CheckConstraint("total_uploads >= 0", name="total_uploads_ge_0"),
        CheckConstraint("total_views >= 0", name="total_views_ge_0"),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<CreatorProfile id={self.id} user_id={self.user_id} status={self.status}>"
