from __future__ import annotations

"""
⚠️ Creator Studio — Creator Strike
=================================

Immutable, append-only record of a violation. The strike count is always
derived with a fresh `COUNT(*)` over this table; there is no cached counter.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Text, Uuid, func

from app.db.base_class import Base, UUIDPKMixin, utcnow


class CreatorStrike(UUIDPKMixin, Base):
    __tablename__ = "creator_strikes"

    creator_id = Column(Uuid(as_uuid=True), ForeignKey("creator_profiles.id", ondelete="CASCADE"), nullable=False)
    reason = Column(Text, nullable=False)
    issued_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    issued_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    __table_args__ = (
        Index("ix_creator_strikes_creator_issued", "creator_id", "issued_at"),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<CreatorStrike id={self.id} creator_id={self.creator_id}>"
