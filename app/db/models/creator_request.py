from __future__ import annotations

"""
📨 Creator Studio — Creator Access Request
=========================================

One row per self-service access request. `pending` until an admin decides;
`approved` and `rejected` are terminal. A partial unique index guarantees at
most one `pending` request per user even under concurrent submits.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Text, Uuid, text

from app.db.base_class import Base, TimestampMixin, UUIDPKMixin, str_enum
from app.schemas.enums import CreatorRequestStatus


class CreatorRequest(UUIDPKMixin, TimestampMixin, Base):
    __tablename__ = "creator_requests"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        str_enum(CreatorRequestStatus, "creator_request_status", 16),
        nullable=False,
        default=CreatorRequestStatus.PENDING,
        server_default=CreatorRequestStatus.PENDING.value,
    )
    account_age_days = Column(Integer, nullable=True, doc="Account age when the request was filed.")
    rejection_reason = Column(Text, nullable=True)

    reviewed_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index(
            "uq_creator_requests_user_pending",
            "user_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
        Index("ix_creator_requests_status_created", "status", "created_at"),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<CreatorRequest id={self.id} user_id={self.user_id} status={self.status}>"
