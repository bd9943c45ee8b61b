from __future__ import annotations

"""
🔔 Creator Studio — Creator Notification
=======================================

In-app notification record. This service only inserts rows and flips
`is_read`; delivery (email/push) belongs to another system.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text, Uuid, false, func

from app.db.base_class import Base, UUIDPKMixin, str_enum, utcnow
from app.schemas.enums import NotificationType


class CreatorNotification(UUIDPKMixin, Base):
    __tablename__ = "creator_notifications"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type = Column(str_enum(NotificationType, "notification_type", 32), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    submission_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("content_submissions.id", ondelete="SET NULL"),
        nullable=True,
    )
    is_read = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    __table_args__ = (
        Index("ix_creator_notifications_user_read_created", "user_id", "is_read", "created_at"),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<CreatorNotification id={self.id} user_id={self.user_id} type={self.type}>"
