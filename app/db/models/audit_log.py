from __future__ import annotations

"""
🧾 Creator Studio — Audit Logs
=============================

Record of admin and creator actions taken through the HTTP surface, with the
request context needed for incident response.

Design highlights
-----------------
• **Immutable event record** keyed by UUID.
• `ON DELETE SET NULL` on the user FK so deleting a user keeps history.
• Avoid the reserved `metadata` attribute by exposing it as `metadata_json`
  while keeping the DB column name `metadata`.
"""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, String, Uuid, func
from sqlalchemy.dialects.postgresql import JSONB

from app.db.base_class import Base, UUIDPKMixin, utcnow


class AuditLog(UUIDPKMixin, Base):
    """Immutable record of an action with request correlation."""

    __tablename__ = "audit_logs"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    request_id = Column(String(128), nullable=True, index=True)
    action = Column(String(64), nullable=False, index=True)
    status = Column(String(32), nullable=False)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(1024), nullable=True)
    metadata_json = Column("metadata", JSON().with_variant(JSONB(), "postgresql"), nullable=True)
    occurred_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    __table_args__ = (
        Index("ix_audit_logs_user_occurred", "user_id", "occurred_at"),
        Index("ix_audit_logs_action_status_occurred", "action", "status", "occurred_at"),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<AuditLog id={self.id} action={self.action!r} status={self.status!r}>"
