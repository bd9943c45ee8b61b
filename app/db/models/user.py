from __future__ import annotations

"""
👤 Creator Studio — User (identity mirror)
=========================================

Local mirror of an account owned by the identity provider. The creator
pipeline consumes exactly two facts from it: the stable `id` and the account
creation timestamp (`created_at`), which drives the eligibility window.

Design highlights
-----------------
• **UUID identity** matching the `sub` claim of access tokens.
• `role` gates the admin surface (`ADMIN` / `SUPERUSER`).
• `is_active=False` blocks authentication entirely.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, String, true

from app.db.base_class import Base, TimestampMixin, UUIDPKMixin, str_enum
from app.schemas.enums import OrgRole


class User(UUIDPKMixin, TimestampMixin, Base):
    """Account record (identity facts + platform role)."""

    __tablename__ = "users"

    # ── Identity ──────────────────────────────────────────────────────────────
    email = Column(String(320), nullable=False, unique=True)
    username = Column(String(64), nullable=True, unique=True)
    full_name = Column(String(255), nullable=True)

    # ── Access ────────────────────────────────────────────────────────────────
    role = Column(str_enum(OrgRole, "org_role", 16), nullable=False, default=OrgRole.USER, server_default=OrgRole.USER.value)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())

    __table_args__ = (
        CheckConstraint("length(trim(email)) > 0", name="email_not_blank"),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User id={self.id} email={self.email!r} role={self.role}>"
