from __future__ import annotations

"""
⚙️ Creator Studio — Creator Settings (singleton)
===============================================

Global creator-program policy. At most one row exists (`id = 1`); when it is
absent the service layer falls back to the `CREATOR_*` defaults in
`app.core.config`.
"""

from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Column, Integer, Numeric, false, text, true

from app.db.base_class import Base, TimestampMixin

SETTINGS_ROW_ID = 1


class CreatorSettings(TimestampMixin, Base):
    __tablename__ = "creator_settings"

    id = Column(Integer, primary_key=True, default=SETTINGS_ROW_ID, autoincrement=False)

    min_account_age_days = Column(Integer, nullable=False, default=30, server_default=text("30"))
    max_account_age_days = Column(Integer, nullable=False, default=90, server_default=text("90"))
    default_daily_upload_limit = Column(Integer, nullable=False, default=4, server_default=text("4"))
    default_daily_storage_limit_gb = Column(Numeric(10, 3), nullable=False, default=Decimal("8"), server_default=text("8"))
    max_strikes_before_suspension = Column(Integer, nullable=False, default=3, server_default=text("3"))
    auto_approve_new_creators = Column(Boolean, nullable=False, default=False, server_default=false())
    is_creator_system_enabled = Column(Boolean, nullable=False, default=True, server_default=true())

    __table_args__ = (
        CheckConstraint("id = 1", name="singleton"),
        CheckConstraint("min_account_age_days >= 0", name="min_age_ge_0"),
        CheckConstraint("max_account_age_days >= min_account_age_days", name="age_window_order"),
        CheckConstraint("max_strikes_before_suspension >= 1", name="max_strikes_ge_1"),
    )
