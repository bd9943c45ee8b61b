from __future__ import annotations

"""
Creator program schemas: policy value, admin inputs, and read views.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.core.config import settings
from app.schemas.enums import CreatorRequestStatus, CreatorStatus, NotificationType


# ─────────────────────────────────────────────────────────────
# ⚙️ Policy (CreatorSettings resolved for one operation)
# ─────────────────────────────────────────────────────────────
class CreatorPolicy(BaseModel):
    """Immutable snapshot of `creator_settings`, read once per operation."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    min_account_age_days: int
    max_account_age_days: int
    default_daily_upload_limit: int
    default_daily_storage_limit_gb: Decimal
    max_strikes_before_suspension: int
    auto_approve_new_creators: bool
    is_creator_system_enabled: bool

    @classmethod
    def defaults(cls) -> "CreatorPolicy":
        return cls(
            min_account_age_days=settings.CREATOR_MIN_ACCOUNT_AGE_DAYS,
            max_account_age_days=settings.CREATOR_MAX_ACCOUNT_AGE_DAYS,
            default_daily_upload_limit=settings.CREATOR_DEFAULT_DAILY_UPLOAD_LIMIT,
            default_daily_storage_limit_gb=settings.CREATOR_DEFAULT_DAILY_STORAGE_LIMIT_GB,
            max_strikes_before_suspension=settings.CREATOR_MAX_STRIKES_BEFORE_SUSPENSION,
            auto_approve_new_creators=settings.CREATOR_AUTO_APPROVE_NEW_CREATORS,
            is_creator_system_enabled=settings.CREATOR_SYSTEM_ENABLED,
        )


class CreatorSettingsUpdateIn(BaseModel):
    min_account_age_days: Optional[int] = Field(None, ge=0)
    max_account_age_days: Optional[int] = Field(None, ge=0)
    default_daily_upload_limit: Optional[int] = Field(None, ge=0)
    default_daily_storage_limit_gb: Optional[Decimal] = Field(None, ge=0)
    max_strikes_before_suspension: Optional[int] = Field(None, ge=1)
    auto_approve_new_creators: Optional[bool] = None
    is_creator_system_enabled: Optional[bool] = None

    @model_validator(mode="after")
    def _window_order(self) -> "CreatorSettingsUpdateIn":
        lo, hi = self.min_account_age_days, self.max_account_age_days
        if lo is not None and hi is not None and lo > hi:
            raise ValueError("min_account_age_days must not exceed max_account_age_days")
        return self


# ─────────────────────────────────────────────────────────────
# 🛠 Admin inputs
# ─────────────────────────────────────────────────────────────
class GrantAccessIn(BaseModel):
    user_id: UUID


class RejectRequestIn(BaseModel):
    reason: Optional[str] = Field(None, max_length=2000)


class StrikeIn(BaseModel):
    reason: str = Field(..., min_length=3, max_length=2000)


class SuspendIn(BaseModel):
    reason: str = Field(..., min_length=3, max_length=2000)


class LimitsUpdateIn(BaseModel):
    daily_upload_limit: Optional[int] = Field(None, ge=0, le=1000)
    daily_storage_limit_gb: Optional[Decimal] = Field(None, ge=0, le=100_000)
    is_auto_approve_enabled: Optional[bool] = None


# ─────────────────────────────────────────────────────────────
# 📤 Views
# ─────────────────────────────────────────────────────────────
class CreatorProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    status: CreatorStatus
    suspended_reason: Optional[str] = None
    daily_upload_limit: int
    daily_storage_limit_gb: Decimal
    is_auto_approve_enabled: bool
    total_uploads: int
    total_views: int
    created_at: datetime


class CreatorRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    status: CreatorRequestStatus
    account_age_days: Optional[int] = None
    rejection_reason: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime


class CreatorStrikeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    creator_id: UUID
    reason: str
    issued_by: Optional[UUID] = None
    issued_at: datetime


class DailyUsageOut(BaseModel):
    day: date
    uploads_today: int
    storage_used_today_gb: Decimal
    daily_upload_limit: int
    daily_storage_limit_gb: Decimal
    uploads_remaining: int
    storage_remaining_gb: Decimal


class EligibilityOut(BaseModel):
    account_age_days: int
    min_account_age_days: int
    max_account_age_days: int
    eligible: bool
    reason: Optional[str] = None


class CreatorStatusOut(BaseModel):
    is_creator: bool
    is_creator_system_enabled: bool
    profile: Optional[CreatorProfileOut] = None
    usage: Optional[DailyUsageOut] = None
    strike_count: int = 0
    approved_count: int = 0
    pending_count: int = 0
    rejected_count: int = 0
    unread_notifications: int = 0
    request: Optional[CreatorRequestOut] = None
    eligibility: Optional[EligibilityOut] = None


class CreatorUserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    username: Optional[str] = None
    full_name: Optional[str] = None


class CreatorListItemOut(CreatorProfileOut):
    """Admin roster row: profile, owning user and strike total."""

    user: CreatorUserOut
    strike_count: int = 0


class StrikeResultOut(BaseModel):
    strike: CreatorStrikeOut
    total_strikes: int
    max_strikes: int
    suspended: bool
    profile: CreatorProfileOut


class CreatorStatsOut(BaseModel):
    total_creators: int
    creators_by_status: Dict[str, int]
    pending_requests: int
    submissions_by_status: Dict[str, int]


class NotificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    type: NotificationType
    title: str
    message: str
    submission_id: Optional[UUID] = None
    is_read: bool
    created_at: datetime


class NotificationListOut(BaseModel):
    items: List[NotificationOut]
    unread: int


__all__ = [
    "CreatorPolicy",
    "CreatorSettingsUpdateIn",
    "GrantAccessIn",
    "RejectRequestIn",
    "StrikeIn",
    "SuspendIn",
    "LimitsUpdateIn",
    "CreatorProfileOut",
    "CreatorRequestOut",
    "CreatorStrikeOut",
    "DailyUsageOut",
    "EligibilityOut",
    "CreatorStatusOut",
    "CreatorUserOut",
    "CreatorListItemOut",
    "StrikeResultOut",
    "CreatorStatsOut",
    "NotificationOut",
    "NotificationListOut",
]
