from __future__ import annotations

"""
Central enum definitions used across Creator Studio.

Design notes
------------
• All enums subclass `str, PyEnum` for JSON-friendly serialization.
• VALUE STRINGS are **stable** once deployed (stored as plain strings).
• Grouped by domain for clarity; keep `__all__` in sync when adding new enums.
"""

from enum import Enum as PyEnum


# ──────────────────────────────────────────────────────────────
# Accounts
# ──────────────────────────────────────────────────────────────
class OrgRole(str, PyEnum):
    """Platform role carried by the local user mirror."""
    ADMIN = "ADMIN"
    SUPERUSER = "SUPERUSER"
    USER = "USER"


# ──────────────────────────────────────────────────────────────
# Creator program
# ──────────────────────────────────────────────────────────────
class CreatorStatus(str, PyEnum):
    """Standing of a creator profile; only `active` may submit."""
    ACTIVE = "active"
    SUSPENDED = "suspended"
    BANNED = "banned"


class CreatorRequestStatus(str, PyEnum):
    """Lifecycle of an access request; `approved`/`rejected` are terminal."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# ──────────────────────────────────────────────────────────────
# Submissions & catalog
# ──────────────────────────────────────────────────────────────
class SubmissionType(str, PyEnum):
    MOVIE = "movie"
    SERIES = "series"


class SubmissionStatus(str, PyEnum):
    """One-way moderation states: `pending` → `approved` | `rejected`."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SeriesStatus(str, PyEnum):
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# ──────────────────────────────────────────────────────────────
# Notifications
# ──────────────────────────────────────────────────────────────
class NotificationType(str, PyEnum):
    SYSTEM = "system"
    SUBMISSION_APPROVED = "submission_approved"
    SUBMISSION_REJECTED = "submission_rejected"
    STRIKE_RECEIVED = "strike_received"
    LIMIT_INCREASED = "limit_increased"


__all__ = [
    "OrgRole",
    "CreatorStatus",
    "CreatorRequestStatus",
    "SubmissionType",
    "SubmissionStatus",
    "SeriesStatus",
    "NotificationType",
]
