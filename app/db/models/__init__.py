# app/db/models/__init__.py
"""
Creator Studio — ORM model package
==================================

Importing this package registers every table on `Base.metadata`.
"""

from app.db.base_class import Base

# ───────────────────────────────────────────────────────────────
# Accounts & audit
# ───────────────────────────────────────────────────────────────
from .user import User
from .audit_log import AuditLog

# ───────────────────────────────────────────────────────────────
# Creator program
# ───────────────────────────────────────────────────────────────
from .creator_settings import CreatorSettings
from .creator_profile import CreatorProfile
from .creator_request import CreatorRequest
from .creator_strike import CreatorStrike
from .daily_upload_tracking import DailyUploadTracking
from .creator_notification import CreatorNotification

# ───────────────────────────────────────────────────────────────
# Canonical catalog
# ───────────────────────────────────────────────────────────────
from .movie import Movie
from .series import Series
from .season import Season
from .episode import Episode

# ───────────────────────────────────────────────────────────────
# Submissions
# ───────────────────────────────────────────────────────────────
from .content_submission import ContentSubmission
from .submission_episode import SubmissionEpisode

__all__ = [
    "Base",
    "User",
    "AuditLog",
    "CreatorSettings",
    "CreatorProfile",
    "CreatorRequest",
    "CreatorStrike",
    "DailyUploadTracking",
    "CreatorNotification",
    "Movie",
    "Series",
    "Season",
    "Episode",
    "ContentSubmission",
    "SubmissionEpisode",
]
