# app/db/base.py
"""
Creator Studio — SQLAlchemy Base registry
=========================================

Import all ORM models so their tables are registered on `Base.metadata`.
Alembic's `env.py` and the test fixtures import `Base` from here.

Tip: Keep this file import-only; no runtime logic.
"""

from app.db.base_class import Base
from app.db.models import (  # noqa: F401  (registration side effect)
    AuditLog,
    ContentSubmission,
    CreatorNotification,
    CreatorProfile,
    CreatorRequest,
    CreatorSettings,
    CreatorStrike,
    DailyUploadTracking,
    Episode,
    Movie,
    Season,
    Series,
    SubmissionEpisode,
    User,
)

__all__ = ["Base"]
