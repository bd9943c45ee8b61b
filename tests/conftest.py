# tests/conftest.py
"""
Global test bootstrap
- Points the app at a throwaway SQLite file (aiosqlite) before any app import
- Mounts a mock Redis client into app.core.redis_client
- Makes SlowAPI rate-limiting test-friendly (bypass by default)
"""

from __future__ import annotations

import os
import tempfile
import warnings

import pytest
from sqlalchemy.exc import SAWarning

# ──────────────────────────────────────────────────────────────────────────────
# 🌱 Test env. NOTE: set BEFORE importing the app so settings pick it up.
# ──────────────────────────────────────────────────────────────────────────────
_DB_DIR = tempfile.mkdtemp(prefix="creator-studio-tests-")
os.environ["DATABASE_URL_OVERRIDE"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-please-change")
os.environ.setdefault("POSTGRES_PASSWORD", "unused-in-tests")
os.environ["ENV"] = "test"
os.environ["REDIS_ENABLED"] = "true"
os.environ.setdefault("RATELIMIT_STORAGE_URI", "memory://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "true")
os.environ.setdefault("RATE_LIMIT_TEST_BYPASS", "1")
os.environ.setdefault("LOG_TO_FILE", "0")
os.environ.setdefault("LOG_LEVEL", "WARNING")

# ──────────────────────────────────────────────────────────────────────────────
# 🧪 Install mock Redis globally before any tests run
# ──────────────────────────────────────────────────────────────────────────────
from app.core.redis_client import redis_wrapper  # noqa: E402
from tests.fixtures.mocks.redis import MockRedisClient  # noqa: E402

redis_wrapper._client = MockRedisClient()

# SQLite stores Numeric as float-ish text; the ORM still hands back Decimal.
warnings.filterwarnings("ignore", category=SAWarning, message=r".*support Decimal objects natively.*")

# ──────────────────────────────────────────────────────────────────────────────
# 📦 Pull in the rest of the fixtures (db, app, auth, etc.)
# ──────────────────────────────────────────────────────────────────────────────
from tests.fixtures.db import *  # noqa: F401,F403,E402
from tests.fixtures.app import *  # noqa: F401,F403,E402
from tests.fixtures.auth import *  # noqa: F401,F403,E402


# ──────────────────────────────────────────────────────────────────────────────
# 🔌 Redis fixture (function-scoped), cleared around each test that asks for it
# ──────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
async def redis_client():
    """Use this to inspect or seed Redis directly in a test."""
    client = redis_wrapper.client
    await client.flushall()
    client.fail_with = None
    yield client
    client.fail_with = None
    await client.flushall()
