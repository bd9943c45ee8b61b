from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Dict, Tuple

import pytest
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.models.creator_profile import CreatorProfile
from app.db.models.user import User
from tests.utils.factory import create_admin, create_creator, create_user


# ─────────────────────────────────────────────────────────────
# 🔐 Token + Auth Fixtures for Testing
# ─────────────────────────────────────────────────────────────
def make_access_token(user_id, *, expires_in: timedelta = timedelta(minutes=15), **claims) -> str:
    """Sign an access token the way the identity provider would."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "token_type": "access",
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
        **claims,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY.get_secret_value(), algorithm=settings.JWT_ALGORITHM)


def auth_headers(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_access_token(user.id)}"}


@pytest.fixture
def user_with_headers(db_session: AsyncSession) -> Callable[..., Awaitable[Tuple[User, Dict[str, str]]]]:
    """Create a plain user and return (user, headers)."""

    async def _create(**kwargs):
        user = await create_user(db_session, **kwargs)
        return user, auth_headers(user)

    return _create


@pytest.fixture
def admin_with_headers(db_session: AsyncSession) -> Callable[..., Awaitable[Tuple[User, Dict[str, str]]]]:
    async def _create(**kwargs):
        admin = await create_admin(db_session, **kwargs)
        return admin, auth_headers(admin)

    return _create


@pytest.fixture
def creator_with_headers(
    db_session: AsyncSession,
) -> Callable[..., Awaitable[Tuple[User, CreatorProfile, Dict[str, str]]]]:
    """Create a user with an active creator profile; returns (user, profile, headers)."""

    async def _create(**kwargs):
        user, profile = await create_creator(db_session, **kwargs)
        return user, profile, auth_headers(user)

    return _create
