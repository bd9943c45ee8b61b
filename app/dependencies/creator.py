from __future__ import annotations

"""
Creator guards
--------------
Resolve the caller's `CreatorProfile` for creator-only routes.

Exports
- current_creator: FastAPI dependency returning the caller's profile (404 if none)
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.core.security import get_current_user
from app.db.models.creator_profile import CreatorProfile
from app.db.models.user import User
from app.db.session import get_async_db
from app.services.creator.profiles import get_profile_for_user


async def current_creator(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
) -> CreatorProfile:
    profile = await get_profile_for_user(db, current_user.id)
    if profile is None:
        raise NotFoundError("You are not a creator yet. Request creator access first.")
    return profile


__all__ = ["current_creator"]
