from __future__ import annotations

"""
Admin guards
------------
Role checks for the admin creator routes, kept in one place so every
router enforces the same rule.

Exports
- is_admin(user): role is ADMIN or SUPERUSER
- ensure_admin(user): raise 403 if not admin
- admin_user: FastAPI dependency returning the authenticated admin user
"""

from fastapi import Depends

from app.core.exceptions import ForbiddenError
from app.core.security import get_current_user
from app.db.models.user import User
from app.schemas.enums import OrgRole


def is_admin(user: User) -> bool:
    return getattr(user, "role", None) in {OrgRole.ADMIN, OrgRole.SUPERUSER}


def ensure_admin(user: User) -> None:
    if not is_admin(user):
        raise ForbiddenError()


async def admin_user(current_user: User = Depends(get_current_user)) -> User:
    ensure_admin(current_user)
    return current_user


__all__ = ["is_admin", "ensure_admin", "admin_user"]
