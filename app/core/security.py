# app/core/security.py
from __future__ import annotations

"""
Creator Studio — Caller identity
================================
Identity is issued elsewhere; this service only **verifies** bearer access
tokens (python-jose) and loads the local `User` mirror that carries the two
facts the creator pipeline consumes: a stable id and the account-creation
timestamp.

Exports
-------
- `decode_access_token(token)`: verify signature/exp (+ iss/aud when set)
- `get_user_id_from_payload(payload)`: `sub` → UUID
- `get_current_user`: FastAPI dependency returning the active `User`
"""

import logging
from typing import Any, Dict
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.db.models.user import User
from app.db.session import get_async_db

logger = logging.getLogger("auth")

security = HTTPBearer(auto_error=False)


# ─────────────────────────────────────────────────────────────
# 🔓 Decode
# ─────────────────────────────────────────────────────────────
def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode and validate an access JWT.

    Checks signature and standard claims (exp/nbf/iat), then issuer/audience
    when configured, then `token_type` when present.
    """
    audience = settings.JWT_AUDIENCE or None
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            audience=audience,
            issuer=settings.JWT_ISSUER or None,
            options={"verify_aud": bool(audience)},
        )
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except JWTError:
        raise AuthenticationError("Invalid token")

    token_type = payload.get("token_type") or payload.get("type")
    if token_type and token_type != "access":
        raise AuthenticationError("Invalid token type")
    return payload


def get_user_id_from_payload(payload: Dict[str, Any]) -> UUID:
    """Extract and validate `sub` as a UUID; raise 401 if malformed/missing."""
    user_id = payload.get("sub") or payload.get("user_id")
    if not user_id:
        raise AuthenticationError("Invalid token: missing subject")
    try:
        return UUID(str(user_id))
    except ValueError:
        raise AuthenticationError("Invalid token: malformed subject")


# ───────────────────────────────────────────────
# 👤 Dependency — Get Current User
# ───────────────────────────────────────────────
async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_async_db),
) -> User:
    """Authenticate a user from the presented **access** token.

    Steps:
    1) Decode & validate JWT.
    2) Load user from DB, ensure active.
    3) Attach the user id to `request.state` (rate-limit keying, audit).
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing bearer token")

    payload = decode_access_token(credentials.credentials)
    user_id = get_user_id_from_payload(payload)

    user = (await db.execute(select(User).where(User.id == user_id))).scalars().first()
    if not user or not user.is_active:
        raise AuthenticationError("Inactive or unknown user")

    request.state.user_id = user.id
    logger.debug("[Auth] Authenticated user_id=%s", user.id)
    return user


__all__ = ["decode_access_token", "get_user_id_from_payload", "get_current_user", "security"]
