# app/services/audit_log_service.py
from __future__ import annotations

"""
Creator Studio — Audit Log Service
==================================

Purpose
-------
Persist a structured trail of administrative actions on the creator
pipeline (request review, grants, strikes, suspension, limits, moderation,
settings) with request metadata for traceability.

Design notes
------------
- **Proxy-aware IP** extraction (`X-Forwarded-For`, `X-Real-IP`, Cloudflare headers).
- Correlates with `request.state.request_id` (see RequestID middleware).
- JSON-serializable `meta_data` with secret-key scrubbing.
- **Best-effort** writes: the row goes into its own SAVEPOINT and failures
  are logged, never raised, so an audited action is never undone by its
  audit entry.

Usage
-----
    await log_audit_event(
        db,
        user=admin,
        action=AuditEvent.SUBMISSION_APPROVED,
        status="SUCCESS",
        request=request,
        meta_data={"submission_id": str(submission_id)},
    )
"""

import json
import logging
from enum import Enum
from typing import Any, Dict, Optional, Union
from uuid import UUID

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.audit_log import AuditLog
from app.db.models.user import User

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
# 📋 Enum: Audit Event Types
# ─────────────────────────────────────────────────────────────
class AuditEvent(str, Enum):
    # 🙋 Creator access
    CREATOR_REQUEST_APPROVED = "CREATOR_REQUEST_APPROVED"
    CREATOR_REQUEST_REJECTED = "CREATOR_REQUEST_REJECTED"
    CREATOR_ACCESS_GRANTED = "CREATOR_ACCESS_GRANTED"

    # ⚠️ Standing
    CREATOR_STRIKE_ISSUED = "CREATOR_STRIKE_ISSUED"
    CREATOR_SUSPENDED = "CREATOR_SUSPENDED"
    CREATOR_UNSUSPENDED = "CREATOR_UNSUSPENDED"
    CREATOR_LIMITS_UPDATED = "CREATOR_LIMITS_UPDATED"

    # 🎬 Moderation
    SUBMISSION_APPROVED = "SUBMISSION_APPROVED"
    SUBMISSION_REJECTED = "SUBMISSION_REJECTED"

    # ⚙️ Policy
    CREATOR_SETTINGS_UPDATED = "CREATOR_SETTINGS_UPDATED"


# ─────────────────────────────────────────────────────────────
# 🔎 Helpers: request metadata & meta scrubbing
# ─────────────────────────────────────────────────────────────
_SENSITIVE_KEYS = {
    "authorization",
    "token",
    "access_token",
    "refresh_token",
    "password",
    "secret",
    "cookie",
    "set-cookie",
}


def _client_ip(request: Optional[Request]) -> Optional[str]:
    if not request:
        return None
    hdrs = request.headers
    # left-most forwarded IP is the client
    xff = hdrs.get("x-forwarded-for")
    if xff:
        ip = xff.split(",")[0].strip()
        if ip:
            return ip
    xri = hdrs.get("x-real-ip")
    if xri:
        return xri.strip()
    ccip = hdrs.get("cf-connecting-ip") or hdrs.get("true-client-ip")
    if ccip:
        return ccip.strip()
    return request.client.host if request.client else None


def _scrub(obj: Any) -> Any:
    """Recursively drop obvious secret keys from dicts/lists."""
    if isinstance(obj, dict):
        return {k: _scrub(v) for k, v in obj.items() if str(k).lower() not in _SENSITIVE_KEYS}
    if isinstance(obj, list):
        return [_scrub(v) for v in obj]
    return obj


def _safe_metadata(meta_data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if meta_data is None:
        return {}
    if not isinstance(meta_data, dict):
        meta_data = {"raw": str(meta_data)}
    meta_data = _scrub(meta_data)
    try:
        json.dumps(meta_data)
    except (TypeError, ValueError):
        return {"raw": "non-serializable metadata"}
    return meta_data


def _request_snapshot(request: Optional[Request]) -> Dict[str, Any]:
    if not request:
        return {}
    return {
        "method": request.method,
        "path": request.url.path,
        "referer": request.headers.get("referer"),
    }


# ─────────────────────────────────────────────────────────────
# 🧠 Audit Writer (best-effort, never raises)
# ─────────────────────────────────────────────────────────────
async def log_audit_event(
    db: AsyncSession,
    *,
    user: Optional[User] = None,
    action: Union[str, AuditEvent],
    status: str,
    request: Optional[Request] = None,
    meta_data: Optional[Dict[str, Any]] = None,
    override_user_id: Optional[UUID] = None,
    commit: bool = True,
) -> Optional[AuditLog]:
    """Persist an audit row for `action`.

    Captures `user_id` (from `user` or `override_user_id`), the action name,
    an upper-cased `status` (SUCCESS / FAILURE), client IP, user agent,
    request id and scrubbed metadata merged with a small request snapshot.
    """
    request_id = getattr(request.state, "request_id", None) if request else None
    metadata = _safe_metadata(meta_data)
    for k, v in _request_snapshot(request).items():
        metadata.setdefault(k, v)

    entry = AuditLog(
        user_id=override_user_id or getattr(user, "id", None),
        action=str(getattr(action, "value", action)),
        status=str(status or "").upper(),
        ip_address=_client_ip(request),
        user_agent=request.headers.get("user-agent") if request else None,
        request_id=request_id,
        metadata_json=metadata or None,
    )
    try:
        async with db.begin_nested():
            db.add(entry)
        if commit:
            await db.commit()
    except SQLAlchemyError:
        logger.warning("[AUDIT] Failed to write audit log for %s", entry.action, exc_info=True)
        return None
    return entry


__all__ = ["AuditEvent", "log_audit_event"]
