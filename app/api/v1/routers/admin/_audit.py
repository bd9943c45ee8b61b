"""Audit helper shared by the admin creator routers."""

from typing import Any, Dict, Optional

from fastapi import Request
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.user import User
from app.schemas.result import OperationResult
from app.services.audit_log_service import AuditEvent, log_audit_event


async def audit_result(
    db: AsyncSession,
    *,
    admin: User,
    action: AuditEvent,
    result: OperationResult,
    request: Request,
    meta: Optional[Dict[str, Any]] = None,
) -> None:
    """Record SUCCESS/FAILURE of an admin operation (best-effort)."""
    meta_data = dict(meta or {})
    if not result.success and result.error is not None:
        meta_data["error_code"] = result.error.code
    # A failed operation rolled the session back and expired `admin`;
    # the identity key still carries its id without a reload.
    admin_id = inspect(admin).identity[0]
    await log_audit_event(
        db,
        override_user_id=admin_id,
        action=action,
        status="SUCCESS" if result.success else "FAILURE",
        request=request,
        meta_data=meta_data,
    )
