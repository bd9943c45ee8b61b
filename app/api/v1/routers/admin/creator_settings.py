"""
Admin: Creator settings
=======================

- GET /creator-settings : current policy (stored row or configured defaults)
- PUT /creator-settings : partial update of the singleton policy row
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.envelope import respond
from app.api.v1.routers.admin._audit import audit_result
from app.core.limiter import rate_limit
from app.db.models.user import User
from app.db.session import get_async_db
from app.dependencies.admin import admin_user
from app.schemas.creator import CreatorSettingsUpdateIn
from app.security_headers import set_sensitive_cache
from app.services.audit_log_service import AuditEvent
from app.services.creator.settings_service import get_creator_settings, update_creator_settings

router = APIRouter(tags=["Admin Creator Settings"])


@router.get("/creator-settings", summary="Read the creator policy")
@rate_limit("60/minute")
async def admin_get_creator_settings(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_async_db),
    admin: User = Depends(admin_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    return respond(await get_creator_settings(db), response)


@router.put("/creator-settings", summary="Update the creator policy")
@rate_limit("10/minute")
async def admin_update_creator_settings(
    request: Request,
    response: Response,
    payload: CreatorSettingsUpdateIn,
    db: AsyncSession = Depends(get_async_db),
    admin: User = Depends(admin_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    result = await update_creator_settings(db, payload)
    await audit_result(
        db, admin=admin, action=AuditEvent.CREATOR_SETTINGS_UPDATED, result=result, request=request,
        meta=payload.model_dump(mode="json", exclude_none=True),
    )
    return respond(result, response)


__all__ = ["router"]
