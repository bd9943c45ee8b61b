"""
Admin: Creator program
======================

Endpoints
---------
- GET   /creator-requests                  : list access requests (optional status filter)
- POST  /creator-requests/{id}/approve     : approve → creates the creator profile
- POST  /creator-requests/{id}/reject      : reject with an optional reason
- GET   /creators                          : creator roster, newest first (optional status filter)
- POST  /creators/grant                    : admin override, creates a profile for any user
- PATCH /creators/{id}/limits              : daily upload/storage limits, auto-approve flag
- POST  /creators/{id}/strikes             : issue a strike (may auto-suspend)
- POST  /creators/{id}/suspend             : suspend explicitly
- POST  /creators/{id}/unsuspend           : reinstate
- GET   /creator-stats                     : counts by status

All routes require an ADMIN/SUPERUSER caller, are audited, and return the
`{success, data, error}` envelope.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.envelope import respond
from app.api.v1.routers.admin._audit import audit_result
from app.core.limiter import rate_limit
from app.db.models.user import User
from app.db.session import get_async_db
from app.dependencies.admin import admin_user
from app.schemas.creator import GrantAccessIn, LimitsUpdateIn, RejectRequestIn, StrikeIn, SuspendIn
from app.schemas.enums import CreatorRequestStatus, CreatorStatus
from app.security_headers import set_sensitive_cache
from app.services.audit_log_service import AuditEvent
from app.services.creator.eligibility_service import (
    approve_request,
    grant_creator_access,
    list_creator_requests,
    reject_request,
)
from app.services.creator.strike_service import (
    add_strike,
    get_creator_stats,
    list_creators,
    suspend_creator,
    unsuspend_creator,
    update_creator_limits,
)

router = APIRouter(tags=["Admin Creators"])


# ─────────────────────────────────────────────────────────────
# 🙋 Access requests
# ─────────────────────────────────────────────────────────────
@router.get("/creator-requests", summary="List creator access requests")
@rate_limit("60/minute")
async def admin_list_creator_requests(
    request: Request,
    response: Response,
    status: Optional[CreatorRequestStatus] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_async_db),
    admin: User = Depends(admin_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    return respond(await list_creator_requests(db, status, limit=limit), response)


@router.post("/creator-requests/{request_id}/approve", summary="Approve a creator access request")
@rate_limit("30/minute")
async def admin_approve_creator_request(
    request_id: UUID,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_async_db),
    admin: User = Depends(admin_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    result = await approve_request(db, request_id, admin.id)
    await audit_result(
        db, admin=admin, action=AuditEvent.CREATOR_REQUEST_APPROVED, result=result, request=request,
        meta={"request_id": str(request_id)},
    )
    return respond(result, response)


@router.post("/creator-requests/{request_id}/reject", summary="Reject a creator access request")
@rate_limit("30/minute")
async def admin_reject_creator_request(
    request_id: UUID,
    request: Request,
    response: Response,
    payload: Optional[RejectRequestIn] = None,
    db: AsyncSession = Depends(get_async_db),
    admin: User = Depends(admin_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    result = await reject_request(db, request_id, admin.id, payload.reason if payload else None)
    await audit_result(
        db, admin=admin, action=AuditEvent.CREATOR_REQUEST_REJECTED, result=result, request=request,
        meta={"request_id": str(request_id)},
    )
    return respond(result, response)


@router.get("/creators", summary="List creators")
@rate_limit("60/minute")
async def admin_list_creators(
    request: Request,
    response: Response,
    status: Optional[CreatorStatus] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_async_db),
    admin: User = Depends(admin_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    return respond(await list_creators(db, status, limit=limit), response)


@router.post("/creators/grant", summary="Grant creator access directly (override)")
@rate_limit("10/minute")
async def admin_grant_creator_access(
    request: Request,
    response: Response,
    payload: GrantAccessIn,
    db: AsyncSession = Depends(get_async_db),
    admin: User = Depends(admin_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    result = await grant_creator_access(db, payload.user_id, admin.id)
    await audit_result(
        db, admin=admin, action=AuditEvent.CREATOR_ACCESS_GRANTED, result=result, request=request,
        meta={"user_id": str(payload.user_id)},
    )
    return respond(result, response)


# ─────────────────────────────────────────────────────────────
# ⚠️ Standing & limits
# ─────────────────────────────────────────────────────────────
@router.patch("/creators/{creator_id}/limits", summary="Update a creator's daily limits")
@rate_limit("30/minute")
async def admin_update_creator_limits(
    creator_id: UUID,
    request: Request,
    response: Response,
    payload: LimitsUpdateIn,
    db: AsyncSession = Depends(get_async_db),
    admin: User = Depends(admin_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    result = await update_creator_limits(db, creator_id, payload, admin.id)
    await audit_result(
        db, admin=admin, action=AuditEvent.CREATOR_LIMITS_UPDATED, result=result, request=request,
        meta={"creator_id": str(creator_id), **payload.model_dump(mode="json", exclude_none=True)},
    )
    return respond(result, response)


@router.post("/creators/{creator_id}/strikes", summary="Issue a strike")
@rate_limit("30/minute")
async def admin_add_strike(
    creator_id: UUID,
    request: Request,
    response: Response,
    payload: StrikeIn,
    db: AsyncSession = Depends(get_async_db),
    admin: User = Depends(admin_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    result = await add_strike(db, creator_id, payload.reason, admin.id)
    await audit_result(
        db, admin=admin, action=AuditEvent.CREATOR_STRIKE_ISSUED, result=result, request=request,
        meta={"creator_id": str(creator_id)},
    )
    return respond(result, response)


@router.post("/creators/{creator_id}/suspend", summary="Suspend a creator")
@rate_limit("30/minute")
async def admin_suspend_creator(
    creator_id: UUID,
    request: Request,
    response: Response,
    payload: SuspendIn,
    db: AsyncSession = Depends(get_async_db),
    admin: User = Depends(admin_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    result = await suspend_creator(db, creator_id, payload.reason, admin.id)
    await audit_result(
        db, admin=admin, action=AuditEvent.CREATOR_SUSPENDED, result=result, request=request,
        meta={"creator_id": str(creator_id)},
    )
    return respond(result, response)


@router.post("/creators/{creator_id}/unsuspend", summary="Reinstate a suspended creator")
@rate_limit("30/minute")
async def admin_unsuspend_creator(
    creator_id: UUID,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_async_db),
    admin: User = Depends(admin_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    result = await unsuspend_creator(db, creator_id, admin.id)
    await audit_result(
        db, admin=admin, action=AuditEvent.CREATOR_UNSUSPENDED, result=result, request=request,
        meta={"creator_id": str(creator_id)},
    )
    return respond(result, response)


@router.get("/creator-stats", summary="Creator program counters")
@rate_limit("60/minute")
async def admin_creator_stats(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_async_db),
    admin: User = Depends(admin_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    return respond(await get_creator_stats(db), response)


__all__ = ["router"]
