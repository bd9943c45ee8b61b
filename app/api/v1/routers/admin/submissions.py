"""
Admin: Submission moderation
============================

Endpoints
---------
- GET  /submissions                   : list submissions (status / creator filters)
- GET  /submissions/{id}              : one submission with its episodes
- POST /submissions/{id}/approve      : approve and publish (reverts to pending if publishing fails)
- POST /submissions/{id}/reject       : reject with an optional reason
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
from app.schemas.enums import SubmissionStatus
from app.schemas.submission import RejectSubmissionIn
from app.security_headers import set_sensitive_cache
from app.services.audit_log_service import AuditEvent
from app.services.creator.moderation_service import approve_submission, reject_submission
from app.services.creator.submission_service import get_submission_details, list_submissions

router = APIRouter(tags=["Admin Submissions"])


@router.get("/submissions", summary="List content submissions")
@rate_limit("60/minute")
async def admin_list_submissions(
    request: Request,
    response: Response,
    status: Optional[SubmissionStatus] = Query(None),
    creator_id: Optional[UUID] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_async_db),
    admin: User = Depends(admin_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    result = await list_submissions(db, status=status, creator_id=creator_id, limit=limit)
    return respond(result, response)


@router.get("/submissions/{submission_id}", summary="Get a submission with its episodes")
@rate_limit("60/minute")
async def admin_get_submission(
    submission_id: UUID,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_async_db),
    admin: User = Depends(admin_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    return respond(await get_submission_details(db, submission_id), response)


@router.post("/submissions/{submission_id}/approve", summary="Approve and publish a submission")
@rate_limit("30/minute")
async def admin_approve_submission(
    submission_id: UUID,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_async_db),
    admin: User = Depends(admin_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    result = await approve_submission(db, submission_id, admin.id)
    await audit_result(
        db, admin=admin, action=AuditEvent.SUBMISSION_APPROVED, result=result, request=request,
        meta={"submission_id": str(submission_id)},
    )
    return respond(result, response)


@router.post("/submissions/{submission_id}/reject", summary="Reject a submission")
@rate_limit("30/minute")
async def admin_reject_submission(
    submission_id: UUID,
    request: Request,
    response: Response,
    payload: Optional[RejectSubmissionIn] = None,
    db: AsyncSession = Depends(get_async_db),
    admin: User = Depends(admin_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    result = await reject_submission(db, submission_id, admin.id, payload.reason if payload else None)
    await audit_result(
        db, admin=admin, action=AuditEvent.SUBMISSION_REJECTED, result=result, request=request,
        meta={"submission_id": str(submission_id)},
    )
    return respond(result, response)


__all__ = ["router"]
