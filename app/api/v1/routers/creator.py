"""
Creator Studio — Creator routes
===============================

Self-service surface for creators and would-be creators.

Endpoints
---------
- GET    /creator/status                       : profile, today's usage, strikes / request + eligibility
- POST   /creator/request-access               : file a creator access request
- POST   /creator/submissions                  : submit a movie or series (Idempotency-Key supported)
- GET    /creator/submissions                  : own submissions, newest first
- GET    /creator/submissions/{id}             : one submission with its episodes
- PATCH  /creator/submissions/{id}             : edit a pending submission
- DELETE /creator/submissions/{id}             : withdraw a pending submission
- POST   /creator/submissions/{id}/episodes    : append episodes to a pending series
- GET    /creator/notifications                : inbox
- POST   /creator/notifications/{id}/read      : mark one read
- POST   /creator/notifications/read-all       : mark all read

Every response is the `{success, data, error}` envelope; mutating routes are
rate limited and marked `no-store`.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.envelope import idempotency_key, replay_snapshot, respond, store_snapshot
from app.core.limiter import rate_limit
from app.core.security import get_current_user
from app.db.models.creator_profile import CreatorProfile
from app.db.models.user import User
from app.db.session import get_async_db
from app.dependencies.creator import current_creator
from app.schemas.enums import SubmissionStatus
from app.schemas.submission import AddEpisodesIn, SubmissionUpdateIn
from app.security_headers import set_sensitive_cache
from app.services.creator.eligibility_service import get_creator_status, request_access
from app.services.creator.notification_service import (
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from app.services.creator.submission_service import (
    add_episodes_to_submission,
    delete_submission,
    get_submission_details,
    list_submissions,
    submit_content,
    update_submission,
)

router = APIRouter(prefix="/creator", tags=["Creator"])


# ─────────────────────────────────────────────────────────────
# 🙋 Access
# ─────────────────────────────────────────────────────────────
@router.get("/status", summary="Creator standing or request eligibility")
@rate_limit("60/minute")
async def creator_status(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    return respond(await get_creator_status(db, current_user.id), response)


@router.post("/request-access", summary="Request creator access")
@rate_limit("5/minute")
async def creator_request_access(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    return respond(await request_access(db, current_user.id), response)


# ─────────────────────────────────────────────────────────────
# 📥 Submissions
# ─────────────────────────────────────────────────────────────
@router.post("/submissions", summary="Submit a movie or series for review")
@rate_limit("10/minute")
async def creator_submit(
    request: Request,
    response: Response,
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_async_db),
    creator: CreatorProfile = Depends(current_creator),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    idem_key = idempotency_key(request, "creator:submit", creator.id)
    replay = await replay_snapshot(idem_key, response)
    if replay is not None:
        return replay

    result = await submit_content(db, creator.id, payload)
    body = respond(result, response)
    if result.success:
        await store_snapshot(idem_key, body, result.status_code)
    return body


@router.get("/submissions", summary="List my submissions")
@rate_limit("60/minute")
async def creator_list_submissions(
    request: Request,
    response: Response,
    status: Optional[SubmissionStatus] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_async_db),
    creator: CreatorProfile = Depends(current_creator),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    return respond(await list_submissions(db, status=status, creator_id=creator.id, limit=limit), response)


@router.get("/submissions/{submission_id}", summary="Get one of my submissions")
@rate_limit("60/minute")
async def creator_get_submission(
    submission_id: UUID,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_async_db),
    creator: CreatorProfile = Depends(current_creator),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    return respond(await get_submission_details(db, submission_id, creator.id), response)


@router.patch("/submissions/{submission_id}", summary="Edit a pending submission")
@rate_limit("20/minute")
async def creator_update_submission(
    submission_id: UUID,
    request: Request,
    response: Response,
    payload: SubmissionUpdateIn,
    db: AsyncSession = Depends(get_async_db),
    creator: CreatorProfile = Depends(current_creator),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    return respond(await update_submission(db, submission_id, creator.id, payload), response)


@router.delete("/submissions/{submission_id}", summary="Withdraw a pending submission")
@rate_limit("20/minute")
async def creator_delete_submission(
    submission_id: UUID,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_async_db),
    creator: CreatorProfile = Depends(current_creator),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    return respond(await delete_submission(db, submission_id, creator.id), response)


@router.post("/submissions/{submission_id}/episodes", summary="Append episodes to a pending series")
@rate_limit("10/minute")
async def creator_add_episodes(
    submission_id: UUID,
    request: Request,
    response: Response,
    payload: AddEpisodesIn,
    db: AsyncSession = Depends(get_async_db),
    creator: CreatorProfile = Depends(current_creator),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    result = await add_episodes_to_submission(db, submission_id, payload, creator_id=creator.id)
    return respond(result, response)


# ─────────────────────────────────────────────────────────────
# 📬 Notifications
# ─────────────────────────────────────────────────────────────
@router.get("/notifications", summary="My notifications")
@rate_limit("60/minute")
async def creator_notifications(
    request: Request,
    response: Response,
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    result = await list_notifications(db, current_user.id, unread_only=unread_only, limit=limit)
    return respond(result, response)


@router.post("/notifications/read-all", summary="Mark all notifications read")
@rate_limit("20/minute")
async def creator_notifications_read_all(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    return respond(await mark_all_notifications_read(db, current_user.id), response)


@router.post("/notifications/{notification_id}/read", summary="Mark one notification read")
@rate_limit("60/minute")
async def creator_notification_read(
    notification_id: UUID,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    set_sensitive_cache(response)
    return respond(await mark_notification_read(db, current_user.id, notification_id), response)


__all__ = ["router"]
