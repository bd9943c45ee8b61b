from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.content_submission import ContentSubmission
from app.schemas.enums import SubmissionType
from tests.fixtures.auth import make_access_token
from tests.utils.factory import create_pending_submission, movie_payload, series_payload

BASE = "/api/v1/creator"


@pytest.mark.anyio
async def test_missing_token_is_an_envelope_401(async_client: AsyncClient):
    res = await async_client.get(f"{BASE}/status")

    assert res.status_code == 401
    assert res.headers.get("www-authenticate") == "Bearer"
    assert res.json() == {
        "success": False,
        "data": None,
        "error": {"code": "AuthenticationError", "message": "Missing bearer token"},
    }


@pytest.mark.anyio
async def test_expired_token_is_refused(async_client: AsyncClient, user_with_headers):
    user, _ = await user_with_headers()
    token = make_access_token(user.id, expires_in=timedelta(seconds=-5))

    res = await async_client.get(f"{BASE}/status", headers={"Authorization": f"Bearer {token}"})

    assert res.status_code == 401
    assert res.json()["error"]["message"] == "Token has expired"


@pytest.mark.anyio
async def test_status_for_a_would_be_creator(async_client: AsyncClient, user_with_headers):
    _, headers = await user_with_headers(age_days=12)

    res = await async_client.get(f"{BASE}/status", headers=headers)

    assert res.status_code == 200
    assert "no-store" in res.headers["cache-control"]
    data = res.json()["data"]
    assert data["is_creator"] is False
    assert data["eligibility"]["eligible"] is False
    assert data["eligibility"]["account_age_days"] == 12


@pytest.mark.anyio
async def test_request_access_then_conflict(async_client: AsyncClient, user_with_headers):
    _, headers = await user_with_headers()

    first = await async_client.post(f"{BASE}/request-access", headers=headers)
    second = await async_client.post(f"{BASE}/request-access", headers=headers)

    assert first.status_code == 201
    assert first.json()["data"]["status"] == "pending"
    assert second.status_code == 409
    assert second.json()["error"]["message"] == "You already have a pending creator request"


@pytest.mark.anyio
async def test_submission_routes_need_a_creator_profile(async_client: AsyncClient, user_with_headers):
    _, headers = await user_with_headers()

    res = await async_client.post(f"{BASE}/submissions", json=movie_payload(), headers=headers)

    assert res.status_code == 404
    assert res.json()["error"]["message"] == "You are not a creator yet. Request creator access first."


@pytest.mark.anyio
async def test_submit_movie_and_read_it_back(async_client: AsyncClient, creator_with_headers):
    _, _, headers = await creator_with_headers()

    res = await async_client.post(f"{BASE}/submissions", json=movie_payload(), headers=headers)

    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["error"] is None
    sub = body["data"]["submission"]
    assert sub["status"] == "pending"
    assert body["data"]["auto_approved"] is False

    listed = await async_client.get(f"{BASE}/submissions", headers=headers)
    detail = await async_client.get(f"{BASE}/submissions/{sub['id']}", headers=headers)

    assert [s["id"] for s in listed.json()["data"]] == [sub["id"]]
    assert detail.json()["data"]["title"] == "Night Train"


@pytest.mark.anyio
async def test_invalid_payload_is_a_422_envelope(async_client: AsyncClient, creator_with_headers):
    _, _, headers = await creator_with_headers()

    res = await async_client.post(
        f"{BASE}/submissions", json=movie_payload(description="too short"), headers=headers
    )

    assert res.status_code == 422
    assert res.json()["error"]["code"] == "ValidationError"
    assert "description" in res.json()["error"]["message"]


@pytest.mark.anyio
async def test_quota_refusal_is_a_429(async_client: AsyncClient, creator_with_headers):
    _, _, headers = await creator_with_headers(daily_upload_limit=1)
    assert (await async_client.post(f"{BASE}/submissions", json=movie_payload(), headers=headers)).status_code == 201

    res = await async_client.post(
        f"{BASE}/submissions", json=movie_payload(title="Encore"), headers=headers
    )

    assert res.status_code == 429
    error = res.json()["error"]
    assert error["code"] == "QuotaExceededError"
    assert error["message"] == "Daily upload limit reached (1 uploads per day)"
    assert error["details"] == {"uploads_today": 1, "daily_upload_limit": 1}


@pytest.mark.anyio
async def test_idempotency_key_replays_the_first_response(
    async_client: AsyncClient, creator_with_headers, db_session: AsyncSession, redis_client
):
    _, _, headers = await creator_with_headers()
    headers = {**headers, "Idempotency-Key": "submit-42"}

    first = await async_client.post(f"{BASE}/submissions", json=series_payload(), headers=headers)
    second = await async_client.post(f"{BASE}/submissions", json=series_payload(), headers=headers)

    assert first.status_code == second.status_code == 201
    assert second.headers.get("idempotent-replay") == "true"
    assert "idempotent-replay" not in first.headers
    assert second.json() == first.json()
    assert await db_session.scalar(select(func.count()).select_from(ContentSubmission)) == 1


@pytest.mark.anyio
async def test_add_episodes_and_withdraw(
    async_client: AsyncClient, creator_with_headers, db_session: AsyncSession
):
    _, profile, headers = await creator_with_headers()
    sub = await create_pending_submission(
        db_session, profile, title="Galaxy Quest", episodes=[(1, 1)], type=SubmissionType.SERIES
    )
    sub_id = sub.id

    added = await async_client.post(
        f"{BASE}/submissions/{sub_id}/episodes",
        json={"episodes": [{"season_number": 1, "episode_number": 2, "video_url": "https://cdn.example.com/e2.mp4"}]},
        headers=headers,
    )
    deleted = await async_client.delete(f"{BASE}/submissions/{sub_id}", headers=headers)
    gone = await async_client.get(f"{BASE}/submissions/{sub_id}", headers=headers)

    assert added.status_code == 201
    assert added.json()["data"]["added"] == 1
    assert deleted.status_code == 200
    assert gone.status_code == 404


@pytest.mark.anyio
async def test_patch_pending_submission(
    async_client: AsyncClient, creator_with_headers, db_session: AsyncSession
):
    _, profile, headers = await creator_with_headers()
    sub = await create_pending_submission(db_session, profile)
    sub_id = sub.id

    ok = await async_client.patch(f"{BASE}/submissions/{sub_id}", json={"genre": "Noir"}, headers=headers)
    empty = await async_client.patch(f"{BASE}/submissions/{sub_id}", json={}, headers=headers)

    assert ok.status_code == 200
    assert ok.json()["data"]["genre"] == "Noir"
    assert empty.status_code == 422


@pytest.mark.anyio
async def test_notification_inbox_flow(async_client: AsyncClient, creator_with_headers):
    _, _, headers = await creator_with_headers()
    await async_client.post(f"{BASE}/submissions", json=movie_payload(), headers=headers)
    await async_client.post(f"{BASE}/submissions", json=movie_payload(title="Encore"), headers=headers)

    inbox = (await async_client.get(f"{BASE}/notifications", headers=headers)).json()["data"]
    assert inbox["unread"] == 2
    assert {n["title"] for n in inbox["items"]} == {"Content Submitted"}

    first_id = inbox["items"][0]["id"]
    one = await async_client.post(f"{BASE}/notifications/{first_id}/read", headers=headers)
    rest = await async_client.post(f"{BASE}/notifications/read-all", headers=headers)

    assert one.json()["data"]["is_read"] is True
    assert rest.json()["data"] == {"updated": 1}
    unread = await async_client.get(f"{BASE}/notifications", params={"unread_only": "true"}, headers=headers)
    assert unread.json()["data"] == {"items": [], "unread": 0}
