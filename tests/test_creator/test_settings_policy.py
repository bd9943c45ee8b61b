from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.creator_profile import CreatorProfile
from app.db.models.creator_settings import CreatorSettings
from app.schemas.creator import CreatorPolicy
from app.services.creator.eligibility_service import approve_request, request_access
from app.services.creator.settings_service import (
    get_creator_policy,
    get_creator_settings,
    update_creator_settings,
)
from tests.utils.factory import create_admin, create_user, save_creator_settings


@pytest.mark.anyio
async def test_defaults_apply_without_a_row(db_session: AsyncSession):
    result = await get_creator_settings(db_session)

    assert result.success
    assert result.data == CreatorPolicy.defaults()
    assert result.data.min_account_age_days == 30
    assert result.data.max_account_age_days == 90
    assert result.data.default_daily_upload_limit == 4
    assert result.data.default_daily_storage_limit_gb == Decimal("8")
    assert result.data.max_strikes_before_suspension == 3
    assert await db_session.get(CreatorSettings, 1) is None


@pytest.mark.anyio
async def test_partial_update_creates_the_singleton(db_session: AsyncSession):
    result = await update_creator_settings(db_session, {"default_daily_upload_limit": 6})

    assert result.success, result.error
    assert result.data.default_daily_upload_limit == 6
    assert result.data.max_account_age_days == 90
    rows = (await db_session.execute(select(CreatorSettings))).scalars().all()
    assert [r.id for r in rows] == [1]


@pytest.mark.anyio
async def test_second_update_patches_the_same_row(db_session: AsyncSession):
    await update_creator_settings(db_session, {"default_daily_upload_limit": 6})

    result = await update_creator_settings(db_session, {"auto_approve_new_creators": True})

    assert result.data.default_daily_upload_limit == 6
    assert result.data.auto_approve_new_creators is True
    assert len((await db_session.execute(select(CreatorSettings))).scalars().all()) == 1


@pytest.mark.anyio
async def test_window_order_checked_in_payload(db_session: AsyncSession):
    result = await update_creator_settings(
        db_session, {"min_account_age_days": 100, "max_account_age_days": 10}
    )

    assert result.error.code == "ValidationError"
    assert result.status_code == 422


@pytest.mark.anyio
async def test_window_order_checked_against_stored_row(db_session: AsyncSession):
    await save_creator_settings(db_session, min_account_age_days=30, max_account_age_days=60)

    result = await update_creator_settings(db_session, {"min_account_age_days": 61})

    assert result.error.code == "ValidationError"
    assert result.error.details == {"min_account_age_days": 61, "max_account_age_days": 60}
    policy = await get_creator_policy(db_session)
    assert policy.min_account_age_days == 30


@pytest.mark.anyio
async def test_negative_limits_are_refused(db_session: AsyncSession):
    result = await update_creator_settings(db_session, {"default_daily_storage_limit_gb": "-1"})

    assert result.error.code == "ValidationError"


@pytest.mark.anyio
async def test_disabled_program_refuses_requests(db_session: AsyncSession):
    user = await create_user(db_session)
    await save_creator_settings(db_session, is_creator_system_enabled=False)

    result = await request_access(db_session, user.id)

    assert result.error.code == "StateConflictError"
    assert result.error.message == "The creator program is not accepting requests right now"


@pytest.mark.anyio
async def test_new_profiles_take_current_defaults(db_session: AsyncSession):
    admin = await create_admin(db_session)
    user = await create_user(db_session)
    user_id = user.id
    req = await request_access(db_session, user_id)
    await update_creator_settings(
        db_session,
        {
            "default_daily_upload_limit": 9,
            "default_daily_storage_limit_gb": "20",
            "auto_approve_new_creators": True,
        },
    )

    assert (await approve_request(db_session, req.data.id, admin.id)).success

    profile = (
        await db_session.execute(select(CreatorProfile).where(CreatorProfile.user_id == user_id))
    ).scalars().one()
    assert profile.daily_upload_limit == 9
    assert Decimal(profile.daily_storage_limit_gb) == Decimal("20")
    assert profile.is_auto_approve_enabled is True
