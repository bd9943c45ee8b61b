import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import QuotaExceededError, StateConflictError
from app.db.models.user import User
from app.schemas.result import OperationResult
from app.services.creator.boundary import operation
from tests.utils.factory import create_user


@operation("echo", status_code=201)
async def _echo(db: AsyncSession, value):
    return {"value": value}


@operation("rename_then_fail")
async def _rename_then_fail(db: AsyncSession, user_id, exc: Exception):
    user = await db.get(User, user_id)
    user.full_name = "Changed"
    await db.flush()
    raise exc


@pytest.mark.anyio
async def test_success_wraps_data_with_status(db_session: AsyncSession):
    result = await _echo(db_session, 7)

    assert isinstance(result, OperationResult)
    assert result.success is True
    assert result.data == {"value": 7}
    assert result.error is None
    assert result.status_code == 201
    assert result.model_dump(mode="json") == {"success": True, "data": {"value": 7}, "error": None}


@pytest.mark.anyio
async def test_app_exception_becomes_failure_and_rolls_back(db_session: AsyncSession):
    user = await create_user(db_session)
    user_id = user.id

    result = await _rename_then_fail(
        db_session, user_id, StateConflictError("Busy", details={"status": "approved"})
    )

    assert result.success is False
    assert result.data is None
    assert result.status_code == 409
    assert result.model_dump(mode="json")["error"] == {
        "code": "StateConflictError",
        "message": "Busy",
        "details": {"status": "approved"},
    }
    name = await db_session.scalar(select(User.full_name).where(User.id == user_id))
    assert name == "Test User"


@pytest.mark.anyio
async def test_quota_failure_keeps_its_status(db_session: AsyncSession):
    user = await create_user(db_session)

    result = await _rename_then_fail(db_session, user.id, QuotaExceededError("Daily upload limit reached"))

    assert result.status_code == 429
    assert result.error_code == "QuotaExceededError"


@pytest.mark.anyio
async def test_store_failure_is_reported_as_store_error(db_session: AsyncSession):
    user = await create_user(db_session)
    user_id = user.id

    result = await _rename_then_fail(
        db_session, user_id, OperationalError("UPDATE users", {}, Exception("disk I/O error"))
    )

    assert result.error.code == "StoreError"
    assert result.status_code == 503
    assert "disk" not in result.error.message
    name = await db_session.scalar(select(User.full_name).where(User.id == user_id))
    assert name == "Test User"


@pytest.mark.anyio
async def test_unexpected_errors_propagate(db_session: AsyncSession):
    user = await create_user(db_session)

    with pytest.raises(KeyError):
        await _rename_then_fail(db_session, user.id, KeyError("boom"))


def test_wrapper_keeps_name_and_operation_tag():
    assert _echo.__name__ == "_echo"
    assert _echo.__wrapped__.__name__ == "_echo"
    assert _echo.operation_name == "echo"
