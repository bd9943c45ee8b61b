# tests/fixtures/app.py

"""
🧩 App Fixture:
- Builds the real FastAPI app through `create_app()`
- Injects the test-specific DB session
- Returns an HTTP client fixture for integration tests
"""

from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from tests.fixtures.db import get_override_get_db


@pytest.fixture()
async def app(db_session: AsyncSession) -> FastAPI:
    """🧪 Full application (middleware, handlers, routers) bound to the test session."""
    from app.main import create_app

    application = create_app()
    application.dependency_overrides[get_async_db] = get_override_get_db(db_session)
    return application


@pytest.fixture()
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """🌐 HTTP client for sending requests to the test app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
