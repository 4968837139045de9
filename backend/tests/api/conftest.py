"""Fixtures for API tests: the app wired to a fake-engine session manager."""

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.api.deps import get_db_session
from app.main import app as fastapi_app


@pytest.fixture
def app(manager):
    fastapi_app.state.session_manager = manager
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def make_result(*, scalars=None, scalar=None, mappings=None, rowcount=1) -> MagicMock:
    """Build a fake ``Result`` for ``AsyncSession.execute``."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = scalars or []
    result.scalar_one_or_none.return_value = scalar
    result.mappings.return_value.all.return_value = mappings or []
    result.rowcount = rowcount
    return result


@pytest.fixture
def db_session(app):
    """Fake ``AsyncSession`` injected in place of the real dependency."""
    session = MagicMock()
    session.execute = AsyncMock(return_value=make_result())
    session.commit = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()

    async def _override():
        yield session

    app.dependency_overrides[get_db_session] = _override
    return session
