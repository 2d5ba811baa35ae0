"""Fixtures for API tests: an ASGI client bound to an in-memory store."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from stockledger.api.dependencies import get_persistence, get_store
from stockledger.api.main import app


@pytest.fixture
def persistence():
    mock = AsyncMock()
    mock.load.return_value = None
    return mock


@pytest.fixture
async def client(stocked_store, persistence):
    app.dependency_overrides[get_store] = lambda: stocked_store
    app.dependency_overrides[get_persistence] = lambda: persistence
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_store, None)
    app.dependency_overrides.pop(get_persistence, None)
