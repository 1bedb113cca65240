"""Pytest configuration and fixtures for integration tests."""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from apps.api.deps import get_commerce_settings, get_event_bus_dep, get_session_factory
from apps.api.main import app


@pytest_asyncio.fixture
async def test_client(test_session_factory, commerce_settings, event_bus):
    """HTTP client for the API, wired to the test database, settings and bus.

    Runs on the test's event loop so seeding and requests share the
    in-memory database connection.
    """
    app.dependency_overrides[get_session_factory] = lambda: test_session_factory
    app.dependency_overrides[get_commerce_settings] = lambda: commerce_settings
    app.dependency_overrides[get_event_bus_dep] = lambda: event_bus

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client

    app.dependency_overrides.clear()
