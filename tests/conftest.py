"""
Test Configuration and Fixtures

Shared fixtures for the webhook inbox test suite: settings, an in-memory
webhook log store, a hosted-database client on a mock transport, and the
application with sync and async clients.
"""

import os
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

# Set test environment variables before importing the app.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("WEBHOOK_LOG_BACKEND", "memory")


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_collection_modifyitems(config, items):
    """
    Auto-assign tier markers so we can run:
    - pytest -m unit
    - pytest -m api

    Convention:
    - tests/api/** => api
    - everything else => unit
    """
    for item in items:
        path = str(getattr(item, "fspath", ""))
        if item.get_closest_marker("api") or item.get_closest_marker("unit"):
            continue
        if "/tests/api/" in path or "\\tests\\api\\" in path:
            item.add_marker(pytest.mark.api)
        else:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# SETTINGS & COLLABORATORS
# =============================================================================


@pytest.fixture
def settings():
    from webhook_inbox.config import Settings

    return Settings(
        environment="test",
        log_level="WARNING",
        webhook_log_backend="memory",
        supabase_url="https://db.example.test",
        supabase_service_role_key="service-role-test-key",
    )


@pytest.fixture
def store():
    from webhook_inbox.webhook_logs.store import MemoryWebhookLogStore

    return MemoryWebhookLogStore()


@pytest.fixture
def upstream():
    """Recorded requests and canned responses for the hosted database."""
    from tests.support.postgrest import FakePostgrestUpstream

    return FakePostgrestUpstream()


@pytest.fixture
def postgrest(settings, upstream):
    from webhook_inbox.db.postgrest import PostgrestClient

    return PostgrestClient(
        base_url=settings.supabase_url,
        service_role_key=settings.supabase_service_role_key,
        transport=httpx.MockTransport(upstream.handle),
    )


# =============================================================================
# APPLICATION FIXTURES
# =============================================================================


@pytest.fixture
def app(settings, store, postgrest):
    from webhook_inbox.api.main import create_app

    return create_app(settings, webhook_log_store=store, postgrest_client=postgrest)


@pytest.fixture
def client(app) -> TestClient:
    """Synchronous test client. Unhandled errors come back as 500 responses."""
    return TestClient(app, raise_server_exceptions=False)


@pytest_asyncio.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
