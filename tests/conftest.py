"""Root test fixtures shared across all test types.

This conftest contains fixtures that can be used by both unit and integration tests.
Database-specific fixtures are in tests/integration/conftest.py.
"""

import os

# Set APP_ENV to testing before any app imports to disable rate limiting
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-key-that-is-at-least-32-chars")
os.environ.setdefault("WEBHOOK_SECRET", "test-webhook-secret-that-is-at-least-32-chars")
# In-process webhook delivery: the ASGI transport ignores the host
os.environ.setdefault("WEBHOOK_BASE_URL", "http://test")
# Cheap argon2 parameters keep the suite fast
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "8192")

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import Callable

import httpx
import pytest

from src.saas.core.config import Settings, get_settings
from src.saas.services import WebhookDispatcher

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Build Settings with overrides on top of the test environment."""

    def _make(**overrides) -> Settings:
        return Settings(**overrides)  # type: ignore[call-arg]

    return _make


# --- Outbound webhook fixtures ---


@pytest.fixture
def captured_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def recording_transport(captured_requests: list[httpx.Request]) -> httpx.MockTransport:
    """Transport that records every request and answers 200."""

    def handler(request: httpx.Request) -> httpx.Response:
        captured_requests.append(request)
        return httpx.Response(200, json={"message": "ok"})

    return httpx.MockTransport(handler)


@pytest.fixture
def failing_transport() -> httpx.MockTransport:
    """Transport whose every request fails to connect."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    return httpx.MockTransport(handler)


@pytest.fixture
def recording_dispatcher(
    settings: Settings, recording_transport: httpx.MockTransport
) -> WebhookDispatcher:
    return WebhookDispatcher.from_settings(settings, transport=recording_transport)
