"""Shared test fixtures for the FastAPI test client and outbound notifier."""

import os
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from gitlab_relay.config import WEBHOOK_URL_ENV
from gitlab_relay.dependencies import get_notifier
from gitlab_relay.main import app
from gitlab_relay.services.notifier import InMemoryNotifier


@pytest.fixture
def anyio_backend() -> str:
    """Run anyio-marked tests on the asyncio backend only."""
    return "asyncio"


@pytest.fixture(autouse=True)
def _clean_webhook_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove webhook URL variables inherited from the developer's shell."""
    prefixes = tuple(WEBHOOK_URL_ENV.values())
    for name in list(os.environ):
        if name.startswith(prefixes):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_notifier() -> InMemoryNotifier:
    """Create a fresh in-memory notifier for test inspection."""
    return InMemoryNotifier()


@pytest.fixture
async def client(mock_notifier: InMemoryNotifier) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx AsyncClient with the notifier overridden.

    Messages are recorded by the in-memory notifier instead of being posted
    to real chat webhooks.
    """
    app.dependency_overrides[get_notifier] = lambda: mock_notifier
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
