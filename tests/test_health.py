"""Integration tests for the /healthz endpoint."""

import pytest
from httpx import AsyncClient


@pytest.mark.anyio
async def test_healthz_returns_200(client: AsyncClient) -> None:
    """GET /healthz returns 200 with status ok."""
    response = await client.get("/healthz")
    assert response.status_code == 200

    body = response.json()
    assert body == {"status": "ok"}


@pytest.mark.anyio
async def test_healthz_does_not_expose_webhook_configuration(
    client: AsyncClient, monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Configured webhook URLs do not change the health body."""
    monkeypatch.setenv("WEBHOOK_URL", "https://qyapi.weixin.qq.com/hook")

    body = (await client.get("/healthz")).json()
    assert body == {"status": "ok"}
