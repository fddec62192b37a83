"""Tests for the outbound chat webhook notifiers."""

import json

import httpx
import pytest

from gitlab_relay.services.notifier import HttpNotifier, InMemoryNotifier, NotifierResponse

WEBHOOK_URL = "https://qyapi.weixin.qq.com/cgi-bin/webhook/send?key=abc"
MESSAGE = {"msgtype": "markdown", "markdown": {"content": "hello"}}


@pytest.mark.asyncio
async def test_http_notifier_posts_json() -> None:
    """The message is POSTed as a UTF-8 JSON body to the webhook URL."""
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"errcode": 0, "errmsg": "ok"})

    notifier = HttpNotifier(timeout=3.0, transport=httpx.MockTransport(handler))
    response = await notifier.send(WEBHOOK_URL, MESSAGE)

    assert response == NotifierResponse(status_code=200, data={"errcode": 0, "errmsg": "ok"})
    assert response.ok
    assert len(captured) == 1
    req = captured[0]
    assert req.method == "POST"
    assert str(req.url) == WEBHOOK_URL
    assert req.headers["content-type"] == "application/json; charset=UTF-8"
    assert json.loads(req.content) == MESSAGE


@pytest.mark.asyncio
async def test_http_notifier_returns_non_2xx() -> None:
    """Error statuses are returned to the caller rather than raised."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    notifier = HttpNotifier(timeout=3.0, transport=httpx.MockTransport(handler))
    response = await notifier.send(WEBHOOK_URL, MESSAGE)

    assert response.status_code == 502
    assert response.data == "Bad Gateway"
    assert not response.ok


@pytest.mark.asyncio
async def test_http_notifier_raises_on_timeout() -> None:
    """Transport timeouts surface as httpx.HTTPError."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    notifier = HttpNotifier(timeout=0.1, transport=httpx.MockTransport(handler))

    with pytest.raises(httpx.HTTPError):
        await notifier.send(WEBHOOK_URL, MESSAGE)


@pytest.mark.asyncio
async def test_in_memory_notifier_records_messages() -> None:
    """Sent messages are recorded with their URL and the canned response returned."""
    notifier = InMemoryNotifier()

    response = await notifier.send("https://a", MESSAGE)
    await notifier.send("https://b", MESSAGE)

    assert response.status_code == 200
    assert [s["url"] for s in notifier.sent] == ["https://a", "https://b"]
    assert notifier.sent[0]["message"] == MESSAGE


def test_in_memory_notifier_starts_empty() -> None:
    assert InMemoryNotifier().sent == []
