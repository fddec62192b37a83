"""Pydantic response models for webhook delivery outcomes."""

from enum import Enum
from typing import Any

from pydantic import BaseModel


class Platform(str, Enum):
    """Chat platforms messages can be delivered to."""

    WXWORK = "wxwork"
    FEISHU = "feishu"


class DeliveryResult(BaseModel):
    """Outcome of translating and delivering one event to one platform.

    ``success`` is true for a message that was suppressed or had nothing to
    send, since withholding it was the intended result.
    """

    platform: Platform
    success: bool
    msg: str | None = None
    webhook_url: str | None = None
    webhook_message: dict[str, Any] | None = None
    status: int | None = None
    response_data: Any = None
    error: str | None = None


class NoWebhookConfigured(BaseModel):
    """Response body when the request path has no webhook URL configured."""

    error: str = "No webhook URL configured for this path."
