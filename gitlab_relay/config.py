"""Application configuration loaded from environment variables."""

import os
from collections.abc import Mapping
from datetime import timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict

from gitlab_relay.schemas.delivery import Platform


class Settings(BaseSettings):
    """Application settings with environment variable loading and sensible defaults."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "gitlab-chat-relay"
    debug: bool = False
    log_level: str = "INFO"

    # Per-delivery timeout for outbound chat webhook calls.
    delivery_timeout_seconds: float = 3.0
    # Zone merge request timestamps are displayed in.
    timezone: str = "Asia/Shanghai"
    # Render and record messages without sending them.
    dry_run: bool = False

    @property
    def tz(self) -> tzinfo:
        """The configured display timezone, falling back to UTC when unknown."""
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            return timezone.utc


settings = Settings()

# Environment variable prefix holding each platform's webhook URL.
WEBHOOK_URL_ENV: dict[Platform, str] = {
    Platform.WXWORK: "WEBHOOK_URL",
    Platform.FEISHU: "FEISHU_WEBHOOK_URL",
}


def resolve_webhook_urls(
    path: str = "",
    environ: Mapping[str, str] | None = None,
) -> dict[Platform, str]:
    """Return the webhook URL of every platform enabled for a route path.

    ``POST /`` reads ``WEBHOOK_URL`` and ``FEISHU_WEBHOOK_URL``; ``POST /team-a``
    reads ``WEBHOOK_URL_TEAM-A`` and ``FEISHU_WEBHOOK_URL_TEAM-A``. Variables
    are read on every call so new routes need no restart. Platforms without a
    non-empty URL are left out.
    """
    env = os.environ if environ is None else environ
    suffix = f"_{path.upper()}" if path else ""
    urls: dict[Platform, str] = {}
    for platform, name in WEBHOOK_URL_ENV.items():
        url = env.get(f"{name}{suffix}", "").strip()
        if url:
            urls[platform] = url
    return urls
