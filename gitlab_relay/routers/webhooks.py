"""GitLab webhook router that fans one event out to every configured chat platform."""

import asyncio
from typing import Annotated, Any

import httpx
import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status

from gitlab_relay.config import resolve_webhook_urls, settings
from gitlab_relay.dependencies import get_notifier
from gitlab_relay.schemas.delivery import DeliveryResult, NoWebhookConfigured, Platform
from gitlab_relay.services.classifier import MalformedPayloadError
from gitlab_relay.services.notifier import Notifier, NotifierResponse
from gitlab_relay.services.translator import translate

logger = structlog.get_logger()

router = APIRouter(tags=["webhooks"])

SUPPRESSED_MSG = "message is empty, suppressed."

# Body field each platform uses for its application-level error code.
_ERROR_CODE_FIELDS = {
    Platform.WXWORK: "errcode",
    Platform.FEISHU: "code",
}


def _accepted(platform: Platform, response: NotifierResponse) -> bool:
    """A delivery succeeded if the HTTP status is 2xx and the body reports no error."""
    if not response.ok:
        return False
    if isinstance(response.data, dict):
        return response.data.get(_ERROR_CODE_FIELDS[platform], 0) == 0
    return True


async def deliver(
    platform: Platform,
    url: str,
    payload: Any,
    notifier: Notifier,
) -> DeliveryResult:
    """Translate *payload* for *platform* and send it to *url*.

    Translation and delivery failures are reported in the returned result so
    one platform never fails another.
    """
    log = logger.bind(platform=platform.value)
    try:
        result = translate(payload, platform, tz=settings.tz)
    except MalformedPayloadError as exc:
        log.warning("translation_failed", field=exc.field, error=str(exc))
        return DeliveryResult(platform=platform, success=False, error=str(exc))

    if not result.has_message:
        log.info("message_suppressed", outcome=result.outcome.value)
        return DeliveryResult(platform=platform, success=True, msg=SUPPRESSED_MSG)

    try:
        response = await notifier.send(url, result.document)
    # InvalidURL is raised while building the request and is not an HTTPError.
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        log.exception("delivery_failed", url=url)
        return DeliveryResult(
            platform=platform,
            success=False,
            error=str(exc) or type(exc).__name__,
        )

    success = _accepted(platform, response)
    if not success:
        log.warning("delivery_rejected", status=response.status_code, response=response.data)
    return DeliveryResult(
        platform=platform,
        success=success,
        webhook_url=url,
        webhook_message=result.document,
        status=response.status_code,
        response_data=response.data,
    )


@router.post(
    "/",
    response_model=list[DeliveryResult] | NoWebhookConfigured,
    response_model_exclude_none=True,
)
@router.post(
    "/{path}",
    response_model=list[DeliveryResult] | NoWebhookConfigured,
    response_model_exclude_none=True,
)
async def gitlab_webhook(
    request: Request,
    notifier: Annotated[Notifier, Depends(get_notifier)],
    path: str = "",
) -> list[DeliveryResult] | NoWebhookConfigured:
    """Receive a GitLab webhook event and relay it to the route's chat webhooks.

    The route ``path`` selects which ``WEBHOOK_URL*`` / ``FEISHU_WEBHOOK_URL*``
    environment variables are used. Platforms are delivered concurrently and
    one result is returned per platform.
    """
    try:
        payload = await request.json()
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid JSON body",
        ) from None

    object_kind = payload.get("object_kind") if isinstance(payload, dict) else None
    logger.info("webhook_received", path=path, object_kind=object_kind)

    urls = resolve_webhook_urls(path)
    if not urls:
        logger.error("no_webhook_configured", path=path)
        return NoWebhookConfigured()

    results = await asyncio.gather(
        *(deliver(platform, url, payload, notifier) for platform, url in urls.items())
    )

    logger.info(
        "webhook_processed",
        path=path,
        object_kind=object_kind,
        platforms=[r.platform.value for r in results],
        delivered=sum(1 for r in results if r.success),
    )
    return list(results)
