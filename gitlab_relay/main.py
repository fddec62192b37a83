"""FastAPI application factory with lifespan context manager."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from gitlab_relay.config import settings
from gitlab_relay.dependencies import init_notifier
from gitlab_relay.logging_config import configure_logging
from gitlab_relay.routers import health, webhooks


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and the outbound notifier before serving requests."""
    configure_logging(json_logs=not settings.debug, log_level=settings.log_level)
    init_notifier(dry_run=settings.dry_run)
    if settings.dry_run:
        structlog.get_logger().warning("dry_run_enabled")
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for any unhandled exception."""
    logger = structlog.get_logger()
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(health.router)
app.include_router(webhooks.router)
