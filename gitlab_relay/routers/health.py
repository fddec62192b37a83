"""Liveness endpoint."""

from fastapi import APIRouter

from gitlab_relay.schemas.health import HealthResponse

router = APIRouter()


@router.get("/healthz", response_model=HealthResponse)
async def healthz() -> HealthResponse:
    """Report that the service is up.

    The relay holds no connections of its own, so there is nothing further to
    probe; delivery problems surface per request instead.
    """
    return HealthResponse(status="ok")
