"""
Health check endpoints.

Provides liveness and readiness probes with storage connectivity checks.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from randflix.api.dependencies import get_storage
from randflix.storage.base import TitleStorage

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    storage: str | None = None


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running.
    Does not check dependencies.
    """
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
def ready(
    response: Response,
    storage: Annotated[TitleStorage, Depends(get_storage)],
) -> HealthResponse:
    """
    Readiness probe.

    Checks storage connectivity. Returns 503 if storage is unavailable.
    """
    if storage.ping():
        return HealthResponse(status="ready", storage="connected")

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(status="not ready", storage="disconnected")
