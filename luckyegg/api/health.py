"""
Health check endpoints.

Liveness, plus a readiness check covering both collaborators: the local
cart store and the hosted backend.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from luckyegg.api.deps import BackendDep
from luckyegg.db.database import check_connection, get_session
from luckyegg.models.failure import BackendError

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    database: str | None = None
    backend: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe. Does not touch the cart store or the backend."""
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
    backend: BackendDep,
) -> HealthResponse:
    """
    Readiness probe.

    Both checks always run so the body reports each one. Returns 503 if
    either the cart store or the backend is unavailable.
    """
    database_ok = await check_connection(session)
    try:
        await backend.ping()
        backend_ok = True
    except BackendError:
        backend_ok = False

    result = HealthResponse(
        status="ready" if database_ok and backend_ok else "not ready",
        database="connected" if database_ok else "disconnected",
        backend="reachable" if backend_ok else "unreachable",
    )
    if result.status != "ready":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return result
