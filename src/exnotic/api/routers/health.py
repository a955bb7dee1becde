"""Health check endpoint."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from exnotic import __version__
from exnotic.api.deps import get_store
from exnotic.services.store import EphemeralStore


class HealthStatus(BaseModel):
    status: str  # "healthy"
    version: str
    timestamp: datetime
    store: dict[str, int]  # entry counts per collection


router = APIRouter()


@router.get("/health", response_model=HealthStatus)
async def health_check(store: EphemeralStore = Depends(get_store)) -> HealthStatus:
    """
    Report version and ephemeral store occupancy.

    The service has no database or credentials to probe, so a response
    at all means healthy.
    """
    return HealthStatus(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(timezone.utc),
        store=store.stats(),
    )
