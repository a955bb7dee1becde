"""Search endpoints: YouTube search and the recent search log."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from exnotic.api.deps import get_recent_searches_limit, get_search_service, get_store
from exnotic.exceptions import BadRequestError, ExternalServiceError, UpstreamError
from exnotic.services.search import SearchService
from exnotic.services.store import EphemeralStore

router = APIRouter()


@router.get("/search")
async def search_videos(
    q: str | None = Query(None, description="Search text, YouTube URL or video ID"),
    method: str = Query(
        "scraping", description="Lookup method; scraping is the only one supported"
    ),
    filter_: str = Query(
        "relevant",
        alias="filter",
        description="Sort order: relevant, latest, popular or duration",
    ),
    page: int = Query(1, ge=1, description="1-based results page"),
    service: SearchService = Depends(get_search_service),
) -> dict[str, Any]:
    """
    Search YouTube.

    Returns ``{videos, channels, type}``. When ``q`` is a YouTube link or
    a bare video ID the single video is returned with ``type="direct"``.

    Raises
    ------
    BadRequestError
        If ``q`` is missing or blank (400).
    ExternalServiceError
        If the YouTube results page cannot be fetched (502).
    """
    if not q or not q.strip():
        raise BadRequestError("Query parameter is required")

    try:
        response = await service.search(q, filter_, page)
    except UpstreamError as e:
        raise ExternalServiceError(
            message=f"YouTube search failed: {e.message}",
            details={"url": e.url, "status_code": e.status_code},
        ) from e

    return response.to_payload()


@router.get("/searches/recent")
async def recent_searches(
    store: EphemeralStore = Depends(get_store),
    limit: int = Depends(get_recent_searches_limit),
) -> list[dict[str, Any]]:
    """Return the most recent searches, newest first."""
    return [
        entry.model_dump(mode="json", by_alias=True)
        for entry in store.recent_searches(limit)
    ]
