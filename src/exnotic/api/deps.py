"""FastAPI dependencies for API endpoints.

This is the only layer that reads global settings; services receive their
configuration as constructor arguments.
"""

from __future__ import annotations

from fastapi import Depends

from exnotic.config.settings import settings
from exnotic.services.channel_resolver import ChannelResolver
from exnotic.services.scraping.fetcher import PageFetcher
from exnotic.services.search import SearchService
from exnotic.services.store import EphemeralStore
from exnotic.services.video_resolver import VideoSourceResolver

# Module-level singleton: one store shared by every request in the process
_store = EphemeralStore(
    max_entries=settings.cache_max_entries,
    ttl_seconds=settings.cache_ttl_seconds,
    log_max_entries=settings.search_log_max_entries,
)


def get_store() -> EphemeralStore:
    """Return the process-wide ephemeral store."""
    return _store


def get_fetcher() -> PageFetcher:
    """
    Dependency for the upstream page fetcher.

    The fetcher holds no request-scoped state; it opens a short-lived HTTP
    client per request.
    """
    return PageFetcher(user_agent=settings.user_agent, timeout=settings.request_timeout)


def get_video_resolver(
    fetcher: PageFetcher = Depends(get_fetcher),
) -> VideoSourceResolver:
    return VideoSourceResolver(
        fetcher,
        settings.invidious_instances,
        invidious_user_agent=settings.invidious_user_agent,
    )


def get_channel_resolver(
    fetcher: PageFetcher = Depends(get_fetcher),
) -> ChannelResolver:
    return ChannelResolver(fetcher, video_limit=settings.channel_video_limit)


def get_search_service(
    fetcher: PageFetcher = Depends(get_fetcher),
    store: EphemeralStore = Depends(get_store),
    video_resolver: VideoSourceResolver = Depends(get_video_resolver),
) -> SearchService:
    return SearchService(
        fetcher,
        store,
        video_resolver,
        result_limit=settings.search_result_limit,
    )


def get_recent_searches_limit() -> int:
    """Number of entries ``/api/searches/recent`` returns."""
    return settings.recent_searches_limit
