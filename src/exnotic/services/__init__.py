"""
Services for exnotic: scraping, fallback resolution, caching and search.
"""

from __future__ import annotations

from exnotic.services.channel_resolver import ChannelResolver, choose_channel_candidate
from exnotic.services.fallback import FallbackOutcome, try_in_order
from exnotic.services.search import SearchService, build_search_url
from exnotic.services.store import BoundedTTLCache, EphemeralStore
from exnotic.services.video_resolver import VideoSourceResolver

__all__ = [
    "BoundedTTLCache",
    "ChannelResolver",
    "EphemeralStore",
    "FallbackOutcome",
    "SearchService",
    "VideoSourceResolver",
    "build_search_url",
    "choose_channel_candidate",
    "try_in_order",
]
