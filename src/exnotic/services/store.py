"""
In-process ephemeral store for resolved videos, search results and the
search audit log.

Nothing here survives a restart. Every collection is bounded: caches evict
the least recently used entry when full and expire entries after a TTL;
the search log keeps only the most recent entries.

The store is used from a single event loop and takes no locks. Concurrent
writers to the same key race and the last write wins.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict, deque
from collections.abc import Callable
from typing import Generic, TypeVar

from exnotic.models.records import SearchQueryLog, SearchResponse, VideoRecord

logger = logging.getLogger(__name__)

V = TypeVar("V")


class BoundedTTLCache(Generic[V]):
    """
    String-keyed LRU cache whose entries expire after ``ttl_seconds``.

    Expired entries are purged lazily, when looked up or when they reach
    the eviction end of the LRU order.

    Parameters
    ----------
    max_entries : int
        Capacity; inserting beyond it evicts the least recently used entry.
    ttl_seconds : float
        Entry lifetime measured from the last write.
    clock : Callable[[], float], optional
        Monotonic time source (default: ``time.monotonic``).

    Examples
    --------
    >>> cache: BoundedTTLCache[str] = BoundedTTLCache(max_entries=2, ttl_seconds=60)
    >>> cache.set("a", "1")
    >>> cache.get("a")
    '1'
    """

    def __init__(
        self,
        max_entries: int,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries <= 0:
            raise ValueError(f"max_entries must be greater than 0, got {max_entries}")
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be greater than 0, got {ttl_seconds}")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, V]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def _is_expired(self, stored_at: float) -> bool:
        return self._clock() - stored_at >= self.ttl_seconds

    def get(self, key: str) -> V | None:
        """Return the live value for ``key``, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._is_expired(stored_at):
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return value

    def set(self, key: str, value: V) -> None:
        """Store ``value`` under ``key``, evicting the oldest entry if full."""
        self._entries[key] = (self._clock(), value)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted cache entry %s", evicted)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()


def search_cache_key(query: str, filter_: str, page: int) -> str:
    """Build the search cache key ``query|filter|page``."""
    return f"{query}|{filter_}|{page}"


class EphemeralStore:
    """
    Video cache, search result cache and search audit log.

    Parameters
    ----------
    max_entries : int
        Capacity of each cache.
    ttl_seconds : float
        Lifetime of cached videos and search results.
    log_max_entries : int
        Number of search log entries retained.
    clock : Callable[[], float], optional
        Time source shared by both caches.
    """

    def __init__(
        self,
        max_entries: int = 1000,
        ttl_seconds: float = 3600,
        log_max_entries: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.videos: BoundedTTLCache[VideoRecord] = BoundedTTLCache(
            max_entries, ttl_seconds, clock
        )
        self.searches: BoundedTTLCache[SearchResponse] = BoundedTTLCache(
            max_entries, ttl_seconds, clock
        )
        self._search_log: deque[SearchQueryLog] = deque(maxlen=log_max_entries)

    # Videos

    def get_video(self, video_id: str) -> VideoRecord | None:
        return self.videos.get(video_id)

    def put_video(self, video: VideoRecord) -> VideoRecord:
        self.videos.set(video.id, video)
        return video

    # Search results

    def get_search(self, query: str, filter_: str, page: int) -> SearchResponse | None:
        return self.searches.get(search_cache_key(query, filter_, page))

    def put_search(
        self, query: str, filter_: str, page: int, response: SearchResponse
    ) -> None:
        self.searches.set(search_cache_key(query, filter_, page), response)

    # Search log

    def log_search(self, query: str) -> SearchQueryLog:
        """Append a search to the audit log and return the entry."""
        entry = SearchQueryLog(query=query)
        self._search_log.append(entry)
        return entry

    def recent_searches(self, limit: int = 10) -> list[SearchQueryLog]:
        """Return up to ``limit`` logged searches, newest first."""
        if limit <= 0:
            return []
        recent = list(self._search_log)[-limit:]
        recent.reverse()
        return recent

    def stats(self) -> dict[str, int]:
        return {
            "videos": len(self.videos),
            "searches": len(self.searches),
            "search_log": len(self._search_log),
        }
