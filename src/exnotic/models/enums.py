"""
Enums for exnotic models.

Defines enumeration types used across the application for consistent
type safety and validation.
"""

from __future__ import annotations

from enum import Enum


class ResultType(str, Enum):
    """Kind of entry inside a mixed search result list."""

    VIDEO = "video"
    CHANNEL = "channel"


class PlaybackStrategy(str, Enum):
    """Source that produced a resolved playback description."""

    INVIDIOUS = "invidious"
    PROXY = "proxy"
    OEMBED = "oembed"
    DIRECT = "direct"


class SearchFilter(str, Enum):
    """Sort order requested for a YouTube search."""

    RELEVANT = "relevant"
    LATEST = "latest"
    POPULAR = "popular"
    DURATION = "duration"


class ProjectionMode(str, Enum):
    """Shape of the page being projected."""

    SEARCH = "search"  # mixed videos and channels
    CHANNEL = "channel"  # channel page, videos only


class VideoLookupMethod(str, Enum):
    """How ``/api/video/{id}`` resolves metadata."""

    OEMBED = "oembed"
    BYPASS = "bypass"


class SearchResponseType(str, Enum):
    """Whether a search was scraped or answered from a direct video link."""

    SEARCH = "search"
    DIRECT = "direct"
