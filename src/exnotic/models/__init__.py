"""
Data models module for exnotic.

Defines Pydantic records for scraped videos and channels, resolved playback
sources, and the search audit log.
"""

from __future__ import annotations

from .enums import (
    PlaybackStrategy,
    ProjectionMode,
    ResultType,
    SearchFilter,
    SearchResponseType,
    VideoLookupMethod,
)
from .records import (
    DEFAULT_AVATAR_URL,
    UNKNOWN_CHANNEL,
    UNTITLED,
    ChannelPage,
    ChannelRecord,
    OEmbedData,
    ResolvedPlaybackSource,
    SearchQueryLog,
    SearchResponse,
    VideoRecord,
)
from .youtube_types import VIDEO_ID_PATTERN, extract_video_id, is_channel_id, is_video_id

__all__ = [
    # Enums
    "PlaybackStrategy",
    "ProjectionMode",
    "ResultType",
    "SearchFilter",
    "SearchResponseType",
    "VideoLookupMethod",
    # Records
    "ChannelPage",
    "ChannelRecord",
    "OEmbedData",
    "ResolvedPlaybackSource",
    "SearchQueryLog",
    "SearchResponse",
    "VideoRecord",
    # Constants
    "DEFAULT_AVATAR_URL",
    "UNKNOWN_CHANNEL",
    "UNTITLED",
    # Identifier helpers
    "VIDEO_ID_PATTERN",
    "extract_video_id",
    "is_channel_id",
    "is_video_id",
]
