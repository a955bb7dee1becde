"""
Pydantic records produced by the scraping and resolution layers.

All records are immutable once constructed. Attributes are snake_case in
Python and serialise to the camelCase keys the frontend consumes.

Models
------
VideoRecord
    A video, or a channel entry inside mixed search results.
ChannelRecord
    Channel metadata assembled from search snippets and channel headers.
ChannelPage
    A channel together with its video list.
SearchResponse
    Body of ``/api/search``.
SearchQueryLog
    Audit entry for a search query.
OEmbedData
    The parts of a YouTube oEmbed response the service reads.
ResolvedPlaybackSource
    Outcome of the playback fallback chain.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from exnotic.models.enums import PlaybackStrategy, ResultType, SearchResponseType

UNKNOWN_CHANNEL = "Unknown Channel"
UNTITLED = "Untitled"
DEFAULT_AVATAR_URL = "https://yt3.ggpht.com/a/default-user=s88-c-k-c0x00ffffff-no-rj"

_RECORD_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)

_CHANNEL_ONLY_FIELDS = {"subscriberCount", "videoCount"}


class VideoRecord(BaseModel):
    """
    A single video, or a channel entry in a mixed search result list.

    ``type`` tells the two apart; input without a ``type`` is a video.
    ``subscriber_count`` and ``video_count`` are only meaningful for
    channel entries and are omitted from video payloads.
    """

    model_config = _RECORD_CONFIG

    id: str
    title: str = UNTITLED
    description: str | None = None
    channel_title: str = UNKNOWN_CHANNEL
    channel_id: str = ""
    channel_avatar_url: str | None = None
    thumbnail_url: str | None = None
    duration: str | None = None
    view_count: str | None = None
    published_at: str | None = None
    type: ResultType = ResultType.VIDEO
    subscriber_count: str | None = None
    video_count: str | None = None

    @property
    def is_channel(self) -> bool:
        return self.type == ResultType.CHANNEL

    def to_payload(self) -> dict[str, Any]:
        """Serialise to the camelCase JSON shape served by the API."""
        payload = self.model_dump(mode="json", by_alias=True)
        if not self.is_channel:
            for key in _CHANNEL_ONLY_FIELDS:
                payload.pop(key, None)
        return payload


class ChannelRecord(BaseModel):
    """
    Channel metadata.

    Attributes
    ----------
    channel_id : str
        The ``UC``-prefixed channel ID (or the raw handle that was looked up).
    name : str
        Display name; ``"Unknown Channel"`` when nothing better was found.
    avatar_url : str | None
        Highest-quality avatar URL known.
    description : str
        Tagline or description snippet.
    subscriber_count : str
        Subscriber count as displayed by YouTube (e.g. "1.2M subscribers").
    video_count : str
        Number of videos, as text.
    """

    model_config = _RECORD_CONFIG

    channel_id: str
    name: str = UNKNOWN_CHANNEL
    avatar_url: str | None = None
    description: str = ""
    subscriber_count: str = ""
    video_count: str = ""

    @property
    def is_placeholder(self) -> bool:
        """True when nothing beyond the ID is known about the channel."""
        return (
            self.name == UNKNOWN_CHANNEL
            and not self.avatar_url
            and not self.description
            and not self.subscriber_count
        )

    def merged_with(self, other: ChannelRecord) -> ChannelRecord:
        """
        Backfill missing fields of this record from ``other``.

        Fields this record already carries win; empty fields and the
        default name are taken from ``other``.

        Parameters
        ----------
        other : ChannelRecord
            The lower-precedence source, typically a channel page header.

        Returns
        -------
        ChannelRecord
            A new merged record.
        """
        return self.model_copy(
            update={
                "channel_id": self.channel_id or other.channel_id,
                "name": self.name if self.name != UNKNOWN_CHANNEL else other.name,
                "avatar_url": self.avatar_url or other.avatar_url,
                "description": self.description or other.description,
                "subscriber_count": self.subscriber_count or other.subscriber_count,
                "video_count": self.video_count or other.video_count,
            }
        )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ChannelPage(BaseModel):
    """A channel and its videos, as returned by ``/api/channel``."""

    model_config = _RECORD_CONFIG

    channel: ChannelRecord
    videos: list[VideoRecord] = Field(default_factory=list)

    def with_counted_videos(self) -> ChannelPage:
        """Return a copy whose ``video_count`` reflects the fetched videos."""
        if not self.videos:
            return self
        channel = self.channel.model_copy(
            update={"video_count": str(len(self.videos))}
        )
        return self.model_copy(update={"channel": channel})

    def to_payload(self) -> dict[str, Any]:
        channel = self.channel.to_payload()
        channel["videoCount"] = channel["videoCount"] or str(len(self.videos))
        return {
            "channel": channel,
            "videos": [video.to_payload() for video in self.videos],
        }


class SearchResponse(BaseModel):
    """Body of ``/api/search``."""

    model_config = _RECORD_CONFIG

    videos: list[VideoRecord] = Field(default_factory=list)
    channels: list[VideoRecord] = Field(default_factory=list)
    type: SearchResponseType = SearchResponseType.SEARCH

    def to_payload(self) -> dict[str, Any]:
        return {
            "videos": [video.to_payload() for video in self.videos],
            "channels": [channel.to_payload() for channel in self.channels],
            "type": self.type.value,
        }


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SearchQueryLog(BaseModel):
    """Audit entry recorded for each search."""

    model_config = _RECORD_CONFIG

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    query: str
    timestamp: str = Field(default_factory=_utc_now_iso)


class OEmbedData(BaseModel):
    """
    YouTube oEmbed response.

    Only the fields the service reads are declared. Everything else the
    endpoint returns is kept so the raw payload can be passed through.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    title: str | None = None
    author_name: str | None = None
    author_url: str | None = None
    thumbnail_url: str | None = None
    html: str | None = None
    provider_name: str | None = None


class ResolvedPlaybackSource(BaseModel):
    """
    Result of the playback fallback chain.

    Attributes
    ----------
    strategy : PlaybackStrategy
        Which source produced the result.
    endpoint : str
        The Invidious instance base URL, the first proxy embed URL, the oEmbed
        endpoint, or the raw embed URL, depending on ``strategy``.
    video : VideoRecord
        Video metadata as known to that source.
    video_streams : list[dict[str, Any]]
        Invidious ``formatStreams`` (Invidious only).
    adaptive_formats : list[dict[str, Any]]
        Invidious ``adaptiveFormats`` (Invidious only).
    proxy_methods : list[str]
        Alternative embed URLs, in preference order (proxy only).
    """

    model_config = ConfigDict(frozen=True)

    strategy: PlaybackStrategy
    endpoint: str
    video: VideoRecord
    video_streams: list[dict[str, Any]] = Field(default_factory=list)
    adaptive_formats: list[dict[str, Any]] = Field(default_factory=list)
    proxy_methods: list[str] = Field(default_factory=list)

    @property
    def embed_url(self) -> str:
        if self.strategy == PlaybackStrategy.INVIDIOUS:
            return f"{self.endpoint}/embed/{self.video.id}"
        if self.strategy == PlaybackStrategy.PROXY and self.proxy_methods:
            return self.proxy_methods[0]
        return f"https://www.youtube.com/embed/{self.video.id}"

    def to_payload(self) -> dict[str, Any]:
        """
        Flatten into the JSON object the player consumes.

        Video fields sit at the top level next to the strategy markers.

        Returns
        -------
        dict[str, Any]
            Player payload with camelCase keys.
        """
        payload = self.video.to_payload()
        payload["strategy"] = self.strategy.value
        payload["endpointOrInstance"] = self.endpoint
        payload["embedUrl"] = self.embed_url

        if self.strategy == PlaybackStrategy.INVIDIOUS:
            payload["invidiousInstance"] = self.endpoint
            payload["videoStreams"] = self.video_streams
            payload["adaptiveFormats"] = self.adaptive_formats
            payload["useInvidious"] = True
        elif self.strategy == PlaybackStrategy.PROXY:
            payload["proxyMethods"] = list(self.proxy_methods)
            payload["useProxy"] = True

        return payload
