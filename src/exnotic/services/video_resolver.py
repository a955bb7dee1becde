"""
Video source resolution.

Given a video ID, produce a playable source description by walking an
ordered chain of sources and stopping at the first that succeeds:

1. Invidious instances, one at a time (only when bypass is preferred);
2. a proxy embed built around a placeholder record, enriched from oEmbed
   when possible (only when bypass is preferred);
3. oEmbed metadata with a plain YouTube embed;
4. a bare YouTube embed with only the ID known.

Independently of the winning source, the channel avatar is looked up by
scanning the video's watch page.
"""

from __future__ import annotations

import logging
import math
import re
import time
from collections.abc import Awaitable, Callable
from typing import Any

from exnotic.exceptions import SourcesExhaustedError, UpstreamError
from exnotic.models.enums import PlaybackStrategy
from exnotic.models.records import (
    DEFAULT_AVATAR_URL,
    UNKNOWN_CHANNEL,
    UNTITLED,
    OEmbedData,
    ResolvedPlaybackSource,
    VideoRecord,
)
from exnotic.services.fallback import try_in_order
from exnotic.services.scraping.accessor import dig
from exnotic.services.scraping.fetcher import PageFetcher

logger = logging.getLogger(__name__)

OEMBED_URL = (
    "https://www.youtube.com/oembed"
    "?url=https://www.youtube.com/watch?v={video_id}&format=json"
)
WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
EMBED_URL = "https://www.youtube.com/embed/{video_id}"
INVIDIOUS_VIDEO_URL = "{instance}/api/v1/videos/{video_id}"
PLACEHOLDER_THUMBNAIL_URL = "https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"

PROXY_EMBED_TEMPLATES = (
    "https://www.youtube-nocookie.com/embed/{video_id}",
    "https://noembed.com/embed?url=https://www.youtube.com/watch?v={video_id}",
    "https://www.youtube.com/embed/{video_id}?rel=0&modestbranding=1&fs=1&playsinline=1",
)

PROXY_PLACEHOLDER_TITLE = "Video Player"
PROXY_PLACEHOLDER_CHANNEL = "YouTube"

_GGPHT_URL_RE = re.compile(r"https://yt3\.ggpht\.com/[^\"'\s]+")
_AVATAR_JSON_RE = re.compile(r'"avatar":\{"thumbnails":\[\{"url":"([^"]+)"')
_OWNER_PROFILE_RE = re.compile(
    r'"ownerProfileUrl":"[^"]*","thumbnail":\{"thumbnails":\[\{"url":"([^"]+)"'
)
_CHANNEL_ID_JSON_RE = re.compile(r'"channelId":"([^"]+)"')

_SECONDS_PER_DAY = 86400


# =============================================================================
# Formatting helpers
# =============================================================================


def format_duration(seconds: int | float | None) -> str | None:
    """
    Format a length in seconds as ``H:MM:SS`` or ``M:SS``.

    Examples
    --------
    >>> format_duration(212)
    '3:32'
    >>> format_duration(3725)
    '1:02:05'
    """
    if seconds is None or isinstance(seconds, bool):
        return None
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_view_count(count: int | None) -> str | None:
    """Format a view count as ``"1,234 views"``."""
    if not count or isinstance(count, bool):
        return None
    return f"{int(count):,} views"


def format_relative_time(timestamp: int | float, now: float | None = None) -> str:
    """
    Describe a unix timestamp relative to ``now`` in whole days, months or years.

    Parameters
    ----------
    timestamp : int | float
        Unix time in seconds.
    now : float | None, optional
        Reference time, defaults to the current time.

    Returns
    -------
    str
        E.g. ``"1 day ago"``, ``"12 days ago"``, ``"3 months ago"``,
        ``"1 year ago"``.
    """
    if now is None:
        now = time.time()
    days = math.ceil(abs(now - timestamp) / _SECONDS_PER_DAY)

    if days == 1:
        return "1 day ago"
    if days < 30:
        return f"{days} days ago"
    if days < 365:
        months = days // 30
        return f"{months} month{'s' if months > 1 else ''} ago"
    years = days // 365
    return f"{years} year{'s' if years > 1 else ''} ago"


def proxy_embed_urls(video_id: str) -> list[str]:
    return [template.format(video_id=video_id) for template in PROXY_EMBED_TEMPLATES]


def find_channel_avatar(html: str) -> str | None:
    """
    Scan watch-page HTML for the uploader's avatar URL.

    Tiers, in order:

    1. an explicit ``yt3.ggpht.com`` URL at the 88px size that is not the
       generic default-user image;
    2. the URL inside an ``"avatar":{"thumbnails":[...]}`` or owner profile
       thumbnail JSON fragment;
    3. the generic avatar placeholder, when the page at least names a
       channel ID.

    Returns
    -------
    str | None
        The avatar URL, or None when the page gives no hint of a channel.
    """
    for url in _GGPHT_URL_RE.findall(html):
        if "default-user" not in url and "s88" in url:
            return url

    for pattern in (_AVATAR_JSON_RE, _OWNER_PROFILE_RE):
        for url in pattern.findall(html):
            if "default-user" not in url:
                return url

    if _CHANNEL_ID_JSON_RE.search(html):
        return DEFAULT_AVATAR_URL

    return None


# =============================================================================
# Resolver
# =============================================================================


class VideoSourceResolver:
    """
    Resolve a video ID to a playable source, trying sources in order.

    Parameters
    ----------
    fetcher : PageFetcher
        Client used for every upstream request.
    instances : list[str]
        Invidious instance base URLs, in the order they should be tried.
    invidious_user_agent : str | None, optional
        User agent for Invidious API calls; the fetcher's default otherwise.

    Examples
    --------
    >>> resolver = VideoSourceResolver(fetcher, ["https://inv.example"])
    >>> source = await resolver.resolve("dQw4w9WgXcQ", prefer_bypass=True)
    >>> source.strategy
    <PlaybackStrategy.INVIDIOUS: 'invidious'>
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        instances: list[str],
        *,
        invidious_user_agent: str | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.instances = [instance.rstrip("/") for instance in instances]
        self.invidious_user_agent = invidious_user_agent

    # -- oEmbed ---------------------------------------------------------------

    async def fetch_oembed(self, video_id: str) -> OEmbedData:
        """
        Fetch the oEmbed document for a video.

        Raises
        ------
        UpstreamError
            If the endpoint fails or does not return a JSON object.
        """
        url = OEMBED_URL.format(video_id=video_id)
        payload = await self.fetcher.fetch_json(url)
        if not isinstance(payload, dict):
            raise UpstreamError(
                url=url, status_code=200, reason="unexpected oEmbed payload"
            )
        return OEmbedData.model_validate(payload)

    async def resolve_oembed(self, video_id: str) -> VideoRecord | None:
        """Build a VideoRecord from oEmbed, or None if oEmbed is unavailable."""
        try:
            oembed = await self.fetch_oembed(video_id)
        except UpstreamError as e:
            logger.warning("oEmbed lookup for %s failed: %s", video_id, e.message)
            return None
        return _video_from_oembed(video_id, oembed)

    async def describe_video(self, video_id: str) -> VideoRecord | None:
        """oEmbed metadata plus the discovered channel avatar."""
        video = await self.resolve_oembed(video_id)
        if video is None:
            return None
        return await self.with_channel_avatar(video)

    # -- Invidious ------------------------------------------------------------

    async def fetch_invidious(
        self, instance: str, video_id: str
    ) -> ResolvedPlaybackSource:
        """
        Fetch a video from a single Invidious instance.

        Raises
        ------
        UpstreamError
            If the instance is unreachable, errors, or returns no video.
        """
        url = INVIDIOUS_VIDEO_URL.format(instance=instance, video_id=video_id)
        data = await self.fetcher.fetch_json(url, user_agent=self.invidious_user_agent)
        if not isinstance(data, dict) or data.get("error"):
            raise UpstreamError(url=url, status_code=200, reason="no video in response")
        return _source_from_invidious(instance, video_id, data)

    async def resolve_invidious(
        self, video_id: str, attempted: list[str] | None = None
    ) -> ResolvedPlaybackSource | None:
        """
        Try each Invidious instance once, in order.

        Returns
        -------
        ResolvedPlaybackSource | None
            The first instance's result, or None when all instances failed.
        """
        outcome = await try_in_order(
            self.instances,
            lambda instance: self.fetch_invidious(instance, video_id),
            description="Invidious instance",
            attempted=attempted,
        )
        if outcome is None:
            return None
        logger.info("Resolved %s via Invidious instance %s", video_id, outcome.source)
        return outcome.value

    # -- Proxy / direct -------------------------------------------------------

    async def resolve_proxy(self, video_id: str) -> ResolvedPlaybackSource:
        """
        Build the proxy playback description.

        The record starts as a placeholder and is enriched from oEmbed when
        that succeeds. This source never fails.
        """
        placeholder_thumbnail = PLACEHOLDER_THUMBNAIL_URL.format(video_id=video_id)
        video = VideoRecord(
            id=video_id,
            title=PROXY_PLACEHOLDER_TITLE,
            channel_title=PROXY_PLACEHOLDER_CHANNEL,
            thumbnail_url=placeholder_thumbnail,
        )
        try:
            oembed = await self.fetch_oembed(video_id)
        except UpstreamError:
            logger.info("No oEmbed data for proxy %s, using defaults", video_id)
        else:
            video = video.model_copy(
                update={
                    "title": oembed.title or PROXY_PLACEHOLDER_TITLE,
                    "channel_title": oembed.author_name or PROXY_PLACEHOLDER_CHANNEL,
                    "thumbnail_url": oembed.thumbnail_url or placeholder_thumbnail,
                }
            )

        methods = proxy_embed_urls(video_id)
        return ResolvedPlaybackSource(
            strategy=PlaybackStrategy.PROXY,
            endpoint=methods[0],
            video=video,
            proxy_methods=methods,
        )

    async def _resolve_oembed_source(self, video_id: str) -> ResolvedPlaybackSource | None:
        video = await self.resolve_oembed(video_id)
        if video is None:
            return None
        return ResolvedPlaybackSource(
            strategy=PlaybackStrategy.OEMBED,
            endpoint=OEMBED_URL.format(video_id=video_id),
            video=video,
        )

    async def _resolve_direct(self, video_id: str) -> ResolvedPlaybackSource:
        return ResolvedPlaybackSource(
            strategy=PlaybackStrategy.DIRECT,
            endpoint=EMBED_URL.format(video_id=video_id),
            video=VideoRecord(id=video_id),
        )

    # -- Avatar ---------------------------------------------------------------

    async def discover_channel_avatar(self, video_id: str) -> str | None:
        """Best-effort avatar lookup from the watch page; None on any failure."""
        try:
            html = await self.fetcher.fetch_text(WATCH_URL.format(video_id=video_id))
        except UpstreamError as e:
            logger.warning("Avatar lookup for %s failed: %s", video_id, e.message)
            return None
        return find_channel_avatar(html)

    async def with_channel_avatar(self, video: VideoRecord) -> VideoRecord:
        avatar = await self.discover_channel_avatar(video.id)
        if not avatar:
            return video
        return video.model_copy(update={"channel_avatar_url": avatar})

    async def enrich(self, source: ResolvedPlaybackSource) -> ResolvedPlaybackSource:
        """Attach the discovered channel avatar to a resolved source."""
        video = await self.with_channel_avatar(source.video)
        if video is source.video:
            return source
        return source.model_copy(update={"video": video})

    # -- Chain ----------------------------------------------------------------

    async def resolve(
        self,
        video_id: str,
        *,
        prefer_bypass: bool = False,
        allow_direct: bool = True,
    ) -> ResolvedPlaybackSource:
        """
        Walk the source chain and return the first playable source.

        Parameters
        ----------
        video_id : str
            The video to resolve.
        prefer_bypass : bool, optional
            Try Invidious and the proxy embed before oEmbed (default: False).
        allow_direct : bool, optional
            Accept a bare embed as the last resort (default: True).

        Returns
        -------
        ResolvedPlaybackSource
            The winning source, with the channel avatar attached when found.

        Raises
        ------
        SourcesExhaustedError
            If no source produced a result. Only possible when
            ``allow_direct`` is False.
        """
        steps: dict[
            PlaybackStrategy, Callable[[str], Awaitable[ResolvedPlaybackSource | None]]
        ] = {
            PlaybackStrategy.INVIDIOUS: self.resolve_invidious,
            PlaybackStrategy.PROXY: self.resolve_proxy,
            PlaybackStrategy.OEMBED: self._resolve_oembed_source,
            PlaybackStrategy.DIRECT: self._resolve_direct,
        }
        chain: list[PlaybackStrategy] = []
        if prefer_bypass:
            chain += [PlaybackStrategy.INVIDIOUS, PlaybackStrategy.PROXY]
        chain.append(PlaybackStrategy.OEMBED)
        if allow_direct:
            chain.append(PlaybackStrategy.DIRECT)

        attempted: list[PlaybackStrategy] = []
        outcome = await try_in_order(
            chain,
            lambda strategy: steps[strategy](video_id),
            description="Playback strategy",
            attempted=attempted,
        )
        if outcome is None:
            raise SourcesExhaustedError(
                resource="Video",
                identifier=video_id,
                attempted=[strategy.value for strategy in attempted],
            )

        logger.info("Resolved %s with strategy %s", video_id, outcome.source.value)
        return await self.enrich(outcome.value)


def _video_from_oembed(video_id: str, oembed: OEmbedData) -> VideoRecord:
    return VideoRecord(
        id=video_id,
        title=oembed.title or UNTITLED,
        description=None,
        channel_title=oembed.author_name or UNKNOWN_CHANNEL,
        channel_id="",
        channel_avatar_url=None,
        thumbnail_url=oembed.thumbnail_url,
    )


def _source_from_invidious(
    instance: str, video_id: str, data: dict[str, Any]
) -> ResolvedPlaybackSource:
    published = data.get("published")
    video = VideoRecord(
        id=video_id,
        title=data.get("title") or UNTITLED,
        description=data.get("description") or None,
        channel_title=data.get("author") or UNKNOWN_CHANNEL,
        channel_id=data.get("authorId") or "",
        channel_avatar_url=dig(data, "authorThumbnails", 0, "url"),
        thumbnail_url=dig(data, "videoThumbnails", 0, "url"),
        duration=format_duration(data.get("lengthSeconds")),
        view_count=format_view_count(data.get("viewCount")),
        published_at=(
            format_relative_time(published)
            if isinstance(published, (int, float)) and published
            else None
        ),
    )
    return ResolvedPlaybackSource(
        strategy=PlaybackStrategy.INVIDIOUS,
        endpoint=instance,
        video=video,
        video_streams=data.get("formatStreams") or [],
        adaptive_formats=data.get("adaptiveFormats") or [],
    )
