"""
Projection of parsed ``ytInitialData`` trees into records.

Two page shapes are understood:

* search results pages, where each item section holds a mix of
  ``videoRenderer``, ``channelRenderer`` and ``gridVideoRenderer`` items;
* channel pages, where a header describes the channel and the "Videos"
  tab holds a grid of videos.

Every missing step in these layouts degrades to an empty list or a
documented default; nothing here raises on unexpected input.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

from exnotic.models.enums import ProjectionMode, ResultType
from exnotic.models.records import (
    DEFAULT_AVATAR_URL,
    UNKNOWN_CHANNEL,
    UNTITLED,
    ChannelPage,
    ChannelRecord,
    VideoRecord,
)
from exnotic.services.scraping.accessor import (
    dig,
    first_present,
    join_runs,
    text_of,
    thumbnail_url,
)

logger = logging.getLogger(__name__)

# Pagination caps for search results
FIRST_PAGE_CHANNEL_LIMIT = 2
FIRST_PAGE_VIDEO_LIMIT = 48
LATER_PAGE_VIDEO_LIMIT = 50
SEARCH_RESULT_LIMIT = 50

_SEARCH_SECTIONS_PATH = (
    "contents",
    "twoColumnSearchResultsRenderer",
    "primaryContents",
    "sectionListRenderer",
    "contents",
)
_CHANNEL_TABS_PATH = ("contents", "twoColumnBrowseResultsRenderer", "tabs")
_BYLINE = ("longBylineText", "runs", 0)


# =============================================================================
# Search results
# =============================================================================


def _iter_search_items(tree: Any) -> Iterator[dict[str, Any]]:
    sections = dig(tree, *_SEARCH_SECTIONS_PATH, default=[])
    if not isinstance(sections, list) or not sections:
        logger.debug("Search tree has no section list")
        return
    for section in sections:
        items = dig(section, "itemSectionRenderer", "contents", default=[])
        if not isinstance(items, list):
            continue
        for item in items:
            if isinstance(item, dict):
                yield item


def _byline_channel_id(renderer: dict[str, Any]) -> str:
    browse_id = dig(renderer, *_BYLINE, "navigationEndpoint", "browseEndpoint", "browseId")
    if browse_id:
        return str(browse_id)
    url = dig(
        renderer,
        *_BYLINE,
        "navigationEndpoint",
        "commandMetadata",
        "webCommandMetadata",
        "url",
    )
    if isinstance(url, str):
        parts = url.split("/")
        if len(parts) > 2 and parts[2]:
            return parts[2]
    return ""


def _search_avatar(renderer: dict[str, Any]) -> str | None:
    explicit = dig(
        renderer,
        "channelThumbnailSupportedRenderers",
        "channelThumbnailWithLinkRenderer",
        "thumbnail",
        "thumbnails",
        0,
        "url",
    )
    if explicit:
        return str(explicit)
    if dig(renderer, *_BYLINE, "navigationEndpoint", "browseEndpoint", "browseId"):
        return DEFAULT_AVATAR_URL
    return None


def _title(renderer: dict[str, Any]) -> str:
    return first_present(
        renderer,
        ("title", "runs", 0, "text"),
        ("title", "simpleText"),
        default=UNTITLED,
    )


def project_video_renderer(renderer: dict[str, Any]) -> VideoRecord | None:
    """Project a search ``videoRenderer`` (or ``gridVideoRenderer``) item."""
    video_id = renderer.get("videoId")
    if not video_id:
        return None

    return VideoRecord(
        id=video_id,
        title=_title(renderer),
        description=join_runs(renderer, "descriptionSnippet"),
        channel_title=first_present(
            renderer,
            (*_BYLINE, "text"),
            ("ownerText", "runs", 0, "text"),
            default=UNKNOWN_CHANNEL,
        ),
        channel_id=_byline_channel_id(renderer),
        channel_avatar_url=_search_avatar(renderer),
        thumbnail_url=thumbnail_url(renderer, "thumbnail"),
        duration=dig(renderer, "lengthText", "simpleText", default=""),
        view_count=dig(renderer, "viewCountText", "simpleText", default=""),
        published_at=dig(renderer, "publishedTimeText", "simpleText", default=""),
        type=ResultType.VIDEO,
    )


def project_channel_renderer(renderer: dict[str, Any]) -> VideoRecord | None:
    """Project a ``channelRenderer`` item into a channel-typed result entry."""
    channel_id = renderer.get("channelId")
    if not channel_id:
        return None

    name = dig(renderer, "title", "simpleText", default=UNKNOWN_CHANNEL)
    avatar = thumbnail_url(renderer, "thumbnail")
    return VideoRecord(
        id=channel_id,
        title=name,
        description=join_runs(renderer, "descriptionSnippet"),
        channel_title=name,
        channel_id=channel_id,
        channel_avatar_url=avatar,
        thumbnail_url=avatar,
        duration=None,
        view_count=None,
        published_at=None,
        type=ResultType.CHANNEL,
        subscriber_count=dig(renderer, "subscriberCountText", "simpleText", default=""),
        video_count=join_runs(renderer, "videoCountText"),
    )


_SEARCH_RENDERERS: dict[str, Callable[[dict[str, Any]], VideoRecord | None]] = {
    "videoRenderer": project_video_renderer,
    "channelRenderer": project_channel_renderer,
    "gridVideoRenderer": project_video_renderer,
}


def project_search_results(
    tree: dict[str, Any] | None,
) -> tuple[list[VideoRecord], list[VideoRecord]]:
    """
    Project a search results tree into videos and channel entries.

    Parameters
    ----------
    tree : dict[str, Any] | None
        Parsed ``ytInitialData`` of a results page.

    Returns
    -------
    tuple[list[VideoRecord], list[VideoRecord]]
        ``(videos, channels)`` in page order. Items without an ID and
        renderer kinds other than video, channel and grid-video are skipped.
    """
    videos: list[VideoRecord] = []
    channels: list[VideoRecord] = []
    if not tree:
        return videos, channels

    for item in _iter_search_items(tree):
        for key, project in _SEARCH_RENDERERS.items():
            renderer = item.get(key)
            if not isinstance(renderer, dict):
                continue
            record = project(renderer)
            if record is None:
                logger.debug("Skipping %s without an id", key)
            elif record.is_channel:
                channels.append(record)
            else:
                videos.append(record)
            break

    return videos, channels


def paginate_search_results(
    videos: list[VideoRecord],
    channels: list[VideoRecord],
    page: int = 1,
    limit: int = SEARCH_RESULT_LIMIT,
) -> list[VideoRecord]:
    """
    Apply the per-page caps and ordering to projected search results.

    Page 1 shows at most two channels followed by at most 48 videos; later
    pages show no channels and at most 50 videos. The combined list never
    exceeds ``limit`` entries and channels always come first.

    Examples
    --------
    >>> results = paginate_search_results(videos, channels, page=1)
    >>> [r.type.value for r in results][:3]
    ['channel', 'channel', 'video']
    """
    if page <= 1:
        channel_limit, video_limit = FIRST_PAGE_CHANNEL_LIMIT, FIRST_PAGE_VIDEO_LIMIT
    else:
        channel_limit, video_limit = 0, LATER_PAGE_VIDEO_LIMIT

    combined = [*channels[:channel_limit], *videos[:video_limit]]
    return combined[:limit]


def project_channel_candidates(tree: dict[str, Any] | None) -> list[ChannelRecord]:
    """Project every ``channelRenderer`` on a results page into a ChannelRecord."""
    candidates: list[ChannelRecord] = []
    if not tree:
        return candidates

    for item in _iter_search_items(tree):
        renderer = item.get("channelRenderer")
        if not isinstance(renderer, dict) or not renderer.get("channelId"):
            continue
        candidates.append(
            ChannelRecord(
                channel_id=renderer["channelId"],
                name=dig(renderer, "title", "simpleText", default=UNKNOWN_CHANNEL),
                avatar_url=thumbnail_url(renderer, "thumbnail", last=True),
                description=join_runs(renderer, "descriptionSnippet"),
                subscriber_count=dig(
                    renderer, "subscriberCountText", "simpleText", default=""
                ),
                video_count=join_runs(renderer, "videoCountText"),
            )
        )
    return candidates


# =============================================================================
# Channel pages
# =============================================================================


def project_channel_header(
    tree: dict[str, Any] | None, channel_id: str
) -> ChannelRecord:
    """
    Read channel metadata from a channel page.

    The tabbed or page header is preferred; ``channelMetadataRenderer`` is
    consulted only when the header did not yield a name.
    """
    header = first_present(
        tree,
        ("header", "c4TabbedHeaderRenderer"),
        ("header", "pageHeaderRenderer"),
        default={},
    )
    name = text_of(header, "title") or UNKNOWN_CHANNEL
    description = dig(header, "tagline", "simpleText", default="")
    subscriber_count = text_of(header, "subscriberCountText") or ""
    avatar_url = dig(header, "avatar", "thumbnails", -1, "url")

    metadata = dig(tree, "metadata", "channelMetadataRenderer")
    if metadata and name == UNKNOWN_CHANNEL:
        name = metadata.get("title") or name
        description = metadata.get("description") or description
        avatar_url = dig(metadata, "avatar", "thumbnails", -1, "url") or avatar_url

    return ChannelRecord(
        channel_id=channel_id,
        name=name,
        avatar_url=avatar_url,
        description=description,
        subscriber_count=subscriber_count,
    )


def _videos_tab_items(tree: dict[str, Any] | None) -> list[Any]:
    tabs = dig(tree, *_CHANNEL_TABS_PATH, default=[])
    if not isinstance(tabs, list):
        return []
    for tab in tabs:
        tab_renderer = dig(tab, "tabRenderer")
        if not isinstance(tab_renderer, dict):
            continue
        if tab_renderer.get("title") == "Videos" or tab_renderer.get("selected"):
            items = first_present(
                tab_renderer,
                ("content", "richGridRenderer", "contents"),
                (
                    "content",
                    "sectionListRenderer",
                    "contents",
                    0,
                    "itemSectionRenderer",
                    "contents",
                    0,
                    "gridRenderer",
                    "items",
                ),
                default=[],
            )
            return items if isinstance(items, list) else []
    logger.debug("Channel page has no Videos tab")
    return []


def _project_channel_video(
    renderer: dict[str, Any], channel: ChannelRecord
) -> VideoRecord:
    return VideoRecord(
        id=renderer["videoId"],
        title=_title(renderer),
        description=join_runs(renderer, "descriptionSnippet"),
        channel_title=channel.name,
        channel_id=channel.channel_id,
        channel_avatar_url=channel.avatar_url,
        thumbnail_url=thumbnail_url(renderer, "thumbnail", last=True),
        duration=first_present(
            renderer,
            ("lengthText", "simpleText"),
            (
                "thumbnailOverlays",
                0,
                "thumbnailOverlayTimeStatusRenderer",
                "text",
                "simpleText",
            ),
            default="",
        ),
        view_count=first_present(
            renderer,
            ("viewCountText", "simpleText"),
            ("shortViewCountText", "simpleText"),
            default="",
        ),
        published_at=dig(renderer, "publishedTimeText", "simpleText", default=""),
    )


def project_channel_page(
    tree: dict[str, Any] | None, channel_id: str
) -> ChannelPage:
    """
    Project a channel ``/videos`` page into a ChannelPage.

    Parameters
    ----------
    tree : dict[str, Any] | None
        Parsed ``ytInitialData`` of the channel page.
    channel_id : str
        Identifier the page was fetched for; stamped on every record.

    Returns
    -------
    ChannelPage
        Header metadata and the videos of the "Videos" (or selected) tab.
        Without a usable tree this is a placeholder channel with no videos.
    """
    channel = project_channel_header(tree, channel_id)
    videos: list[VideoRecord] = []

    for item in _videos_tab_items(tree):
        renderer = first_present(
            item,
            ("richItemRenderer", "content", "videoRenderer"),
            ("gridVideoRenderer",),
        )
        if isinstance(renderer, dict) and renderer.get("videoId"):
            videos.append(_project_channel_video(renderer, channel))

    return ChannelPage(channel=channel, videos=videos)


def project_results(
    tree: dict[str, Any] | None,
    mode: ProjectionMode,
    channel_id: str = "",
) -> list[VideoRecord]:
    """
    Project a tree into an ordered result list for the given page shape.

    Search mode returns channel entries before videos, uncapped; apply
    :func:`paginate_search_results` for per-page limits. Channel mode
    returns the channel's videos.
    """
    if mode == ProjectionMode.CHANNEL:
        return project_channel_page(tree, channel_id).videos
    videos, channels = project_search_results(tree)
    return [*channels, *videos]
