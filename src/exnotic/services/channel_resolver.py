"""
Channel resolution by ID or by name.

A channel ID is looked up directly on its channel page. A name goes
through YouTube's channel-only search, and the best candidate is picked by
:func:`choose_channel_candidate` before its page is fetched. Metadata from
the search snippet and the channel page header is merged, with the snippet
taking precedence.

Lookups that find nothing return ``None``; upstream failures are logged
and absorbed here.
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from exnotic.exceptions import UpstreamError
from exnotic.models.records import (
    UNKNOWN_CHANNEL,
    ChannelPage,
    ChannelRecord,
)
from exnotic.models.youtube_types import is_channel_id
from exnotic.services.fallback import try_in_order
from exnotic.services.scraping.extractor import extract_initial_data
from exnotic.services.scraping.fetcher import PageFetcher
from exnotic.services.scraping.projector import (
    project_channel_candidates,
    project_channel_header,
    project_channel_page,
)

logger = logging.getLogger(__name__)

CHANNEL_SEARCH_URL = (
    "https://www.youtube.com/results?search_query={query}&sp=EgIQAg%253D%253D"
)
CHANNEL_HOME_URL = "https://www.youtube.com/channel/{channel_id}"
CHANNEL_VIDEOS_URL_TEMPLATES = (
    "https://www.youtube.com/channel/{channel_id}/videos",
    "https://www.youtube.com/@{channel_id}/videos",
    "https://www.youtube.com/c/{channel_id}/videos",
    "https://www.youtube.com/user/{channel_id}/videos",
)
DEFAULT_CHANNEL_VIDEO_LIMIT = 200

# Characters JavaScript's encodeURIComponent leaves untouched besides [A-Za-z0-9_.-]
_URI_COMPONENT_SAFE = "!~*'()"


def encode_query(query: str) -> str:
    return quote(query, safe=_URI_COMPONENT_SAFE)


def choose_channel_candidate(
    name: str, candidates: list[ChannelRecord]
) -> ChannelRecord | None:
    """
    Pick the candidate that best matches ``name``.

    Priority: the first case-insensitive exact title match; otherwise the
    first candidate whose title contains the name or is contained in it;
    otherwise the first candidate.

    Parameters
    ----------
    name : str
        The channel name that was searched for.
    candidates : list[ChannelRecord]
        Candidates in page order.

    Returns
    -------
    ChannelRecord | None
        The chosen candidate, or None when there are no candidates.

    Examples
    --------
    >>> choose_channel_candidate("lofi girl", [sub_match, exact_match]) is exact_match
    True
    """
    wanted = name.strip().lower()
    best_match: ChannelRecord | None = None
    fallback: ChannelRecord | None = None

    for candidate in candidates:
        title = "" if candidate.name == UNKNOWN_CHANNEL else candidate.name.lower()
        if title == wanted:
            return candidate
        if best_match is None and title and (wanted in title or title in wanted):
            best_match = candidate
        if fallback is None:
            fallback = candidate

    return best_match or fallback


class ChannelResolver:
    """
    Resolve channels and their video lists.

    Parameters
    ----------
    fetcher : PageFetcher
        Client used for every YouTube request.
    video_limit : int, optional
        Maximum number of videos kept per channel (default: 200).
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        *,
        video_limit: int = DEFAULT_CHANNEL_VIDEO_LIMIT,
    ) -> None:
        self.fetcher = fetcher
        self.video_limit = video_limit

    async def _fetch_videos_page(self, url: str, channel_id: str) -> ChannelPage | None:
        html = await self.fetcher.fetch_text(url)
        page = project_channel_page(extract_initial_data(html), channel_id)
        if page.videos or page.channel.name != UNKNOWN_CHANNEL:
            return page
        return None

    async def fetch_channel_videos(self, channel_id: str) -> ChannelPage:
        """
        Fetch a channel's videos, trying each URL shape in turn.

        The first URL whose page yields videos or a channel name wins.

        Parameters
        ----------
        channel_id : str
            Channel ID, handle, custom name or legacy username.

        Returns
        -------
        ChannelPage
            The channel and up to ``video_limit`` videos, or a placeholder
            channel with no videos when every URL shape failed.
        """
        urls = [
            template.format(channel_id=channel_id)
            for template in CHANNEL_VIDEOS_URL_TEMPLATES
        ]
        outcome = await try_in_order(
            urls,
            lambda url: self._fetch_videos_page(url, channel_id),
            description="Channel URL",
        )
        if outcome is None:
            logger.warning("No channel page found for %s", channel_id)
            return ChannelPage(channel=ChannelRecord(channel_id=channel_id))

        page = outcome.value
        return page.model_copy(update={"videos": page.videos[: self.video_limit]})

    async def fetch_channel_header(self, channel_id: str) -> ChannelRecord | None:
        """Read header metadata from the channel home page, if reachable."""
        url = CHANNEL_HOME_URL.format(channel_id=channel_id)
        try:
            html = await self.fetcher.fetch_text(url)
        except UpstreamError as e:
            logger.warning("Channel header fetch failed: %s", e.message)
            return None

        tree = extract_initial_data(html)
        if tree is None:
            return None
        header = project_channel_header(tree, channel_id)
        return None if header.is_placeholder else header

    async def fetch_by_id(self, channel_id: str) -> ChannelPage | None:
        """
        Look up a channel by ID.

        When the videos page leaves the avatar or subscriber count empty,
        the channel home page is fetched to backfill them. If no header was
        found at all, the channel is described from its first video.

        Returns
        -------
        ChannelPage | None
            The channel page, or None when nothing is known about the channel.
        """
        page = await self.fetch_channel_videos(channel_id)
        channel = page.channel

        if not channel.avatar_url or not channel.subscriber_count:
            header = await self.fetch_channel_header(channel_id)
            if header is not None:
                channel = channel.merged_with(header)

        if channel.is_placeholder and page.videos:
            first = page.videos[0]
            channel = channel.merged_with(
                ChannelRecord(
                    channel_id=channel_id,
                    name=first.channel_title,
                    avatar_url=first.channel_avatar_url,
                )
            )

        if channel.is_placeholder and not page.videos:
            return None

        return ChannelPage(channel=channel, videos=page.videos).with_counted_videos()

    async def search_candidates(self, name: str) -> list[ChannelRecord]:
        """Run a channel-only search and return every channel on the page."""
        url = CHANNEL_SEARCH_URL.format(query=encode_query(name))
        try:
            html = await self.fetcher.fetch_text(url)
        except UpstreamError as e:
            logger.warning("Channel search for %r failed: %s", name, e.message)
            return []
        return project_channel_candidates(extract_initial_data(html))

    async def search(self, name: str) -> ChannelPage | None:
        """
        Find a channel by name and fetch its videos.

        Returns
        -------
        ChannelPage | None
            The chosen channel with its videos, or None when the search
            produced no channel candidates.
        """
        candidates = await self.search_candidates(name)
        chosen = choose_channel_candidate(name, candidates)
        if chosen is None:
            logger.info("No channel candidates for %r", name)
            return None

        logger.info(
            "Chose channel %s (%s) for %r among %d candidates",
            chosen.channel_id,
            chosen.name,
            name,
            len(candidates),
        )
        page = await self.fetch_channel_videos(chosen.channel_id)
        channel = chosen.merged_with(page.channel)
        return ChannelPage(channel=channel, videos=page.videos).with_counted_videos()

    async def resolve(
        self, query: str | None = None, channel_id: str | None = None
    ) -> ChannelPage | None:
        """
        Resolve a channel from a name, an ID, or both.

        A well-formed channel ID is looked up directly first. Failing that
        the query is searched as a name, and finally a ``channel_id`` that
        is not a real ID (a handle or display name) is searched as a name.

        Parameters
        ----------
        query : str | None, optional
            Free-text channel name.
        channel_id : str | None, optional
            Channel ID, or a handle/name passed where an ID was expected.

        Returns
        -------
        ChannelPage | None
            The resolved channel, or None when no strategy found it.
        """
        query = (query or "").strip()
        channel_id = (channel_id or "").strip()
        result: ChannelPage | None = None

        if channel_id and is_channel_id(channel_id):
            result = await self.fetch_by_id(channel_id)

        if result is None and query:
            result = await self.search(query)

        if result is None and channel_id and not is_channel_id(channel_id):
            result = await self.search(channel_id)

        return result
