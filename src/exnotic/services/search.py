"""
Search orchestration for ``/api/search``.

Queries that are YouTube links or bare video IDs are answered directly
from oEmbed. Everything else is scraped from the YouTube results page,
projected, paginated and cached.
"""

from __future__ import annotations

import logging

from exnotic.models.enums import SearchFilter, SearchResponseType
from exnotic.models.records import SearchResponse
from exnotic.models.youtube_types import extract_video_id
from exnotic.services.channel_resolver import encode_query
from exnotic.services.scraping.extractor import extract_initial_data
from exnotic.services.scraping.fetcher import PageFetcher
from exnotic.services.scraping.projector import (
    SEARCH_RESULT_LIMIT,
    paginate_search_results,
    project_search_results,
)
from exnotic.services.store import EphemeralStore
from exnotic.services.video_resolver import VideoSourceResolver

logger = logging.getLogger(__name__)

SEARCH_URL = "https://www.youtube.com/results?search_query={query}"

SORT_PARAMS: dict[SearchFilter, str] = {
    SearchFilter.RELEVANT: "",
    SearchFilter.LATEST: "&sp=CAI%253D",
    SearchFilter.POPULAR: "&sp=CAMSAhAB",
    SearchFilter.DURATION: "&sp=EgIYAw%253D%253D",
}

RESULTS_PER_YOUTUBE_PAGE = 20


def normalize_filter(value: str | SearchFilter | None) -> SearchFilter:
    """Map a filter name to a SearchFilter; unknown names mean relevance."""
    if isinstance(value, SearchFilter):
        return value
    try:
        return SearchFilter((value or "").strip().lower())
    except ValueError:
        return SearchFilter.RELEVANT


def build_search_url(
    query: str,
    filter_: str | SearchFilter | None = SearchFilter.RELEVANT,
    page: int = 1,
) -> str:
    """
    Build the YouTube results URL for a query.

    Examples
    --------
    >>> build_search_url("lofi beats", "latest")
    'https://www.youtube.com/results?search_query=lofi%20beats&sp=CAI%253D'
    >>> build_search_url("lofi", page=3)
    'https://www.youtube.com/results?search_query=lofi&gl=US&hl=en&start=40'
    """
    url = SEARCH_URL.format(query=encode_query(query))
    url += SORT_PARAMS[normalize_filter(filter_)]
    if page > 1:
        url += f"&gl=US&hl=en&start={(page - 1) * RESULTS_PER_YOUTUBE_PAGE}"
    return url


class SearchService:
    """
    Run searches against YouTube with caching and direct-link handling.

    Parameters
    ----------
    fetcher : PageFetcher
        Client for the results page.
    store : EphemeralStore
        Cache and search log.
    video_resolver : VideoSourceResolver
        Used to describe directly linked videos.
    result_limit : int, optional
        Maximum combined entries per page (default: 50).
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        store: EphemeralStore,
        video_resolver: VideoSourceResolver,
        *,
        result_limit: int = SEARCH_RESULT_LIMIT,
    ) -> None:
        self.fetcher = fetcher
        self.store = store
        self.video_resolver = video_resolver
        self.result_limit = result_limit

    async def search(
        self,
        query: str,
        filter_: str | SearchFilter | None = SearchFilter.RELEVANT,
        page: int = 1,
    ) -> SearchResponse:
        """
        Search YouTube.

        Parameters
        ----------
        query : str
            Free text, a YouTube URL, or a video ID.
        filter_ : str | SearchFilter | None, optional
            Sort order; unknown values fall back to relevance.
        page : int, optional
            1-based page number (default: 1).

        Returns
        -------
        SearchResponse
            A ``direct`` response holding the linked video, or ``search``
            results with channels (page 1 only) and videos.

        Raises
        ------
        UpstreamError
            If the YouTube results page cannot be fetched.
        """
        query = query.strip()
        page = max(page, 1)
        self.store.log_search(query)

        video_id = extract_video_id(query)
        if video_id:
            video = await self.video_resolver.describe_video(video_id)
            if video is not None:
                self.store.put_video(video)
                return SearchResponse(videos=[video], type=SearchResponseType.DIRECT)
            logger.info("Direct lookup for %s failed, scraping instead", video_id)

        sort = normalize_filter(filter_)
        cached = self.store.get_search(query, sort.value, page)
        if cached is not None:
            logger.debug("Search cache hit for %r (%s, page %d)", query, sort.value, page)
            return cached

        html = await self.fetcher.fetch_text(build_search_url(query, sort, page))
        videos, channels = project_search_results(extract_initial_data(html))
        results = paginate_search_results(videos, channels, page, self.result_limit)

        response = SearchResponse(
            videos=[record for record in results if not record.is_channel],
            channels=[record for record in results if record.is_channel],
            type=SearchResponseType.SEARCH,
        )
        for video in response.videos:
            self.store.put_video(video)
        self.store.put_search(query, sort.value, page, response)

        logger.info(
            "Search %r page %d: %d channels, %d videos",
            query,
            page,
            len(response.channels),
            len(response.videos),
        )
        return response
