"""
Pytest configuration and fixtures for exnotic tests.

Most fixtures here are factories for the fragments of YouTube's
``ytInitialData`` layout the scrapers read, so tests can describe pages in
a few lines. No fixture performs network I/O.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from exnotic.config.settings import Settings
from exnotic.exceptions import UpstreamError
from exnotic.services.scraping.fetcher import PageFetcher

TEST_INSTANCES = [
    "https://inv-one.example",
    "https://inv-two.example",
    "https://inv-three.example",
]


@pytest.fixture
def mock_settings() -> Settings:
    """Settings with a small, fake Invidious instance list."""
    return Settings(
        invidious_instances=",".join(TEST_INSTANCES),
        request_timeout=5.0,
        cache_max_entries=10,
        cache_ttl_seconds=60,
    )


@pytest.fixture
def instances() -> list[str]:
    return list(TEST_INSTANCES)


# =============================================================================
# ytInitialData builders
# =============================================================================


@pytest.fixture
def page_html() -> Callable[[dict[str, Any]], str]:
    """Wrap a tree in a minimal page that assigns it to ytInitialData."""

    def _build(data: dict[str, Any]) -> str:
        return (
            "<html><head><script>window.ytcfg = {};</script></head><body>"
            f"<script>var ytInitialData = {json.dumps(data)};</script>"
            "</body></html>"
        )

    return _build


@pytest.fixture
def video_renderer() -> Callable[..., dict[str, Any]]:
    """Build a search-page ``videoRenderer`` item."""

    def _build(
        video_id: str = "dQw4w9WgXcQ",
        title: str = "Never Gonna Give You Up",
        channel: str = "Rick Astley",
        channel_id: str = "UCuAXFkgsw1L7xaCfnd5JJOw",
        **extra: Any,
    ) -> dict[str, Any]:
        renderer: dict[str, Any] = {
            "videoId": video_id,
            "title": {"runs": [{"text": title}]},
            "descriptionSnippet": {"runs": [{"text": "The official "}, {"text": "video"}]},
            "longBylineText": {
                "runs": [
                    {
                        "text": channel,
                        "navigationEndpoint": {"browseEndpoint": {"browseId": channel_id}},
                    }
                ]
            },
            "thumbnail": {
                "thumbnails": [
                    {"url": f"https://i.ytimg.com/vi/{video_id}/hq720.jpg"},
                    {"url": f"https://i.ytimg.com/vi/{video_id}/maxres.jpg"},
                ]
            },
            "lengthText": {"simpleText": "3:33"},
            "viewCountText": {"simpleText": "1,500,000,000 views"},
            "publishedTimeText": {"simpleText": "14 years ago"},
        }
        renderer.update(extra)
        return {"videoRenderer": renderer}

    return _build


@pytest.fixture
def channel_renderer() -> Callable[..., dict[str, Any]]:
    """Build a search-page ``channelRenderer`` item."""

    def _build(
        channel_id: str = "UCuAXFkgsw1L7xaCfnd5JJOw",
        title: str = "Rick Astley",
        **extra: Any,
    ) -> dict[str, Any]:
        renderer: dict[str, Any] = {
            "channelId": channel_id,
            "title": {"simpleText": title},
            "thumbnail": {
                "thumbnails": [
                    {"url": f"//yt3.ggpht.com/{channel_id}=s88"},
                    {"url": f"//yt3.ggpht.com/{channel_id}=s176"},
                ]
            },
            "descriptionSnippet": {"runs": [{"text": "Official channel"}]},
            "subscriberCountText": {"simpleText": "4.2M subscribers"},
            "videoCountText": {"runs": [{"text": "312"}, {"text": " videos"}]},
        }
        renderer.update(extra)
        return {"channelRenderer": renderer}

    return _build


@pytest.fixture
def search_tree() -> Callable[..., dict[str, Any]]:
    """Wrap items into the search results layout, one item section per list."""

    def _build(*sections: list[dict[str, Any]]) -> dict[str, Any]:
        return {
            "contents": {
                "twoColumnSearchResultsRenderer": {
                    "primaryContents": {
                        "sectionListRenderer": {
                            "contents": [
                                {"itemSectionRenderer": {"contents": list(items)}}
                                for items in sections
                            ]
                        }
                    }
                }
            }
        }

    return _build


@pytest.fixture
def channel_tree() -> Callable[..., dict[str, Any]]:
    """Build a channel ``/videos`` page tree with a rich grid of videos."""

    def _build(
        name: str | None = "Example Channel",
        video_ids: list[str] | None = None,
        avatar: str | None = "https://yt3.ggpht.com/example=s176",
        subscribers: str | None = "1.2M subscribers",
    ) -> dict[str, Any]:
        header: dict[str, Any] = {}
        if name is not None:
            header["title"] = {"simpleText": name}
        if avatar is not None:
            header["avatar"] = {
                "thumbnails": [{"url": "https://yt3.ggpht.com/small"}, {"url": avatar}]
            }
        if subscribers is not None:
            header["subscriberCountText"] = {"simpleText": subscribers}
        header["tagline"] = {"simpleText": "Videos about examples"}

        items = [
            {
                "richItemRenderer": {
                    "content": {
                        "videoRenderer": {
                            "videoId": video_id,
                            "title": {"runs": [{"text": f"Video {video_id}"}]},
                            "thumbnail": {
                                "thumbnails": [
                                    {"url": f"https://i.ytimg.com/vi/{video_id}/default.jpg"},
                                    {"url": f"https://i.ytimg.com/vi/{video_id}/hq.jpg"},
                                ]
                            },
                            "lengthText": {"simpleText": "10:01"},
                            "viewCountText": {"simpleText": "1,000 views"},
                            "publishedTimeText": {"simpleText": "2 days ago"},
                        }
                    }
                }
            }
            for video_id in (video_ids or [])
        ]
        tree: dict[str, Any] = {
            "contents": {
                "twoColumnBrowseResultsRenderer": {
                    "tabs": [
                        {"tabRenderer": {"title": "Home", "selected": False}},
                        {
                            "tabRenderer": {
                                "title": "Videos",
                                "selected": True,
                                "content": {"richGridRenderer": {"contents": items}},
                            }
                        },
                    ]
                }
            }
        }
        if header:
            tree["header"] = {"c4TabbedHeaderRenderer": header}
        return tree

    return _build


# =============================================================================
# Fetcher double
# =============================================================================


@pytest.fixture
def fake_fetcher() -> Callable[[dict[str, Any]], MagicMock]:
    """
    Build a PageFetcher double backed by a URL -> response mapping.

    Values may be a string (text body), any other object (JSON body) or an
    exception instance, which is raised. URLs missing from the mapping
    raise a 404 UpstreamError.
    """

    def _build(responses: dict[str, Any]) -> MagicMock:
        def _lookup(url: str, **_: Any) -> Any:
            if url not in responses:
                raise UpstreamError(url=url, status_code=404, reason="Not Found")
            value = responses[url]
            if isinstance(value, BaseException):
                raise value
            return value

        fetcher = MagicMock(spec=PageFetcher)
        fetcher.fetch_text = AsyncMock(side_effect=_lookup)
        fetcher.fetch_json = AsyncMock(side_effect=_lookup)
        return fetcher

    return _build
