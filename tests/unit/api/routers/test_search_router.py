"""Tests for /api/search and /api/searches/recent."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from exnotic.api.deps import get_recent_searches_limit
from exnotic.api.main import app
from exnotic.services.search import build_search_url
from exnotic.services.video_resolver import OEMBED_URL

pytestmark = pytest.mark.asyncio


class TestSearchEndpoint:
    """Tests for GET /api/search."""

    async def test_missing_query(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/search")

        assert response.status_code == 400
        assert response.headers["content-type"] == "application/problem+json"
        data = response.json()
        assert data["code"] == "BAD_REQUEST"
        assert data["detail"] == "Query parameter is required"
        assert data["instance"] == "/api/search"

    async def test_blank_query(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/search", params={"q": "   "})
        assert response.status_code == 400

    async def test_scraped_results(
        self,
        async_client: AsyncClient,
        use_pages,
        page_html,
        search_tree,
        video_renderer,
        channel_renderer,
    ) -> None:
        use_pages(
            {
                build_search_url("lofi beats", "latest"): page_html(
                    search_tree([channel_renderer(), video_renderer()])
                )
            }
        )

        response = await async_client.get(
            "/api/search", params={"q": "lofi beats", "filter": "latest"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "search"
        assert data["channels"][0]["type"] == "channel"
        assert data["channels"][0]["subscriberCount"] == "4.2M subscribers"
        video = data["videos"][0]
        assert video["id"] == "dQw4w9WgXcQ"
        assert video["channelTitle"] == "Rick Astley"
        assert video["viewCount"] == "1,500,000,000 views"
        assert "subscriberCount" not in video

    async def test_direct_link(self, async_client: AsyncClient, use_pages) -> None:
        use_pages(
            {
                OEMBED_URL.format(video_id="dQw4w9WgXcQ"): {
                    "title": "Never Gonna Give You Up",
                    "author_name": "Rick Astley",
                }
            }
        )

        response = await async_client.get(
            "/api/search", params={"q": "https://www.youtube.com/watch?v=dQw4w9WgXcQ"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "direct"
        assert data["videos"][0]["title"] == "Never Gonna Give You Up"
        assert data["channels"] == []

    async def test_upstream_failure_is_502(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/search", params={"q": "lofi beats"})

        assert response.status_code == 502
        data = response.json()
        assert data["code"] == "EXTERNAL_SERVICE_ERROR"
        assert data["detail"] == "External service unavailable"
        assert "youtube.com" not in data["detail"]

    async def test_invalid_page(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/search", params={"q": "x", "page": 0})

        assert response.status_code == 422
        data = response.json()
        assert data["code"] == "VALIDATION_ERROR"
        assert data["errors"][0]["loc"] == ["query", "page"]


class TestRecentSearches:
    """Tests for GET /api/searches/recent."""

    async def test_empty(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/searches/recent")
        assert response.status_code == 200
        assert response.json() == []

    async def test_newest_first(self, async_client: AsyncClient, store) -> None:
        store.log_search("first")
        store.log_search("second")

        response = await async_client.get("/api/searches/recent")

        data = response.json()
        assert [entry["query"] for entry in data] == ["second", "first"]
        assert set(data[0]) == {"id", "query", "timestamp"}

    async def test_failed_search_is_still_logged(self, async_client: AsyncClient) -> None:
        await async_client.get("/api/search", params={"q": "unreachable"})

        response = await async_client.get("/api/searches/recent")

        assert response.json()[0]["query"] == "unreachable"

    async def test_limit_is_injected(self, async_client: AsyncClient, store) -> None:
        for query in ("one", "two", "three"):
            store.log_search(query)
        app.dependency_overrides[get_recent_searches_limit] = lambda: 2

        response = await async_client.get("/api/searches/recent")

        assert [entry["query"] for entry in response.json()] == ["three", "two"]
