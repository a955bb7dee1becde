"""Tests for GET /api/channel."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from exnotic.services.channel_resolver import (
    CHANNEL_SEARCH_URL,
    CHANNEL_VIDEOS_URL_TEMPLATES,
    encode_query,
)

pytestmark = pytest.mark.asyncio

EXAMPLE_ID = "UCexampleexampleexample1"


def _videos_url(channel_id: str) -> str:
    return CHANNEL_VIDEOS_URL_TEMPLATES[0].format(channel_id=channel_id)


class TestGetChannel:
    """Tests for channel lookup."""

    async def test_requires_query_or_id(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/channel")

        assert response.status_code == 400
        assert response.json()["detail"] == "Channel query or ID is required"

    async def test_by_channel_id(
        self, async_client: AsyncClient, use_pages, page_html, channel_tree
    ) -> None:
        use_pages({_videos_url(EXAMPLE_ID): page_html(channel_tree(video_ids=["aaaaaaaaaaa"]))})

        response = await async_client.get("/api/channel", params={"channelId": EXAMPLE_ID})

        assert response.status_code == 200
        data = response.json()
        assert data["channel"]["channelId"] == EXAMPLE_ID
        assert data["channel"]["name"] == "Example Channel"
        assert data["channel"]["videoCount"] == "1"
        assert data["videos"][0]["id"] == "aaaaaaaaaaa"

    async def test_id_alias(
        self, async_client: AsyncClient, use_pages, page_html, channel_tree
    ) -> None:
        use_pages({_videos_url(EXAMPLE_ID): page_html(channel_tree(video_ids=["aaaaaaaaaaa"]))})

        response = await async_client.get("/api/channel", params={"id": EXAMPLE_ID})

        assert response.status_code == 200
        assert response.json()["channel"]["channelId"] == EXAMPLE_ID

    async def test_by_name(
        self,
        async_client: AsyncClient,
        use_pages,
        page_html,
        search_tree,
        channel_renderer,
        channel_tree,
    ) -> None:
        use_pages(
            {
                CHANNEL_SEARCH_URL.format(query=encode_query("Example Channel")): page_html(
                    search_tree([channel_renderer(channel_id=EXAMPLE_ID, title="Example Channel")])
                ),
                _videos_url(EXAMPLE_ID): page_html(channel_tree(video_ids=["aaaaaaaaaaa"])),
            }
        )

        response = await async_client.get("/api/channel", params={"q": "Example Channel"})

        assert response.status_code == 200
        assert response.json()["channel"]["channelId"] == EXAMPLE_ID

    async def test_not_found(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/channel", params={"q": "Nobody At All"})

        assert response.status_code == 404
        data = response.json()
        assert data["code"] == "NOT_FOUND"
        assert data["detail"] == "Channel 'Nobody At All' not found"
