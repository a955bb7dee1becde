"""
Tests for the video endpoints: metadata, oEmbed passthrough, Invidious,
proxy and the playback chain.
"""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from exnotic.exceptions import UpstreamError
from exnotic.models.records import VideoRecord
from exnotic.services.video_resolver import INVIDIOUS_VIDEO_URL, OEMBED_URL, WATCH_URL

pytestmark = pytest.mark.asyncio

VIDEO_ID = "dQw4w9WgXcQ"
OEMBED = {
    "title": "Never Gonna Give You Up",
    "author_name": "Rick Astley",
    "thumbnail_url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg",
    "provider_name": "YouTube",
}
WATCH_HTML = '"https://yt3.ggpht.com/rick=s88-c-k"'


class TestGetVideo:
    """Tests for GET /api/video/{id}."""

    async def test_oembed_lookup(self, async_client: AsyncClient, use_pages, store) -> None:
        use_pages(
            {
                OEMBED_URL.format(video_id=VIDEO_ID): OEMBED,
                WATCH_URL.format(video_id=VIDEO_ID): WATCH_HTML,
            }
        )

        response = await async_client.get(f"/api/video/{VIDEO_ID}")

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Never Gonna Give You Up"
        assert data["channelTitle"] == "Rick Astley"
        assert data["channelAvatarUrl"] == "https://yt3.ggpht.com/rick=s88-c-k"
        assert store.get_video(VIDEO_ID) is not None

    async def test_served_from_cache(self, async_client: AsyncClient, use_pages, store) -> None:
        fetcher = use_pages({})
        store.put_video(VideoRecord(id=VIDEO_ID, title="Cached"))

        response = await async_client.get(f"/api/video/{VIDEO_ID}")

        assert response.json()["title"] == "Cached"
        fetcher.fetch_json.assert_not_awaited()

    async def test_not_found(self, async_client: AsyncClient) -> None:
        response = await async_client.get(f"/api/video/{VIDEO_ID}")

        assert response.status_code == 404
        data = response.json()
        assert data["code"] == "NOT_FOUND"
        assert data["detail"] == f"Video '{VIDEO_ID}' not found"

    async def test_bypass_uses_playback_chain(self, async_client: AsyncClient) -> None:
        response = await async_client.get(
            f"/api/video/{VIDEO_ID}", params={"method": "bypass"}
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Video Player"

    async def test_bypass_placeholder_not_cached(
        self, async_client: AsyncClient, store
    ) -> None:
        await async_client.get(f"/api/video/{VIDEO_ID}", params={"method": "bypass"})

        assert store.get_video(VIDEO_ID) is None
        response = await async_client.get(f"/api/video/{VIDEO_ID}")
        assert response.status_code == 404

    async def test_bypass_invidious_result_cached(
        self, async_client: AsyncClient, use_pages, store, instances
    ) -> None:
        use_pages(
            {
                INVIDIOUS_VIDEO_URL.format(instance=instances[0], video_id=VIDEO_ID): {
                    "title": "From Invidious",
                    "author": "Rick Astley",
                    "lengthSeconds": 212,
                }
            }
        )

        response = await async_client.get(
            f"/api/video/{VIDEO_ID}", params={"method": "bypass"}
        )

        assert response.json()["title"] == "From Invidious"
        assert store.get_video(VIDEO_ID).title == "From Invidious"

    async def test_invalid_id(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/video/short")
        assert response.status_code == 422


class TestGetOEmbed:
    """Tests for GET /api/oembed/{id}."""

    async def test_passthrough_with_avatar(self, async_client: AsyncClient, use_pages) -> None:
        use_pages(
            {
                OEMBED_URL.format(video_id=VIDEO_ID): {**OEMBED, "width": 200},
                WATCH_URL.format(video_id=VIDEO_ID): WATCH_HTML,
            }
        )

        response = await async_client.get(f"/api/oembed/{VIDEO_ID}")

        assert response.status_code == 200
        data = response.json()
        assert data["author_name"] == "Rick Astley"
        assert data["width"] == 200
        assert data["channelAvatarUrl"] == "https://yt3.ggpht.com/rick=s88-c-k"
        assert "html" not in data

    async def test_unknown_video_is_404(self, async_client: AsyncClient) -> None:
        response = await async_client.get(f"/api/oembed/{VIDEO_ID}")
        assert response.status_code == 404

    async def test_upstream_outage_is_502(self, async_client: AsyncClient, use_pages) -> None:
        url = OEMBED_URL.format(video_id=VIDEO_ID)
        use_pages({url: UpstreamError(url, reason="ConnectTimeout")})

        response = await async_client.get(f"/api/oembed/{VIDEO_ID}")

        assert response.status_code == 502
        assert response.json()["detail"] == "External service unavailable"


class TestInvidiousAndProxy:
    """Tests for GET /api/invidious/{id} and /api/proxy/{id}."""

    async def test_invidious_second_instance(
        self, async_client: AsyncClient, use_pages, instances
    ) -> None:
        use_pages(
            {
                INVIDIOUS_VIDEO_URL.format(instance=instances[1], video_id=VIDEO_ID): {
                    "title": "From Invidious",
                    "author": "Rick Astley",
                    "lengthSeconds": 212,
                    "formatStreams": [{"itag": "18"}],
                    "adaptiveFormats": [],
                }
            }
        )

        response = await async_client.get(f"/api/invidious/{VIDEO_ID}")

        assert response.status_code == 200
        data = response.json()
        assert data["useInvidious"] is True
        assert data["invidiousInstance"] == instances[1]
        assert data["duration"] == "3:32"
        assert data["embedUrl"] == f"{instances[1]}/embed/{VIDEO_ID}"

    async def test_invidious_falls_back_to_proxy(self, async_client: AsyncClient) -> None:
        response = await async_client.get(f"/api/invidious/{VIDEO_ID}")

        assert response.status_code == 200
        data = response.json()
        assert data["useProxy"] is True
        assert len(data["proxyMethods"]) == 3

    async def test_proxy(self, async_client: AsyncClient, use_pages) -> None:
        use_pages({OEMBED_URL.format(video_id=VIDEO_ID): OEMBED})

        response = await async_client.get(f"/api/proxy/{VIDEO_ID}")

        data = response.json()
        assert data["strategy"] == "proxy"
        assert data["title"] == "Never Gonna Give You Up"
        assert data["proxyMethods"][0] == f"https://www.youtube-nocookie.com/embed/{VIDEO_ID}"


class TestPlay:
    """Tests for GET /api/play/{id}."""

    async def test_default_chain_uses_oembed(self, async_client: AsyncClient, use_pages) -> None:
        use_pages({OEMBED_URL.format(video_id=VIDEO_ID): OEMBED})

        response = await async_client.get(f"/api/play/{VIDEO_ID}")

        data = response.json()
        assert data["strategy"] == "oembed"
        assert data["embedUrl"] == f"https://www.youtube.com/embed/{VIDEO_ID}"

    async def test_direct_when_nothing_answers(self, async_client: AsyncClient) -> None:
        response = await async_client.get(f"/api/play/{VIDEO_ID}")

        assert response.status_code == 200
        assert response.json()["strategy"] == "direct"

    async def test_bypass(self, async_client: AsyncClient) -> None:
        response = await async_client.get(f"/api/play/{VIDEO_ID}", params={"bypass": "true"})
        assert response.json()["strategy"] == "proxy"
