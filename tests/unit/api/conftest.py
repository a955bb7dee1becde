"""
Fixtures for API tests.

The app is exercised in-process through ``httpx.ASGITransport``. The
fetcher dependency is overridden with the URL-keyed fake from the root
conftest, so the real resolvers and search service run against canned
pages.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from typing import Any
from unittest.mock import MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from exnotic.api.deps import get_fetcher, get_store, get_video_resolver
from exnotic.api.main import app
from exnotic.services.store import EphemeralStore
from exnotic.services.video_resolver import VideoSourceResolver


@pytest.fixture
def store() -> EphemeralStore:
    return EphemeralStore(max_entries=10, ttl_seconds=60)


@pytest.fixture
def use_pages(
    fake_fetcher, instances, store
) -> Callable[[dict[str, Any]], MagicMock]:
    """Serve upstream requests from a URL -> response mapping."""

    def _install(responses: dict[str, Any]) -> MagicMock:
        fetcher = fake_fetcher(responses)
        app.dependency_overrides[get_fetcher] = lambda: fetcher
        app.dependency_overrides[get_video_resolver] = lambda: VideoSourceResolver(
            fetcher, instances
        )
        return fetcher

    app.dependency_overrides[get_store] = lambda: store
    return _install


@pytest.fixture
async def async_client(use_pages) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client for FastAPI testing with no upstream pages."""
    use_pages({})
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
