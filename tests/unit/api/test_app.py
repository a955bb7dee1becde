"""Tests for application wiring in exnotic.api.main."""

from __future__ import annotations

from exnotic.api.main import app
from exnotic.config.settings import settings


def test_app_uses_configured_name_and_debug() -> None:
    assert app.title == settings.app_name
    assert app.debug is settings.debug


def test_routes_mounted_under_api_prefix() -> None:
    paths = {route.path for route in app.routes}

    assert {
        "/api/health",
        "/api/search",
        "/api/searches/recent",
        "/api/channel",
        "/api/video/{video_id}",
        "/api/play/{video_id}",
    } <= paths
