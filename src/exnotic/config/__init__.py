"""
Configuration management module for exnotic.

Handles application settings, environment variables, upstream instance
lists, and cache bounds.
"""

from __future__ import annotations

from exnotic.config.settings import Settings, get_settings, settings

__all__ = ["Settings", "get_settings", "settings"]
