"""
Identifier helpers for YouTube entities.

Scraped pages and user input both carry loosely formatted identifiers.
The ``is_*`` predicates answer "does this look like one"; the API routes
reuse ``VIDEO_ID_PATTERN`` to reject malformed path parameters.
"""

from __future__ import annotations

import re

_CHANNEL_ID_RE = re.compile(r"^UC[A-Za-z0-9_-]{22}$")
VIDEO_ID_PATTERN = r"^[A-Za-z0-9_-]{11}$"

_VIDEO_ID_RE = re.compile(VIDEO_ID_PATTERN)

# Matched in order; the first pattern that captures wins.
_VIDEO_URL_PATTERNS = (
    re.compile(
        r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&\n?#]+)"
    ),
    re.compile(r"^([A-Za-z0-9_-]{11})$"),
)


def is_channel_id(value: str | None) -> bool:
    """Return True when ``value`` is a ``UC``-prefixed 24-character channel ID."""
    return bool(value) and bool(_CHANNEL_ID_RE.match(value))  # type: ignore[arg-type]


def is_video_id(value: str | None) -> bool:
    """Return True when ``value`` is an 11-character video ID."""
    return bool(value) and bool(_VIDEO_ID_RE.match(value))  # type: ignore[arg-type]


def extract_video_id(text: str) -> str | None:
    """
    Pull a video ID out of a watch, short or embed URL, or a bare ID.

    Parameters
    ----------
    text : str
        A search query as typed by the user.

    Returns
    -------
    str | None
        The video ID, or None when ``text`` is neither a recognised YouTube
        URL nor an 11-character ID.

    Examples
    --------
    >>> extract_video_id("https://youtu.be/dQw4w9WgXcQ?t=42")
    'dQw4w9WgXcQ'
    >>> extract_video_id("never gonna give you up") is None
    True
    """
    text = text.strip()
    for pattern in _VIDEO_URL_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None

