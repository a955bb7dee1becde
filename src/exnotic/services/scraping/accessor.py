"""
Best-effort access into YouTube's untyped JSON trees.

All structural path traversal over scraped data goes through these
helpers, so that a change in YouTube's layout is a change to a path tuple
rather than a cascade of ``KeyError`` handling.

A path is a sequence of dict keys (``str``) and list indices (``int``,
negative indices count from the end). Any missing step, wrong container
type, or out-of-range index ends the walk with the default.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

Path = Sequence[str | int]


def dig(node: Any, *path: str | int, default: Any = None) -> Any:
    """
    Follow ``path`` through nested dicts and lists.

    Parameters
    ----------
    node : Any
        Root of the tree.
    *path : str | int
        Keys and indices to follow.
    default : Any, optional
        Returned when any step is missing (default: None).

    Returns
    -------
    Any
        The value at the end of the path, or ``default``.

    Examples
    --------
    >>> dig({"title": {"runs": [{"text": "Hi"}]}}, "title", "runs", 0, "text")
    'Hi'
    >>> dig({"title": {}}, "title", "runs", 0, "text", default="Untitled")
    'Untitled'
    """
    current = node
    for step in path:
        if isinstance(step, int) and not isinstance(step, bool):
            if not isinstance(current, list):
                return default
            try:
                current = current[step]
            except IndexError:
                return default
        else:
            if not isinstance(current, dict) or step not in current:
                return default
            current = current[step]
        if current is None:
            return default
    return current


def _is_present(value: Any) -> bool:
    return value is not None and value != "" and value != [] and value != {}


def first_present(node: Any, *paths: Path, default: Any = None) -> Any:
    """
    Return the value at the first path that resolves to a non-empty value.

    Empty strings and empty containers count as absent, matching the way
    YouTube leaves fields blank rather than omitting them.

    Parameters
    ----------
    node : Any
        Root of the tree.
    *paths : Sequence[str | int]
        Candidate paths, in priority order.
    default : Any, optional
        Returned when no path yields a value (default: None).
    """
    for path in paths:
        value = dig(node, *path)
        if _is_present(value):
            return value
    return default


def join_runs(node: Any, *path: str | int) -> str:
    """Concatenate the ``text`` of each run in the ``runs`` list at ``path``."""
    runs = dig(node, *path, "runs")
    if not isinstance(runs, list):
        return ""
    return "".join(
        run["text"]
        for run in runs
        if isinstance(run, dict) and isinstance(run.get("text"), str)
    )


def text_of(node: Any, *path: str | int) -> str | None:
    """Read a text object at ``path``: its ``simpleText`` or first run's text."""
    return first_present(
        node,
        (*path, "simpleText"),
        (*path, "runs", 0, "text"),
    )


def thumbnail_url(node: Any, *path: str | int, last: bool = False) -> str | None:
    """
    Pick a URL from the ``thumbnails`` list at ``path``.

    YouTube orders thumbnails smallest first, so ``last=True`` selects the
    highest quality one, falling back to the first.
    """
    if last:
        return first_present(
            node,
            (*path, "thumbnails", -1, "url"),
            (*path, "thumbnails", 0, "url"),
        )
    return first_present(node, (*path, "thumbnails", 0, "url"))
