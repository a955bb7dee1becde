"""
Embedded-data extraction from YouTube HTML pages.

YouTube hydrates its pages from a JSON blob assigned to ``ytInitialData``
inside a ``<script>`` element. This module locates that assignment and
parses the object that follows it.

Extraction never raises on bad input: a page with no marker, or with
markers whose JSON does not parse, yields ``None``.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterator
from typing import Any

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

INITIAL_DATA_MARKER = "ytInitialData"

# Handles: var ytInitialData = {...};
#          ytInitialData = {...};
#          window["ytInitialData"] = {...};
_ASSIGNMENT_RE_TEMPLATE = r'(?:var\s+|window\["|)%s(?:"\])?\s*=\s*'

# Non-greedy capture up to the first "};" after the assignment.
_OBJECT_RE = re.compile(r"(\{.*?\});", re.DOTALL)

_MAX_OBJECT_LENGTH = 5_000_000


def _assignment_pattern(marker: str) -> re.Pattern[str]:
    return re.compile(_ASSIGNMENT_RE_TEMPLATE % re.escape(marker))


def _extract_json_object(text: str, start: int) -> str | None:
    """
    Extract a balanced JSON object from ``text`` starting at ``start``.

    Brace-counting copes with nested objects and with ``};`` sequences
    inside string values, which defeat the non-greedy regex.

    Parameters
    ----------
    text : str
        Script or HTML source.
    start : int
        Position of the opening ``{``.

    Returns
    -------
    str | None
        The balanced object text, or None if there is no opening brace at
        ``start`` or the braces do not balance within the first 5MB.
    """
    if start >= len(text) or text[start] != "{":
        return None

    depth = 0
    in_string = False
    escape = False
    limit = min(len(text), start + _MAX_OBJECT_LENGTH)

    for i in range(start, limit):
        ch = text[i]

        if escape:
            escape = False
            continue

        if ch == "\\":
            if in_string:
                escape = True
            continue

        if ch == '"':
            in_string = not in_string
            continue

        if in_string:
            continue

        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]

    return None


def iter_script_blocks(
    html: str, marker: str = INITIAL_DATA_MARKER
) -> Iterator[str]:
    """
    Yield the text of every ``<script>`` element that mentions ``marker``.

    Blocks are yielded in document order. When no script element contains
    the marker but the raw document does (e.g. a bare JSON-in-HTML
    fragment), the whole document is yielded once.

    Parameters
    ----------
    html : str
        Full HTML document.
    marker : str, optional
        Literal text identifying the embedded state variable.

    Yields
    ------
    str
        Candidate script text.
    """
    soup = BeautifulSoup(html, "html.parser")
    found = False
    for script in soup.find_all("script"):
        content = script.string or script.get_text()
        if content and marker in content:
            found = True
            yield content

    if not found and marker in html:
        logger.debug("No <script> block holds %s, scanning raw document", marker)
        yield html


def _candidate_objects(block: str, assignment: re.Pattern[str]) -> Iterator[str]:
    for match in assignment.finditer(block):
        start = match.end()
        regex_match = _OBJECT_RE.match(block, start)
        if regex_match:
            yield regex_match.group(1)
        balanced = _extract_json_object(block, start)
        if balanced and (regex_match is None or balanced != regex_match.group(1)):
            yield balanced


def parse_block(block: str, marker: str = INITIAL_DATA_MARKER) -> dict[str, Any] | None:
    """
    Parse the object assigned to ``marker`` inside a single script block.

    Returns
    -------
    dict[str, Any] | None
        The parsed object, or None if no candidate in the block is a valid
        JSON object.
    """
    for candidate in _candidate_objects(block, _assignment_pattern(marker)):
        try:
            data = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(data, dict):
            return data
    return None


def extract_initial_data(
    html: str, marker: str = INITIAL_DATA_MARKER
) -> dict[str, Any] | None:
    """
    Extract and parse the embedded ``ytInitialData`` object from a page.

    Script blocks are tried in document order and the first one whose JSON
    parses wins. A malformed block is skipped, never fatal.

    Parameters
    ----------
    html : str
        Full HTML document.
    marker : str, optional
        Name of the embedded state variable (default: ``"ytInitialData"``).

    Returns
    -------
    dict[str, Any] | None
        The parsed tree, or None when no block yields valid JSON.

    Examples
    --------
    >>> extract_initial_data('<script>var ytInitialData = {"a": 1};</script>')
    {'a': 1}
    >>> extract_initial_data("<html></html>") is None
    True
    """
    if not html:
        return None

    for index, block in enumerate(iter_script_blocks(html, marker)):
        data = parse_block(block, marker)
        if data is not None:
            return data
        logger.debug("Script block %d mentions %s but holds no valid JSON", index, marker)

    return None
