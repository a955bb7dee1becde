"""
Tests for ytInitialData extraction.

Covers the script-block scan, the two candidate strategies (non-greedy
regex and balanced braces), and the "skip malformed, keep going" rule.
"""

from __future__ import annotations

import json

from exnotic.services.scraping.extractor import (
    _extract_json_object,
    extract_initial_data,
    iter_script_blocks,
    parse_block,
)


class TestExtractJsonObject:
    """Tests for the balanced-brace scanner."""

    def test_nested_object(self) -> None:
        text = 'x = {"a": {"b": [1, {"c": 2}]}}; trailing'
        start = text.index("{")
        assert _extract_json_object(text, start) == '{"a": {"b": [1, {"c": 2}]}}'

    def test_braces_inside_strings_are_ignored(self) -> None:
        text = '{"title": "curly } and }; inside", "n": 1};'
        assert _extract_json_object(text, 0) == '{"title": "curly } and }; inside", "n": 1}'

    def test_escaped_quote_inside_string(self) -> None:
        text = r'{"t": "say \"hi\" }"}'
        assert _extract_json_object(text, 0) == text

    def test_not_starting_at_brace(self) -> None:
        assert _extract_json_object("abc", 0) is None

    def test_start_out_of_range(self) -> None:
        assert _extract_json_object("{}", 5) is None

    def test_unbalanced(self) -> None:
        assert _extract_json_object('{"a": {"b": 1}', 0) is None


class TestParseBlock:
    """Tests for parsing a single script block."""

    def test_var_assignment(self) -> None:
        assert parse_block('var ytInitialData = {"a": 1};') == {"a": 1}

    def test_window_assignment(self) -> None:
        assert parse_block('window["ytInitialData"] = {"a": 2};') == {"a": 2}

    def test_bare_assignment(self) -> None:
        assert parse_block('ytInitialData = {"a": 3};') == {"a": 3}

    def test_balanced_fallback_when_regex_cuts_short(self) -> None:
        """A nested '};' truncates the regex capture; brace counting recovers."""
        data = {"outer": {"inner": "x"}, "text": "ends with };", "after": True}
        block = "var ytInitialData = " + json.dumps(data) + ";"
        assert parse_block(block) == data

    def test_non_object_value_is_rejected(self) -> None:
        assert parse_block("var ytInitialData = [1, 2];") is None

    def test_invalid_json(self) -> None:
        assert parse_block("var ytInitialData = {not json};") is None

    def test_custom_marker(self) -> None:
        assert parse_block('var ytInitialPlayerResponse = {"p": 1};', "ytInitialPlayerResponse") == {
            "p": 1
        }


class TestIterScriptBlocks:
    """Tests for locating candidate script blocks."""

    def test_only_blocks_with_marker(self) -> None:
        html = (
            "<script>var a = 1;</script>"
            '<script>var ytInitialData = {"x": 1};</script>'
            "<script>other()</script>"
        )
        blocks = list(iter_script_blocks(html))
        assert blocks == ['var ytInitialData = {"x": 1};']

    def test_document_order(self) -> None:
        html = (
            '<script>var ytInitialData = {"n": 1};</script>'
            '<script>var ytInitialData = {"n": 2};</script>'
        )
        blocks = list(iter_script_blocks(html))
        assert len(blocks) == 2
        assert '"n": 1' in blocks[0]

    def test_raw_document_fallback(self) -> None:
        html = '<div>var ytInitialData = {"raw": true};</div>'
        assert list(iter_script_blocks(html)) == [html]

    def test_no_marker_anywhere(self) -> None:
        assert list(iter_script_blocks("<html><script>x()</script></html>")) == []


class TestExtractInitialData:
    """Tests for whole-page extraction."""

    def test_valid_page(self, page_html) -> None:
        tree = {"contents": {"k": [1, 2, 3]}}
        assert extract_initial_data(page_html(tree)) == tree

    def test_no_marker_returns_none(self) -> None:
        assert extract_initial_data("<html><body>nothing</body></html>") is None

    def test_empty_document(self) -> None:
        assert extract_initial_data("") is None

    def test_malformed_first_block_is_skipped(self) -> None:
        html = (
            "<script>var ytInitialData = {broken: ;</script>"
            '<script>var ytInitialData = {"ok": true};</script>'
        )
        assert extract_initial_data(html) == {"ok": True}

    def test_all_blocks_malformed(self) -> None:
        html = (
            "<script>var ytInitialData = {broken};</script>"
            "<script>var ytInitialData = 'nope';</script>"
        )
        assert extract_initial_data(html) is None

    def test_first_valid_block_wins(self) -> None:
        html = (
            '<script>var ytInitialData = {"n": 1};</script>'
            '<script>var ytInitialData = {"n": 2};</script>'
        )
        assert extract_initial_data(html) == {"n": 1}
