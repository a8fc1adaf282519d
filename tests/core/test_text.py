"""Tests for core/text.py helpers."""

import pytest

from docmark.core.text import (
    collapse_spaces,
    sanitize_path,
    summarize,
    to_header_string,
    to_snake_case,
)


class TestSummarize:
    def test_short_text_unchanged(self) -> None:
        assert summarize("Makes a sound.") == "Makes a sound."

    def test_truncates_with_ellipsis(self) -> None:
        result = summarize("x" * 120)

        assert len(result) == 100
        assert result.endswith("...")
        assert result[:97] == "x" * 97

    def test_exact_length_is_not_truncated(self) -> None:
        assert summarize("y" * 25, 25) == "y" * 25

    def test_newlines_become_spaces(self) -> None:
        assert summarize("line one\r\nline two") == "line one  line two"

    def test_empty(self) -> None:
        assert summarize("") == ""


class TestCollapseSpaces:
    def test_collapses_runs_and_newlines(self) -> None:
        assert collapse_spaces("a  \n\t b") == "a b"


class TestCaseHelpers:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("StaticMethods", "static_methods"),
            ("HTTPClient", "httpclient"),
            ("name", "name"),
        ],
    )
    def test_to_snake_case(self, text: str, expected: str) -> None:
        assert to_snake_case(text) == expected

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("StaticMethods", "Static Methods"),
            ("convertForDisplay", "Convert for Display"),
        ],
    )
    def test_to_header_string(self, text: str, expected: str) -> None:
        assert to_header_string(text) == expected


class TestSanitizePath:
    def test_generic_brackets(self) -> None:
        assert sanitize_path("Zoo/Zoo/Cage<Animal>") == "Zoo/Zoo/Cage[Animal]"

    def test_drops_spaces(self) -> None:
        assert sanitize_path("Zoo/Dictionary<string, int>") == "Zoo/Dictionary[string,int]"

    def test_replaces_invalid_characters(self) -> None:
        assert sanitize_path('Zoo/a:b?"c"') == "Zoo/a_b__c_"

    def test_empty(self) -> None:
        assert sanitize_path("") == ""
