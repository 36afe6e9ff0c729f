"""Tests for scripts/orchestra2md/markdown_util.py."""

from __future__ import annotations

import pytest

from orchestra2md.markdown_util import (
    MARKDOWN_SPECIAL,
    convert_to_title_case,
    escape_table_cell,
    plain_text_to_markdown,
)


class TestPlainTextToMarkdown:
    @pytest.mark.parametrize("char", sorted(MARKDOWN_SPECIAL))
    def test_special_character_escaped(self, char: str) -> None:
        assert plain_text_to_markdown(f"a{char}b") == f"a\\{char}b"

    def test_ordinary_text_unchanged(self) -> None:
        assert plain_text_to_markdown("OrdStatus == ^New (0)") == "OrdStatus == ^New (0)"

    def test_leading_hash_escaped(self) -> None:
        assert plain_text_to_markdown("# not a heading") == "\\# not a heading"

    def test_inner_hash_unchanged(self) -> None:
        assert plain_text_to_markdown("issue #12") == "issue #12"

    def test_empty(self) -> None:
        assert plain_text_to_markdown("") == ""


class TestConvertToTitleCase:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("SYNOPSIS", "Synopsis"),
            ("elaboration", "Elaboration"),
            ("documentation", "Documentation"),
            ("custom purpose", "Custom Purpose"),
        ],
    )
    def test_title_case(self, text: str, expected: str) -> None:
        assert convert_to_title_case(text) == expected


class TestEscapeTableCell:
    def test_pipe_escaped(self) -> None:
        assert escape_table_cell("a|b") == "a\\|b"

    def test_escaped_pipe_untouched(self) -> None:
        assert escape_table_cell("a\\|b") == "a\\|b"

    def test_no_pipe(self) -> None:
        assert escape_table_cell("plain") == "plain"

    def test_pipe_after_escaped_backslash_escaped(self) -> None:
        assert escape_table_cell("use a\\\\|b here") == "use a\\\\\\|b here"

    def test_pipe_after_odd_backslashes_untouched(self) -> None:
        assert escape_table_cell("a\\\\\\|b") == "a\\\\\\|b"
