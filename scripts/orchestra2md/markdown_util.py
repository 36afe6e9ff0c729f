"""Text helpers for the Markdown grammar.

Public API:
    MARKDOWN_SPECIAL      — characters escaped by plain_text_to_markdown()
    plain_text_to_markdown(text) → str
    convert_to_title_case(text) → str
    escape_table_cell(text) → str
"""

from __future__ import annotations

import re

MARKDOWN_SPECIAL = frozenset("\\`*_[]<>|~")

# A pipe preceded by an even number of backslashes (zero included).
_UNESCAPED_PIPE = re.compile(r"(?<!\\)((?:\\\\)*)\|")


def plain_text_to_markdown(text: str) -> str:
    """Escape characters that have special meaning in Markdown.

    Each special character is prefixed with a backslash. A leading '#' is
    escaped as well so that the text can never be read back as a heading.
    """
    escaped = "".join("\\" + c if c in MARKDOWN_SPECIAL else c for c in text)
    if escaped.startswith("#"):
        escaped = "\\" + escaped
    return escaped


def convert_to_title_case(text: str) -> str:
    """Return text with each word capitalized: "SYNOPSIS" → "Synopsis"."""
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split())


def escape_table_cell(text: str) -> str:
    """Escape pipes that would otherwise end a table cell."""
    return _UNESCAPED_PIPE.sub(r"\1\\|", text)
