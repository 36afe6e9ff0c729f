"""Document model: the primitive output vocabulary of the Markdown document.

Three transient units, each tagged with its UnitKind:

    Context        — a heading; level 1..4 and ordered segments
    Documentation  — free text plus a format tag (fenced block info string)
    DetailTable    — ordered rows of named, nullable cells

The model has no schema knowledge and performs no validation. The single
normalization is in DetailRow: embedded newlines become the table's paragraph
delimiter, since a table row is a single line of the grammar.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Mapping

DEFAULT_PARAGRAPH_DELIMITER = "/P/"
MARKDOWN_FORMAT = "markdown"


class UnitKind(str, Enum):
    CONTEXT = "context"
    DOCUMENTATION = "documentation"
    TABLE = "table"


# ─── Context ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Segment:
    """A heading segment: a (label, value) pair, or a bare label when value is None."""

    label: str
    value: str | None = None

    @property
    def is_pair(self) -> bool:
        return self.value is not None


@dataclass
class Context:
    """A heading. Level 1 = repository, 2 = section, 3 = entity, 4 = sub-element.

    Text shape: pairs render as "label: value" and are separated by ", ";
    a bare label is separated from what precedes it by a space. For example
    segments [Message/NewOrderSingle, type/D, "(14)"] render as
    "Message: NewOrderSingle, type: D (14)".
    """

    kind = UnitKind.CONTEXT

    level: int
    segments: list[Segment] = field(default_factory=list)

    def add_pair(self, label: str, value: str) -> Context:
        self.segments.append(Segment(label, value))
        return self

    def add_key(self, label: str) -> Context:
        self.segments.append(Segment(label))
        return self

    @property
    def text(self) -> str:
        parts: list[str] = []
        previous: Segment | None = None
        for segment in self.segments:
            if segment.is_pair:
                piece = f"{segment.label}: {segment.value}"
                if previous is not None and previous.is_pair:
                    parts.append(", ")
                elif previous is not None:
                    parts.append(" ")
            else:
                piece = segment.label
                if previous is not None:
                    parts.append(" ")
            parts.append(piece)
            previous = segment
        return "".join(parts)


# ─── Documentation ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Documentation:
    """Free text rendered as a fenced block.

    format corresponds to the info string of the fence. "markdown" denotes
    ordinary prose; other tags (e.g. "xml") denote other encodings and are
    preserved verbatim.
    """

    kind = UnitKind.DOCUMENTATION

    text: str
    format: str = MARKDOWN_FORMAT


# ─── Detail Table ─────────────────────────────────────────────────────────────


class DetailRow:
    """Ordered mapping of column key → cell text. Insertion order is emission order."""

    def __init__(self, paragraph_delimiter: str = DEFAULT_PARAGRAPH_DELIMITER) -> None:
        self._paragraph_delimiter = paragraph_delimiter
        self._cells: dict[str, str] = {}

    def add(self, key: str, value: str) -> DetailRow:
        """Set a cell. A later add() with the same key replaces the value in place."""
        # Any line ending (\r\n, \r, \n) becomes the paragraph delimiter.
        self._cells[key] = self._paragraph_delimiter.join(value.splitlines())
        return self

    def add_int(self, key: str, value: int) -> DetailRow:
        return self.add(key, str(int(value)))

    def get(self, key: str) -> str | None:
        return self._cells.get(key)

    def keys(self) -> list[str]:
        return list(self._cells)

    def items(self) -> list[tuple[str, str]]:
        return list(self._cells.items())

    def __contains__(self, key: object) -> bool:
        return key in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        return f"DetailRow({self._cells!r})"


class DetailTable:
    """A table of DetailRows.

    heading_aliases, when set, translates column keys to display labels at
    write time (matched case-insensitively; unlisted keys pass through).
    """

    kind = UnitKind.TABLE

    def __init__(
        self,
        paragraph_delimiter: str = DEFAULT_PARAGRAPH_DELIMITER,
        heading_aliases: Mapping[str, str] | None = None,
    ) -> None:
        self.paragraph_delimiter = paragraph_delimiter
        self.heading_aliases = heading_aliases
        self._rows: list[DetailRow] = []

    def new_row(self) -> DetailRow:
        """Append and return an empty row."""
        row = DetailRow(self.paragraph_delimiter)
        self._rows.append(row)
        return row

    @property
    def rows(self) -> list[DetailRow]:
        return list(self._rows)

    def columns(self) -> list[str]:
        """Union of keys across rows, in order of first appearance."""
        seen: dict[str, None] = {}
        for row in self._rows:
            for key in row.keys():
                seen.setdefault(key, None)
        return list(seen)

    def __iter__(self) -> Iterator[DetailRow]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)


Unit = Context | Documentation | DetailTable
