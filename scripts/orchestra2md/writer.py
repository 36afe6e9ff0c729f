"""Document writer: serializes document model units into the Markdown grammar.

Each write appends exactly one grammar unit to the sink, in call order, with a
blank line between units. The writer holds no domain knowledge; it only knows
how to render a Context, a DetailTable or a Documentation unit.

Grammar units are rendered from Jinja2 templates in ``templates/``:

    heading.md.j2        — "#" × level, a space, the heading text
    table.md.j2          — header row, delimiter row, one row per record
    documentation.md.j2  — fenced block; info string = documentation format

Public API:
    DocumentWriter(sink, template_dir=None)
        .write(unit)
        .write_context(context)
        .write_documentation(documentation)
        .write_table(table, heading_aliases=None)
        .units_written
"""

from __future__ import annotations

import pathlib
import re
from typing import Callable, Mapping, TextIO

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from orchestra2md.document import Context, DetailTable, Documentation, Unit, UnitKind
from orchestra2md.markdown_util import escape_table_cell

_TEMPLATES_DIR = pathlib.Path(__file__).parent / "templates"

_BACKTICK_RUN = re.compile(r"`{3,}")


def _fence_for(text: str) -> str:
    """Return a backtick fence longer than any backtick run inside text."""
    longest = max((len(run) for run in _BACKTICK_RUN.findall(text)), default=0)
    return "`" * max(3, longest + 1)


def _display_heading(key: str, heading_aliases: Mapping[str, str] | None) -> str:
    if not heading_aliases:
        return key
    lowered = {k.lower(): v for k, v in heading_aliases.items()}
    return lowered.get(key.lower(), key)


class DocumentWriter:
    """Writes document model units to a text sink.

    The writer does not own the sink: it flushes but never closes it. Sink I/O
    errors propagate unchanged.

    Usage:
        with DocumentWriter(sys.stdout) as writer:
            writer.write(Context(1).add_key("Repository"))
    """

    def __init__(
        self,
        sink: TextIO,
        *,
        template_dir: pathlib.Path | str | None = None,
    ) -> None:
        self._sink = sink
        env = Environment(
            loader=FileSystemLoader(str(template_dir or _TEMPLATES_DIR)),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._heading_template = env.get_template("heading.md.j2")
        self._table_template = env.get_template("table.md.j2")
        self._documentation_template = env.get_template("documentation.md.j2")
        self.units_written = 0

        self._dispatch: dict[UnitKind, Callable[[Unit], None]] = {
            UnitKind.CONTEXT: self.write_context,
            UnitKind.DOCUMENTATION: self.write_documentation,
            UnitKind.TABLE: lambda table: self.write_table(table, table.heading_aliases),
        }

    def __enter__(self) -> DocumentWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._sink.flush()

    # ─── Public API ───────────────────────────────────────────────────────────

    def write(self, unit: Unit) -> None:
        """Write any unit, selected by its kind tag."""
        self._dispatch[unit.kind](unit)

    def write_context(self, context: Context) -> None:
        self._emit(
            self._heading_template.render(level=context.level, text=context.text)
        )

    def write_documentation(self, documentation: Documentation) -> None:
        self._emit(
            self._documentation_template.render(
                fence=_fence_for(documentation.text),
                format=documentation.format,
                text=documentation.text,
            )
        )

    def write_table(
        self,
        table: DetailTable,
        heading_aliases: Mapping[str, str] | None = None,
    ) -> None:
        """Write a table; a table without rows writes nothing."""
        columns = table.columns()
        if not columns:
            return
        headers = [escape_table_cell(_display_heading(c, heading_aliases)) for c in columns]
        rows = [
            [escape_table_cell(row.get(c) or "") for c in columns]
            for row in table
        ]
        self._emit(self._table_template.render(headers=headers, rows=rows))

    # ─── Internals ────────────────────────────────────────────────────────────

    def _emit(self, text: str) -> None:
        if self.units_written:
            self._sink.write("\n")
        self._sink.write(text)
        self.units_written += 1
