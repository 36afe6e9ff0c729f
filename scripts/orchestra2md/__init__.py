"""orchestra2md — Orchestra repository → Markdown transcoder.

Translates an Orchestra protocol-schema repository (actors, flows, messages,
groups, components, fields, codesets, datatypes) into a Markdown document made
of headings, pipe tables and fenced documentation blocks. The grammar is
restricted so that the document can be read back into a repository.

Public API (re-exported from submodules):

Document Model (from document.py):
    Context        — heading: level 1..4 and ordered (label, value) segments
    Documentation  — free text + format tag, rendered as a fenced block
    DetailTable    — ordered rows of named cells
    DetailRow      — one table row; newlines become the paragraph delimiter
    UnitKind       — context, documentation, table

Document Writer (from writer.py):
    DocumentWriter(sink) — serializes units into the Markdown grammar

Generator (from generator.py):
    MarkdownGenerator(config) — repository → stream of document units
    generate_markdown(source, sink, json_sink=None, config=None)
    group_and_order(annotation, paragraph_delimiter) — purpose buckets in rank order
    HEADING_ALIASES — column key → display label

Diagnostics (from events.py):
    Severity, Event, EventListener (runtime_checkable Protocol)
    LogEventListener, JsonEventListener, InMemoryEventListener, TeeEventListener

Schema (from types.py, schema_parser.py):
    Repository and its frozen entity dataclasses
    parse_repository(source, events=None) — Orchestra XML → Repository
    SchemaParseError — raised when the XML is malformed or invalid

Configuration (from config.py):
    GeneratorConfig, ConfigError, load_config(path)
"""

from orchestra2md.config import (
    ConfigError,
    GeneratorConfig,
    load_config,
)
from orchestra2md.document import (
    DEFAULT_PARAGRAPH_DELIMITER,
    Context,
    DetailRow,
    DetailTable,
    Documentation,
    UnitKind,
)
from orchestra2md.events import (
    Event,
    EventListener,
    InMemoryEventListener,
    JsonEventListener,
    LogEventListener,
    Severity,
    TeeEventListener,
)
from orchestra2md.generator import (
    HEADING_ALIASES,
    MarkdownGenerator,
    generate_markdown,
    group_and_order,
)
from orchestra2md.schema_parser import (
    SchemaParseError,
    parse_repository,
)
from orchestra2md.types import (
    DEFAULT_SCENARIO,
    Repository,
)
from orchestra2md.writer import DocumentWriter

__all__ = [
    # Document model
    "DEFAULT_PARAGRAPH_DELIMITER",
    "Context",
    "DetailRow",
    "DetailTable",
    "Documentation",
    "UnitKind",
    # Writer
    "DocumentWriter",
    # Generator
    "HEADING_ALIASES",
    "MarkdownGenerator",
    "generate_markdown",
    "group_and_order",
    # Diagnostics
    "Event",
    "EventListener",
    "InMemoryEventListener",
    "JsonEventListener",
    "LogEventListener",
    "Severity",
    "TeeEventListener",
    # Schema
    "DEFAULT_SCENARIO",
    "Repository",
    "SchemaParseError",
    "parse_repository",
    # Configuration
    "ConfigError",
    "GeneratorConfig",
    "load_config",
]
