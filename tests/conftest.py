"""Shared pytest fixtures and helpers for the orchestra2md test suite.

Provides:
- Module-level builder functions importable directly by any test module.
- pytest fixtures for listeners, sample files and the YAML case fixture.
- Module-level _CASE_FIXTURE singleton for table-driven parametrized tests.

Module-level helpers (import directly):
    _doc(text, purpose=None, content_type=...) — documentation Fragment.
    _annotation(*fragments) — Annotation from fragments.
    _symbol_repository(**overrides) — one field (55 Symbol) used by one component.
    _render(repository, config=None) — (markdown text, InMemoryEventListener).

Module-level fixtures (import directly):
    _CASE_FIXTURE — CaseFixture singleton (loaded once, shared across tests).

pytest fixtures:
    events                  — fresh InMemoryEventListener.
    sample_repository_path  — path of tests/fixtures/sample_repository.xml.
    case_fixture            — CaseFixture singleton.
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from orchestra2md.config import GeneratorConfig
from orchestra2md.events import InMemoryEventListener
from orchestra2md.generator import MarkdownGenerator
from orchestra2md.types import (
    PLAIN_TEXT_MEDIA_TYPE,
    Annotation,
    Component,
    Field,
    FieldRef,
    Fragment,
    FragmentKind,
    Presence,
    Repository,
)

# Import after production imports so pythonpath=scripts,tests resolves fixtures/
from fixtures.fixture_loader import CaseFixture

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"
SAMPLE_REPOSITORY = FIXTURES_DIR / "sample_repository.xml"


# ─── Case Fixture Singleton ───────────────────────────────────────────────────
# Loaded once at module import time; usable in parametrize decorators.

_CASE_FIXTURE = CaseFixture()


# ─── Module-Level Helpers ─────────────────────────────────────────────────────


def _doc(
    text: str,
    purpose: str | None = None,
    content_type: str = PLAIN_TEXT_MEDIA_TYPE,
) -> Fragment:
    return Fragment(
        kind=FragmentKind.DOCUMENTATION,
        text=text,
        purpose=purpose,
        content_type=content_type,
    )


def _annotation(*fragments: Fragment) -> Annotation:
    return Annotation(fragments=tuple(fragments))


def _symbol_repository(**overrides) -> Repository:
    """Field 55 Symbol (STRING) referenced as required by component 1000 Instrument."""
    values = dict(
        name="Test",
        version="1.0",
        fields=(Field(id=55, name="Symbol", type="STRING"),),
        components=(
            Component(
                id=1000,
                name="Instrument",
                members=(FieldRef(id=55, presence=Presence.REQUIRED),),
            ),
        ),
    )
    values.update(overrides)
    return Repository(**values)


def _render(
    repository: Repository,
    config: GeneratorConfig | None = None,
) -> tuple[str, InMemoryEventListener]:
    """Write repository to a string; return the text and the captured events."""
    sink = io.StringIO()
    events = InMemoryEventListener()
    MarkdownGenerator(config).write(repository, sink, events)
    return sink.getvalue(), events


# ─── pytest Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def events() -> InMemoryEventListener:
    """Fresh in-memory listener."""
    return InMemoryEventListener()


@pytest.fixture
def sample_repository_path() -> Path:
    assert SAMPLE_REPOSITORY.exists(), f"sample repository not found at {SAMPLE_REPOSITORY}"
    return SAMPLE_REPOSITORY


@pytest.fixture
def case_fixture() -> CaseFixture:
    return _CASE_FIXTURE
