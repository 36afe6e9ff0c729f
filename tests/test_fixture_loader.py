"""Tests for tests/fixtures/fixture_loader.py.

Validates the CaseFixture loader itself: file loading, axis access and
generator contracts. These do NOT exercise the generator; they keep the
table-driven tests built on top of the fixture trustworthy.

Test classes:
    TestCaseFixtureInit        — fixture loads default and custom paths
    TestPurposeCaseGenerator   — generate_purpose_cases() contract
    TestCodesetCaseGenerator   — generate_codeset_cases() contract
    TestPresenceCaseGenerator  — generate_presence_cases() contract
"""

from __future__ import annotations

from pathlib import Path

import pytest

from orchestra2md.types import Annotation, Code, FieldRef
from fixtures.fixture_loader import (
    CaseFixture,
    CodeOrderTestCase,
    PresenceTestCase,
    PurposeOrderTestCase,
)

_FIXTURE_PATH = Path(__file__).parent / "fixtures" / "cases.yaml"


class TestCaseFixtureInit:
    def test_default_path_loads_successfully(self) -> None:
        assert CaseFixture().purpose_ordering

    def test_custom_path_loads_same_data(self) -> None:
        assert CaseFixture(str(_FIXTURE_PATH)).presence == CaseFixture().presence

    def test_missing_file_raises_error(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            CaseFixture(tmp_path / "missing.yaml")


class TestPurposeCaseGenerator:
    def test_cases_typed(self) -> None:
        cases = list(CaseFixture().generate_purpose_cases())
        assert cases
        assert all(isinstance(tc, PurposeOrderTestCase) for tc in cases)
        assert all(isinstance(tc.annotation, Annotation) for tc in cases)

    def test_ids_unique(self) -> None:
        ids = [tc.id for tc in CaseFixture().generate_purpose_cases()]
        assert len(ids) == len(set(ids))


class TestCodesetCaseGenerator:
    def test_expected_names_cover_codes(self) -> None:
        for tc in CaseFixture().generate_codeset_cases():
            assert isinstance(tc, CodeOrderTestCase)
            assert all(isinstance(code, Code) for code in tc.codes)
            assert sorted(tc.expected_names) == sorted(code.name for code in tc.codes), tc.id


class TestPresenceCaseGenerator:
    def test_cases_typed(self) -> None:
        for tc in CaseFixture().generate_presence_cases():
            assert isinstance(tc, PresenceTestCase)
            assert isinstance(tc.field_ref, FieldRef)
            assert tc.expected
