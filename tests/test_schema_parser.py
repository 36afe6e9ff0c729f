"""Tests for scripts/orchestra2md/schema_parser.py.

Happy path: the sample repository decodes into the expected object model.
Error path: SchemaParseError on malformed or invalid XML, reported as FATAL.
"""

from __future__ import annotations

import io
import textwrap
from pathlib import Path

import pytest

from orchestra2md.events import InMemoryEventListener, Severity
from orchestra2md.schema_parser import SchemaParseError, parse_repository
from orchestra2md.types import (
    MARKDOWN_MEDIA_TYPE,
    Actor,
    ComponentRef,
    FieldRef,
    Flow,
    FragmentKind,
    GroupRef,
    MemberKind,
    Presence,
    Repository,
)


def _parse_text(xml: str) -> Repository:
    return parse_repository(io.BytesIO(textwrap.dedent(xml).encode("utf-8")))


@pytest.fixture(scope="module")
def sample() -> Repository:
    """Parse the sample repository once for the entire module."""
    path = Path(__file__).resolve().parent / "fixtures" / "sample_repository.xml"
    return parse_repository(path)


class TestSampleRepository:
    def test_repository_attributes(self, sample: Repository) -> None:
        assert sample.name == "Sample"
        assert sample.version == "1.0"

    def test_metadata_by_local_name(self, sample: Repository) -> None:
        assert [(m.term, m.value) for m in sample.metadata] == [
            ("title", "Sample Orchestra"),
            ("creator", "orchestra2md tests"),
        ]

    def test_section_counts(self, sample: Repository) -> None:
        assert len(sample.fields) == 4
        assert len(sample.components) == 1
        assert len(sample.groups) == 1
        assert len(sample.messages) == 1
        assert len(sample.codesets) == 1
        assert len(sample.datatypes) == 3
        assert len(sample.actors) == 2

    def test_fields_keep_source_order(self, sample: Repository) -> None:
        assert [f.id for f in sample.fields] == [55, 54, 453, 448]

    def test_field_attributes(self, sample: Repository) -> None:
        symbol = sample.fields[0]
        assert symbol.name == "Symbol"
        assert symbol.type == "String"
        assert symbol.scenario == "base"
        assert symbol.abbr_name == "Sym"
        assert symbol.pedigree.added == "FIX.2.7"
        assert symbol.pedigree.added_ep == -1

    def test_field_annotation(self, sample: Repository) -> None:
        (fragment,) = sample.fields[0].annotation.fragments
        assert fragment.kind == FragmentKind.DOCUMENTATION
        assert fragment.purpose == "SYNOPSIS"
        assert fragment.text == "Ticker symbol."

    def test_message_structure_member_kinds(self, sample: Repository) -> None:
        message = sample.messages[0]
        assert message.msg_type == "D"
        assert [m.kind for m in message.members] == [
            MemberKind.COMPONENT, MemberKind.FIELD, MemberKind.GROUP,
        ]
        assert isinstance(message.members[0], ComponentRef)
        assert isinstance(message.members[2], GroupRef)
        assert message.members[0].presence == Presence.REQUIRED
        assert message.members[2].presence == Presence.OPTIONAL

    def test_message_responses(self, sample: Repository) -> None:
        (response,) = sample.messages[0].responses
        assert response.when == "OrdStatus == ^New"
        assert [(r.name, r.msg_type) for r in response.message_refs] == [("ExecutionReport", "8")]

    def test_group_num_in_group(self, sample: Repository) -> None:
        group = sample.groups[0]
        assert group.num_in_group == FieldRef(id=453)
        assert [m.id for m in group.members] == [448]

    def test_codes_keep_sort_as_written(self, sample: Repository) -> None:
        codes = sample.codesets[0].codes
        assert [(c.name, c.sort) for c in codes] == [("Sell", "2"), ("Buy", "1")]

    def test_datatype_mapping(self, sample: Repository) -> None:
        string = sample.datatypes[0]
        assert string.name == "String"
        assert string.mappings[0].standard == "XML"
        assert string.mappings[0].base == "xs:string"

    def test_actor_and_flow(self, sample: Repository) -> None:
        actor, flow = sample.actors
        assert isinstance(actor, Actor)
        assert isinstance(flow, Flow)
        assert [m.id for m in actor.members] == [55]
        machine = actor.state_machines[0]
        assert machine.initial.name == "New"
        assert machine.initial.transitions[0].when == "CumQty > 0"
        assert [s.name for s in machine.states] == ["Filled"]
        assert (flow.source, flow.destination) == ("Trade", "Market")


class TestParserDetails:
    def test_unnamespaced_document(self) -> None:
        repository = _parse_text("""\
            <repository name="R">
              <fields><field id="1" name="Account" type="String"/></fields>
            </repository>
            """)
        assert repository.fields[0].name == "Account"

    def test_missing_sections_are_empty(self) -> None:
        repository = _parse_text("<repository/>")
        assert repository.name is None
        assert repository.fields == ()
        assert repository.messages == ()

    def test_field_without_id_is_allowed(self) -> None:
        repository = _parse_text("""\
            <repository><fields><field name="NoTag" type="int"/></fields></repository>
            """)
        assert repository.fields[0].id is None

    def test_presence_case_insensitive(self) -> None:
        repository = _parse_text("""\
            <repository><components>
              <component name="C" id="1"><fieldRef id="55" presence="Required"/></component>
            </components></repository>
            """)
        assert repository.components[0].members[0].presence == Presence.REQUIRED

    def test_field_rules(self) -> None:
        repository = _parse_text("""\
            <repository><components>
              <component name="C" id="1">
                <fieldRef id="44">
                  <rule name="PriceRequired" presence="required">
                    <when>OrdType == ^Limit</when>
                  </rule>
                </fieldRef>
              </component>
            </components></repository>
            """)
        (rule,) = repository.components[0].members[0].rules
        assert rule.presence == Presence.REQUIRED
        assert rule.when == "OrdType == ^Limit"
        assert rule.name == "PriceRequired"

    def test_documentation_content_type_and_appinfo(self) -> None:
        repository = _parse_text("""\
            <repository><fields>
              <field id="1" name="Account" type="String">
                <annotation>
                  <documentation contentType="text/markdown">*Account*</documentation>
                  <appinfo purpose="EXAMPLE">ABC123</appinfo>
                </annotation>
              </field>
            </fields></repository>
            """)
        doc, appinfo = repository.fields[0].annotation.fragments
        assert doc.content_type == MARKDOWN_MEDIA_TYPE
        assert doc.purpose is None
        assert appinfo.kind == FragmentKind.APPINFO
        assert appinfo.purpose == "EXAMPLE"


class TestParserErrors:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SchemaParseError, match="not found"):
            parse_repository(tmp_path / "missing.xml")

    def test_malformed_xml(self) -> None:
        with pytest.raises(SchemaParseError, match="XML parse error"):
            _parse_text("<repository><fields>")

    def test_wrong_root(self) -> None:
        with pytest.raises(SchemaParseError, match="Unexpected root element <schema>"):
            _parse_text("<schema/>")

    def test_missing_field_name(self) -> None:
        with pytest.raises(SchemaParseError, match="'name' on <field>"):
            _parse_text('<repository><fields><field id="1" type="int"/></fields></repository>')

    def test_non_numeric_id(self) -> None:
        with pytest.raises(SchemaParseError, match="Invalid id 'abc'"):
            _parse_text(
                '<repository><fields><field id="abc" name="X" type="int"/></fields></repository>'
            )

    def test_ref_without_id(self) -> None:
        with pytest.raises(SchemaParseError, match="'id' on <fieldRef>"):
            _parse_text(
                '<repository><components><component name="C"><fieldRef/></component>'
                "</components></repository>"
            )

    def test_unknown_presence(self) -> None:
        with pytest.raises(SchemaParseError, match="Unknown presence 'sometimes'"):
            _parse_text(
                '<repository><components><component name="C">'
                '<fieldRef id="1" presence="sometimes"/></component></components></repository>'
            )

    def test_state_machine_without_initial(self) -> None:
        with pytest.raises(SchemaParseError, match="Missing <initial>"):
            _parse_text(
                '<repository><actors><actor name="A"><stateMachine name="S"/></actor>'
                "</actors></repository>"
            )

    def test_error_messages_are_actionable(self) -> None:
        with pytest.raises(SchemaParseError, match="Fix:"):
            _parse_text("<schema/>")

    def test_failure_reported_as_fatal_event(self) -> None:
        events = InMemoryEventListener()
        with pytest.raises(SchemaParseError):
            parse_repository(io.BytesIO(b"<schema/>"), events)
        (message,) = events.messages(Severity.FATAL)
        assert message.startswith("Failed to parse repository; Unexpected root element")
