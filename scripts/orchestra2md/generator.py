"""Markdown generator: maps an Orchestra repository onto the document model.

The walk is deterministic and single-pass. Sections are produced in a fixed
order, each only when its collection is non-empty:

    repository metadata → actors & flows → messages (each followed by its
    responses) → groups → components → fields → codesets → datatypes

iter_units() is a pure transformation: it yields Context, Documentation and
DetailTable units and never touches I/O. write() feeds the units to a
DocumentWriter; generate() decodes XML first and closes the listener at the end.

Data-quality problems are reported to the EventListener and generation
continues:
- unresolved reference       → WARN, row kept with an empty name cell
- missing id                 → WARN, id omitted from output
- empty member or code list  → WARN, no table
- no fields / no messages    → ERROR, section omitted

A codeset sort key that is not an integer raises ValueError: code ordering
cannot be guaranteed, so the run aborts.

Public API:
    HEADING_ALIASES          — column key → display label for member tables
    MarkdownGenerator(config)
        .iter_units(repository, events) → Iterator[Unit]
        .write(repository, sink, events) → int
        .generate(source, sink, events)
    generate_markdown(source, sink, json_sink=None, config=None)
    group_and_order(annotation, paragraph_delimiter) → list[tuple[str, str]]
    purpose_rank(purpose) → int
    presence_text(field_ref) → str
    sort_codes(codes) → list[Code]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, Iterable, Iterator, TextIO, TypeVar

from orchestra2md.config import GeneratorConfig
from orchestra2md.document import Context, DetailRow, DetailTable, Documentation, Unit
from orchestra2md.events import (
    EventListener,
    JsonEventListener,
    LogEventListener,
    TeeEventListener,
)
from orchestra2md.markdown_util import convert_to_title_case, plain_text_to_markdown
from orchestra2md.schema_parser import SchemaParseError, parse_repository
from orchestra2md.types import (
    DEFAULT_SCENARIO,
    MARKDOWN_MEDIA_TYPE,
    Actor,
    ActorElementKind,
    Annotation,
    Code,
    CodeSet,
    Component,
    ComponentRef,
    Field,
    FieldRef,
    Flow,
    Fragment,
    FragmentKind,
    Group,
    GroupRef,
    MemberKind,
    MemberRef,
    Message,
    Pedigree,
    Presence,
    Repository,
    StateMachine,
)
from orchestra2md.writer import DocumentWriter

logger = logging.getLogger(__name__)

ASSIGN_KEYWORD = "assign"
DOCUMENTATION_KEYWORD = "documentation"
WHEN_KEYWORD = "when"

# Keys are matched case-insensitively against column keys.
HEADING_ALIASES: dict[str, str] = {
    "abbrname": "XMLName",
    "basecategoryabbrname": "Category XMLName",
    "basecategory": "Category",
    "discriminatorid": "Discriminator",
    "addedep": "Added EP",
    "updatedep": "Updated EP",
    "deprecatedep": "Deprecated EP",
    "uniondatatype": "Union Type",
}

_PURPOSE_RANKS: dict[str, int] = {
    "synopsis": 0,
    DOCUMENTATION_KEYWORD: 0,
    "elaboration": 1,
    "example": 2,
    "display": 3,
}
_OTHER_PURPOSE_RANK = 4

_Entity = TypeVar("_Entity", Field, Group, Component)


# ─── Documentation grouping ───────────────────────────────────────────────────


def purpose_rank(purpose: str) -> int:
    """Rank of a purpose bucket: synopsis/documentation, elaboration, example, display, other."""
    return _PURPOSE_RANKS.get(purpose.lower(), _OTHER_PURPOSE_RANK)


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _split_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def _documentation_text(fragment: Fragment, paragraph_delimiter: str) -> str:
    content = _normalize_newlines(fragment.text)
    if fragment.content_type == MARKDOWN_MEDIA_TYPE:
        # Markdown is already in the target grammar: reflow, do not escape.
        paragraphs = (" ".join(_split_lines(p)) for p in content.split("\n\n"))
        return paragraph_delimiter.join(p for p in paragraphs if p)
    return paragraph_delimiter.join(
        plain_text_to_markdown(line) for line in _split_lines(content)
    )


def _appinfo_text(fragment: Fragment, paragraph_delimiter: str) -> str:
    return paragraph_delimiter.join(
        plain_text_to_markdown(line) for line in _split_lines(_normalize_newlines(fragment.text))
    )


_FRAGMENT_RENDERERS: dict[FragmentKind, Callable[[Fragment, str], str]] = {
    FragmentKind.DOCUMENTATION: _documentation_text,
    FragmentKind.APPINFO: _appinfo_text,
}


def group_and_order(
    annotation: Annotation | None,
    paragraph_delimiter: str,
) -> list[tuple[str, str]]:
    """Group annotation fragments by purpose and order the buckets.

    A null purpose is bucketed under "documentation". Buckets are ordered by
    purpose_rank(), ties broken by the purpose key. Fragment texts within a
    bucket are joined, in original order, by paragraph_delimiter. Buckets whose
    text is blank are dropped.

    Returns:
        [(purpose key, text), ...] in output order.
    """
    if annotation is None:
        return []
    buckets: dict[str, list[str]] = {}
    for fragment in annotation.fragments:
        key = fragment.purpose if fragment.purpose is not None else DOCUMENTATION_KEYWORD
        text = _FRAGMENT_RENDERERS[fragment.kind](fragment, paragraph_delimiter)
        buckets.setdefault(key, []).append(text)
    ordered = sorted(buckets.items(), key=lambda item: (purpose_rank(item[0]), item[0]))
    result: list[tuple[str, str]] = []
    for key, texts in ordered:
        text = paragraph_delimiter.join(t for t in texts if t)
        if text.strip():
            result.append((key, text))
    return result


# ─── Pure row helpers ─────────────────────────────────────────────────────────


def presence_text(field_ref: FieldRef) -> str:
    """Presence cell: the bare keyword, or "<presence> when <predicate>" per rule."""
    if not field_ref.rules:
        return field_ref.presence.value
    parts: list[str] = []
    for rule in field_ref.rules:
        words: list[str] = []
        if rule.presence is not None:
            words.append(rule.presence.value)
        if rule.when is not None:
            words.extend([WHEN_KEYWORD, plain_text_to_markdown(rule.when)])
        if words:
            parts.append(" ".join(words))
    return " ".join(parts)


def sort_codes(codes: Iterable[Code]) -> list[Code]:
    """Order codes by group (null first), then by integer sort (null first).

    Raises:
        ValueError: If a sort key is not an integer.
    """

    def key(code: Code) -> tuple[bool, str, bool, int]:
        return (
            code.group is not None,
            code.group or "",
            code.sort is not None,
            int(code.sort.strip()) if code.sort is not None else 0,
        )

    return sorted(codes, key=key)


def _index(entities: Iterable[_Entity]) -> dict[tuple[int, str], _Entity]:
    """Map (id, scenario) → entity; the first definition of a key wins."""
    index: dict[tuple[int, str], _Entity] = {}
    for entity in entities:
        if entity.id is not None:
            index.setdefault((entity.id, entity.scenario), entity)
    return index


@dataclass(frozen=True)
class _Run:
    """Per-run state: lookup indexes and the diagnostics listener."""

    repository: Repository
    events: EventListener
    fields: dict[tuple[int, str], Field]
    groups: dict[tuple[int, str], Group]
    components: dict[tuple[int, str], Component]

    @classmethod
    def start(cls, repository: Repository, events: EventListener) -> _Run:
        return cls(
            repository=repository,
            events=events,
            fields=_index(repository.fields),
            groups=_index(repository.groups),
            components=_index(repository.components),
        )


# ─── Generator ────────────────────────────────────────────────────────────────


class MarkdownGenerator:
    """Translates a Repository into a stream of document model units.

    Usage:
        generator = MarkdownGenerator(GeneratorConfig(include_pedigree=True))
        with open("repo.xml", "rb") as source, open("repo.md", "w") as sink:
            generator.generate(source, sink, LogEventListener())
    """

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        self.config = config or GeneratorConfig()
        self._member_rows: dict[MemberKind, Callable[[_Run, MemberRef, DetailRow], None]] = {
            MemberKind.FIELD: self._add_field_ref_row,
            MemberKind.GROUP: self._add_group_ref_row,
            MemberKind.COMPONENT: self._add_component_ref_row,
        }
        self._actor_elements: dict[ActorElementKind, Callable[[_Run, Actor | Flow], Iterator[Unit]]] = {
            ActorElementKind.ACTOR: self._actor,
            ActorElementKind.FLOW: self._flow,
        }

    # ─── Entry points ─────────────────────────────────────────────────────────

    def iter_units(self, repository: Repository, events: EventListener) -> Iterator[Unit]:
        """Yield every unit of the document in output order."""
        run = _Run.start(repository, events)
        yield from self._repository_metadata(run)
        yield from self._actors_and_flows(run)
        yield from self._messages(run)
        yield from self._groups(run)
        yield from self._components(run)
        yield from self._fields(run)
        yield from self._codesets(run)
        yield from self._datatypes(run)

    def write(self, repository: Repository, sink: TextIO, events: EventListener) -> int:
        """Write the document for repository to sink; returns the number of units written."""
        with DocumentWriter(sink) as writer:
            for unit in self.iter_units(repository, events):
                writer.write(unit)
        return writer.units_written

    def generate(
        self,
        source: Path | str | BinaryIO,
        sink: TextIO,
        events: EventListener,
    ) -> None:
        """Decode repository XML from source and write its document to sink.

        The listener is closed when generation ends, whether or not it succeeded.

        Raises:
            SchemaParseError: If the source cannot be decoded (nothing is written).
            ValueError: If repository data is malformed (e.g. non-numeric sort key).
            OSError: On sink I/O failure.
        """
        try:
            repository = parse_repository(source, events)
            self.write(repository, sink, events)
        except SchemaParseError:
            logger.debug("Repository XML rejected; reported as FATAL by the parser")
            raise
        except ValueError as e:
            events.fatal("Malformed repository data; {0}", str(e))
            raise
        except Exception:
            logger.critical("orchestra2md error", exc_info=True)
            raise
        finally:
            events.close()

    # ─── Shared builders ──────────────────────────────────────────────────────

    def _new_table(self, aliased: bool = True) -> DetailTable:
        return DetailTable(
            self.config.paragraph_delimiter,
            HEADING_ALIASES if aliased else None,
        )

    def _documentation_blocks(self, annotation: Annotation | None) -> Iterator[Unit]:
        for purpose, text in group_and_order(annotation, "\n"):
            yield Context(4).add_key(convert_to_title_case(purpose))
            yield Documentation(text)

    def _add_documentation_cells(self, row: DetailRow, annotation: Annotation | None) -> None:
        for purpose, text in group_and_order(annotation, self.config.paragraph_delimiter):
            row.add(purpose, text)

    def _add_pedigree_cells(self, row: DetailRow, pedigree: Pedigree) -> None:
        if not self.config.include_pedigree:
            return
        cells: tuple[tuple[str, str | int | None], ...] = (
            ("added", pedigree.added),
            ("addedEp", pedigree.added_ep),
            ("deprecated", pedigree.deprecated),
            ("deprecatedEp", pedigree.deprecated_ep),
            ("issue", pedigree.issue),
            ("lastModified", pedigree.last_modified),
            ("replaced", pedigree.replaced),
            ("replacedByField", pedigree.replaced_by_field),
            ("replacedEp", pedigree.replaced_ep),
            ("updated", pedigree.updated),
            ("updatedEp", pedigree.updated_ep),
        )
        for key, value in cells:
            if isinstance(value, int):
                row.add_int(key, value)
            elif value is not None:
                row.add(key, value)

    def _entity_context(
        self,
        run: _Run,
        label: str,
        entity: Message | Group | Component | CodeSet,
        *pairs: tuple[str, str | None],
    ) -> Context:
        """Level-3 heading: "<label>: <name>[, scenario: s][, k: v...] (<id>)"."""
        context = Context(3).add_pair(label, entity.name)
        if entity.scenario != DEFAULT_SCENARIO:
            context.add_pair("scenario", entity.scenario)
        for key, value in pairs:
            if value is not None:
                context.add_pair(key, value)
        if entity.id is not None:
            context.add_key(f"({entity.id})")
        else:
            run.events.warn(
                f"Unknown {label.lower()} id; name={{0}} scenario={{1}}",
                entity.name,
                entity.scenario,
            )
        return context

    def _fixml(self, value: str | None) -> str | None:
        return value if self.config.include_fixml else None

    # ─── Member rows ──────────────────────────────────────────────────────────

    def _add_member_rows(
        self, run: _Run, table: DetailTable, members: Iterable[MemberRef]
    ) -> None:
        for member in members:
            self._member_rows[member.kind](run, member, table.new_row())

    def _add_field_ref_row(self, run: _Run, ref: FieldRef, row: DetailRow) -> None:
        field = run.fields.get((ref.id, ref.scenario))
        if field is None:
            run.events.warn("Unknown field; id={0} scenario={1}", ref.id, ref.scenario)
        row.add("name", field.name if field is not None else "")
        row.add_int("tag", ref.id)
        if ref.scenario != DEFAULT_SCENARIO:
            row.add("scenario", ref.scenario)
        row.add("presence", presence_text(ref))
        if ref.presence == Presence.CONSTANT:
            if ref.value is not None:
                row.add("values", ref.value)
        elif ref.assign is not None:
            row.add("values", f"{ASSIGN_KEYWORD} {ref.assign}")
        if ref.impl_min_length is not None:
            row.add_int("implMinLength", ref.impl_min_length)
        if ref.impl_max_length is not None:
            row.add_int("implMaxLength", ref.impl_max_length)
        if ref.impl_length is not None:
            row.add_int("implLength", ref.impl_length)
        self._add_pedigree_cells(row, ref.pedigree)
        self._add_documentation_cells(row, ref.annotation)

    def _add_group_ref_row(self, run: _Run, ref: GroupRef, row: DetailRow) -> None:
        group = run.groups.get((ref.id, ref.scenario))
        if group is None:
            run.events.warn("Unknown group; id={0} scenario={1}", ref.id, ref.scenario)
        row.add("name", group.name if group is not None else "")
        row.add("tag", "group")
        if ref.scenario != DEFAULT_SCENARIO:
            row.add("scenario", ref.scenario)
        row.add("presence", ref.presence.value)
        self._add_pedigree_cells(row, ref.pedigree)
        self._add_documentation_cells(row, ref.annotation)

    def _add_component_ref_row(self, run: _Run, ref: ComponentRef, row: DetailRow) -> None:
        component = run.components.get((ref.id, ref.scenario))
        if component is None:
            run.events.warn("Unknown component; id={0} scenario={1}", ref.id, ref.scenario)
        row.add("name", component.name if component is not None else "")
        row.add("tag", "component")
        if ref.scenario != DEFAULT_SCENARIO:
            row.add("scenario", ref.scenario)
        row.add("presence", ref.presence.value)
        self._add_pedigree_cells(row, ref.pedigree)
        self._add_documentation_cells(row, ref.annotation)

    # ─── Repository metadata ──────────────────────────────────────────────────

    def _repository_metadata(self, run: _Run) -> Iterator[Unit]:
        repository = run.repository
        context = Context(1)
        if repository.name is not None:
            context.add_key(repository.name)
            if "version" not in repository.name.lower() and repository.version is not None:
                context.add_key(repository.version)
        else:
            context.add_key("Repository")
        yield context

        if repository.metadata:
            table = self._new_table(aliased=False)
            for term in repository.metadata:
                table.new_row().add("term", term.term).add("value", term.value)
            yield table

    # ─── Actors and flows ─────────────────────────────────────────────────────

    def _actors_and_flows(self, run: _Run) -> Iterator[Unit]:
        elements = run.repository.actors
        if not elements:
            return
        yield Context(2).add_key("Actors and Flows")
        for element in elements:
            yield from self._actor_elements[element.kind](run, element)

    def _actor(self, run: _Run, actor: Actor) -> Iterator[Unit]:
        yield Context(3).add_pair("Actor", actor.name)
        yield from self._documentation_blocks(actor.annotation)
        if actor.members:
            yield Context(4).add_key("Variables")
            table = self._new_table()
            self._add_member_rows(run, table, actor.members)
            yield table
        for state_machine in actor.state_machines:
            yield from self._state_machine(state_machine)

    def _flow(self, run: _Run, flow: Flow) -> Iterator[Unit]:
        yield Context(3).add_pair("Flow", flow.name)
        yield from self._documentation_blocks(flow.annotation)
        table = self._new_table(aliased=False)
        table.new_row().add("source", flow.source).add("destination", flow.destination)
        yield table

    def _state_machine(self, state_machine: StateMachine) -> Iterator[Unit]:
        yield Context(3).add_pair("StateMachine", state_machine.name)
        yield from self._documentation_blocks(state_machine.annotation)
        table = self._new_table(aliased=False)
        for state in (state_machine.initial, *state_machine.states):
            for transition in state.transitions:
                row = table.new_row()
                row.add("state", state.name)
                row.add("transition", transition.name)
                row.add("target", transition.target)
                row.add(
                    WHEN_KEYWORD,
                    plain_text_to_markdown(transition.when) if transition.when is not None else "",
                )
                self._add_documentation_cells(row, transition.annotation)
        if len(table):
            yield table

    # ─── Messages ─────────────────────────────────────────────────────────────

    def _messages(self, run: _Run) -> Iterator[Unit]:
        messages = sorted(run.repository.messages, key=lambda m: m.name)
        if not messages:
            run.events.error("No messages found")
            return
        yield Context(2).add_key("Messages")
        for message in messages:
            yield from self._message_structure(run, message)
            yield from self._message_responses(run, message)

    def _message_structure(self, run: _Run, message: Message) -> Iterator[Unit]:
        yield self._entity_context(
            run,
            "Message",
            message,
            ("type", message.msg_type),
            ("flow", message.flow),
            ("abbrname", self._fixml(message.abbr_name)),
            ("category", message.category),
        )
        yield from self._documentation_blocks(message.annotation)
        if message.members:
            table = self._new_table()
            self._add_member_rows(run, table, message.members)
            yield table
        else:
            run.events.warn(
                "Message structure has no members; name={0} scenario={1}",
                message.name,
                message.scenario,
            )

    def _message_responses(self, run: _Run, message: Message) -> Iterator[Unit]:
        table = self._new_table(aliased=False)
        for response in message.responses:
            for ref in response.message_refs:
                row = table.new_row()
                row.add("name", ref.name)
                if ref.scenario != DEFAULT_SCENARIO:
                    row.add("scenario", ref.scenario)
                if ref.msg_type is not None:
                    row.add("msgType", ref.msg_type)
                row.add(
                    WHEN_KEYWORD,
                    plain_text_to_markdown(response.when) if response.when is not None else "",
                )
                self._add_documentation_cells(row, response.annotation)
        if len(table):
            yield Context(3).add_key("Responses")
            yield table

    # ─── Groups and components ────────────────────────────────────────────────

    def _groups(self, run: _Run) -> Iterator[Unit]:
        groups = sorted(run.repository.groups, key=lambda g: g.name)
        if not groups:
            run.events.warn("No groups found")
            return
        yield Context(2).add_key("Groups")
        for group in groups:
            yield from self._group(run, group)

    def _group(self, run: _Run, group: Group) -> Iterator[Unit]:
        yield self._entity_context(
            run,
            "Group",
            group,
            ("abbrname", self._fixml(group.abbr_name)),
            ("category", group.category),
        )
        yield from self._documentation_blocks(group.annotation)

        table = self._new_table()
        if group.num_in_group is not None:
            self._add_field_ref_row(run, group.num_in_group, table.new_row())
        else:
            run.events.warn(
                "Unknown numInGroup for group; name={0} scenario={1}", group.name, group.scenario
            )
        if group.members:
            self._add_member_rows(run, table, group.members)
        else:
            run.events.warn("Group has no members; name={0} scenario={1}", group.name, group.scenario)
        if len(table):
            yield table

    def _components(self, run: _Run) -> Iterator[Unit]:
        components = sorted(run.repository.components, key=lambda c: c.name)
        if not components:
            run.events.warn("No components found")
            return
        yield Context(2).add_key("Components")
        for component in components:
            yield from self._component(run, component)

    def _component(self, run: _Run, component: Component) -> Iterator[Unit]:
        yield self._entity_context(
            run,
            "Component",
            component,
            ("abbrname", self._fixml(component.abbr_name)),
            ("category", component.category),
        )
        yield from self._documentation_blocks(component.annotation)
        if component.members:
            table = self._new_table()
            self._add_member_rows(run, table, component.members)
            yield table
        else:
            run.events.warn(
                "Component has no members; name={0} scenario={1}", component.name, component.scenario
            )

    # ─── Fields ───────────────────────────────────────────────────────────────

    def _fields(self, run: _Run) -> Iterator[Unit]:
        if not run.repository.fields:
            run.events.error("No fields found")
            return
        yield Context(2).add_key("Fields")

        identified: list[Field] = []
        for field in run.repository.fields:
            if field.id is None:
                run.events.warn("Unknown field id; name={0} scenario={1}", field.name, field.scenario)
            else:
                identified.append(field)

        table = self._new_table()
        for field in sorted(identified, key=lambda f: f.id):
            self._add_field_row(table.new_row(), field)
        if len(table):
            yield table

    def _add_field_row(self, row: DetailRow, field: Field) -> None:
        row.add_int("tag", field.id)
        row.add("name", field.name)
        if field.scenario != DEFAULT_SCENARIO:
            row.add("scenario", field.scenario)
        row.add("type", field.type)
        if field.impl_min_length is not None:
            row.add_int("implMinLength", field.impl_min_length)
        if field.impl_max_length is not None:
            row.add_int("implMaxLength", field.impl_max_length)
        if field.impl_length is not None:
            row.add_int("implLength", field.impl_length)
        if field.min_inclusive is not None:
            row.add("minInclusive", field.min_inclusive)
        if field.max_inclusive is not None:
            row.add("maxInclusive", field.max_inclusive)
        if field.discriminator_id is not None:
            row.add_int("discriminatorId", field.discriminator_id)
        if field.union_datatype is not None:
            row.add("unionDataType", field.union_datatype)
        for key, value in (
            ("abbrName", field.abbr_name),
            ("baseCategoryAbbrName", field.base_category_abbr_name),
            ("baseCategory", field.base_category),
        ):
            if self._fixml(value) is not None:
                row.add(key, value)
        self._add_pedigree_cells(row, field.pedigree)
        self._add_documentation_cells(row, field.annotation)

    # ─── Codesets ─────────────────────────────────────────────────────────────

    def _codesets(self, run: _Run) -> Iterator[Unit]:
        codesets = sorted(run.repository.codesets, key=lambda cs: cs.name)
        if not codesets:
            return
        yield Context(2).add_key("Codesets")
        for codeset in codesets:
            yield from self._codeset(run, codeset)

    def _codeset(self, run: _Run, codeset: CodeSet) -> Iterator[Unit]:
        yield self._entity_context(run, "Codeset", codeset, ("type", codeset.type))
        yield from self._documentation_blocks(codeset.annotation)
        if not codeset.codes:
            run.events.warn(
                "Codeset has no codes; name={0} scenario={1}", codeset.name, codeset.scenario
            )
            return

        table = self._new_table()
        for code in sort_codes(codeset.codes):
            row = table.new_row()
            row.add("name", code.name)
            row.add("value", code.value)
            if code.id is not None:
                row.add_int("id", code.id)
            else:
                run.events.warn("Unknown code id; name={0} scenario={1}", code.name, codeset.scenario)
            if code.group is not None:
                row.add("group", code.group)
            if code.sort is not None:
                row.add("sort", code.sort)
            self._add_pedigree_cells(row, code.pedigree)
            self._add_documentation_cells(row, code.annotation)
        yield table

    # ─── Datatypes ────────────────────────────────────────────────────────────

    def _datatypes(self, run: _Run) -> Iterator[Unit]:
        datatypes = sorted(run.repository.datatypes, key=lambda d: d.name.lower())
        if not datatypes:
            run.events.warn("No datatypes found")
            return
        yield Context(2).add_key("Datatypes")

        table = self._new_table(aliased=False)
        for datatype in datatypes:
            row = table.new_row().add("name", datatype.name)
            self._add_documentation_cells(row, datatype.annotation)
            for mapping in datatype.mappings:
                row = table.new_row()
                row.add("name", datatype.name)
                row.add("standard", mapping.standard)
                for key, value in (
                    ("base", mapping.base),
                    ("element", mapping.element),
                    ("parameter", mapping.parameter),
                    ("pattern", mapping.pattern),
                    ("minInclusive", mapping.min_inclusive),
                    ("maxInclusive", mapping.max_inclusive),
                ):
                    if value is not None:
                        row.add(key, value)
                self._add_documentation_cells(row, mapping.annotation)
        yield table


# ─── Convenience entry point ──────────────────────────────────────────────────


def generate_markdown(
    source: Path | str | BinaryIO,
    sink: TextIO,
    json_sink: TextIO | None = None,
    config: GeneratorConfig | None = None,
) -> None:
    """Generate Markdown with diagnostics sent to the log and, optionally, JSON lines.

    The log listener is the primary destination; the JSON listener, when
    json_sink is given, is a secondary destination whose failures do not abort
    the run. json_sink is flushed but not closed.
    """
    events = TeeEventListener(LogEventListener())
    if json_sink is not None:
        events.add_event_listener(JsonEventListener(json_sink))
    MarkdownGenerator(config).generate(source, sink, events)
