"""Schema object model for an Orchestra repository.

All enums are str Enums so values compare equal to their XML spelling.
All entity dataclasses are frozen (immutable): the repository is read-only
input for the generator.

Entities are identified by an Entity Key, the pair (id, scenario). The scenario
defaults to DEFAULT_SCENARIO ("base"), which is suppressed from output.

Member references and annotation fragments carry an explicit kind tag
(MemberKind / FragmentKind) so consumers select a handler from a table rather
than inspecting Python types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_SCENARIO = "base"

MARKDOWN_MEDIA_TYPE = "text/markdown"
PLAIN_TEXT_MEDIA_TYPE = "text/plain"


# ─── Enums ────────────────────────────────────────────────────────────────────


class Presence(str, Enum):
    """Presence of a member at a use site.

    Values match the Orchestra presence attribute values.
    """

    REQUIRED = "required"
    OPTIONAL = "optional"
    FORBIDDEN = "forbidden"
    IGNORED = "ignored"
    CONSTANT = "constant"


class MemberKind(str, Enum):
    """Tag for the closed set of member reference variants."""

    FIELD = "field"
    GROUP = "group"
    COMPONENT = "component"


class FragmentKind(str, Enum):
    """Tag for annotation fragment variants."""

    DOCUMENTATION = "documentation"
    APPINFO = "appinfo"


class ActorElementKind(str, Enum):
    """Tag for top-level members of the actors section."""

    ACTOR = "actor"
    FLOW = "flow"


# ─── Annotations and Provenance ───────────────────────────────────────────────


@dataclass(frozen=True)
class Fragment:
    """One documentation or appinfo fragment of an annotation.

    purpose is nullable; a null purpose is grouped under "documentation".
    content_type is only meaningful for documentation fragments.
    """

    kind: FragmentKind
    text: str
    purpose: str | None = None
    content_type: str = PLAIN_TEXT_MEDIA_TYPE
    lang: str | None = None


@dataclass(frozen=True)
class Annotation:
    """Unordered list of documentation/appinfo fragments (order is kept for joining)."""

    fragments: tuple[Fragment, ...] = ()


@dataclass(frozen=True)
class Pedigree:
    """Provenance markers: when an element was added, changed or retired.

    Version markers are free text; the *_ep counterparts are extension-pack
    numbers.
    """

    added: str | None = None
    added_ep: int | None = None
    updated: str | None = None
    updated_ep: int | None = None
    deprecated: str | None = None
    deprecated_ep: int | None = None
    replaced: str | None = None
    replaced_ep: int | None = None
    replaced_by_field: int | None = None
    issue: str | None = None
    last_modified: str | None = None


# ─── Member References ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class FieldRule:
    """Conditional presence override on a field reference."""

    presence: Presence | None = None
    when: str | None = None
    name: str | None = None


@dataclass(frozen=True)
class FieldRef:
    kind = MemberKind.FIELD

    id: int
    scenario: str = DEFAULT_SCENARIO
    presence: Presence = Presence.OPTIONAL
    rules: tuple[FieldRule, ...] = ()
    value: str | None = None
    assign: str | None = None
    impl_min_length: int | None = None
    impl_max_length: int | None = None
    impl_length: int | None = None
    pedigree: Pedigree = field(default_factory=Pedigree)
    annotation: Annotation | None = None


@dataclass(frozen=True)
class GroupRef:
    kind = MemberKind.GROUP

    id: int
    scenario: str = DEFAULT_SCENARIO
    presence: Presence = Presence.OPTIONAL
    pedigree: Pedigree = field(default_factory=Pedigree)
    annotation: Annotation | None = None


@dataclass(frozen=True)
class ComponentRef:
    kind = MemberKind.COMPONENT

    id: int
    scenario: str = DEFAULT_SCENARIO
    presence: Presence = Presence.OPTIONAL
    pedigree: Pedigree = field(default_factory=Pedigree)
    annotation: Annotation | None = None


MemberRef = FieldRef | GroupRef | ComponentRef


# ─── Definitions ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Field:
    """A field definition. id is None only when the source omitted it."""

    id: int | None
    name: str
    type: str
    scenario: str = DEFAULT_SCENARIO
    impl_min_length: int | None = None
    impl_max_length: int | None = None
    impl_length: int | None = None
    min_inclusive: str | None = None
    max_inclusive: str | None = None
    discriminator_id: int | None = None
    union_datatype: str | None = None
    abbr_name: str | None = None
    base_category: str | None = None
    base_category_abbr_name: str | None = None
    pedigree: Pedigree = field(default_factory=Pedigree)
    annotation: Annotation | None = None


@dataclass(frozen=True)
class Component:
    id: int | None
    name: str
    scenario: str = DEFAULT_SCENARIO
    category: str | None = None
    abbr_name: str | None = None
    members: tuple[MemberRef, ...] = ()
    pedigree: Pedigree = field(default_factory=Pedigree)
    annotation: Annotation | None = None


@dataclass(frozen=True)
class Group:
    """A repeating group. num_in_group is the counter field reference."""

    id: int | None
    name: str
    scenario: str = DEFAULT_SCENARIO
    category: str | None = None
    abbr_name: str | None = None
    num_in_group: FieldRef | None = None
    members: tuple[MemberRef, ...] = ()
    pedigree: Pedigree = field(default_factory=Pedigree)
    annotation: Annotation | None = None


@dataclass(frozen=True)
class MessageRef:
    name: str
    scenario: str = DEFAULT_SCENARIO
    msg_type: str | None = None
    id: int | None = None


@dataclass(frozen=True)
class Response:
    message_refs: tuple[MessageRef, ...] = ()
    when: str | None = None
    name: str | None = None
    annotation: Annotation | None = None


@dataclass(frozen=True)
class Message:
    id: int | None
    name: str
    scenario: str = DEFAULT_SCENARIO
    msg_type: str | None = None
    flow: str | None = None
    category: str | None = None
    abbr_name: str | None = None
    members: tuple[MemberRef, ...] = ()
    responses: tuple[Response, ...] = ()
    pedigree: Pedigree = field(default_factory=Pedigree)
    annotation: Annotation | None = None


@dataclass(frozen=True)
class Code:
    """One code of a codeset. group and sort are kept as written in the source."""

    name: str
    value: str
    id: int | None = None
    group: str | None = None
    sort: str | None = None
    pedigree: Pedigree = field(default_factory=Pedigree)
    annotation: Annotation | None = None


@dataclass(frozen=True)
class CodeSet:
    id: int | None
    name: str
    type: str
    scenario: str = DEFAULT_SCENARIO
    codes: tuple[Code, ...] = ()
    pedigree: Pedigree = field(default_factory=Pedigree)
    annotation: Annotation | None = None


@dataclass(frozen=True)
class MappedDatatype:
    """Mapping of a datatype onto another encoding standard (XML, JSON, ...)."""

    standard: str
    base: str | None = None
    element: str | None = None
    parameter: str | None = None
    pattern: str | None = None
    min_inclusive: str | None = None
    max_inclusive: str | None = None
    annotation: Annotation | None = None


@dataclass(frozen=True)
class Datatype:
    name: str
    mappings: tuple[MappedDatatype, ...] = ()
    annotation: Annotation | None = None


# ─── Actors, Flows, State Machines ────────────────────────────────────────────


@dataclass(frozen=True)
class StateTransition:
    name: str
    target: str
    when: str | None = None
    annotation: Annotation | None = None


@dataclass(frozen=True)
class State:
    name: str
    transitions: tuple[StateTransition, ...] = ()
    annotation: Annotation | None = None


@dataclass(frozen=True)
class StateMachine:
    """Static state/transition table. initial is the initial pseudostate."""

    name: str
    initial: State
    states: tuple[State, ...] = ()
    annotation: Annotation | None = None


@dataclass(frozen=True)
class Actor:
    kind = ActorElementKind.ACTOR

    name: str
    members: tuple[MemberRef, ...] = ()
    state_machines: tuple[StateMachine, ...] = ()
    annotation: Annotation | None = None


@dataclass(frozen=True)
class Flow:
    kind = ActorElementKind.FLOW

    name: str
    source: str
    destination: str
    annotation: Annotation | None = None


# ─── Root Container ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class MetadataTerm:
    """One Dublin Core metadata term, e.g. ("title", "Orchestra FIX Latest")."""

    term: str
    value: str


@dataclass(frozen=True)
class Repository:
    """Complete parsed repository. Collections keep source order.

    An empty collection means the section was missing or empty in the source.
    """

    name: str | None = None
    version: str | None = None
    metadata: tuple[MetadataTerm, ...] = ()
    actors: tuple[Actor | Flow, ...] = ()
    messages: tuple[Message, ...] = ()
    groups: tuple[Group, ...] = ()
    components: tuple[Component, ...] = ()
    fields: tuple[Field, ...] = ()
    codesets: tuple[CodeSet, ...] = ()
    datatypes: tuple[Datatype, ...] = ()
