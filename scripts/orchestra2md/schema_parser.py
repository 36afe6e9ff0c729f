"""Schema parser for Orchestra repository XML.

Parses an Orchestra repository file into the typed object model of
orchestra2md.types.

Public API:
    SchemaParseError              — raised when the XML is malformed or invalid
    parse_repository(source, events=None) → Repository

Design notes:
- Elements are matched by local name, so any repository namespace version is
  accepted (and un-namespaced test documents as well).
- Raises SchemaParseError on any structural problem: missing file, bad XML,
  wrong root element, missing required attribute, non-numeric numeric attribute.
  Failures are also reported as FATAL events when a listener is supplied.
- A missing id on a definition is not an error here; the generator reports it.
- Codeset sort keys are kept as written; they are interpreted at sort time.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import BinaryIO

from orchestra2md.events import EventListener
from orchestra2md.types import (
    DEFAULT_SCENARIO,
    PLAIN_TEXT_MEDIA_TYPE,
    Actor,
    Annotation,
    Code,
    CodeSet,
    Component,
    ComponentRef,
    Datatype,
    Field,
    FieldRef,
    FieldRule,
    Flow,
    Fragment,
    FragmentKind,
    Group,
    GroupRef,
    MappedDatatype,
    MemberRef,
    Message,
    MessageRef,
    MetadataTerm,
    Pedigree,
    Presence,
    Repository,
    Response,
    State,
    StateMachine,
    StateTransition,
)

_ROOT_ELEMENT = "repository"


# ─── Exception ────────────────────────────────────────────────────────────────


class SchemaParseError(Exception):
    """Raised when repository XML is malformed or missing required data.

    The message describes what went wrong, where it failed, and how to fix it.
    """


# ─── Element helpers ──────────────────────────────────────────────────────────


def _local(tag: object) -> str:
    """Local name of an element tag: "{ns}field" → "field"."""
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _children(elem: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in elem if _local(child.tag) == name]


def _child(elem: ET.Element, name: str) -> ET.Element | None:
    for child in elem:
        if _local(child.tag) == name:
            return child
    return None


def _text(elem: ET.Element | None) -> str | None:
    if elem is None:
        return None
    return "".join(elem.itertext())


def _attr_or_child(elem: ET.Element, name: str) -> str | None:
    """Value of an attribute, falling back to the text of a child element."""
    value = elem.get(name)
    if value is not None:
        return value
    text = _text(_child(elem, name))
    return text.strip() if text is not None else None


def _require(value: str | None, attr: str, context: str, where: str) -> str:
    """Return value or raise SchemaParseError with actionable message."""
    if value is None or value.strip() == "":
        raise SchemaParseError(
            f"Missing required attribute '{attr}' on {context} in {where}. "
            f"This attribute is required to identify the element. "
            f"Fix: add the missing attribute to the repository XML."
        )
    return value


def _int(value: str | None, attr: str, context: str, where: str) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        raise SchemaParseError(
            f"Invalid {attr} '{value}' on {context} in {where}. "
            f"{attr} must be an integer. "
            f"Fix: correct the '{attr}' attribute value."
        )


def _int_attr(elem: ET.Element, attr: str, context: str, where: str) -> int | None:
    return _int(elem.get(attr), attr, context, where)


def _presence(
    value: str | None,
    context: str,
    where: str,
    default: Presence | None = Presence.OPTIONAL,
) -> Presence | None:
    if value is None:
        return default
    try:
        return Presence(value.strip().lower())
    except ValueError:
        raise SchemaParseError(
            f"Unknown presence '{value}' on {context} in {where}. "
            f"Valid values: {[p.value for p in Presence]}. "
            f"Fix: correct the 'presence' attribute."
        )


def _describe(source: Path | str | BinaryIO) -> str:
    if isinstance(source, (str, Path)):
        return str(source)
    return str(getattr(source, "name", "<stream>"))


# ─── Shared sub-elements ──────────────────────────────────────────────────────


def _parse_annotation(elem: ET.Element) -> Annotation | None:
    annotation_el = _child(elem, "annotation")
    if annotation_el is None:
        return None
    fragments: list[Fragment] = []
    for frag_el in annotation_el:
        name = _local(frag_el.tag)
        if name == "documentation":
            fragments.append(Fragment(
                kind=FragmentKind.DOCUMENTATION,
                text=_text(frag_el) or "",
                purpose=frag_el.get("purpose"),
                content_type=frag_el.get("contentType") or PLAIN_TEXT_MEDIA_TYPE,
                lang=frag_el.get("langId"),
            ))
        elif name == "appinfo":
            fragments.append(Fragment(
                kind=FragmentKind.APPINFO,
                text=_text(frag_el) or "",
                purpose=frag_el.get("purpose"),
            ))
    return Annotation(fragments=tuple(fragments))


def _parse_pedigree(elem: ET.Element, context: str, where: str) -> Pedigree:
    return Pedigree(
        added=elem.get("added"),
        added_ep=_int_attr(elem, "addedEP", context, where),
        updated=elem.get("updated"),
        updated_ep=_int_attr(elem, "updatedEP", context, where),
        deprecated=elem.get("deprecated"),
        deprecated_ep=_int_attr(elem, "deprecatedEP", context, where),
        replaced=elem.get("replaced"),
        replaced_ep=_int_attr(elem, "replacedEP", context, where),
        replaced_by_field=_int_attr(elem, "replacedByField", context, where),
        issue=elem.get("issue"),
        last_modified=elem.get("lastModified"),
    )


# ─── Member references ────────────────────────────────────────────────────────


def _parse_field_ref(elem: ET.Element, where: str) -> FieldRef:
    context = f"<{_local(elem.tag)}>"
    ref_id = _int(_require(elem.get("id"), "id", context, where), "id", context, where)
    context = f"<{_local(elem.tag)} id='{ref_id}'>"
    rules = tuple(
        FieldRule(
            presence=_presence(rule.get("presence"), f"<rule> of {context}", where, None),
            when=_attr_or_child(rule, "when"),
            name=rule.get("name"),
        )
        for rule in _children(elem, "rule")
    )
    return FieldRef(
        id=ref_id,
        scenario=elem.get("scenario") or DEFAULT_SCENARIO,
        presence=_presence(elem.get("presence"), context, where),
        rules=rules,
        value=elem.get("value"),
        assign=_attr_or_child(elem, "assign"),
        impl_min_length=_int_attr(elem, "implMinLength", context, where),
        impl_max_length=_int_attr(elem, "implMaxLength", context, where),
        impl_length=_int_attr(elem, "implLength", context, where),
        pedigree=_parse_pedigree(elem, context, where),
        annotation=_parse_annotation(elem),
    )


def _parse_group_ref(elem: ET.Element, where: str) -> GroupRef:
    ref_id = _int(_require(elem.get("id"), "id", "<groupRef>", where), "id", "<groupRef>", where)
    context = f"<groupRef id='{ref_id}'>"
    return GroupRef(
        id=ref_id,
        scenario=elem.get("scenario") or DEFAULT_SCENARIO,
        presence=_presence(elem.get("presence"), context, where),
        pedigree=_parse_pedigree(elem, context, where),
        annotation=_parse_annotation(elem),
    )


def _parse_component_ref(elem: ET.Element, where: str) -> ComponentRef:
    ref_id = _int(
        _require(elem.get("id"), "id", "<componentRef>", where), "id", "<componentRef>", where
    )
    context = f"<componentRef id='{ref_id}'>"
    return ComponentRef(
        id=ref_id,
        scenario=elem.get("scenario") or DEFAULT_SCENARIO,
        presence=_presence(elem.get("presence"), context, where),
        pedigree=_parse_pedigree(elem, context, where),
        annotation=_parse_annotation(elem),
    )


_MEMBER_PARSERS = {
    "fieldRef": _parse_field_ref,
    "groupRef": _parse_group_ref,
    "componentRef": _parse_component_ref,
}


def _parse_members(elem: ET.Element | None, where: str) -> tuple[MemberRef, ...]:
    """Member references in source order; other children are ignored."""
    if elem is None:
        return ()
    members: list[MemberRef] = []
    for child in elem:
        parser = _MEMBER_PARSERS.get(_local(child.tag))
        if parser is not None:
            members.append(parser(child, where))
    return tuple(members)


# ─── Sections ─────────────────────────────────────────────────────────────────


def _parse_metadata(root: ET.Element) -> tuple[MetadataTerm, ...]:
    metadata_el = _child(root, "metadata")
    if metadata_el is None:
        return ()
    return tuple(
        MetadataTerm(term=_local(term.tag), value=" ".join((_text(term) or "").split()))
        for term in metadata_el
        if _local(term.tag)
    )


def _parse_fields(root: ET.Element, where: str) -> tuple[Field, ...]:
    fields_el = _child(root, "fields")
    if fields_el is None:
        return ()
    result: list[Field] = []
    for f in _children(fields_el, "field"):
        name = _require(f.get("name"), "name", "<field>", where)
        context = f"<field name='{name}'>"
        result.append(Field(
            id=_int_attr(f, "id", context, where),
            name=name,
            type=_require(f.get("type"), "type", context, where),
            scenario=f.get("scenario") or DEFAULT_SCENARIO,
            impl_min_length=_int_attr(f, "implMinLength", context, where),
            impl_max_length=_int_attr(f, "implMaxLength", context, where),
            impl_length=_int_attr(f, "implLength", context, where),
            min_inclusive=f.get("minInclusive"),
            max_inclusive=f.get("maxInclusive"),
            discriminator_id=_int_attr(f, "discriminatorId", context, where),
            union_datatype=f.get("unionDataType"),
            abbr_name=f.get("abbrName"),
            base_category=f.get("baseCategory"),
            base_category_abbr_name=f.get("baseCategoryAbbrName"),
            pedigree=_parse_pedigree(f, context, where),
            annotation=_parse_annotation(f),
        ))
    return tuple(result)


def _parse_components(root: ET.Element, where: str) -> tuple[Component, ...]:
    components_el = _child(root, "components")
    if components_el is None:
        return ()
    result: list[Component] = []
    for c in _children(components_el, "component"):
        name = _require(c.get("name"), "name", "<component>", where)
        context = f"<component name='{name}'>"
        result.append(Component(
            id=_int_attr(c, "id", context, where),
            name=name,
            scenario=c.get("scenario") or DEFAULT_SCENARIO,
            category=c.get("category"),
            abbr_name=c.get("abbrName"),
            members=_parse_members(c, where),
            pedigree=_parse_pedigree(c, context, where),
            annotation=_parse_annotation(c),
        ))
    return tuple(result)


def _parse_groups(root: ET.Element, where: str) -> tuple[Group, ...]:
    groups_el = _child(root, "groups")
    if groups_el is None:
        return ()
    result: list[Group] = []
    for g in _children(groups_el, "group"):
        name = _require(g.get("name"), "name", "<group>", where)
        context = f"<group name='{name}'>"
        num_in_group_el = _child(g, "numInGroup")
        result.append(Group(
            id=_int_attr(g, "id", context, where),
            name=name,
            scenario=g.get("scenario") or DEFAULT_SCENARIO,
            category=g.get("category"),
            abbr_name=g.get("abbrName"),
            num_in_group=(
                _parse_field_ref(num_in_group_el, where) if num_in_group_el is not None else None
            ),
            members=_parse_members(g, where),
            pedigree=_parse_pedigree(g, context, where),
            annotation=_parse_annotation(g),
        ))
    return tuple(result)


def _parse_responses(message_el: ET.Element, context: str, where: str) -> tuple[Response, ...]:
    responses_el = _child(message_el, "responses")
    if responses_el is None:
        return ()
    result: list[Response] = []
    for r in _children(responses_el, "response"):
        refs = tuple(
            MessageRef(
                name=_require(ref.get("name"), "name", f"<messageRef> of {context}", where),
                scenario=ref.get("scenario") or DEFAULT_SCENARIO,
                msg_type=ref.get("msgType"),
                id=_int_attr(ref, "id", f"<messageRef> of {context}", where),
            )
            for ref in _children(r, "messageRef")
        )
        result.append(Response(
            message_refs=refs,
            when=_attr_or_child(r, "when"),
            name=r.get("name"),
            annotation=_parse_annotation(r),
        ))
    return tuple(result)


def _parse_messages(root: ET.Element, where: str) -> tuple[Message, ...]:
    messages_el = _child(root, "messages")
    if messages_el is None:
        return ()
    result: list[Message] = []
    for m in _children(messages_el, "message"):
        name = _require(m.get("name"), "name", "<message>", where)
        context = f"<message name='{name}'>"
        result.append(Message(
            id=_int_attr(m, "id", context, where),
            name=name,
            scenario=m.get("scenario") or DEFAULT_SCENARIO,
            msg_type=m.get("msgType"),
            flow=m.get("flow"),
            category=m.get("category"),
            abbr_name=m.get("abbrName"),
            members=_parse_members(_child(m, "structure"), where),
            responses=_parse_responses(m, context, where),
            pedigree=_parse_pedigree(m, context, where),
            annotation=_parse_annotation(m),
        ))
    return tuple(result)


def _parse_codesets(root: ET.Element, where: str) -> tuple[CodeSet, ...]:
    codesets_el = _child(root, "codeSets")
    if codesets_el is None:
        return ()
    result: list[CodeSet] = []
    for cs in _children(codesets_el, "codeSet"):
        name = _require(cs.get("name"), "name", "<codeSet>", where)
        context = f"<codeSet name='{name}'>"
        codes: list[Code] = []
        for code in _children(cs, "code"):
            code_name = _require(code.get("name"), "name", f"<code> of {context}", where)
            code_context = f"<code name='{code_name}'> of {context}"
            codes.append(Code(
                name=code_name,
                value=_require(code.get("value"), "value", code_context, where),
                id=_int_attr(code, "id", code_context, where),
                group=code.get("group"),
                sort=code.get("sort"),
                pedigree=_parse_pedigree(code, code_context, where),
                annotation=_parse_annotation(code),
            ))
        result.append(CodeSet(
            id=_int_attr(cs, "id", context, where),
            name=name,
            type=_require(cs.get("type"), "type", context, where),
            scenario=cs.get("scenario") or DEFAULT_SCENARIO,
            codes=tuple(codes),
            pedigree=_parse_pedigree(cs, context, where),
            annotation=_parse_annotation(cs),
        ))
    return tuple(result)


def _parse_datatypes(root: ET.Element, where: str) -> tuple[Datatype, ...]:
    datatypes_el = _child(root, "datatypes")
    if datatypes_el is None:
        return ()
    result: list[Datatype] = []
    for dt in _children(datatypes_el, "datatype"):
        name = _require(dt.get("name"), "name", "<datatype>", where)
        mappings = tuple(
            MappedDatatype(
                standard=_require(
                    mapping.get("standard"), "standard",
                    f"<mappedDatatype> of <datatype name='{name}'>", where,
                ),
                base=mapping.get("base"),
                element=mapping.get("element"),
                parameter=mapping.get("parameter"),
                pattern=mapping.get("pattern"),
                min_inclusive=mapping.get("minInclusive"),
                max_inclusive=mapping.get("maxInclusive"),
                annotation=_parse_annotation(mapping),
            )
            for mapping in _children(dt, "mappedDatatype")
        )
        result.append(Datatype(name=name, mappings=mappings, annotation=_parse_annotation(dt)))
    return tuple(result)


def _parse_state(elem: ET.Element, where: str) -> State:
    name = _require(elem.get("name"), "name", f"<{_local(elem.tag)}>", where)
    transitions = tuple(
        StateTransition(
            name=_require(t.get("name"), "name", f"<transition> of state '{name}'", where),
            target=_require(t.get("target"), "target", f"<transition> of state '{name}'", where),
            when=_attr_or_child(t, "when"),
            annotation=_parse_annotation(t),
        )
        for t in _children(elem, "transition")
    )
    return State(name=name, transitions=transitions, annotation=_parse_annotation(elem))


def _parse_state_machine(elem: ET.Element, where: str) -> StateMachine:
    name = _require(elem.get("name"), "name", "<stateMachine>", where)
    initial_el = _child(elem, "initial")
    if initial_el is None:
        raise SchemaParseError(
            f"Missing <initial> state in <stateMachine name='{name}'> in {where}. "
            f"Every state machine must declare its initial state. "
            f"Fix: add an <initial> element to the state machine."
        )
    return StateMachine(
        name=name,
        initial=_parse_state(initial_el, where),
        states=tuple(_parse_state(s, where) for s in _children(elem, "state")),
        annotation=_parse_annotation(elem),
    )


def _parse_actors(root: ET.Element, where: str) -> tuple[Actor | Flow, ...]:
    actors_el = _child(root, "actors")
    if actors_el is None:
        return ()
    result: list[Actor | Flow] = []
    for elem in actors_el:
        name = _local(elem.tag)
        if name == "actor":
            actor_name = _require(elem.get("name"), "name", "<actor>", where)
            result.append(Actor(
                name=actor_name,
                members=_parse_members(elem, where),
                state_machines=tuple(
                    _parse_state_machine(sm, where) for sm in _children(elem, "stateMachine")
                ),
                annotation=_parse_annotation(elem),
            ))
        elif name == "flow":
            flow_name = _require(elem.get("name"), "name", "<flow>", where)
            context = f"<flow name='{flow_name}'>"
            result.append(Flow(
                name=flow_name,
                source=_require(elem.get("source"), "source", context, where),
                destination=_require(elem.get("destination"), "destination", context, where),
                annotation=_parse_annotation(elem),
            ))
    return tuple(result)


# ─── Public API ───────────────────────────────────────────────────────────────


def _parse(source: Path | str | BinaryIO) -> Repository:
    where = _describe(source)
    if isinstance(source, (str, Path)) and not Path(source).exists():
        raise SchemaParseError(
            f"Repository file not found: {where}. "
            f"Fix: check the input path."
        )
    try:
        tree = ET.parse(source)
    except ET.ParseError as e:
        raise SchemaParseError(
            f"XML parse error in {where}: {e}. "
            f"The repository file is not valid XML. "
            f"Fix: correct the XML syntax error at the reported line/column."
        ) from e

    root = tree.getroot()
    if _local(root.tag) != _ROOT_ELEMENT:
        raise SchemaParseError(
            f"Unexpected root element <{_local(root.tag)}> in {where}. "
            f"Expected <{_ROOT_ELEMENT}>. "
            f"Fix: supply an Orchestra repository file."
        )

    return Repository(
        name=root.get("name"),
        version=root.get("version"),
        metadata=_parse_metadata(root),
        actors=_parse_actors(root, where),
        messages=_parse_messages(root, where),
        groups=_parse_groups(root, where),
        components=_parse_components(root, where),
        fields=_parse_fields(root, where),
        codesets=_parse_codesets(root, where),
        datatypes=_parse_datatypes(root, where),
    )


def parse_repository(
    source: Path | str | BinaryIO,
    events: EventListener | None = None,
) -> Repository:
    """Parse Orchestra repository XML into a Repository.

    Args:
        source: Path to the XML file, or a binary stream positioned at its start.
        events: Optional diagnostics listener; a parse failure is reported to
            it as a FATAL event before SchemaParseError is raised.

    Returns:
        Repository with every section in source order. Sections missing from
        the file are empty tuples.

    Raises:
        SchemaParseError: If the source is missing, not valid XML, not an
            Orchestra repository, or has missing/invalid required attributes.
    """
    try:
        return _parse(source)
    except SchemaParseError as e:
        if events is not None:
            events.fatal("Failed to parse repository; {0}", str(e))
        raise
