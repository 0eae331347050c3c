"""
Node Templates - The closed set of node kinds a user can create.

This module defines:
- InputDefinition / OutputDefinition: Describe a port a template installs
- TemplateDefinition: Label, description and port layout of a template
- NodeTemplate: Enum of creatable node kinds
- NodeData: Opaque per-node payload set by the originating template

Adding a template means adding one NodeTemplate member and one entry
in the definition table below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from harmonia.core.port_types import InputPolicy, PortKind
from harmonia.core.ports import (
    InputPort,
    NodeId,
    OutputPort,
    PortDirection,
    port_id_for,
)


@dataclass(frozen=True)
class InputDefinition:
    """
    Definition of an input port on a template.

    Attributes:
        label: Display label in UI
        kind: Signal kind accepted
        policy: Whether a local value is allowed when unconnected
        required: If True, the UI flags the port while it is unwired
    """
    label: str
    kind: PortKind
    policy: InputPolicy = InputPolicy.CONNECTION_ONLY
    required: bool = True


@dataclass(frozen=True)
class OutputDefinition:
    """Definition of an output port on a template."""
    label: str
    kind: PortKind


@dataclass(frozen=True)
class TemplateDefinition:
    """
    Complete definition of a node template.

    Actual nodes in a graph are built from a definition once, at
    creation time; the definition itself is shared and never mutated.
    """
    label: str  # Display name, e.g., "Audio Mixer"
    description: str = ""
    inputs: tuple[InputDefinition, ...] = field(default_factory=tuple)
    outputs: tuple[OutputDefinition, ...] = field(default_factory=tuple)

    # UI hints
    color: str = "#4a5568"  # Header color


class NodeTemplate(Enum):
    """Creatable node kinds, in the order they are offered to the user."""
    MIDI_SOURCE = "midi_source"
    SOUND_SOURCE = "sound_source"
    EFFECT = "effect"
    MIXER = "mixer"

    @property
    def definition(self) -> TemplateDefinition:
        return _DEFINITIONS[self]

    def display_label(self) -> str:
        return self.definition.label


_DEFINITIONS: dict[NodeTemplate, TemplateDefinition] = {
    NodeTemplate.MIDI_SOURCE: TemplateDefinition(
        label="MIDI Input",
        description="Emits MIDI events into the graph",
        outputs=(OutputDefinition("MIDI Out", PortKind.MIDI),),
        color="#b8860b",
    ),
    NodeTemplate.SOUND_SOURCE: TemplateDefinition(
        label="Sound Source",
        description="Turns MIDI events into audio",
        inputs=(InputDefinition("MIDI In", PortKind.MIDI),),
        outputs=(OutputDefinition("Audio Out", PortKind.AUDIO),),
        color="#a855f7",
    ),
    NodeTemplate.EFFECT: TemplateDefinition(
        label="Audio Effect",
        description="Processes a single audio stream",
        inputs=(InputDefinition("Audio In", PortKind.AUDIO),),
        outputs=(OutputDefinition("Audio Out", PortKind.AUDIO),),
        color="#14b8a6",
    ),
    NodeTemplate.MIXER: TemplateDefinition(
        label="Audio Mixer",
        description="Sums two audio streams",
        inputs=(
            InputDefinition("In 1", PortKind.AUDIO),
            InputDefinition("In 2", PortKind.AUDIO),
        ),
        outputs=(OutputDefinition("Mix Out", PortKind.AUDIO),),
        color="#0077a8",
    ),
}


@dataclass(frozen=True)
class NodeData:
    """Payload attached to a node by the template that created it."""
    template: NodeTemplate
    title: str


def all_templates() -> list[NodeTemplate]:
    """Get every creatable template, in menu order."""
    return list(NodeTemplate)


def display_label(template: NodeTemplate) -> str:
    """Human-readable name used in the creation menu and as default node title."""
    return template.display_label()


def declare_ports(
    template: NodeTemplate,
    node_id: NodeId,
) -> tuple[list[InputPort], list[OutputPort]]:
    """
    Build the ports a template installs onto the node with the given id.

    Pure and deterministic: the same template and node id always yield
    equal port lists.
    """
    definition = template.definition
    inputs = [
        InputPort(
            id=port_id_for(node_id, PortDirection.INPUT, index),
            node_id=node_id,
            index=index,
            label=inp.label,
            kind=inp.kind,
            policy=inp.policy,
            required=inp.required,
        )
        for index, inp in enumerate(definition.inputs)
    ]
    outputs = [
        OutputPort(
            id=port_id_for(node_id, PortDirection.OUTPUT, index),
            node_id=node_id,
            index=index,
            label=out.label,
            kind=out.kind,
        )
        for index, out in enumerate(definition.outputs)
    ]
    return inputs, outputs


def user_data(template: NodeTemplate) -> NodeData:
    """Payload stored on a freshly created node."""
    return NodeData(template=template, title=display_label(template))


def template_for_label(label: str) -> NodeTemplate:
    """
    Resolve a display label back to its template.

    Raises:
        KeyError: If no template carries that label.
    """
    for template in NodeTemplate:
        if template.display_label() == label:
            return template
    raise KeyError(label)


def find_templates(query: str) -> list[NodeTemplate]:
    """Search templates by label or description (case-insensitive)."""
    query = query.lower()
    return [
        t for t in NodeTemplate
        if query in t.definition.label.lower() or query in t.definition.description.lower()
    ]
