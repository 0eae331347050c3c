"""
Ports - Identities and port records shared by templates and the graph.

A port's identity is derived from its owning node's identity, its
direction and its index, so declaring the ports of a node twice yields
identical records.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NewType, Union
from uuid import UUID, uuid4, uuid5

from harmonia.core.port_types import InputPolicy, PortKind


# Type aliases for clarity
NodeId = NewType("NodeId", UUID)
PortId = NewType("PortId", UUID)
ConnectionId = NewType("ConnectionId", UUID)


def new_node_id() -> NodeId:
    """Generate a new unique node ID."""
    return NodeId(uuid4())


def new_connection_id() -> ConnectionId:
    """Generate a new unique connection ID."""
    return ConnectionId(uuid4())


class PortDirection(Enum):
    INPUT = "input"
    OUTPUT = "output"


def port_id_for(node_id: NodeId, direction: PortDirection, index: int) -> PortId:
    """Derive the identity of the index-th port of a node in a direction."""
    return PortId(uuid5(node_id, f"{direction.value}:{index}"))


@dataclass(frozen=True)
class InputPort:
    """
    An input port on a node.

    Attributes:
        id: Port identity (unique across the graph)
        node_id: Owning node
        index: Position among the node's inputs
        label: Display label in UI
        kind: Signal kind accepted
        policy: Whether a local value is allowed when unconnected
        required: If True, the UI flags the port while it is unwired
    """
    id: PortId
    node_id: NodeId
    index: int
    label: str
    kind: PortKind
    policy: InputPolicy = InputPolicy.CONNECTION_ONLY
    required: bool = True

    @property
    def direction(self) -> PortDirection:
        return PortDirection.INPUT


@dataclass(frozen=True)
class OutputPort:
    """An output port on a node. Outputs may drive any number of wires."""
    id: PortId
    node_id: NodeId
    index: int
    label: str
    kind: PortKind

    @property
    def direction(self) -> PortDirection:
        return PortDirection.OUTPUT


Port = Union[InputPort, OutputPort]
