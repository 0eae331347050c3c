"""
Node Graph Model - Core data structures for the signal-routing graph.

This module defines the fundamental building blocks:
- Node: A node built from a template, with fixed input and output ports
- Connection: A wire from one node's output to another node's input
- NodeGraph: The store owning nodes, ports, connections and positions

Node positions live in a sidecar mapping keyed by node id rather than
on the Node itself, so layout can be queried and updated without
touching node content.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator
from uuid import UUID

from harmonia.core.geometry import Point2D
from harmonia.core.node_templates import (
    NodeData,
    NodeTemplate,
    declare_ports,
    display_label,
    user_data,
)
from harmonia.core.ports import (
    ConnectionId,
    InputPort,
    NodeId,
    OutputPort,
    Port,
    PortId,
    new_connection_id,
    new_node_id,
)

logger = logging.getLogger(__name__)


class GraphError(Exception):
    """Base exception for rejected graph operations."""
    pass


class IncompatibleKindError(GraphError):
    """Connection attempted between ports of different kinds."""

    def __init__(self, output: OutputPort, input: InputPort):
        self.output = output
        self.input = input
        super().__init__(
            f"Cannot connect {output.kind.display_name()} output "
            f"'{output.label}' to {input.kind.display_name()} input '{input.label}'"
        )


class PortOccupiedError(GraphError):
    """Input port already holds a connection."""

    def __init__(self, input: InputPort, existing: Connection):
        self.input = input
        self.existing = existing
        super().__init__(f"Input '{input.label}' is already connected")


class UnknownIdentityError(GraphError):
    """Operation referenced a node or port that is not in the graph."""

    def __init__(self, identity: UUID, what: str = "identity"):
        self.identity = identity
        super().__init__(f"Unknown {what}: {identity}")


@dataclass(frozen=True)
class Connection:
    """
    A connection (wire) between two nodes.

    Connects an output port of one node to an input port of another.
    """
    id: ConnectionId
    output: PortId
    input: PortId

    @classmethod
    def create(cls, output: PortId, input: PortId) -> Connection:
        """Factory method to create a new connection."""
        return cls(id=new_connection_id(), output=output, input=input)


@dataclass
class Node:
    """
    A single node in the routing graph.

    Nodes have:
    - A unique ID
    - A display title
    - Ordered input and output ports, fixed at creation
    - Payload data from the originating template
    """
    id: NodeId
    title: str
    inputs: list[InputPort] = field(default_factory=list)
    outputs: list[OutputPort] = field(default_factory=list)
    data: NodeData | None = None

    @property
    def template(self) -> NodeTemplate | None:
        return self.data.template if self.data else None

    @property
    def ports(self) -> list[Port]:
        """All ports, inputs first."""
        return [*self.inputs, *self.outputs]

    def get_input(self, label: str) -> InputPort | None:
        """Get an input port by label."""
        for inp in self.inputs:
            if inp.label == label:
                return inp
        return None

    def get_output(self, label: str) -> OutputPort | None:
        """Get an output port by label."""
        for out in self.outputs:
            if out.label == label:
                return out
        return None


class NodeGraph:
    """
    The node graph of the editor.

    Owns every node, port, connection and node position. All mutation
    goes through the methods below, which keep these invariants:
    - every connection's endpoints are ports that currently exist
    - every port belongs to exactly one existing node
    - an input port holds at most one connection
    - connected ports have identical kinds
    """

    def __init__(self, name: str = "Untitled"):
        self.name: str = name
        self._nodes: dict[NodeId, Node] = {}
        self._ports: dict[PortId, Port] = {}
        self._connections: dict[ConnectionId, Connection] = {}
        self._input_connections: dict[PortId, ConnectionId] = {}
        self._positions: dict[NodeId, Point2D] = {}

    # --- Node operations ---

    def create_node(self, template: NodeTemplate) -> NodeId:
        """
        Create a node from a template and add it to the graph.

        The node gets a fresh id, the template's label as title and the
        template's ports. No position is assigned; callers follow up
        with set_position.
        """
        node_id = new_node_id()
        inputs, outputs = declare_ports(template, node_id)
        node = Node(
            id=node_id,
            title=display_label(template),
            inputs=inputs,
            outputs=outputs,
            data=user_data(template),
        )
        self._nodes[node_id] = node
        for port in node.ports:
            self._ports[port.id] = port
        logger.debug("Created %s node %s", node.title, node_id)
        return node_id

    def delete_node(self, node_id: NodeId) -> Node | None:
        """
        Remove a node, its ports, its position and all its connections.

        Returns the removed node, or None if not found.
        """
        node = self._nodes.pop(node_id, None)
        if node is None:
            return None

        port_ids = {port.id for port in node.ports}
        for conn in list(self._connections.values()):
            if conn.output in port_ids or conn.input in port_ids:
                self._remove_connection(conn)
        for port_id in port_ids:
            del self._ports[port_id]
        self._positions.pop(node_id, None)

        logger.debug("Deleted %s node %s", node.title, node_id)
        return node

    def get_node(self, node_id: NodeId) -> Node | None:
        """Get a node by ID."""
        return self._nodes.get(node_id)

    def nodes(self) -> Iterator[Node]:
        """Iterate over nodes in insertion order."""
        return iter(list(self._nodes.values()))

    def node_count(self) -> int:
        return len(self._nodes)

    # --- Position operations ---

    def set_position(self, node_id: NodeId, position: Point2D) -> None:
        """Place a node on the canvas (graph space). Unknown ids are ignored."""
        if node_id not in self._nodes:
            return
        self._positions[node_id] = position

    def get_position(self, node_id: NodeId) -> Point2D | None:
        return self._positions.get(node_id)

    @property
    def positions(self) -> dict[NodeId, Point2D]:
        """Get all node positions (read-only copy)."""
        return self._positions.copy()

    # --- Port operations ---

    def get_port(self, port_id: PortId) -> Port | None:
        """Get a port by ID."""
        return self._ports.get(port_id)

    def missing_required_inputs(self, node_id: NodeId) -> list[InputPort]:
        """Get required inputs of a node that have nothing wired to them."""
        node = self._nodes.get(node_id)
        if node is None:
            return []
        return [
            inp for inp in node.inputs
            if inp.required and inp.id not in self._input_connections
        ]

    # --- Connection operations ---

    @property
    def connections(self) -> list[Connection]:
        """Get all connections (read-only copy)."""
        return list(self._connections.values())

    def connect(self, output: PortId, input: PortId) -> Connection:
        """
        Wire an output port to an input port.

        Returns:
            The new connection.

        Raises:
            UnknownIdentityError: If either id is not an existing port of
                the expected direction.
            IncompatibleKindError: If the ports carry different kinds.
            PortOccupiedError: If the input already has a connection.
        """
        source = self._ports.get(output)
        if not isinstance(source, OutputPort):
            raise UnknownIdentityError(output, "output port")
        target = self._ports.get(input)
        if not isinstance(target, InputPort):
            raise UnknownIdentityError(input, "input port")

        if not source.kind.is_compatible_with(target.kind):
            raise IncompatibleKindError(source, target)

        existing = self.connection_to(input)
        if existing is not None:
            raise PortOccupiedError(target, existing)

        connection = Connection.create(output, input)
        self._connections[connection.id] = connection
        self._input_connections[input] = connection.id
        logger.debug("Connected '%s' -> '%s'", source.label, target.label)
        return connection

    def disconnect(self, input: PortId) -> Connection | None:
        """Remove the connection feeding an input, if any."""
        connection = self.connection_to(input)
        if connection is not None:
            self._remove_connection(connection)
        return connection

    def connection_to(self, input: PortId) -> Connection | None:
        """Get the connection feeding into a specific input."""
        conn_id = self._input_connections.get(input)
        return self._connections.get(conn_id) if conn_id is not None else None

    def connections_from(self, output: PortId) -> list[Connection]:
        """Get all connections from a specific output."""
        return [conn for conn in self._connections.values() if conn.output == output]

    def _remove_connection(self, connection: Connection) -> None:
        del self._connections[connection.id]
        del self._input_connections[connection.input]

    # --- Utility ---

    def clear(self) -> None:
        """Remove all nodes, ports, connections and positions."""
        self._nodes.clear()
        self._ports.clear()
        self._connections.clear()
        self._input_connections.clear()
        self._positions.clear()

    def __len__(self) -> int:
        """Return the number of nodes."""
        return len(self._nodes)

    def __contains__(self, node_id: NodeId) -> bool:
        """Check if a node exists in the graph."""
        return node_id in self._nodes
