"""
Tests for the graph module.
"""

import pytest
from uuid import UUID

from harmonia.core.geometry import Point2D
from harmonia.core.graph import (
    IncompatibleKindError,
    NodeGraph,
    PortOccupiedError,
    UnknownIdentityError,
)
from harmonia.core.node_templates import NodeTemplate
from harmonia.core.port_types import PortKind
from harmonia.core.ports import new_node_id


@pytest.fixture
def graph():
    return NodeGraph("Test Graph")


def port_of(graph, node_id, label):
    node = graph.get_node(node_id)
    port = node.get_input(label) or node.get_output(label)
    assert port is not None, label
    return port


class TestCreateNode:
    """Tests for NodeGraph.create_node."""

    def test_create_empty_graph(self, graph):
        assert graph.name == "Test Graph"
        assert len(graph) == 0
        assert graph.node_count() == 0

    def test_create_node_is_visible(self, graph):
        node_id = graph.create_node(NodeTemplate.MIXER)

        assert isinstance(node_id, UUID)
        assert node_id in graph
        assert graph.node_count() == 1
        assert [n.id for n in graph.nodes()] == [node_id]

    def test_title_and_ports_come_from_template(self, graph):
        node = graph.get_node(graph.create_node(NodeTemplate.MIXER))

        assert node.title == "Audio Mixer"
        assert [p.label for p in node.inputs] == ["In 1", "In 2"]
        assert [p.label for p in node.outputs] == ["Mix Out"]
        assert node.template is NodeTemplate.MIXER
        assert node.data.title == "Audio Mixer"

    def test_ids_are_unique(self, graph):
        ids = {graph.create_node(NodeTemplate.EFFECT) for _ in range(20)}
        assert len(ids) == 20

    def test_ports_are_registered_and_owned(self, graph):
        node_id = graph.create_node(NodeTemplate.SOUND_SOURCE)
        node = graph.get_node(node_id)

        for port in node.ports:
            assert graph.get_port(port.id) is port
            assert port.node_id == node_id

    def test_no_position_assigned(self, graph):
        node_id = graph.create_node(NodeTemplate.EFFECT)
        assert graph.get_position(node_id) is None

    def test_nodes_in_insertion_order(self, graph):
        a = graph.create_node(NodeTemplate.MIXER)
        b = graph.create_node(NodeTemplate.MIDI_SOURCE)
        c = graph.create_node(NodeTemplate.EFFECT)

        assert [n.id for n in graph.nodes()] == [a, b, c]


class TestPositions:
    """Tests for the node position sidecar."""

    def test_set_and_get_position(self, graph):
        node_id = graph.create_node(NodeTemplate.EFFECT)
        graph.set_position(node_id, Point2D(10, 20))

        assert graph.get_position(node_id) == Point2D(10, 20)

    def test_set_position_overwrites(self, graph):
        node_id = graph.create_node(NodeTemplate.EFFECT)
        graph.set_position(node_id, Point2D(10, 20))
        graph.set_position(node_id, Point2D(-5, 7))

        assert graph.get_position(node_id) == Point2D(-5, 7)

    def test_set_position_unknown_id_is_noop(self, graph):
        graph.set_position(new_node_id(), Point2D(1, 1))

        assert graph.positions == {}

    def test_positions_is_a_copy(self, graph):
        node_id = graph.create_node(NodeTemplate.EFFECT)
        graph.set_position(node_id, Point2D(1, 2))

        graph.positions.clear()

        assert graph.get_position(node_id) == Point2D(1, 2)


class TestConnect:
    """Tests for NodeGraph.connect."""

    def test_midi_to_midi_succeeds(self, graph):
        sound = graph.create_node(NodeTemplate.SOUND_SOURCE)
        midi = graph.create_node(NodeTemplate.MIDI_SOURCE)

        conn = graph.connect(
            port_of(graph, midi, "MIDI Out").id,
            port_of(graph, sound, "MIDI In").id,
        )

        assert graph.connections == [conn]
        assert graph.connection_to(port_of(graph, sound, "MIDI In").id) == conn

    def test_midi_to_audio_is_incompatible(self, graph):
        midi = graph.create_node(NodeTemplate.MIDI_SOURCE)
        mixer = graph.create_node(NodeTemplate.MIXER)

        with pytest.raises(IncompatibleKindError):
            graph.connect(
                port_of(graph, midi, "MIDI Out").id,
                port_of(graph, mixer, "In 1").id,
            )

        assert graph.connections == []

    def test_connect_twice_is_occupied(self, graph):
        effect = graph.create_node(NodeTemplate.EFFECT)
        mixer = graph.create_node(NodeTemplate.MIXER)
        out_id = port_of(graph, effect, "Audio Out").id
        in_id = port_of(graph, mixer, "In 1").id

        graph.connect(out_id, in_id)
        with pytest.raises(PortOccupiedError):
            graph.connect(out_id, in_id)

        assert len(graph.connections) == 1

    def test_occupied_input_is_not_replaced(self, graph):
        first = graph.create_node(NodeTemplate.EFFECT)
        second = graph.create_node(NodeTemplate.EFFECT)
        mixer = graph.create_node(NodeTemplate.MIXER)
        in_id = port_of(graph, mixer, "In 1").id

        original = graph.connect(port_of(graph, first, "Audio Out").id, in_id)
        with pytest.raises(PortOccupiedError) as excinfo:
            graph.connect(port_of(graph, second, "Audio Out").id, in_id)

        assert excinfo.value.existing == original
        assert graph.connection_to(in_id) == original

    def test_output_can_drive_many_inputs(self, graph):
        effect = graph.create_node(NodeTemplate.EFFECT)
        mixer = graph.create_node(NodeTemplate.MIXER)
        out_id = port_of(graph, effect, "Audio Out").id

        graph.connect(out_id, port_of(graph, mixer, "In 1").id)
        graph.connect(out_id, port_of(graph, mixer, "In 2").id)

        assert len(graph.connections_from(out_id)) == 2

    def test_unknown_ports_rejected(self, graph):
        effect = graph.create_node(NodeTemplate.EFFECT)
        out_id = port_of(graph, effect, "Audio Out").id

        with pytest.raises(UnknownIdentityError):
            graph.connect(out_id, new_node_id())
        with pytest.raises(UnknownIdentityError):
            graph.connect(new_node_id(), port_of(graph, effect, "Audio In").id)

    def test_wrong_direction_rejected(self, graph):
        a = graph.create_node(NodeTemplate.EFFECT)
        b = graph.create_node(NodeTemplate.EFFECT)

        # input used as source
        with pytest.raises(UnknownIdentityError):
            graph.connect(port_of(graph, a, "Audio In").id, port_of(graph, b, "Audio In").id)
        # output used as target
        with pytest.raises(UnknownIdentityError):
            graph.connect(port_of(graph, a, "Audio Out").id, port_of(graph, b, "Audio Out").id)

    def test_connect_iff_same_kind_and_free(self, graph):
        nodes = [graph.create_node(t) for t in NodeTemplate]
        outputs = [p for n in nodes for p in graph.get_node(n).outputs]
        inputs = [p for n in nodes for p in graph.get_node(n).inputs]

        for out in outputs:
            for inp in inputs:
                free = graph.connection_to(inp.id) is None
                should_succeed = out.kind == inp.kind and free
                try:
                    graph.connect(out.id, inp.id)
                    succeeded = True
                except (IncompatibleKindError, PortOccupiedError):
                    succeeded = False
                assert succeeded == should_succeed, (out.label, inp.label)

    def test_disconnect(self, graph):
        effect = graph.create_node(NodeTemplate.EFFECT)
        mixer = graph.create_node(NodeTemplate.MIXER)
        in_id = port_of(graph, mixer, "In 1").id
        conn = graph.connect(port_of(graph, effect, "Audio Out").id, in_id)

        assert graph.disconnect(in_id) == conn
        assert graph.connections == []
        assert graph.disconnect(in_id) is None

    def test_missing_required_inputs(self, graph):
        effect = graph.create_node(NodeTemplate.EFFECT)
        mixer = graph.create_node(NodeTemplate.MIXER)

        assert [p.label for p in graph.missing_required_inputs(mixer)] == ["In 1", "In 2"]

        graph.connect(port_of(graph, effect, "Audio Out").id, port_of(graph, mixer, "In 2").id)

        assert [p.label for p in graph.missing_required_inputs(mixer)] == ["In 1"]
        assert graph.missing_required_inputs(new_node_id()) == []


class TestDeleteNode:
    """Tests for NodeGraph.delete_node."""

    def test_delete_removes_node_ports_and_position(self, graph):
        node_id = graph.create_node(NodeTemplate.SOUND_SOURCE)
        graph.set_position(node_id, Point2D(3, 4))
        port_ids = [p.id for p in graph.get_node(node_id).ports]

        removed = graph.delete_node(node_id)

        assert removed.id == node_id
        assert node_id not in graph
        assert graph.get_position(node_id) is None
        assert all(graph.get_port(pid) is None for pid in port_ids)

    def test_delete_removes_connections(self, graph):
        midi = graph.create_node(NodeTemplate.MIDI_SOURCE)
        sound = graph.create_node(NodeTemplate.SOUND_SOURCE)
        effect = graph.create_node(NodeTemplate.EFFECT)
        mixer = graph.create_node(NodeTemplate.MIXER)
        graph.connect(port_of(graph, midi, "MIDI Out").id, port_of(graph, sound, "MIDI In").id)
        graph.connect(port_of(graph, sound, "Audio Out").id, port_of(graph, effect, "Audio In").id)
        kept = graph.connect(port_of(graph, effect, "Audio Out").id, port_of(graph, mixer, "In 1").id)
        sound_ports = {p.id for p in graph.get_node(sound).ports}
        before = graph.node_count()

        graph.delete_node(sound)

        assert graph.node_count() == before - 1
        assert graph.connections == [kept]
        for conn in graph.connections:
            assert conn.output not in sound_ports and conn.input not in sound_ports

    def test_delete_frees_input_for_new_connection(self, graph):
        first = graph.create_node(NodeTemplate.EFFECT)
        second = graph.create_node(NodeTemplate.EFFECT)
        mixer = graph.create_node(NodeTemplate.MIXER)
        in_id = port_of(graph, mixer, "In 1").id
        graph.connect(port_of(graph, first, "Audio Out").id, in_id)

        graph.delete_node(first)

        graph.connect(port_of(graph, second, "Audio Out").id, in_id)
        assert len(graph.connections) == 1

    def test_delete_unknown_returns_none(self, graph):
        graph.create_node(NodeTemplate.EFFECT)

        assert graph.delete_node(new_node_id()) is None
        assert graph.node_count() == 1

    def test_every_connection_references_existing_ports(self, graph):
        nodes = [graph.create_node(t) for t in NodeTemplate for _ in range(2)]
        for node_id in nodes:
            for out in graph.get_node(node_id).outputs:
                for other in nodes:
                    for inp in graph.get_node(other).inputs:
                        if other != node_id and out.kind == inp.kind and graph.connection_to(inp.id) is None:
                            graph.connect(out.id, inp.id)

        for node_id in nodes[::3]:
            graph.delete_node(node_id)

        for conn in graph.connections:
            assert graph.get_port(conn.output) is not None
            assert graph.get_port(conn.input) is not None
            assert graph.get_port(conn.output).kind == graph.get_port(conn.input).kind

    def test_clear(self, graph):
        node_id = graph.create_node(NodeTemplate.EFFECT)
        graph.set_position(node_id, Point2D())

        graph.clear()

        assert len(graph) == 0
        assert graph.positions == {}
        assert graph.connections == []


class TestScenario:
    """Wiring a small graph end to end."""

    def test_midi_chain(self, graph):
        sound = graph.create_node(NodeTemplate.SOUND_SOURCE)
        midi = graph.create_node(NodeTemplate.MIDI_SOURCE)
        mixer = graph.create_node(NodeTemplate.MIXER)
        midi_out = port_of(graph, midi, "MIDI Out")

        graph.connect(midi_out.id, port_of(graph, sound, "MIDI In").id)

        with pytest.raises(IncompatibleKindError) as excinfo:
            graph.connect(midi_out.id, port_of(graph, mixer, "In 1").id)
        assert excinfo.value.output.kind is PortKind.MIDI
        assert excinfo.value.input.kind is PortKind.AUDIO
