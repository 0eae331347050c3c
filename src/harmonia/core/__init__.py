"""
Core module - Graph model, viewport math and node creation.

This module provides the fundamental building blocks for Harmonia:
- Port Types: MIDI/Audio port kinds
- Node Templates: The creatable node kinds and their ports
- Graph: Nodes, connections and node positions
- Viewport: Pan/zoom and coordinate mapping
- Context Menu: Right-click node creation state machine
"""

from harmonia.core.context_menu import (
    InteractionController,
    MenuClosed,
    MenuEntries,
    MenuOpen,
    MenuState,
)

from harmonia.core.geometry import (
    Point2D,
    Rect2D,
)

from harmonia.core.graph import (
    Connection,
    GraphError,
    IncompatibleKindError,
    Node,
    NodeGraph,
    PortOccupiedError,
    UnknownIdentityError,
)

from harmonia.core.grid import dot_grid_positions

from harmonia.core.node_templates import (
    InputDefinition,
    NodeData,
    NodeTemplate,
    OutputDefinition,
    TemplateDefinition,
    all_templates,
    declare_ports,
    display_label,
    find_templates,
    template_for_label,
)

from harmonia.core.port_types import (
    InputPolicy,
    PortKind,
)

from harmonia.core.ports import (
    ConnectionId,
    InputPort,
    NodeId,
    OutputPort,
    Port,
    PortDirection,
    PortId,
    new_node_id,
)

from harmonia.core.settings import EditorSettings

from harmonia.core.viewport import (
    ScrollInput,
    ViewportTransform,
    apply_scroll_zoom,
    scroll_zoom_factor,
)


__all__ = [
    # context_menu.py
    "InteractionController",
    "MenuClosed",
    "MenuEntries",
    "MenuOpen",
    "MenuState",
    # geometry.py
    "Point2D",
    "Rect2D",
    # graph.py
    "Connection",
    "GraphError",
    "IncompatibleKindError",
    "Node",
    "NodeGraph",
    "PortOccupiedError",
    "UnknownIdentityError",
    # grid.py
    "dot_grid_positions",
    # node_templates.py
    "InputDefinition",
    "NodeData",
    "NodeTemplate",
    "OutputDefinition",
    "TemplateDefinition",
    "all_templates",
    "declare_ports",
    "display_label",
    "find_templates",
    "template_for_label",
    # port_types.py
    "InputPolicy",
    "PortKind",
    # ports.py
    "ConnectionId",
    "InputPort",
    "NodeId",
    "OutputPort",
    "Port",
    "PortDirection",
    "PortId",
    "new_node_id",
    # settings.py
    "EditorSettings",
    # viewport.py
    "ScrollInput",
    "ViewportTransform",
    "apply_scroll_zoom",
    "scroll_zoom_factor",
]
