"""
Context Menu - Right-click node creation as an explicit state machine.

States:
    MenuClosed           no menu showing
    MenuOpen(anchor)     creation menu open at a screen position

Transitions:
    Closed --secondary_click--> Open(click position)
    Open   --choose_template--> Closed  (creates a node at the anchor)
    Open   --cancel / choose_properties / click_outside--> Closed

While open, further secondary clicks are ignored; the menu has to close
before it can open somewhere else.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Union

from harmonia.core.geometry import Point2D
from harmonia.core.graph import NodeGraph
from harmonia.core.node_templates import NodeTemplate, all_templates, display_label
from harmonia.core.ports import NodeId
from harmonia.core.viewport import ViewportTransform

logger = logging.getLogger(__name__)


NEW_SUBMENU_TITLE = "New"
PROPERTIES_ENTRY = "Properties"
CANCEL_ENTRY = "Cancel"


@dataclass(frozen=True)
class MenuClosed:
    """No context menu is showing."""


@dataclass(frozen=True)
class MenuOpen:
    """The creation menu is open at a screen-space anchor."""
    anchor: Point2D


MenuState = Union[MenuClosed, MenuOpen]


@dataclass(frozen=True)
class MenuEntries:
    """What the context menu offers, in display order."""
    new_title: str = NEW_SUBMENU_TITLE
    templates: tuple[tuple[str, NodeTemplate], ...] = field(default_factory=tuple)
    actions: tuple[str, ...] = (PROPERTIES_ENTRY, CANCEL_ENTRY)


class InteractionController:
    """
    Drives the node-creation context menu.

    Reaches the graph only through create_node/set_position and reads
    the viewport only to convert the menu anchor into graph space.
    """

    def __init__(self, graph: NodeGraph, viewport: ViewportTransform):
        self._graph = graph
        self._viewport = viewport
        self._state: MenuState = MenuClosed()

    @property
    def state(self) -> MenuState:
        return self._state

    @property
    def is_open(self) -> bool:
        return isinstance(self._state, MenuOpen)

    @property
    def anchor(self) -> Point2D | None:
        """Screen position the menu is anchored at, or None when closed."""
        return self._state.anchor if isinstance(self._state, MenuOpen) else None

    def menu_entries(self) -> MenuEntries:
        return MenuEntries(
            templates=tuple((display_label(t), t) for t in all_templates()),
        )

    # --- Events ---

    def secondary_click(self, position: Point2D, pointer_busy: bool = False) -> bool:
        """
        Handle a right click on the canvas.

        Opens the menu at position unless it is already open or the
        drawing widget is using the pointer (e.g. mid-drag).

        Returns:
            True if the menu opened.
        """
        if self.is_open or pointer_busy:
            return False
        self._state = MenuOpen(position)
        return True

    def choose_template(self, template: NodeTemplate) -> NodeId | None:
        """
        Create a node from the chosen template at the menu anchor.

        The anchor is converted with the viewport as it is now, so a zoom
        that happened while the menu was open is taken into account.

        Returns:
            The new node's id, or None if the menu was not open.
        """
        anchor = self.anchor
        if anchor is None:
            logger.warning("Ignoring %s selection: context menu is closed", template.name)
            return None

        graph_position = self._viewport.screen_to_graph(anchor)
        node_id = self._graph.create_node(template)
        self._graph.set_position(node_id, graph_position)
        self._state = MenuClosed()

        logger.debug("Spawned %s at %s", display_label(template), graph_position)
        return node_id

    def cancel(self) -> None:
        self._close()

    def choose_properties(self) -> None:
        # Properties has no panel yet; choosing it just closes the menu.
        self._close()

    def click_outside(self) -> None:
        self._close()

    def _close(self) -> None:
        self._state = MenuClosed()
