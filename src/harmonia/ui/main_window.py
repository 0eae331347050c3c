"""
Main Window - The primary application window.

This module provides the main window for Harmonia, including the menu
bar, the node graph canvas and the status bar, and wires the canvas'
right click to the node-creation context menu.
"""

from __future__ import annotations

import logging

from PySide6.QtWidgets import (
    QMainWindow,
    QWidget,
    QMenu,
    QLabel,
)
from PySide6.QtCore import QPoint, QSettings
from PySide6.QtGui import QAction, QKeySequence

from harmonia.core.context_menu import CANCEL_ENTRY, PROPERTIES_ENTRY, InteractionController
from harmonia.core.geometry import Point2D
from harmonia.core.graph import NodeGraph
from harmonia.core.settings import EditorSettings
from harmonia.core.viewport import ViewportTransform
from harmonia.ui.node_graph import NodeGraphCanvas

logger = logging.getLogger(__name__)


ENGINE_STATUS = "Harmonia Engine Status: Ready"


def load_editor_settings(qsettings: QSettings) -> EditorSettings:
    """Read EditorSettings overrides from the "editor" settings group."""
    qsettings.beginGroup("editor")
    try:
        data = {key: qsettings.value(key) for key in qsettings.childKeys()}
    finally:
        qsettings.endGroup()

    try:
        return EditorSettings.from_dict(data)
    except (TypeError, ValueError) as e:
        logger.warning("Invalid editor settings, using defaults: %s", e)
        return EditorSettings()


class MainWindow(QMainWindow):
    """
    The main application window for Harmonia.

    Contains:
    - Menu bar with File, Edit, View menus
    - Central node graph canvas
    - Status bar with engine status and node count
    """

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)

        self.setWindowTitle("Harmonia DAW")

        # Initialize settings
        self._settings = QSettings("Harmonia", "Harmonia")
        self._editor_settings = load_editor_settings(self._settings)
        self.resize(self._editor_settings.window_width, self._editor_settings.window_height)

        # Core model
        self._graph = NodeGraph("Workspace")
        self._viewport = ViewportTransform()
        self._controller = InteractionController(self._graph, self._viewport)

        # Setup UI components
        self._setup_menu_bar()
        self._setup_central_widget()
        self._setup_status_bar()

        self._restore_state()

    @property
    def graph(self) -> NodeGraph:
        return self._graph

    @property
    def viewport(self) -> ViewportTransform:
        return self._viewport

    def _setup_menu_bar(self) -> None:
        """Create and configure the menu bar."""
        menubar = self.menuBar()

        # File menu
        file_menu = menubar.addMenu("&File")

        new_action = QAction("&New Project", self)
        new_action.setShortcut(QKeySequence.StandardKey.New)
        new_action.triggered.connect(self._on_new_project)
        file_menu.addAction(new_action)

        open_action = QAction("&Open Project", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self._on_open_project)
        file_menu.addAction(open_action)

        file_menu.addSeparator()

        exit_action = QAction("E&xit", self)
        exit_action.setShortcut(QKeySequence.StandardKey.Quit)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        # Edit menu
        edit_menu = menubar.addMenu("&Edit")

        undo_action = QAction("&Undo", self)
        undo_action.setShortcut(QKeySequence.StandardKey.Undo)
        undo_action.triggered.connect(self._on_undo)
        edit_menu.addAction(undo_action)

        redo_action = QAction("&Redo", self)
        redo_action.setShortcut(QKeySequence.StandardKey.Redo)
        redo_action.triggered.connect(self._on_redo)
        edit_menu.addAction(redo_action)

        # View menu
        view_menu = menubar.addMenu("&View")

        zoom_in_action = QAction("Zoom &In", self)
        zoom_in_action.triggered.connect(self._on_zoom_in)
        view_menu.addAction(zoom_in_action)

        zoom_out_action = QAction("Zoom &Out", self)
        zoom_out_action.triggered.connect(self._on_zoom_out)
        view_menu.addAction(zoom_out_action)

    def _setup_central_widget(self) -> None:
        """Create the node graph canvas."""
        self._node_graph_canvas = NodeGraphCanvas(
            self._graph, self._viewport, self._editor_settings
        )
        self._node_graph_canvas.context_menu_requested.connect(self._on_canvas_context_menu)
        self._node_graph_canvas.node_selected.connect(self._on_node_selected)
        self._node_graph_canvas.node_deleted.connect(self._on_graph_changed)
        self._node_graph_canvas.connection_created.connect(self._on_graph_changed)
        self._node_graph_canvas.connection_rejected.connect(self._on_connection_rejected)

        self.setCentralWidget(self._node_graph_canvas)

    def _setup_status_bar(self) -> None:
        """Create and configure the status bar."""
        status_bar = self.statusBar()

        self._status_engine = QLabel(ENGINE_STATUS)
        status_bar.addWidget(self._status_engine)

        self._status_nodes = QLabel()
        status_bar.addPermanentWidget(self._status_nodes)
        self._update_node_count()

    def _update_node_count(self) -> None:
        self._status_nodes.setText(f"Nodes: {self._graph.node_count()}")

    def _restore_state(self) -> None:
        """Restore window geometry from settings."""
        geometry = self._settings.value("geometry")
        if geometry:
            self.restoreGeometry(geometry)

    def closeEvent(self, event) -> None:
        """Save window geometry before closing."""
        self._settings.setValue("geometry", self.saveGeometry())
        super().closeEvent(event)

    # --- Context menu ---

    def _on_canvas_context_menu(self, x: float, y: float) -> None:
        """Open the node creation menu at a canvas position."""
        opened = self._controller.secondary_click(
            Point2D(x, y), pointer_busy=self._node_graph_canvas.is_interacting
        )
        if not opened:
            return

        entries = self._controller.menu_entries()
        menu = QMenu(self)
        menu.setMinimumWidth(120)

        new_menu = menu.addMenu(entries.new_title)
        templates_by_value = {}
        for label, template in entries.templates:
            action = new_menu.addAction(label)
            action.setData(template.value)
            templates_by_value[template.value] = template

        menu.addSeparator()
        for name in entries.actions:
            menu.addAction(name).setData(name)

        global_pos = self._node_graph_canvas.mapToGlobal(QPoint(int(x), int(y)))
        chosen = menu.exec(global_pos)
        choice = chosen.data() if chosen is not None else None

        if choice in templates_by_value:
            self._controller.choose_template(templates_by_value[choice])
            self._node_graph_canvas.update()
            self._update_node_count()
            self.statusBar().showMessage(f"Added {chosen.text()} node", 2000)
        elif choice == PROPERTIES_ENTRY:
            self._controller.choose_properties()
        elif choice == CANCEL_ENTRY:
            self._controller.cancel()
        else:
            # Dismissed by clicking elsewhere or pressing Escape
            self._controller.click_outside()

    # --- Canvas signal handlers ---

    def _on_graph_changed(self, *_args) -> None:
        self._update_node_count()

    def _on_node_selected(self, node_id) -> None:
        node = self._graph.get_node(node_id) if node_id is not None else None
        if node is None:
            self.statusBar().clearMessage()
        else:
            self.statusBar().showMessage(f"Selected: {node.title}")

    def _on_connection_rejected(self, message: str) -> None:
        self.statusBar().showMessage(message, 3000)

    # --- Menu action handlers ---

    def _on_new_project(self) -> None:
        # No project model yet
        pass

    def _on_open_project(self) -> None:
        # No project model yet
        pass

    def _on_undo(self) -> None:
        pass

    def _on_redo(self) -> None:
        pass

    def _on_zoom_in(self) -> None:
        pass

    def _on_zoom_out(self) -> None:
        pass
