"""
Node Graph Canvas - QPainter-based node graph editor widget.

This module provides the canvas widget that draws the NodeGraph under
the current ViewportTransform and lets the user drag nodes, pan, zoom
with the wheel and drag wires between ports. Node creation is left to
the owner via context_menu_requested.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from PySide6.QtWidgets import QWidget
from PySide6.QtCore import Qt, Signal, QPointF, QRectF
from PySide6.QtGui import (
    QPainter,
    QPen,
    QColor,
    QFont,
    QPainterPath,
    QMouseEvent,
    QWheelEvent,
    QKeyEvent,
    QPaintEvent,
)

from harmonia.core.geometry import Point2D, Rect2D
from harmonia.core.graph import GraphError
from harmonia.core.grid import dot_grid_positions
from harmonia.core.ports import InputPort, OutputPort, Port
from harmonia.core.settings import EditorSettings
from harmonia.core.viewport import ScrollInput, apply_scroll_zoom

if TYPE_CHECKING:
    from harmonia.core.graph import Node, NodeGraph
    from harmonia.core.ports import NodeId
    from harmonia.core.viewport import ViewportTransform

logger = logging.getLogger(__name__)


DEFAULT_HEADER_COLOR = QColor("#4a5568")
MISSING_INPUT_COLOR = QColor("#ef4444")


class NodeGraphCanvas(QWidget):
    """
    Canvas for displaying and editing a node graph.

    Signals:
        node_selected: Emitted when a node is selected (node_id or None)
        node_deleted: Emitted after the user deletes a node (node_id)
        connection_created: Emitted after a wire is added (Connection)
        connection_rejected: Emitted when the graph refuses a wire (message)
        context_menu_requested: Emitted on right click (screen x, y)
    """

    # Signals
    node_selected = Signal(object)  # NodeId or None
    node_deleted = Signal(object)  # NodeId
    connection_created = Signal(object)  # Connection
    connection_rejected = Signal(str)
    context_menu_requested = Signal(float, float)  # screen x, y

    # Layout constants (graph units)
    NODE_HEADER_HEIGHT = 28
    NODE_WIDTH = 180
    NODE_PADDING = 10
    SOCKET_RADIUS = 6
    SOCKET_SPACING = 24

    def __init__(
        self,
        graph: NodeGraph,
        viewport: ViewportTransform,
        settings: EditorSettings | None = None,
        parent: QWidget | None = None,
    ):
        super().__init__(parent)

        # Enable mouse tracking for hover effects
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        self._graph = graph
        self._viewport = viewport
        self._settings = settings or EditorSettings()

        # Interaction state
        self._selected_node: NodeId | None = None
        self._hovered_node: NodeId | None = None

        # Drag state
        self._is_panning = False
        self._is_dragging_node = False
        self._drag_last_pos: QPointF | None = None
        self._wire_start: Port | None = None
        self._wire_end_pos: Point2D | None = None

        # Styling
        self._background_color = QColor("#1a1a2e")
        self._grid_color = QColor(255, 255, 255, 15)
        self._selection_color = QColor("#4a9eff")
        self._wire_color = QColor("#888888")

        # Fonts
        self._title_font = QFont("Inter", 11, QFont.Weight.Bold)
        self._socket_font = QFont("Inter", 9)

        self.setMinimumSize(400, 300)

    # --- Public API ---

    @property
    def is_interacting(self) -> bool:
        """True while a pan, node drag or wire drag is in progress."""
        return self._is_panning or self._is_dragging_node or self._wire_start is not None

    @property
    def selected_node(self) -> NodeId | None:
        return self._selected_node

    def select_node(self, node_id: NodeId | None) -> None:
        """Select a node (or deselect if None)."""
        if node_id is not None and node_id not in self._graph:
            node_id = None
        self._selected_node = node_id
        self.node_selected.emit(node_id)
        self.update()

    def delete_selected_node(self) -> None:
        """Delete the selected node and its wires."""
        node_id = self._selected_node
        if node_id is None:
            return
        self._selected_node = None
        if self._graph.delete_node(node_id) is not None:
            self.node_deleted.emit(node_id)
        self.node_selected.emit(None)
        self.update()

    # --- Rendering ---

    def paintEvent(self, event: QPaintEvent) -> None:
        """Render the canvas."""
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        painter.fillRect(self.rect(), self._background_color)

        self._draw_grid(painter)

        for conn in self._graph.connections:
            source = self._graph.get_port(conn.output)
            target = self._graph.get_port(conn.input)
            if source is None or target is None:
                continue
            start = self._viewport.graph_to_screen(self._socket_position(source))
            end = self._viewport.graph_to_screen(self._socket_position(target))
            self._draw_bezier_connection(painter, start, end, QColor(source.kind.display_color()))

        if self._wire_start is not None and self._wire_end_pos is not None:
            self._draw_temp_connection(painter)

        for node in self._graph.nodes():
            self._draw_node(painter, node)

        painter.end()

    def _draw_grid(self, painter: QPainter) -> None:
        """Draw the background dot grid."""
        rect = Rect2D.from_size(0, 0, self.width(), self.height())
        dots = dot_grid_positions(
            rect,
            self._viewport.pan,
            self._viewport.zoom,
            grid_size=self._settings.grid_size,
            min_spacing=self._settings.grid_min_spacing,
            max_cells=self._settings.grid_max_cells,
        )
        if len(dots) == 0:
            return

        radius = self._settings.grid_dot_radius
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(self._grid_color)
        for x, y in dots:
            painter.drawEllipse(QPointF(x, y), radius, radius)

    def _draw_node(self, painter: QPainter, node: Node) -> None:
        """Draw a single node."""
        position = self._graph.get_position(node.id)
        if position is None:
            return

        painter.save()  # Isolate painter state per node

        zoom = self._viewport.zoom
        screen = self._viewport.graph_to_screen(position)
        sx, sy = screen.x, screen.y
        sw = self.NODE_WIDTH * zoom
        sh = self._node_height(node) * zoom
        header_h = self.NODE_HEADER_HEIGHT * zoom

        # Node body - rounded rect
        path = QPainterPath()
        path.addRoundedRect(QRectF(sx, sy, sw, sh), 8, 8)
        painter.fillPath(path, QColor("#2d2d3d"))

        # Header - clip the rounded body to the header strip
        header_path = QPainterPath()
        header_path.addRect(QRectF(sx, sy, sw, header_h))
        header_color = (
            QColor(node.template.definition.color) if node.template else DEFAULT_HEADER_COLOR
        )
        painter.fillPath(path.intersected(header_path), header_color)

        # Border
        if node.id == self._selected_node:
            pen = QPen(self._selection_color, 2)
        elif node.id == self._hovered_node:
            pen = QPen(QColor("#6b7280"), 2)
        else:
            pen = QPen(QColor("#3f3f4f"), 1)
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawPath(path)

        # Title
        painter.setPen(Qt.GlobalColor.white)
        title_font = QFont(self._title_font)
        title_font.setPointSizeF(max(title_font.pointSizeF() * zoom, 1.0))
        painter.setFont(title_font)
        painter.drawText(QRectF(sx + 10 * zoom, sy, sw - 20 * zoom, header_h),
                         Qt.AlignmentFlag.AlignVCenter, node.title)

        # Sockets
        socket_font = QFont(self._socket_font)
        socket_font.setPointSizeF(max(socket_font.pointSizeF() * zoom, 1.0))
        painter.setFont(socket_font)

        socket_radius = self.SOCKET_RADIUS * zoom
        socket_spacing = self.SOCKET_SPACING * zoom
        missing = {inp.id for inp in self._graph.missing_required_inputs(node.id)}

        for port in node.ports:
            center = self._viewport.graph_to_screen(self._socket_position(port))
            is_input = isinstance(port, InputPort)

            painter.setBrush(QColor(port.kind.display_color()))
            if port.id in missing:
                painter.setPen(QPen(MISSING_INPUT_COLOR, 2))
            else:
                painter.setPen(QPen(Qt.GlobalColor.white, 1))
            painter.drawEllipse(QPointF(center.x, center.y), socket_radius, socket_radius)

            painter.setPen(QColor("#cccccc"))
            if is_input:
                label_rect = QRectF(center.x + socket_radius + 4, center.y - socket_spacing / 2,
                                    sw / 2, socket_spacing)
                painter.drawText(label_rect, Qt.AlignmentFlag.AlignVCenter, port.label)
            else:
                label_rect = QRectF(sx + sw / 2, center.y - socket_spacing / 2,
                                    sw / 2 - socket_radius - 4, socket_spacing)
                painter.drawText(label_rect,
                                 Qt.AlignmentFlag.AlignVCenter | Qt.AlignmentFlag.AlignRight,
                                 port.label)

        painter.restore()

    def _draw_temp_connection(self, painter: QPainter) -> None:
        """Draw the wire being dragged."""
        start = self._viewport.graph_to_screen(self._socket_position(self._wire_start))
        end = self._wire_end_pos
        if isinstance(self._wire_start, InputPort):
            # Dragging from an input: draw the curve output -> input
            start, end = end, start
        self._draw_bezier_connection(painter, start, end, self._selection_color)

    def _draw_bezier_connection(
        self,
        painter: QPainter,
        start: Point2D,
        end: Point2D,
        color: QColor,
        width: int = 2,
    ) -> None:
        """Draw a bezier curve connection."""
        path = QPainterPath()
        path.moveTo(start.x, start.y)

        dx = abs(end.x - start.x) * 0.5
        dx = max(dx, 50 * self._viewport.zoom)

        path.cubicTo(start.x + dx, start.y, end.x - dx, end.y, end.x, end.y)

        painter.setPen(QPen(color, width))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawPath(path)

    # --- Helpers ---

    def _node_height(self, node: Node) -> float:
        """Calculate node height (graph units) based on sockets."""
        num_sockets = max(len(node.inputs), len(node.outputs), 1)
        return self.NODE_HEADER_HEIGHT + self.NODE_PADDING * 2 + num_sockets * self.SOCKET_SPACING

    def _socket_position(self, port: Port) -> Point2D:
        """Get the graph-space position of a socket."""
        origin = self._graph.get_position(port.node_id) or Point2D()
        x = origin.x + (self.NODE_WIDTH if isinstance(port, OutputPort) else 0)
        y = origin.y + self.NODE_HEADER_HEIGHT + self.NODE_PADDING + 12 + port.index * self.SOCKET_SPACING
        return Point2D(x, y)

    def _node_at(self, point: Point2D) -> NodeId | None:
        """Get the node at graph coordinates (topmost)."""
        for node in reversed(list(self._graph.nodes())):
            position = self._graph.get_position(node.id)
            if position is None:
                continue
            bounds = Rect2D.from_size(position.x, position.y, self.NODE_WIDTH, self._node_height(node))
            if bounds.contains(point):
                return node.id
        return None

    def _socket_at(self, point: Point2D) -> Port | None:
        """Get the socket at graph coordinates."""
        hit_radius = self.SOCKET_RADIUS * 1.5
        for node in self._graph.nodes():
            if self._graph.get_position(node.id) is None:
                continue
            for port in node.ports:
                center = self._socket_position(port)
                if math.hypot(point.x - center.x, point.y - center.y) < hit_radius:
                    return port
        return None

    def _finish_wire(self, target: Port | None) -> None:
        """Try to turn the dragged wire into a connection."""
        start = self._wire_start
        if target is None or start is None or target.node_id == start.node_id:
            return

        if isinstance(start, OutputPort) and isinstance(target, InputPort):
            output, input = start, target
        elif isinstance(start, InputPort) and isinstance(target, OutputPort):
            output, input = target, start
        else:
            return

        try:
            connection = self._graph.connect(output.id, input.id)
        except GraphError as e:
            logger.warning("Connection rejected: %s", e)
            self.connection_rejected.emit(str(e))
            return
        self.connection_created.emit(connection)

    # --- Mouse Events ---

    def mousePressEvent(self, event: QMouseEvent) -> None:
        """Handle mouse press."""
        pos = event.position()
        screen = Point2D(pos.x(), pos.y())
        point = self._viewport.screen_to_graph(screen)

        # Middle mouse for panning
        if event.button() == Qt.MouseButton.MiddleButton:
            self._is_panning = True
            self._drag_last_pos = pos
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
            return

        # Right click on empty canvas for the creation menu
        if event.button() == Qt.MouseButton.RightButton:
            if self._node_at(point) is None and self._socket_at(point) is None:
                self.context_menu_requested.emit(screen.x, screen.y)
            return

        if event.button() != Qt.MouseButton.LeftButton:
            return

        socket = self._socket_at(point)
        if socket is not None:
            # Grabbing a wired input pulls the wire off and re-drags it from its output
            if isinstance(socket, InputPort):
                detached = self._graph.disconnect(socket.id)
                if detached is not None:
                    socket = self._graph.get_port(detached.output)
            self._wire_start = socket
            self._wire_end_pos = screen
            self.update()
            return

        node_id = self._node_at(point)
        if node_id is not None:
            if node_id != self._selected_node:
                self.select_node(node_id)
            self._is_dragging_node = True
            self._drag_last_pos = pos
            self.update()
            return

        # Click on empty space
        if self._selected_node is not None:
            self.select_node(None)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        """Handle mouse move."""
        pos = event.position()

        if self._is_panning and self._drag_last_pos is not None:
            self._viewport.pan_by(Point2D(pos.x() - self._drag_last_pos.x(),
                                          pos.y() - self._drag_last_pos.y()))
            self._drag_last_pos = pos
            self.update()
            return

        if self._is_dragging_node and self._drag_last_pos is not None and self._selected_node:
            delta = Point2D(pos.x() - self._drag_last_pos.x(),
                            pos.y() - self._drag_last_pos.y()) / self._viewport.zoom
            current = self._graph.get_position(self._selected_node)
            if current is not None:
                self._graph.set_position(self._selected_node, current + delta)
            self._drag_last_pos = pos
            self.update()
            return

        if self._wire_start is not None:
            self._wire_end_pos = Point2D(pos.x(), pos.y())
            self.update()
            return

        # Hover detection
        hovered = self._node_at(self._viewport.screen_to_graph(Point2D(pos.x(), pos.y())))
        if hovered != self._hovered_node:
            self._hovered_node = hovered
            self.update()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        """Handle mouse release."""
        pos = event.position()

        if self._is_panning and event.button() == Qt.MouseButton.MiddleButton:
            self._is_panning = False
            self.setCursor(Qt.CursorShape.ArrowCursor)

        if event.button() == Qt.MouseButton.LeftButton:
            self._is_dragging_node = False
            if self._wire_start is not None:
                point = self._viewport.screen_to_graph(Point2D(pos.x(), pos.y()))
                self._finish_wire(self._socket_at(point))
                self._wire_start = None
                self._wire_end_pos = None

        if not self._is_panning and not self._is_dragging_node:
            self._drag_last_pos = None
        self.update()

    def wheelEvent(self, event: QWheelEvent) -> None:
        """Zoom around the pointer; the event is consumed when applied."""
        pos = event.position()
        pixel = event.pixelDelta()
        if pixel.isNull():
            scroll = ScrollInput(raw_delta=float(event.angleDelta().y()))
        else:
            scroll = ScrollInput(smooth_delta=float(pixel.y()))

        consumed = apply_scroll_zoom(
            self._viewport,
            scroll,
            Point2D(pos.x(), pos.y()),
            self.rect().contains(pos.toPoint()),
            self._settings.zoom_sensitivity,
        )
        if consumed:
            event.accept()
            self.update()
        else:
            event.ignore()

    def keyPressEvent(self, event: QKeyEvent) -> None:
        """Handle key press."""
        if event.key() in (Qt.Key.Key_Delete, Qt.Key.Key_Backspace):
            self.delete_selected_node()
        elif event.key() == Qt.Key.Key_Escape:
            # Cancel current wire drag
            if self._wire_start is not None:
                self._wire_start = None
                self._wire_end_pos = None
                self.update()

        super().keyPressEvent(event)
