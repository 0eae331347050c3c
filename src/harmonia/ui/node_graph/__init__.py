"""
Node Graph UI components.

This package provides the visual node graph editor.
"""

from harmonia.ui.node_graph.canvas import (
    NodeGraphCanvas,
    MISSING_INPUT_COLOR,
)

__all__ = [
    "NodeGraphCanvas",
    "MISSING_INPUT_COLOR",
]
