"""
Editor Settings - Tunable constants of the node editor.

Defaults match the built-in behaviour; the main window can override
them from persisted Qt settings.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from harmonia.core.grid import GRID_SIZE, MAX_CELLS, MIN_SCREEN_SPACING
from harmonia.core.viewport import DEFAULT_ZOOM_SENSITIVITY


@dataclass
class EditorSettings:
    """
    Editor-level settings.

    These settings affect the canvas and window, never the graph.
    """
    # Viewport
    zoom_sensitivity: float = DEFAULT_ZOOM_SENSITIVITY

    # Background grid
    grid_size: float = GRID_SIZE
    grid_min_spacing: float = MIN_SCREEN_SPACING
    grid_max_cells: int = MAX_CELLS
    grid_dot_radius: float = 1.0

    # Window
    window_width: int = 1200
    window_height: int = 800

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary for serialization."""
        return {
            "zoom_sensitivity": self.zoom_sensitivity,
            "grid_size": self.grid_size,
            "grid_min_spacing": self.grid_min_spacing,
            "grid_max_cells": self.grid_max_cells,
            "grid_dot_radius": self.grid_dot_radius,
            "window_width": self.window_width,
            "window_height": self.window_height,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EditorSettings:
        """
        Create settings from dictionary.

        Missing keys fall back to defaults. Values are coerced, since
        QSettings may hand them back as strings.

        Raises:
            ValueError: If a value cannot be coerced or is out of range.
        """
        defaults = cls()
        settings = cls(
            zoom_sensitivity=float(data.get("zoom_sensitivity", defaults.zoom_sensitivity)),
            grid_size=float(data.get("grid_size", defaults.grid_size)),
            grid_min_spacing=float(data.get("grid_min_spacing", defaults.grid_min_spacing)),
            grid_max_cells=int(data.get("grid_max_cells", defaults.grid_max_cells)),
            grid_dot_radius=float(data.get("grid_dot_radius", defaults.grid_dot_radius)),
            window_width=int(data.get("window_width", defaults.window_width)),
            window_height=int(data.get("window_height", defaults.window_height)),
        )
        for name in ("zoom_sensitivity", "grid_size", "grid_min_spacing", "grid_dot_radius"):
            value = getattr(settings, name)
            if not (math.isfinite(value) and value > 0):
                raise ValueError(f"{name} must be finite and positive, got {value}")
        for name in ("grid_max_cells", "window_width", "window_height"):
            if getattr(settings, name) <= 0:
                raise ValueError(f"{name} must be positive")
        return settings
