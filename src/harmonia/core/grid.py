"""
Dot Grid - Screen positions of the background grid dots.

Stateless: given the visible canvas rectangle and the viewport, returns
the dots to draw. Nothing is returned when the dots would be too close
together to see, or when there would be too many of them.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from harmonia.core.geometry import Point2D, Rect2D


GRID_SIZE = 20.0           # Graph units between dots
MIN_SCREEN_SPACING = 4.0   # Pixels; below this the grid is skipped
MAX_CELLS = 100_000


def dot_grid_positions(
    rect: Rect2D,
    pan: Point2D,
    zoom: float,
    grid_size: float = GRID_SIZE,
    min_spacing: float = MIN_SCREEN_SPACING,
    max_cells: int = MAX_CELLS,
) -> NDArray[np.float64]:
    """
    Compute grid dot positions inside rect.

    Args:
        rect: Visible canvas area in screen coordinates
        pan: Viewport pan (screen units)
        zoom: Viewport zoom (screen pixels per graph unit)
        grid_size: Dot spacing in graph units
        min_spacing: Smallest on-screen spacing worth drawing
        max_cells: Upper bound on the number of grid cells considered

    Returns:
        Array of shape (N, 2) with screen x, y per dot.
    """
    empty = np.empty((0, 2), dtype=np.float64)

    spacing = grid_size * zoom
    if spacing < min_spacing:
        return empty

    start_col = math.floor((rect.min.x - pan.x) / spacing)
    end_col = math.ceil((rect.max.x - pan.x) / spacing)
    start_row = math.floor((rect.min.y - pan.y) / spacing)
    end_row = math.ceil((rect.max.y - pan.y) / spacing)

    if (end_col - start_col) * (end_row - start_row) > max_cells:
        return empty

    xs = pan.x + np.arange(start_col, end_col + 1, dtype=np.float64) * spacing
    ys = pan.y + np.arange(start_row, end_row + 1, dtype=np.float64) * spacing
    grid_x, grid_y = np.meshgrid(xs, ys)
    points = np.column_stack((grid_x.ravel(), grid_y.ravel()))

    inside = (
        (points[:, 0] >= rect.min.x) & (points[:, 0] <= rect.max.x)
        & (points[:, 1] >= rect.min.y) & (points[:, 1] <= rect.max.y)
    )
    return points[inside]
