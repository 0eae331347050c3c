"""
Viewport - Pan/zoom state and screen <-> graph coordinate mapping.

Screen positions relate to graph positions by

    screen = graph * zoom + pan

so pan is measured in screen units and zoom in screen pixels per graph
unit. Zooming is anchored: the graph point under the anchor stays put.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from harmonia.core.geometry import Point2D

logger = logging.getLogger(__name__)


# Scroll units -> exponent of the zoom factor
DEFAULT_ZOOM_SENSITIVITY = 0.002


@dataclass
class ViewportTransform:
    """Handles canvas pan and zoom transformations."""
    pan: Point2D = field(default_factory=Point2D)
    zoom: float = 1.0

    def __post_init__(self) -> None:
        if not _is_valid_zoom(self.zoom):
            raise ValueError(f"Zoom must be finite and positive, got {self.zoom}")

    def screen_to_graph(self, point: Point2D) -> Point2D:
        """Convert screen coordinates to graph coordinates."""
        return (point - self.pan) / self.zoom

    def graph_to_screen(self, point: Point2D) -> Point2D:
        """Convert graph coordinates to screen coordinates."""
        return point * self.zoom + self.pan

    def zoom_at(self, anchor: Point2D, factor: float) -> None:
        """
        Multiply zoom by factor, keeping the graph point under anchor fixed.

        Raises:
            ValueError: If factor is not finite and positive, or the
                resulting zoom would leave (0, inf). State is unchanged.
        """
        if not _is_valid_zoom(factor):
            raise ValueError(f"Zoom factor must be finite and positive, got {factor}")

        new_zoom = self.zoom * factor
        if not _is_valid_zoom(new_zoom):
            raise ValueError(f"Zoom factor {factor} would push zoom out of range")

        new_pan = anchor - (anchor - self.pan) * (new_zoom / self.zoom)
        self.zoom = new_zoom
        self.pan = new_pan

    def pan_by(self, delta: Point2D) -> None:
        """Shift the view by a screen-space delta."""
        self.pan = self.pan + delta

    def reset(self) -> None:
        self.pan = Point2D()
        self.zoom = 1.0


def _is_valid_zoom(value: float) -> bool:
    return math.isfinite(value) and value > 0.0


@dataclass
class ScrollInput:
    """
    Scroll deltas delivered to the canvas for one frame/event.

    Mouse wheels usually report raw deltas, touchpads smooth ones;
    both are combined when translated into zoom.
    """
    raw_delta: float = 0.0
    smooth_delta: float = 0.0

    @property
    def total(self) -> float:
        return self.raw_delta + self.smooth_delta

    def consume(self) -> None:
        """Zero the deltas so no later handler applies them again."""
        self.raw_delta = 0.0
        self.smooth_delta = 0.0


def scroll_zoom_factor(delta: float, sensitivity: float = DEFAULT_ZOOM_SENSITIVITY) -> float:
    """
    Convert a scroll delta to a multiplicative zoom factor.

    exp() keeps the factor strictly positive and makes opposite scrolls
    of equal size cancel out exactly.
    """
    return math.exp(delta * sensitivity)


def apply_scroll_zoom(
    viewport: ViewportTransform,
    scroll: ScrollInput,
    pointer: Point2D | None,
    pointer_over_canvas: bool,
    sensitivity: float = DEFAULT_ZOOM_SENSITIVITY,
) -> bool:
    """
    Translate scroll input into a zoom anchored at the pointer.

    Only acts while the pointer is over the canvas. When it acts, the
    scroll input is consumed, even if the resulting zoom had to be
    rejected.

    Returns:
        True if the scroll input was consumed.
    """
    if not pointer_over_canvas or pointer is None:
        return False

    delta = scroll.total
    if delta == 0.0:
        return False

    try:
        viewport.zoom_at(pointer, scroll_zoom_factor(delta, sensitivity))
    except (ValueError, OverflowError) as e:
        logger.warning("Ignoring scroll zoom (delta=%s): %s", delta, e)

    scroll.consume()
    return True
