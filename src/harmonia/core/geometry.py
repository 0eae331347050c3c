"""
Geometry - Small 2D value types shared by the graph and the viewport.

Graph-space and screen-space coordinates both use Point2D; which space
a value lives in is a matter of where it came from, not of its type.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Point2D:
    """2D point or vector."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Point2D) -> Point2D:
        return Point2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point2D) -> Point2D:
        return Point2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Point2D:
        return Point2D(self.x * scalar, self.y * scalar)

    def __truediv__(self, scalar: float) -> Point2D:
        return Point2D(self.x / scalar, self.y / scalar)

    def is_close(self, other: Point2D, tolerance: float = 1e-6) -> bool:
        """Check if two points are equal within a tolerance (per axis)."""
        return abs(self.x - other.x) <= tolerance and abs(self.y - other.y) <= tolerance


@dataclass(frozen=True)
class Rect2D:
    """Axis-aligned rectangle given by its minimum and maximum corners."""
    min: Point2D
    max: Point2D

    @classmethod
    def from_size(cls, x: float, y: float, width: float, height: float) -> Rect2D:
        return cls(Point2D(x, y), Point2D(x + width, y + height))

    @property
    def width(self) -> float:
        return self.max.x - self.min.x

    @property
    def height(self) -> float:
        return self.max.y - self.min.y

    def contains(self, point: Point2D) -> bool:
        """Check if a point lies inside the rectangle (edges included)."""
        return (
            self.min.x <= point.x <= self.max.x
            and self.min.y <= point.y <= self.max.y
        )
