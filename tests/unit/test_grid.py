"""
Tests for the background dot grid.
"""

import numpy as np

from harmonia.core.geometry import Point2D, Rect2D
from harmonia.core.grid import GRID_SIZE, MAX_CELLS, MIN_SCREEN_SPACING, dot_grid_positions


RECT = Rect2D.from_size(0, 0, 100, 100)


class TestDotGrid:
    """Tests for dot_grid_positions."""

    def test_defaults(self):
        assert GRID_SIZE == 20.0
        assert MIN_SCREEN_SPACING == 4.0
        assert MAX_CELLS == 100_000

    def test_identity_viewport(self):
        dots = dot_grid_positions(RECT, Point2D(0, 0), 1.0)

        assert dots.shape == (36, 2)
        assert set(np.unique(dots[:, 0])) == {0.0, 20.0, 40.0, 60.0, 80.0, 100.0}

    def test_dots_follow_pan(self):
        dots = dot_grid_positions(RECT, Point2D(5, 5), 1.0)

        assert dots.shape == (25, 2)
        assert np.allclose(np.mod(dots, 20.0), 5.0)

    def test_spacing_scales_with_zoom(self):
        dots = dot_grid_positions(RECT, Point2D(0, 0), 2.0)

        assert set(np.unique(dots[:, 1])) == {0.0, 40.0, 80.0}

    def test_all_dots_inside_rect(self):
        rect = Rect2D(Point2D(-13, 7), Point2D(211, 93))
        dots = dot_grid_positions(rect, Point2D(3.5, -8.25), 0.75)

        assert len(dots) > 0
        for x, y in dots:
            assert rect.contains(Point2D(x, y))

    def test_too_dense_draws_nothing(self):
        dots = dot_grid_positions(RECT, Point2D(0, 0), 0.1)

        assert dots.shape == (0, 2)

    def test_spacing_at_minimum_still_draws(self):
        dots = dot_grid_positions(RECT, Point2D(0, 0), 0.25, min_spacing=5.0)

        assert len(dots) == 21 * 21

    def test_too_many_cells_draws_nothing(self):
        huge = Rect2D.from_size(0, 0, 10_000, 10_000)

        assert len(dot_grid_positions(huge, Point2D(0, 0), 1.0)) == 0
        assert len(dot_grid_positions(RECT, Point2D(0, 0), 1.0, max_cells=10)) == 0
