"""Tests for the raster overlay."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from screenbounds.model import Camera
from screenbounds.overlay import DEFAULT_COLOR, PLANE_OFFSET, Color, RasterOverlay
from screenbounds.projection import Rect


def make_overlay(width: int = 40, height: int = 30) -> RasterOverlay:
    return RasterOverlay(Camera(width=width, height=height))


class TestColor:
    """Tests for Color."""

    def test_rgb_is_opaque(self):
        assert Color.from_sequence([0.1, 0.2, 0.3]).a == 1.0

    def test_rgba_round_trip(self):
        assert Color.from_sequence((0.1, 0.2, 0.3, 0.4)).as_tuple() == (0.1, 0.2, 0.3, 0.4)

    def test_default_is_translucent_black(self):
        assert DEFAULT_COLOR.as_tuple() == (0.0, 0.0, 0.0, 0.5)


class TestRasterOverlay:
    """Tests for RasterOverlay."""

    def test_matches_viewport(self):
        """The canvas has the camera's size and sits just past the near plane."""
        overlay = make_overlay()
        assert (overlay.width, overlay.height) == (40, 30)
        assert overlay.plane_distance == pytest.approx(0.3 + PLANE_OFFSET)

    def test_draw_rect_fills_area(self):
        """A 10x5 rectangle covers 50 pixels with the color's alpha."""
        overlay = make_overlay()
        overlay.draw_rect(Rect(2.0, 3.0, 10.0, 5.0), Color(1.0, 0.0, 0.0, 0.5))

        assert overlay.covered_pixels() == 50
        np.testing.assert_allclose(overlay.pixels[3, 2], [0.5, 0.0, 0.0, 0.5])
        assert overlay.pixels[2, 2, 3] == 0.0

    def test_overlapping_rects_blend(self):
        """Source-over blending accumulates alpha."""
        overlay = make_overlay()
        color = Color(0.0, 0.0, 0.0, 0.5)
        overlay.draw_rect(Rect(0.0, 0.0, 4.0, 4.0), color)
        overlay.draw_rect(Rect(0.0, 0.0, 4.0, 4.0), color)
        assert overlay.pixels[0, 0, 3] == pytest.approx(0.75)

    def test_clipped_to_canvas(self):
        """Rectangles partly off the canvas are clipped, and still recorded."""
        overlay = make_overlay()
        overlay.draw_rect(Rect(-5.0, -5.0, 10.0, 10.0), DEFAULT_COLOR)
        assert overlay.covered_pixels() == 25
        assert len(overlay.rects) == 1

    def test_fully_off_canvas(self):
        """A rectangle entirely outside draws nothing."""
        overlay = make_overlay()
        overlay.draw_rect(Rect(100.0, 100.0, 10.0, 10.0), DEFAULT_COLOR)
        assert overlay.covered_pixels() == 0

    def test_non_finite_rect_skipped(self, caplog):
        """NaN or infinite rectangles are skipped with a warning."""
        overlay = make_overlay()
        with caplog.at_level(logging.WARNING, logger="screenbounds.overlay.surface"):
            overlay.draw_rect(Rect(float("nan"), 0.0, 1.0, 1.0), DEFAULT_COLOR)
        assert overlay.rects == []
        assert "non-finite" in caplog.text

    def test_clear(self):
        """clear removes every rectangle."""
        overlay = make_overlay()
        overlay.draw_rect(Rect(0.0, 0.0, 5.0, 5.0), DEFAULT_COLOR)
        overlay.clear()
        assert overlay.covered_pixels() == 0
        assert overlay.rects == []
