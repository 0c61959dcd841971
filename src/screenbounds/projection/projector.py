"""Projector: world-space points to a screen-space bounding rectangle.

Screen rectangles use the overlay convention: origin at the top-left of the
viewport, y growing downward, units in pixels. The camera's native
projection is y-up, so every projected point is flipped vertically before
the min/max reduction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from screenbounds.model.camera import Camera
    from screenbounds.model.transform import FloatArray


@dataclass(frozen=True)
class Rect:
    """Screen rectangle (x, y, width, height) in pixels, origin top-left."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def zero(cls) -> Rect:
        """The rectangle reported when no geometry was found."""
        return cls(0.0, 0.0, 0.0, 0.0)

    @classmethod
    def min_max(cls, x_min: float, y_min: float, x_max: float, y_max: float) -> Rect:
        """Build a rectangle from its corner coordinates."""
        return cls(float(x_min), float(y_min), float(x_max - x_min), float(y_max - y_min))

    @property
    def x_min(self) -> float:
        return self.x

    @property
    def y_min(self) -> float:
        return self.y

    @property
    def x_max(self) -> float:
        return self.x + self.width

    @property
    def y_max(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2.0, self.y + self.height / 2.0

    @property
    def is_zero(self) -> bool:
        return self == Rect.zero()

    def truncated(self) -> tuple[int, int, int, int]:
        """Integer (x, y, width, height), each truncated toward zero."""
        return int(self.x), int(self.y), int(self.width), int(self.height)


def to_gui_points(camera: Camera, points: npt.ArrayLike) -> FloatArray:
    """Project world points to top-left-origin pixel coordinates (x, y)."""
    screen = camera.world_to_screen_points(points)
    gui = screen[:, :2].copy()
    gui[:, 1] = camera.height - gui[:, 1]
    return gui


def project(camera: Camera, points: npt.ArrayLike) -> Rect:
    """Smallest screen rectangle containing every projected point.

    Args:
        camera: Camera whose viewpoint and viewport are used.
        points: World-space points, shape (N, 3).

    Returns:
        Rect spanning the component-wise minimum and maximum of the flipped
        projections, or Rect.zero() when ``points`` is empty. The result is
        not clamped to the viewport.
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    if len(pts) == 0:
        return Rect.zero()

    gui = to_gui_points(camera, pts)
    lo = gui.min(axis=0)
    hi = gui.max(axis=0)
    return Rect.min_max(lo[0], lo[1], hi[0], hi[1])
