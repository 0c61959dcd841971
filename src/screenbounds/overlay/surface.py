"""Overlay drawing surface bound to a camera's viewport.

The overlay holds no state across frames: the orchestrator clears it at the
start of every frame and redraws each visible rectangle.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Sequence

    from screenbounds.model.camera import Camera
    from screenbounds.projection.projector import Rect

logger = logging.getLogger(__name__)

# Overlay sits just in front of the near clip plane.
PLANE_OFFSET = 0.01


@dataclass(frozen=True)
class Color:
    """RGBA color, each channel 0.0 to 1.0."""

    r: float
    g: float
    b: float
    a: float = 1.0

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> Color:
        if len(values) == 3:
            return cls(*values)
        r, g, b, a = values
        return cls(r, g, b, a)

    def as_tuple(self) -> tuple[float, float, float, float]:
        return self.r, self.g, self.b, self.a


DEFAULT_COLOR = Color(0.0, 0.0, 0.0, 0.5)


class OverlaySurface(Protocol):
    """Anything that can show rectangles on top of a camera image."""

    def clear(self) -> None: ...

    def draw_rect(self, rect: Rect, color: Color) -> None: ...


class RasterOverlay:
    """RGBA canvas matching the camera's viewport.

    Rectangles are alpha-composited onto the canvas and clipped to it. The
    canvas is sized from the camera at creation and follows the camera
    through ``plane_distance``; it does not resize if the viewport changes.
    """

    def __init__(self, camera: Camera) -> None:
        self.camera = camera
        self.plane_distance = camera.near_clip + PLANE_OFFSET
        self.pixels = np.zeros((camera.height, camera.width, 4), dtype=np.float32)
        self.rects: list[tuple[Rect, Color]] = []

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def clear(self) -> None:
        """Remove every rectangle drawn so far."""
        self.pixels.fill(0.0)
        self.rects.clear()

    def draw_rect(self, rect: Rect, color: Color) -> None:
        """Fill ``rect`` (top-left origin) with ``color`` using source-over blending."""
        if not all(math.isfinite(v) for v in (rect.x, rect.y, rect.width, rect.height)):
            logger.warning("Skipping non-finite overlay rect %s", rect)
            return

        self.rects.append((rect, color))

        x0 = max(0, math.floor(rect.x_min))
        y0 = max(0, math.floor(rect.y_min))
        x1 = min(self.width, math.ceil(rect.x_max))
        y1 = min(self.height, math.ceil(rect.y_max))
        if x0 >= x1 or y0 >= y1:
            return

        region = self.pixels[y0:y1, x0:x1]
        alpha = np.float32(color.a)
        src = np.array([color.r, color.g, color.b], dtype=np.float32)
        region[..., :3] = src * alpha + region[..., :3] * (1.0 - alpha)
        region[..., 3] = alpha + region[..., 3] * (1.0 - alpha)

    def covered_pixels(self) -> int:
        """Number of pixels with any coverage."""
        return int(np.count_nonzero(self.pixels[..., 3] > 0.0))
