"""Pinhole perspective camera.

The camera looks along its local +Z axis with +Y up and +X to the right.
Screen coordinates follow the native projection convention: origin at the
bottom-left of the viewport, y up, depth in world units along the view axis.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

from screenbounds.model.transform import FloatArray, Transform, apply_matrix

DEFAULT_FOV = 60.0
DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600


@dataclass(eq=False)
class Camera:
    """Perspective camera with a pixel viewport."""

    transform: Transform = field(default_factory=Transform)
    fov: float = DEFAULT_FOV  # vertical field of view, degrees
    near_clip: float = 0.3
    far_clip: float = 1000.0
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    enabled: bool = True

    def __post_init__(self) -> None:
        if not 0.0 < self.fov < 180.0:
            raise ValueError(f"Field of view must be in (0, 180) degrees, got {self.fov}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Viewport must be positive, got {self.width}x{self.height}")
        if self.near_clip <= 0.0 or self.far_clip <= self.near_clip:
            raise ValueError(
                f"Clip planes must satisfy 0 < near < far, got {self.near_clip}, {self.far_clip}"
            )

    @property
    def aspect(self) -> float:
        return self.width / self.height

    @property
    def focal_scale(self) -> float:
        """cot(fov / 2): NDC units per unit of (y / depth)."""
        return 1.0 / math.tan(math.radians(self.fov) / 2.0)

    def view_matrix(self) -> FloatArray:
        """World-to-camera matrix (camera scale is ignored)."""
        return np.linalg.inv(self.transform.rigid_world_matrix())

    def world_to_camera_points(self, points: npt.ArrayLike) -> FloatArray:
        return apply_matrix(self.view_matrix(), points)

    def world_to_screen_points(self, points: npt.ArrayLike) -> FloatArray:
        """Project world points to (x pixels, y pixels from bottom, depth).

        Points on the eye plane (depth 0) yield non-finite x/y; points behind
        the eye are mirrored, as with any pinhole projection.
        """
        cam = self.world_to_camera_points(points)
        depth = cam[:, 2]
        f = self.focal_scale
        with np.errstate(divide="ignore", invalid="ignore"):
            ndc_x = (f / self.aspect) * cam[:, 0] / depth
            ndc_y = f * cam[:, 1] / depth
        screen = np.empty_like(cam)
        screen[:, 0] = (ndc_x + 1.0) * 0.5 * self.width
        screen[:, 1] = (ndc_y + 1.0) * 0.5 * self.height
        screen[:, 2] = depth
        return screen

    def world_to_screen_point(self, point: npt.ArrayLike) -> FloatArray:
        return self.world_to_screen_points(point)[0]
