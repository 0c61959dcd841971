"""Coarse behind-camera rejection.

This is not frustum culling: objects off to the sides of the viewport are
still reported as visible. Objects whose bounding sphere reaches behind the
camera's eye plane are rejected.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from screenbounds.model.bounds import Bounds

if TYPE_CHECKING:
    from screenbounds.model.camera import Camera
    from screenbounds.model.scene_object import SceneObject


def encapsulated_bounds(obj: SceneObject | None) -> Bounds:
    """Union of renderer bounds over ``obj`` and its descendants (empty if none)."""
    bounds = Bounds.empty_bounds()
    if obj is None:
        return bounds
    for node in obj.iter_hierarchy():
        for renderer_bounds in node.render_bounds():
            bounds.encapsulate(renderer_bounds)
    return bounds


def is_behind_camera(camera: Camera, obj: SceneObject | None) -> bool:
    """True when any part of the bounding sphere of ``obj`` is behind the eye plane.

    The sphere is centered on the encapsulated bounds with the box's
    half-diagonal as radius. Only objects whose whole sphere lies in front of
    the camera reach projection, so no projected vertex has negative depth.
    An object without renderers has no position to test and is never
    rejected.
    """
    bounds = encapsulated_bounds(obj)
    if bounds.empty:
        return False
    depth = float(camera.world_to_camera_points(bounds.center)[0, 2])
    return depth - bounds.half_diagonal < 0
