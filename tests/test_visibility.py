"""Tests for behind-camera rejection."""

from __future__ import annotations

import numpy as np
import pytest

from screenbounds.geometry import encapsulated_bounds, is_behind_camera
from screenbounds.model import Camera, SceneObject, Transform, quaternion_from_euler
from screenbounds.scenes.demo import box_vertices


def make_cube(z: float) -> SceneObject:
    obj = SceneObject(name=f"cube@{z}", transform=Transform(position=(0.0, 0.0, z)))
    obj.add_mesh(box_vertices())
    return obj


class TestEncapsulatedBounds:
    """Tests for the hierarchy bounds union."""

    def test_union_over_children(self):
        """Parent and child boxes are merged."""
        root = make_cube(10.0)
        child = root.add_child(
            SceneObject(name="child", transform=Transform(position=(4.0, 0.0, 0.0)))
        )
        child.add_mesh(box_vertices())

        bounds = encapsulated_bounds(root)
        np.testing.assert_allclose(bounds.min, [-1.0, -1.0, 9.0])
        np.testing.assert_allclose(bounds.max, [5.0, 1.0, 11.0])

    def test_far_object_does_not_include_origin(self):
        """The union starts empty rather than from a box at the origin."""
        bounds = encapsulated_bounds(make_cube(50.0))
        np.testing.assert_allclose(bounds.min, [-1.0, -1.0, 49.0])

    def test_empty_object(self):
        """No renderers leaves the bounds empty at the origin."""
        bounds = encapsulated_bounds(SceneObject(name="empty"))
        assert bounds.empty
        assert bounds.half_diagonal == 0.0


class TestIsBehindCamera:
    """Tests for is_behind_camera."""

    @pytest.mark.parametrize(
        ("z", "expected"),
        [
            (10.0, False),
            (-10.0, True),
            (0.5, True),  # straddles the eye plane
            (1.0, True),  # sphere radius sqrt(3) still reaches the eye plane
            (-1.5, True),
            (2.0, False),
        ],
    )
    def test_cube_depths(self, z, expected):
        """Any part of the sphere behind the eye plane rejects the object."""
        assert is_behind_camera(Camera(), make_cube(z)) is expected

    def test_empty_object_not_behind(self):
        """An object without renderers is never rejected."""
        assert is_behind_camera(Camera(), SceneObject(name="empty")) is False

    def test_empty_object_ignores_world_origin(self):
        """Rejection of an empty object does not depend on where the origin lies."""
        camera = Camera(transform=Transform(position=(0.0, 0.0, 5.0)))
        marker = SceneObject(name="marker", transform=Transform(position=(0.0, 0.0, 20.0)))
        assert is_behind_camera(camera, marker) is False

    def test_off_screen_laterally_not_rejected(self):
        """Objects beside the viewport are not culled."""
        obj = SceneObject(name="side", transform=Transform(position=(500.0, 0.0, 10.0)))
        obj.add_mesh(box_vertices())
        assert is_behind_camera(Camera(), obj) is False

    def test_camera_orientation_respected(self):
        """Turning the camera around brings the -Z cube in front."""
        camera = Camera(transform=Transform(rotation=quaternion_from_euler(0.0, 180.0, 0.0)))
        assert is_behind_camera(camera, make_cube(-10.0)) is False
        assert is_behind_camera(camera, make_cube(10.0)) is True
