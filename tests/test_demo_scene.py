"""Tests for the demo scene."""

from __future__ import annotations

import numpy as np
import pytest

from screenbounds.geometry import extract_vertices, is_behind_camera
from screenbounds.scenes import box_vertices, create_scene
from screenbounds.scenes.demo import ARM_RINGS, arm_vertices, arm_weights


class TestGeometryHelpers:
    """Tests for the mesh builders."""

    def test_box_vertices(self):
        vertices = box_vertices((2.0, 4.0, 6.0), center=(1.0, 0.0, 0.0))
        assert vertices.shape == (8, 3)
        np.testing.assert_allclose(vertices.min(axis=0), [0.0, -2.0, -3.0])
        np.testing.assert_allclose(vertices.max(axis=0), [2.0, 2.0, 3.0])

    def test_arm_weights_are_normalized(self):
        vertices = arm_vertices()
        weights = arm_weights(vertices)
        assert vertices.shape == (ARM_RINGS * 4, 3)
        np.testing.assert_allclose(weights.sum(axis=1), 1.0)
        np.testing.assert_allclose(weights[0], [1.0, 0.0])
        np.testing.assert_allclose(weights[-1], [0.0, 1.0])


class TestCreateScene:
    """Tests for create_scene."""

    def test_targets(self):
        scene = create_scene()
        assert [t.name for t in scene.targets] == ["cube", "arm", "turret", "marker", "behind"]
        assert scene.loop.fps == 30.0

    def test_only_last_target_behind(self):
        scene = create_scene()
        assert [is_behind_camera(scene.camera, t) for t in scene.targets] == [
            False,
            False,
            False,
            False,
            True,
        ]

    def test_animation_moves_arm(self):
        """Ticking the loop bends the skinned arm."""
        scene = create_scene(fps=2.0)
        arm = scene.targets[1]
        before = extract_vertices(arm)
        scene.loop.tick()
        after = extract_vertices(arm)

        assert before.shape == after.shape
        assert not np.allclose(before, after)
        # The lower ring is bound to the static bone only.
        np.testing.assert_allclose(before[:4], after[:4], atol=1e-12)

    def test_animation_spins_turret(self):
        scene = create_scene(fps=1.0)
        scene.loop.tick()
        assert scene.turret_base.rotation[2] == pytest.approx(np.sin(np.radians(45.0) / 2.0))
