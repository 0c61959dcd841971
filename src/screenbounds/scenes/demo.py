"""Demo scene: a camera and a handful of tracked objects.

The camera sits at the origin looking down +Z with an 800x600 viewport and a
60 degree vertical field of view. Targets, by index:

0. cube: static 2x2x2 cube centered at (0, 0, 10)
1. arm: skinned two-bone arm at (3, -1, 12), scaled 1.5, bending over time
2. turret: spinning base with a nested barrel child at (-3, 1, 14)
3. marker: empty object with no surfaces (always reports the zero rect)
4. behind: cube at (0, 0, -10), behind the camera and never reported
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

from screenbounds.engine.frame_loop import FrameLoop
from screenbounds.model import (
    Camera,
    DeformableSurface,
    SceneObject,
    Transform,
    quaternion_from_euler,
)
from screenbounds.model.transform import FloatArray

ARM_SEGMENT_LENGTH = 2.0
ARM_RINGS = 9
ARM_BEND_DEGREES = 60.0
TURRET_SPIN_DEGREES_PER_SEC = 45.0


def box_vertices(
    size: npt.ArrayLike = (2.0, 2.0, 2.0), center: npt.ArrayLike = (0.0, 0.0, 0.0)
) -> FloatArray:
    """The 8 corners of an axis-aligned box."""
    half = np.asarray(size, dtype=np.float64) / 2.0
    signs = np.array(
        [[x, y, z] for x in (-1, 1) for y in (-1, 1) for z in (-1, 1)], dtype=np.float64
    )
    return signs * half + np.asarray(center, dtype=np.float64)


def arm_vertices(rings: int = ARM_RINGS, radius: float = 0.25) -> FloatArray:
    """Square tube along +Y from 0 to two segment lengths, 4 vertices per ring."""
    heights = np.linspace(0.0, 2.0 * ARM_SEGMENT_LENGTH, rings)
    corners = [(-radius, -radius), (-radius, radius), (radius, -radius), (radius, radius)]
    return np.array([[x, h, z] for h in heights for x, z in corners], dtype=np.float64)


def arm_weights(vertices: FloatArray) -> FloatArray:
    """Blend weights for (lower, upper) bones with a soft joint at mid height."""
    t = np.clip((vertices[:, 1] - ARM_SEGMENT_LENGTH * 0.75) / (ARM_SEGMENT_LENGTH * 0.5), 0.0, 1.0)
    return np.stack([1.0 - t, t], axis=1)


@dataclass
class Scene:
    """A camera, its tracked objects and the animation that drives them."""

    camera: Camera
    targets: list[SceneObject | None]
    upper_bone: Transform
    turret_base: Transform
    loop: FrameLoop = field(default_factory=FrameLoop)

    def animate(self, loop: FrameLoop) -> None:
        """Update-phase hook: bend the arm and spin the turret."""
        bend = ARM_BEND_DEGREES * math.sin(loop.time)
        self.upper_bone.rotation = quaternion_from_euler(0.0, 0.0, bend)
        spin = (TURRET_SPIN_DEGREES_PER_SEC * loop.time) % 360.0
        self.turret_base.rotation = quaternion_from_euler(0.0, spin, 0.0)


def _make_arm() -> tuple[SceneObject, Transform]:
    arm = SceneObject(
        name="arm",
        transform=Transform(position=(3.0, -1.0, 12.0), local_scale=(1.5, 1.5, 1.5)),
    )
    lower = Transform(name="arm.lower", parent=arm.transform)
    upper = Transform(name="arm.upper", position=(0.0, ARM_SEGMENT_LENGTH, 0.0), parent=lower)
    vertices = arm_vertices()
    arm.deformables.append(
        DeformableSurface.bind_to(
            vertices=vertices,
            transform=arm.transform,
            bones=[lower, upper],
            weights=arm_weights(vertices),
            name="arm.skin",
        )
    )
    return arm, upper


def _make_turret() -> tuple[SceneObject, Transform]:
    turret = SceneObject(name="turret", transform=Transform(position=(-3.0, 1.0, 14.0)))
    turret.add_mesh(box_vertices((1.5, 0.5, 1.5)), name="turret.base")
    barrel = turret.add_child(
        SceneObject(name="turret.barrel", transform=Transform(position=(0.0, 0.5, 0.0)))
    )
    barrel.add_mesh(box_vertices((0.3, 0.3, 2.0), center=(0.0, 0.0, 1.0)), name="turret.barrel")
    return turret, turret.transform


def create_scene(fps: float = 30.0) -> Scene:
    """Build the demo scene with its animation registered in the update phase."""
    camera = Camera(fov=60.0, width=800, height=600)

    cube = SceneObject(name="cube", transform=Transform(position=(0.0, 0.0, 10.0)))
    cube.add_mesh(box_vertices(), name="cube")

    arm, upper_bone = _make_arm()
    turret, turret_base = _make_turret()
    marker = SceneObject(name="marker", transform=Transform(position=(0.0, 0.0, 5.0)))

    behind = SceneObject(name="behind", transform=Transform(position=(0.0, 0.0, -10.0)))
    behind.add_mesh(box_vertices(), name="behind")

    scene = Scene(
        camera=camera,
        targets=[cube, arm, turret, marker, behind],
        upper_bone=upper_bone,
        turret_base=turret_base,
        loop=FrameLoop(fps=fps),
    )
    scene.loop.add_update_hook(scene.animate)
    return scene
