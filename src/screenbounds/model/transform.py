"""Transform: position/rotation/scale node in a scene hierarchy.

Matrices are 4x4 float64 column-vector transforms (``p_world = M @ p``).
Rotations are unit quaternions stored as (w, x, y, z).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

FloatArray = npt.NDArray[np.float64]

IDENTITY_ROTATION: tuple[float, float, float, float] = (1.0, 0.0, 0.0, 0.0)


def quaternion_from_euler(x_deg: float, y_deg: float, z_deg: float) -> FloatArray:
    """Build a quaternion from Euler angles in degrees.

    Applied in Z, X, Y order (roll, then pitch, then yaw), so that
    ``quaternion_from_euler(0, 90, 0)`` turns +Z towards +X.
    """
    qx = _axis_angle((1.0, 0.0, 0.0), x_deg)
    qy = _axis_angle((0.0, 1.0, 0.0), y_deg)
    qz = _axis_angle((0.0, 0.0, 1.0), z_deg)
    return quaternion_multiply(quaternion_multiply(qy, qx), qz)


def _axis_angle(axis: tuple[float, float, float], degrees: float) -> FloatArray:
    half = math.radians(degrees) / 2.0
    s = math.sin(half)
    return np.array([math.cos(half), axis[0] * s, axis[1] * s, axis[2] * s], dtype=np.float64)


def quaternion_multiply(a: npt.ArrayLike, b: npt.ArrayLike) -> FloatArray:
    """Hamilton product ``a * b`` (apply b, then a)."""
    aw, ax, ay, az = np.asarray(a, dtype=np.float64)
    bw, bx, by, bz = np.asarray(b, dtype=np.float64)
    return np.array(
        [
            aw * bw - ax * bx - ay * by - az * bz,
            aw * bx + ax * bw + ay * bz - az * by,
            aw * by - ax * bz + ay * bw + az * bx,
            aw * bz + ax * by - ay * bx + az * bw,
        ],
        dtype=np.float64,
    )


def rotation_matrix(q: npt.ArrayLike) -> FloatArray:
    """3x3 rotation matrix for a quaternion (normalized first)."""
    q = np.asarray(q, dtype=np.float64)
    norm = np.linalg.norm(q)
    if norm == 0.0:
        return np.eye(3)
    w, x, y, z = q / norm
    return np.array(
        [
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
            [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
        ],
        dtype=np.float64,
    )


def trs_matrix(
    position: npt.ArrayLike, rotation: npt.ArrayLike, scale: npt.ArrayLike
) -> FloatArray:
    """Compose translate * rotate * scale into one 4x4 matrix."""
    m = np.eye(4)
    m[:3, :3] = rotation_matrix(rotation) * np.asarray(scale, dtype=np.float64)
    m[:3, 3] = np.asarray(position, dtype=np.float64)
    return m


def apply_matrix(matrix: FloatArray, points: npt.ArrayLike) -> FloatArray:
    """Apply a 4x4 affine matrix to an (N, 3) array of points."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    return pts @ matrix[:3, :3].T + matrix[:3, 3]


@dataclass(eq=False)
class Transform:
    """A node in the transform hierarchy.

    Local position, rotation and scale are relative to ``parent``; world
    matrices are recomputed on every access so per-frame animation needs no
    invalidation bookkeeping.
    """

    position: FloatArray = field(default_factory=lambda: np.zeros(3))
    rotation: FloatArray = field(default_factory=lambda: np.array(IDENTITY_ROTATION))
    local_scale: FloatArray = field(default_factory=lambda: np.ones(3))
    parent: Transform | None = None
    name: str = ""

    def __post_init__(self) -> None:
        self.position = np.asarray(self.position, dtype=np.float64).reshape(3)
        self.rotation = np.asarray(self.rotation, dtype=np.float64).reshape(4)
        self.local_scale = np.asarray(self.local_scale, dtype=np.float64).reshape(3)

    def set_parent(self, parent: Transform | None) -> None:
        """Attach to ``parent`` keeping the local values (not the world pose)."""
        node = parent
        while node is not None:
            if node is self:
                raise ValueError(f"Transform '{self.name}' cannot be parented to its descendant")
            node = node.parent
        self.parent = parent

    def local_matrix(self) -> FloatArray:
        return trs_matrix(self.position, self.rotation, self.local_scale)

    def world_matrix(self) -> FloatArray:
        """Local-to-world matrix including every ancestor."""
        m = self.local_matrix()
        if self.parent is not None:
            m = self.parent.world_matrix() @ m
        return m

    @property
    def world_position(self) -> FloatArray:
        return self.world_matrix()[:3, 3].copy()

    @property
    def world_rotation(self) -> FloatArray:
        """World rotation as a quaternion."""
        q = self.rotation
        if self.parent is not None:
            q = quaternion_multiply(self.parent.world_rotation, q)
        return q

    @property
    def world_rotation_matrix(self) -> FloatArray:
        return rotation_matrix(self.world_rotation)

    @property
    def lossy_scale(self) -> FloatArray:
        """Approximate world scale (exact when no ancestor is rotated and scaled non-uniformly)."""
        scale = self.local_scale.copy()
        if self.parent is not None:
            scale = scale * self.parent.lossy_scale
        return scale

    def rigid_world_matrix(self) -> FloatArray:
        """World rotation and translation only, with unit scale."""
        return trs_matrix(self.world_position, self.world_rotation, np.ones(3))

    def transform_points(self, points: npt.ArrayLike) -> FloatArray:
        """Map local points to world space (scale, rotate, translate, then ancestors)."""
        return apply_matrix(self.world_matrix(), points)

    def inverse_transform_points(self, points: npt.ArrayLike) -> FloatArray:
        """Map world points into this transform's local space."""
        return apply_matrix(np.linalg.inv(self.world_matrix()), points)

    def forward(self) -> FloatArray:
        """World-space direction of local +Z."""
        return self.world_rotation_matrix[:, 2].copy()
