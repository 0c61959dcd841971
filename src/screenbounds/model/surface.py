"""Mesh surfaces attached to scene objects.

MeshSurface holds fixed local-space vertices. DeformableSurface is skinned:
its vertices follow a set of bone transforms and must be baked each frame.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

from screenbounds.model.bounds import Bounds
from screenbounds.model.transform import FloatArray, Transform, apply_matrix

logger = logging.getLogger(__name__)


def _as_vertices(vertices: npt.ArrayLike | None) -> FloatArray | None:
    if vertices is None:
        return None
    return np.asarray(vertices, dtype=np.float64).reshape(-1, 3)


@dataclass(eq=False)
class MeshSurface:
    """Static mesh: local-space vertices plus the transform that places them.

    ``vertices`` may be None for a surface whose mesh data is missing; such a
    surface contributes no geometry and no render bounds.
    """

    vertices: FloatArray | None
    transform: Transform = field(default_factory=Transform)
    name: str = ""

    def __post_init__(self) -> None:
        self.vertices = _as_vertices(self.vertices)

    @property
    def has_geometry(self) -> bool:
        return self.vertices is not None

    def world_vertices(self) -> FloatArray:
        if self.vertices is None:
            return np.empty((0, 3))
        return self.transform.transform_points(self.vertices)

    def render_bounds(self) -> Bounds:
        """World-space box around the mesh's local bounds."""
        if self.vertices is None:
            return Bounds.empty_bounds()
        return Bounds.from_points(self.vertices).transformed(self.transform.world_matrix())


@dataclass(eq=False)
class BakedMesh:
    """Temporary vertex buffer holding one bake of a DeformableSurface."""

    vertices: FloatArray
    source: str = ""
    released: bool = False

    def release(self) -> None:
        self.vertices = np.empty((0, 3))
        self.released = True


@dataclass(eq=False)
class DeformableSurface:
    """Skinned mesh whose vertices depend on the current bone pose.

    Vertices are stored in bind pose, in the surface's local space.
    ``bind_poses[i]`` maps bind-pose surface space into bone ``i``'s local
    space; ``weights`` is (N, len(bones)) and each row is normalized when
    baking. With no bones the mesh behaves rigidly.
    """

    vertices: FloatArray | None
    transform: Transform = field(default_factory=Transform)
    bones: list[Transform] = field(default_factory=list)
    bind_poses: list[FloatArray] = field(default_factory=list)
    weights: FloatArray | None = None
    name: str = ""

    def __post_init__(self) -> None:
        self.vertices = _as_vertices(self.vertices)
        self.bind_poses = [np.asarray(m, dtype=np.float64).reshape(4, 4) for m in self.bind_poses]
        if self.weights is not None and self.bones:
            self.weights = np.asarray(self.weights, dtype=np.float64).reshape(-1, len(self.bones))
        else:
            self.weights = None
        if len(self.bind_poses) != len(self.bones):
            raise ValueError(
                f"Surface '{self.name}' has {len(self.bones)} bones "
                f"but {len(self.bind_poses)} bind poses"
            )

    @property
    def has_geometry(self) -> bool:
        return self.vertices is not None

    @classmethod
    def bind_to(
        cls,
        vertices: npt.ArrayLike,
        transform: Transform,
        bones: Sequence[Transform],
        weights: npt.ArrayLike,
        name: str = "",
    ) -> DeformableSurface:
        """Create a surface bound to ``bones`` in their current pose."""
        surface_world = transform.world_matrix()
        bind_poses = [np.linalg.inv(bone.world_matrix()) @ surface_world for bone in bones]
        return cls(
            vertices=vertices,
            transform=transform,
            bones=list(bones),
            bind_poses=bind_poses,
            weights=np.asarray(weights, dtype=np.float64),
            name=name,
        )

    def bake(self, use_scale: bool = False) -> FloatArray:
        """Evaluate vertices at the current pose, relative to the surface transform.

        With ``use_scale=False`` the result is in the surface's local space
        with its world scale divided out, so ``transform.transform_points``
        applies that scale exactly once. ``use_scale=True`` keeps the scale in
        the baked vertices (rotation/translation frame only); transforming
        those through the full world matrix scales them twice.
        """
        if self.vertices is None:
            return np.empty((0, 3))

        if not self.bones or self.weights is None:
            if use_scale:
                return self.vertices * self.transform.lossy_scale
            return self.vertices.copy()

        frame = self.transform.rigid_world_matrix() if use_scale else self.transform.world_matrix()
        return apply_matrix(np.linalg.inv(frame), self.skinned_world_vertices())

    def skinned_world_vertices(self) -> FloatArray:
        """World positions of the vertices under the current bone pose."""
        if self.vertices is None:
            return np.empty((0, 3))
        if not self.bones or self.weights is None:
            return self.transform.transform_points(self.vertices)

        weights = self.weights
        totals = weights.sum(axis=1)
        posed = np.zeros_like(self.vertices)
        for i, (bone, bind_pose) in enumerate(zip(self.bones, self.bind_poses, strict=True)):
            skin = bone.world_matrix() @ bind_pose
            posed += weights[:, i, None] * apply_matrix(skin, self.vertices)

        # Vertices with no bone influence stay rigidly attached to the surface.
        unweighted = totals <= 0.0
        posed[~unweighted] /= totals[~unweighted, None]
        posed[unweighted] = self.transform.transform_points(self.vertices[unweighted])
        return posed

    def render_bounds(self) -> Bounds:
        """World-space box around the currently posed vertices."""
        if self.vertices is None:
            return Bounds.empty_bounds()
        with baked_mesh(self) as baked:
            return Bounds.from_points(self.transform.transform_points(baked.vertices))


@contextmanager
def baked_mesh(surface: DeformableSurface, use_scale: bool = False) -> Iterator[BakedMesh]:
    """Bake ``surface`` into a BakedMesh that is released on exit, even on error."""
    mesh = BakedMesh(vertices=surface.bake(use_scale=use_scale), source=surface.name)
    try:
        yield mesh
    finally:
        mesh.release()
        logger.debug("Released baked mesh for surface '%s'", surface.name)
