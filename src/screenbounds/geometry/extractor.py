"""World-space vertex extraction from object hierarchies.

Collects every static mesh vertex (through its surface's world transform)
and every skinned vertex (baked at the current pose, then through the
surface's world transform) from an object and all its descendants.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from screenbounds.model.surface import baked_mesh

if TYPE_CHECKING:
    from screenbounds.model.scene_object import SceneObject
    from screenbounds.model.surface import DeformableSurface, MeshSurface
    from screenbounds.model.transform import FloatArray

logger = logging.getLogger(__name__)


def extract_vertices(obj: SceneObject | None) -> FloatArray:
    """Combine all world-space vertices found under ``obj``.

    Args:
        obj: Root of the hierarchy to read. None is treated as an object
            with no surfaces.

    Returns:
        (N, 3) float64 array; (0, 3) when no geometry is found.
    """
    if obj is None:
        return np.empty((0, 3))

    chunks: list[FloatArray] = []
    for node in obj.iter_hierarchy():
        for mesh in getattr(node, "meshes", None) or []:
            vertices = _mesh_vertices(mesh)
            if vertices is not None:
                chunks.append(vertices)

        for deformable in getattr(node, "deformables", None) or []:
            vertices = _deformable_vertices(deformable)
            if vertices is not None:
                chunks.append(vertices)

    if not chunks:
        return np.empty((0, 3))
    return np.concatenate(chunks, axis=0)


def _mesh_vertices(mesh: MeshSurface | None) -> FloatArray | None:
    if mesh is None or not mesh.has_geometry:
        logger.debug("Skipping mesh surface without vertex data")
        return None
    return mesh.world_vertices()


def _deformable_vertices(surface: DeformableSurface | None) -> FloatArray | None:
    """Bake a skinned surface without its own scale, then apply the full world transform."""
    if surface is None or not surface.has_geometry:
        logger.debug("Skipping deformable surface without vertex data")
        return None
    with baked_mesh(surface, use_scale=False) as baked:
        return surface.transform.transform_points(baked.vertices)
