"""Scene model: Transform, surfaces, Bounds, SceneObject, Camera."""

from screenbounds.model.bounds import Bounds
from screenbounds.model.camera import Camera
from screenbounds.model.scene_object import HasRenderBounds, HasSurfaces, SceneObject
from screenbounds.model.surface import BakedMesh, DeformableSurface, MeshSurface, baked_mesh
from screenbounds.model.transform import Transform, quaternion_from_euler

__all__ = [
    "BakedMesh",
    "Bounds",
    "Camera",
    "DeformableSurface",
    "HasRenderBounds",
    "HasSurfaces",
    "MeshSurface",
    "SceneObject",
    "Transform",
    "baked_mesh",
    "quaternion_from_euler",
]
