"""SceneObject: a renderable entity and its sub-objects."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from screenbounds.model.bounds import Bounds
from screenbounds.model.surface import DeformableSurface, MeshSurface
from screenbounds.model.transform import Transform


@runtime_checkable
class HasSurfaces(Protocol):
    """Anything that owns static and skinned mesh surfaces."""

    meshes: list[MeshSurface]
    deformables: list[DeformableSurface]


@runtime_checkable
class HasRenderBounds(Protocol):
    """Anything that can report the world-space bounds of its renderers."""

    def render_bounds(self) -> list[Bounds]: ...


@dataclass(eq=False)
class SceneObject:
    """A tracked entity in the host scene.

    Owns zero or more mesh and deformable surfaces plus child objects. The
    core only reads geometry from these objects; it never creates or destroys
    them during a frame.
    """

    name: str
    transform: Transform = field(default_factory=Transform)
    meshes: list[MeshSurface] = field(default_factory=list)
    deformables: list[DeformableSurface] = field(default_factory=list)
    children: list[SceneObject] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.transform.name:
            self.transform.name = self.name
        for child in self.children:
            child.transform.set_parent(self.transform)

    def add_child(self, child: SceneObject) -> SceneObject:
        """Attach ``child`` below this object (transform parented too)."""
        child.transform.set_parent(self.transform)
        self.children.append(child)
        return child

    def add_mesh(self, vertices, name: str = "") -> MeshSurface:
        """Attach a static mesh placed by this object's transform."""
        surface = MeshSurface(vertices=vertices, transform=self.transform, name=name or self.name)
        self.meshes.append(surface)
        return surface

    def iter_hierarchy(self) -> Iterator[SceneObject]:
        """Depth-first walk over this object and all its descendants."""
        yield self
        for child in self.children:
            if child is not None:
                yield from child.iter_hierarchy()

    def render_bounds(self) -> list[Bounds]:
        """World bounds of every surface on this object (not descendants)."""
        bounds = [mesh.render_bounds() for mesh in self.meshes if mesh is not None]
        bounds.extend(d.render_bounds() for d in self.deformables if d is not None)
        return [b for b in bounds if not b.empty]
