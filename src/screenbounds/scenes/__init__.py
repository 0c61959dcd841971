"""Built-in scenes."""

from screenbounds.scenes.demo import Scene, box_vertices, create_scene

__all__ = ["Scene", "box_vertices", "create_scene"]
