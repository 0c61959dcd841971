"""Screen projection: world points to bounding rectangles."""

from screenbounds.projection.projector import Rect, project, to_gui_points

__all__ = ["Rect", "project", "to_gui_points"]
