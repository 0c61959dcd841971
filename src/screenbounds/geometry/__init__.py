"""Geometry: vertex extraction and behind-camera rejection."""

from screenbounds.geometry.extractor import extract_vertices
from screenbounds.geometry.visibility import encapsulated_bounds, is_behind_camera

__all__ = ["encapsulated_bounds", "extract_vertices", "is_behind_camera"]
