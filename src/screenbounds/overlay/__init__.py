"""Overlay: drawing surface for bounding rectangles."""

from screenbounds.overlay.surface import (
    DEFAULT_COLOR,
    PLANE_OFFSET,
    Color,
    OverlaySurface,
    RasterOverlay,
)

__all__ = ["DEFAULT_COLOR", "PLANE_OFFSET", "Color", "OverlaySurface", "RasterOverlay"]
