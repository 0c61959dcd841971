"""Frame driving: two-phase frame loop and the bounding box renderer."""

from screenbounds.engine.frame_loop import FrameLoop
from screenbounds.engine.orchestrator import (
    BoundingBoxHandler,
    BoundingBoxRenderer,
    BoundingBoxResult,
)

__all__ = [
    "BoundingBoxHandler",
    "BoundingBoxRenderer",
    "BoundingBoxResult",
    "FrameLoop",
]
