"""Per-frame bounding box pass over a list of tracked objects.

For every tracked object, in list order:
1. Skip it when the camera is disabled or the object is behind the camera
2. Extract world-space vertices from its hierarchy
3. Project them to a screen rectangle
4. Draw the rectangle on the overlay if drawing is enabled
5. Publish a BoundingBoxResult to every subscriber

Skipped objects publish nothing, so result indices may be sparse.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from screenbounds.config import RendererSettings, get_settings
from screenbounds.geometry.extractor import extract_vertices
from screenbounds.geometry.visibility import is_behind_camera
from screenbounds.overlay.surface import Color, RasterOverlay
from screenbounds.projection.projector import Rect, project

if TYPE_CHECKING:
    from screenbounds.engine.frame_loop import FrameLoop
    from screenbounds.model.camera import Camera
    from screenbounds.model.scene_object import SceneObject
    from screenbounds.overlay.surface import OverlaySurface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundingBoxResult:
    """One object's bounding box for one frame, in integer screen pixels."""

    object_id: int  # index into the renderer's target list
    x: int
    y: int
    width: int
    height: int
    time_secs: float

    @classmethod
    def from_rect(cls, object_id: int, rect: Rect, time_secs: float) -> BoundingBoxResult:
        x, y, width, height = rect.truncated()
        return cls(object_id, x, y, width, height, time_secs)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


BoundingBoxHandler = Callable[[BoundingBoxResult], None]


class BoundingBoxRenderer:
    """Computes, draws and publishes bounding boxes for ``targets`` each frame.

    ``targets``, ``draw_bounding_box`` and ``box_color`` are plain attributes
    and may be changed between frames. Call :meth:`late_update` once per
    frame after all transforms are final, or :meth:`attach` it to a
    FrameLoop's finalize phase.
    """

    def __init__(
        self,
        camera: Camera,
        targets: Sequence[SceneObject | None] | None = None,
        settings: RendererSettings | None = None,
        overlay: OverlaySurface | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.camera = camera
        self.targets: list[SceneObject | None] = list(targets or [])
        self.draw_bounding_box = settings.draw_bounding_box
        self.box_color = Color.from_sequence(settings.box_color)
        self.log_every_n_frames = settings.log_every_n_frames
        self.overlay: OverlaySurface = overlay if overlay is not None else RasterOverlay(camera)
        self._subscribers: list[BoundingBoxHandler] = []
        self._start = time.monotonic()
        self._clock = clock or (lambda: time.monotonic() - self._start)
        self.frame_count = 0

    def subscribe(self, handler: BoundingBoxHandler) -> None:
        """Register ``handler`` to receive every published result."""
        if handler not in self._subscribers:
            self._subscribers.append(handler)

    def unsubscribe(self, handler: BoundingBoxHandler) -> None:
        if handler in self._subscribers:
            self._subscribers.remove(handler)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def attach(self, loop: FrameLoop) -> None:
        """Run this renderer in the finalize phase of ``loop``, stamped with its clock."""
        self._clock = loop.clock
        loop.add_finalize_hook(lambda _loop: self.late_update())

    def late_update(self) -> list[BoundingBoxResult]:
        """Run one frame's pass and return the published results in order."""
        self.overlay.clear()
        results: list[BoundingBoxResult] = []

        if not self.camera.enabled:
            self._finish_frame(results)
            return results

        for index, target in enumerate(self.targets):
            if target is None:
                continue
            try:
                result = self._process_target(index, target)
            except Exception:
                logger.exception(
                    "Bounding box computation failed for target %d ('%s'). Skipping.",
                    index,
                    getattr(target, "name", "?"),
                )
                continue
            if result is None:
                continue
            results.append(result)
            self._publish(result)

        self._finish_frame(results)
        return results

    def _process_target(self, index: int, target: SceneObject) -> BoundingBoxResult | None:
        if is_behind_camera(self.camera, target):
            return None

        rect = project(self.camera, extract_vertices(target))
        result = BoundingBoxResult.from_rect(index, rect, self._clock())

        if self.draw_bounding_box:
            self.overlay.draw_rect(rect, self.box_color)
        return result

    def _publish(self, result: BoundingBoxResult) -> None:
        for handler in list(self._subscribers):
            try:
                handler(result)
            except Exception:
                logger.exception("Bounding box subscriber %r failed", handler)

    def _finish_frame(self, results: list[BoundingBoxResult]) -> None:
        self.frame_count += 1
        if self.frame_count % self.log_every_n_frames == 0:
            logger.debug(
                "Frame %d: targets=%d, published=%d, camera_enabled=%s",
                self.frame_count,
                len(self.targets),
                len(results),
                self.camera.enabled,
            )
