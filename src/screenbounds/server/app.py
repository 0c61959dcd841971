"""FastAPI server streaming per-frame bounding boxes.

Provides:
- WebSocket /ws/boxes: Stream each frame's bounding box results at ~target FPS
- REST API for targets, camera state, draw toggle and manual frame stepping
"""

from __future__ import annotations

import asyncio
import logging
import threading
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect, status
from pydantic import BaseModel, Field

from screenbounds.config import RendererSettings, get_settings
from screenbounds.engine.orchestrator import BoundingBoxRenderer, BoundingBoxResult
from screenbounds.geometry.visibility import encapsulated_bounds, is_behind_camera
from screenbounds.scenes.demo import Scene, create_scene

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)


class SceneState:
    """Thread-safe owner of the scene, its renderer and the latest results.

    Frames run either from the background thread (while playing) or from
    :meth:`step`; both hold the lock so only one frame pass runs at a time.
    """

    def __init__(self, settings: RendererSettings | None = None) -> None:
        self._settings = settings or get_settings()
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._running = False
        self._paused = True  # Start paused
        self._build()

    def _build(self) -> None:
        self._scene: Scene = create_scene(fps=self._settings.target_fps)
        self._renderer = BoundingBoxRenderer(
            camera=self._scene.camera,
            targets=self._scene.targets,
            settings=self._settings,
        )
        self._renderer.attach(self._scene.loop)
        self._latest: list[BoundingBoxResult] = []
        self._renderer.subscribe(self._latest.append)

    @property
    def scene(self) -> Scene:
        with self._lock:
            return self._scene

    @property
    def renderer(self) -> BoundingBoxRenderer:
        with self._lock:
            return self._renderer

    @property
    def frame(self) -> int:
        with self._lock:
            return self._scene.loop.frame

    @property
    def paused(self) -> bool:
        with self._lock:
            return self._paused

    @paused.setter
    def paused(self, value: bool) -> None:
        with self._lock:
            self._paused = value

    @property
    def target_fps(self) -> float:
        """Frame rate of this state's frame loop and box stream."""
        return self._settings.target_fps

    @property
    def latest_results(self) -> list[BoundingBoxResult]:
        """Results of the most recent frame, in target order."""
        with self._lock:
            return list(self._latest)

    def describe_target(self, index: int) -> TargetResponse | None:
        """Snapshot one target under the lock, or None for an empty slot.

        Raises:
            IndexError: If ``index`` is outside the target list.
        """
        with self._lock:
            if not 0 <= index < len(self._scene.targets):
                raise IndexError(index)
            return self._describe(index)

    def describe_targets(self) -> list[TargetResponse]:
        """Snapshot every non-empty target in one locked pass."""
        with self._lock:
            described = (self._describe(i) for i in range(len(self._scene.targets)))
            return [t for t in described if t is not None]

    def _describe(self, index: int) -> TargetResponse | None:
        target = self._scene.targets[index]
        if target is None:
            return None
        nodes = list(target.iter_hierarchy())
        bounds = encapsulated_bounds(target)
        return TargetResponse(
            index=index,
            name=target.name,
            mesh_count=sum(len(n.meshes) for n in nodes),
            deformable_count=sum(len(n.deformables) for n in nodes),
            child_count=len(target.children),
            behind_camera=is_behind_camera(self._scene.camera, target),
            bounds_center=[float(v) for v in bounds.center],
            bounds_extents=[float(v) for v in bounds.extents],
        )

    def step(self) -> list[BoundingBoxResult]:
        """Run one frame (update then finalize) and return its results."""
        with self._lock:
            self._latest.clear()
            self._scene.loop.tick()
            return list(self._latest)

    def set_camera_enabled(self, enabled: bool) -> None:
        with self._lock:
            self._scene.camera.enabled = enabled

    def set_draw(self, enabled: bool) -> None:
        with self._lock:
            self._renderer.draw_bounding_box = enabled

    def reset(self) -> None:
        """Rebuild the scene from scratch."""
        with self._lock:
            self._build()

    def start(self) -> None:
        """Start the background frame thread."""
        if self._running:
            return
        self._running = True
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._frame_loop, daemon=True)
        self._thread.start()
        logger.info("Frame thread started")

    def stop(self) -> None:
        """Stop the background frame thread."""
        if not self._running:
            return
        self._running = False
        self._stop_event.set()
        if hasattr(self, "_thread"):
            self._thread.join(timeout=2.0)
        logger.info("Frame thread stopped")

    def _frame_loop(self) -> None:
        interval = 1.0 / self._settings.target_fps
        while self._running and not self._stop_event.is_set():
            if not self.paused:
                self.step()
            self._stop_event.wait(timeout=interval)


# Global scene state
_scene_state: SceneState | None = None


def get_scene_state() -> SceneState:
    """Get or create the global scene state."""
    global _scene_state
    if _scene_state is None:
        _scene_state = SceneState()
    return _scene_state


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager: start/stop the frame thread."""
    state = get_scene_state()
    state.start()
    yield
    state.stop()


app = FastAPI(
    title="screenbounds",
    description="Screen-space bounding boxes of 3D scene objects, streamed per frame",
    version="0.1.0",
    lifespan=lifespan,
)


# Pydantic models for REST responses


class BoundingBoxResponse(BaseModel):
    """Response model for one bounding box result."""

    object_id: int = Field(description="Index of the target in the tracked list")
    x: int = Field(description="Left edge in pixels from the viewport's left")
    y: int = Field(description="Top edge in pixels from the viewport's top")
    width: int = Field(description="Width in pixels")
    height: int = Field(description="Height in pixels")
    time_secs: float = Field(description="Frame time when the box was computed")


class FrameResponse(BaseModel):
    """Response model for a frame's results."""

    frame: int = Field(description="Frames completed so far")
    boxes: list[BoundingBoxResponse] = Field(description="Results in target order")


class TargetResponse(BaseModel):
    """Response model for a tracked object."""

    index: int = Field(description="Index in the tracked list")
    name: str = Field(description="Object name")
    mesh_count: int = Field(description="Static surfaces in the hierarchy")
    deformable_count: int = Field(description="Skinned surfaces in the hierarchy")
    child_count: int = Field(description="Direct children")
    behind_camera: bool = Field(description="Whether the object is currently rejected")
    bounds_center: list[float] = Field(description="World-space bounds center")
    bounds_extents: list[float] = Field(description="World-space bounds half size")


class CameraResponse(BaseModel):
    """Response model for camera state."""

    enabled: bool = Field(description="Whether frames are processed")
    fov: float = Field(description="Vertical field of view in degrees")
    near_clip: float = Field(description="Near clip distance")
    far_clip: float = Field(description="Far clip distance")
    width: int = Field(description="Viewport width in pixels")
    height: int = Field(description="Viewport height in pixels")
    position: list[float] = Field(description="World position")


class ControlCommandResponse(BaseModel):
    """Response for control commands."""

    success: bool = Field(description="Whether command succeeded")
    message: str = Field(description="Status message")


def _frame_response(frame: int, results: list[BoundingBoxResult]) -> FrameResponse:
    return FrameResponse(
        frame=frame,
        boxes=[BoundingBoxResponse(**r.to_dict()) for r in results],
    )


# REST endpoints


@app.get("/api/boxes", response_model=FrameResponse, tags=["boxes"])
async def get_boxes() -> FrameResponse:
    """Get the bounding boxes published in the most recent frame."""
    state = get_scene_state()
    return _frame_response(state.frame, state.latest_results)


@app.post("/api/frame/step", response_model=FrameResponse, tags=["boxes"])
async def step_frame() -> FrameResponse:
    """Run a single frame and return its bounding boxes."""
    state = get_scene_state()
    results = state.step()
    return _frame_response(state.frame, results)


@app.get("/api/targets", response_model=list[TargetResponse], tags=["targets"])
async def get_targets() -> list[TargetResponse]:
    """Get all non-empty tracked objects."""
    return get_scene_state().describe_targets()


@app.get("/api/targets/{index}", response_model=TargetResponse, tags=["targets"])
async def get_target(index: int) -> TargetResponse:
    """Get one tracked object by index."""
    try:
        described = get_scene_state().describe_target(index)
    except IndexError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Target {index} not found",
        ) from None
    if described is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Target {index} is empty",
        )
    return described


@app.get("/api/camera", response_model=CameraResponse, tags=["camera"])
async def get_camera() -> CameraResponse:
    """Get the camera's current state."""
    camera = get_scene_state().scene.camera
    return CameraResponse(
        enabled=camera.enabled,
        fov=camera.fov,
        near_clip=camera.near_clip,
        far_clip=camera.far_clip,
        width=camera.width,
        height=camera.height,
        position=[float(v) for v in camera.transform.world_position],
    )


@app.post("/api/camera/enable", response_model=ControlCommandResponse, tags=["camera"])
async def enable_camera() -> ControlCommandResponse:
    """Enable the camera; frames publish results again."""
    get_scene_state().set_camera_enabled(True)
    return ControlCommandResponse(success=True, message="Camera enabled")


@app.post("/api/camera/disable", response_model=ControlCommandResponse, tags=["camera"])
async def disable_camera() -> ControlCommandResponse:
    """Disable the camera; frames publish nothing."""
    get_scene_state().set_camera_enabled(False)
    return ControlCommandResponse(success=True, message="Camera disabled")


@app.post("/api/draw", response_model=ControlCommandResponse, tags=["overlay"])
async def set_draw(enabled: bool = True) -> ControlCommandResponse:
    """Turn overlay drawing on or off. Results are published either way.

    Args:
        enabled: Whether to draw rectangles on the overlay.
    """
    get_scene_state().set_draw(enabled)
    return ControlCommandResponse(
        success=True, message=f"Drawing {'enabled' if enabled else 'disabled'}"
    )


@app.post("/api/pause", response_model=ControlCommandResponse, tags=["frames"])
async def pause_frames() -> ControlCommandResponse:
    """Pause the background frame loop."""
    get_scene_state().paused = True
    return ControlCommandResponse(success=True, message="Frames paused")


@app.post("/api/play", response_model=ControlCommandResponse, tags=["frames"])
async def play_frames() -> ControlCommandResponse:
    """Resume the background frame loop."""
    get_scene_state().paused = False
    return ControlCommandResponse(success=True, message="Frames playing")


@app.post("/api/reset", response_model=ControlCommandResponse, tags=["frames"])
async def reset_scene() -> ControlCommandResponse:
    """Rebuild the scene in its initial state."""
    get_scene_state().reset()
    logger.info("Scene reset to initial state")
    return ControlCommandResponse(success=True, message="Scene reset")


# WebSocket connections management


class ConnectionManager:
    """Track WebSocket clients subscribed to bounding box frames."""

    def __init__(self) -> None:
        self.connections: list[WebSocket] = []

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.connections.append(websocket)
        logger.info("Box client connected, total: %d", len(self.connections))

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self.connections:
            self.connections.remove(websocket)
        logger.info("Box client disconnected, remaining: %d", len(self.connections))


manager = ConnectionManager()


def _frame_to_dict(frame: int, results: list[BoundingBoxResult]) -> dict[str, Any]:
    """Convert a frame's results to a JSON-serializable dict."""
    return {"frame": frame, "boxes": [r.to_dict() for r in results]}


@app.websocket("/ws/boxes")
async def websocket_boxes(websocket: WebSocket) -> None:
    """WebSocket endpoint streaming the latest frame's boxes at ~target FPS.

    A frame number of -1 with no boxes means no frame has run yet.
    """
    await manager.connect(websocket)
    state = get_scene_state()
    interval = 1.0 / state.target_fps

    try:
        while True:
            start = asyncio.get_running_loop().time()

            frame = state.frame
            payload = _frame_to_dict(frame if frame > 0 else -1, state.latest_results)
            await websocket.send_json(payload)

            elapsed = asyncio.get_running_loop().time() - start
            await asyncio.sleep(max(0.0, interval - elapsed))

    except WebSocketDisconnect:
        manager.disconnect(websocket)
    except Exception as e:
        logger.error("Box streaming error: %s", str(e))
        manager.disconnect(websocket)


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
