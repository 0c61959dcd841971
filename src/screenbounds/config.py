"""Renderer settings loaded from environment variables and .env files.

Settings are read once per process through :func:`get_settings`; the
orchestrator copies them into mutable attributes so the draw toggle and box
color can still be changed between frames.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_BOX_COLOR: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.5)


class RendererSettings(BaseSettings):
    """Configuration for the bounding box renderer.

    Environment Variables:
        SCREENBOUNDS_DRAW_BOUNDING_BOX: Draw rectangles on the overlay (default: true)
        SCREENBOUNDS_BOX_COLOR: RGBA color as JSON list, e.g. [1, 0, 0, 0.5]
            (default: black at 50% alpha)
        SCREENBOUNDS_TARGET_FPS: Frame rate of the background frame loop (default: 30)
        SCREENBOUNDS_LOG_EVERY_N_FRAMES: Frame summary debug log interval (default: 100)

    Example:
        >>> settings = RendererSettings()  # Loads from environment
        >>> settings = RendererSettings(draw_bounding_box=False)
    """

    model_config = SettingsConfigDict(
        env_prefix="SCREENBOUNDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    draw_bounding_box: bool = Field(
        default=True,
        description="Draw rectangles on the overlay; does not affect computation",
    )
    box_color: tuple[float, float, float, float] = Field(
        default=DEFAULT_BOX_COLOR,
        description="RGBA fill color of drawn rectangles, each channel 0.0 to 1.0",
    )
    target_fps: float = Field(
        default=30.0,
        gt=0,
        le=240,
        description="Frames per second of the background frame loop",
    )
    log_every_n_frames: int = Field(
        default=100,
        ge=1,
        description="Emit a frame summary debug log every N frames",
    )

    @field_validator("box_color", mode="before")
    @classmethod
    def normalize_color(cls, v: Any) -> Any:
        """Accept a comma separated string and promote RGB to opaque RGBA."""
        if isinstance(v, str) and not v.strip().startswith("["):
            v = [float(part) for part in v.split(",")]
        if isinstance(v, (list, tuple)) and len(v) == 3:
            v = [*v, 1.0]
        return v

    @field_validator("box_color")
    @classmethod
    def check_channel_range(
        cls, v: tuple[float, float, float, float]
    ) -> tuple[float, float, float, float]:
        """Reject color channels outside 0.0 to 1.0."""
        for channel in v:
            if not 0.0 <= channel <= 1.0:
                raise ValueError(f"color channel {channel} outside [0, 1]")
        return v

    def __repr__(self) -> str:
        return (
            f"RendererSettings("
            f"draw={self.draw_bounding_box}, "
            f"color={self.box_color}, "
            f"fps={self.target_fps}, "
            f"log_every={self.log_every_n_frames}"
            f")"
        )


@lru_cache
def get_settings() -> RendererSettings:
    """Get cached renderer settings singleton.

    To reload configuration, call get_settings.cache_clear() first.
    """
    settings = RendererSettings()
    logger.info("Loaded renderer settings: %s", settings)
    return settings
