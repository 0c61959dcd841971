"""Two-phase frame driver: update hooks, then finalize hooks.

Hosts advance animation and transforms in the update phase. Anything that
reads final per-frame poses (bounding box computation) registers in the
finalize phase, which always runs after every update hook of the same frame.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

FrameHook = Callable[["FrameLoop"], None]


@dataclass
class FrameLoop:
    """Frame counter and clock with ordered update/finalize phases."""

    frame: int = 0  # frames completed
    time: float = 0.0  # seconds of frame time elapsed
    fps: float = 30.0
    update_hooks: list[FrameHook] = field(default_factory=list)
    finalize_hooks: list[FrameHook] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")

    @property
    def delta_time(self) -> float:
        return 1.0 / self.fps

    def add_update_hook(self, hook: FrameHook) -> None:
        self.update_hooks.append(hook)

    def add_finalize_hook(self, hook: FrameHook) -> None:
        self.finalize_hooks.append(hook)

    def clock(self) -> float:
        """Current frame time; usable as a result timestamp source."""
        return self.time

    def tick(self) -> None:
        """Run one frame.

        Sequence:
        1. Advance the clock by one frame
        2. Run every update hook (animation, transform changes)
        3. Run every finalize hook (reads final poses)
        4. Increment the frame counter
        """
        self.time += self.delta_time

        for hook in self.update_hooks:
            hook(self)

        for hook in self.finalize_hooks:
            hook(self)

        self.frame += 1
