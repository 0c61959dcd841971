"""Bounds: world-space axis-aligned box stored as center + extents."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

from screenbounds.model.transform import FloatArray, apply_matrix


@dataclass
class Bounds:
    """Axis-aligned bounding box.

    ``extents`` is half the size along each axis. A Bounds built with no
    points is empty: it has zero extents and is replaced outright by the
    first box it encapsulates.
    """

    center: FloatArray = field(default_factory=lambda: np.zeros(3))
    extents: FloatArray = field(default_factory=lambda: np.zeros(3))
    empty: bool = False

    def __post_init__(self) -> None:
        self.center = np.asarray(self.center, dtype=np.float64).reshape(3)
        self.extents = np.asarray(self.extents, dtype=np.float64).reshape(3)

    @classmethod
    def empty_bounds(cls) -> Bounds:
        return cls(empty=True)

    @classmethod
    def from_min_max(cls, minimum: npt.ArrayLike, maximum: npt.ArrayLike) -> Bounds:
        lo = np.asarray(minimum, dtype=np.float64)
        hi = np.asarray(maximum, dtype=np.float64)
        return cls(center=(lo + hi) / 2.0, extents=(hi - lo) / 2.0)

    @classmethod
    def from_points(cls, points: npt.ArrayLike) -> Bounds:
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        if len(pts) == 0:
            return cls.empty_bounds()
        return cls.from_min_max(pts.min(axis=0), pts.max(axis=0))

    @property
    def min(self) -> FloatArray:
        return self.center - self.extents

    @property
    def max(self) -> FloatArray:
        return self.center + self.extents

    @property
    def size(self) -> FloatArray:
        return self.extents * 2.0

    @property
    def half_diagonal(self) -> float:
        """Distance from the center to any corner."""
        return float(np.linalg.norm(self.extents))

    def corners(self) -> FloatArray:
        """The 8 corners as an (8, 3) array."""
        lo, hi = self.min, self.max
        return np.array(
            [[x, y, z] for x in (lo[0], hi[0]) for y in (lo[1], hi[1]) for z in (lo[2], hi[2])],
            dtype=np.float64,
        )

    def encapsulate(self, other: Bounds) -> None:
        """Grow in place to contain ``other``."""
        if other.empty:
            return
        if self.empty:
            self.center = other.center.copy()
            self.extents = other.extents.copy()
            self.empty = False
            return
        lo = np.minimum(self.min, other.min)
        hi = np.maximum(self.max, other.max)
        self.center = (lo + hi) / 2.0
        self.extents = (hi - lo) / 2.0

    def transformed(self, matrix: FloatArray) -> Bounds:
        """Box enclosing this box after an affine transform."""
        if self.empty:
            return Bounds.empty_bounds()
        return Bounds.from_points(apply_matrix(matrix, self.corners()))
