"""
Renderable fiber curves and base-point clouds.

A FiberCurve owns one LineGeometry (flat position/color buffers plus
per-segment line distances) and one LineMaterial. The renderer only reads
these buffers; nothing here draws. BasePointCloud plays the same role for
the sampled base points shown on S².
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from hopfviz.core.exceptions import ParameterRangeError, ResourceError
from hopfviz.core.fibration import hopf_fiber, project_fiber

__all__ = [
    "DEFAULT_MAX_FIBER_RESOLUTION",
    "LineGeometry",
    "LineMaterial",
    "FiberCurve",
    "PointsGeometry",
    "PointsMaterial",
    "BasePointCloud",
    "compute_line_distances",
    "assemble_fiber_curve",
]

DEFAULT_MAX_FIBER_RESOLUTION = 512


def compute_line_distances(points: np.ndarray) -> np.ndarray:
    """Cumulative arc length at the start and end of every segment.

    Parameters
    ----------
    points : (m, 3) ndarray
        Polyline vertices.

    Returns
    -------
    distances : (m - 1, 2) ndarray
        ``distances[k] = (s_k, s_{k+1})`` where ``s_0 = 0``.
    """
    points = np.asarray(points, dtype=np.float64)
    if len(points) < 2:
        return np.zeros((0, 2))
    seg_lengths = np.linalg.norm(np.diff(points, axis=0), axis=1)
    cumulative = np.concatenate([[0.0], np.cumsum(seg_lengths)])
    return np.stack([cumulative[:-1], cumulative[1:]], axis=1)


class _Disposable:
    """Tracks release of a single GPU-side resource."""

    _disposed: bool = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        if self._disposed:
            raise ResourceError(f"{type(self).__name__} already disposed")
        self._disposed = True


@dataclass(eq=False)
class LineGeometry(_Disposable):
    """Flat vertex buffers for one polyline."""
    positions: np.ndarray                         # (3 * vertex_count,)
    colors: np.ndarray                            # (3 * (max_resolution + 1),)
    line_distances: np.ndarray = field(default_factory=lambda: np.zeros((0, 2)))

    @property
    def vertex_count(self) -> int:
        return len(self.positions) // 3

    def points(self) -> np.ndarray:
        return self.positions.reshape(-1, 3)


@dataclass(eq=False)
class LineMaterial(_Disposable):
    color: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    linewidth: float = 0.003
    vertex_colors: bool = True
    dashed: bool = False


class FiberCurve:
    """One projected fiber: geometry + material, owned by a single circle."""

    def __init__(self, geometry: LineGeometry, material: Optional[LineMaterial] = None, owner: Any = None):
        self.geometry = geometry
        self.material = material if material is not None else LineMaterial()
        self.owner = owner

    @property
    def points(self) -> np.ndarray:
        return self.geometry.points()

    @property
    def vertex_colors(self) -> np.ndarray:
        """Per-vertex RGB rows actually used by the current vertices."""
        return self.geometry.colors.reshape(-1, 3)[: self.geometry.vertex_count]

    @property
    def arc_length(self) -> float:
        distances = self.geometry.line_distances
        return float(distances[-1, 1]) if len(distances) else 0.0

    @property
    def disposed(self) -> bool:
        return self.geometry.disposed and self.material.disposed

    def compute_line_distances(self) -> "FiberCurve":
        self.geometry.line_distances = compute_line_distances(self.points)
        return self

    def dispose(self) -> None:
        self.geometry.dispose()
        self.material.dispose()

    def __repr__(self) -> str:
        return f"FiberCurve(vertices={self.geometry.vertex_count}, arc_length={self.arc_length:.4f})"


def assemble_fiber_curve(
    base_point: Sequence[float],
    color: Sequence[float],
    resolution: int,
    compress_to_ball: bool = False,
    max_fiber_resolution: int = DEFAULT_MAX_FIBER_RESOLUTION,
    linewidth: float = 0.003,
) -> FiberCurve:
    """Build the renderable curve for one base point.

    Generates the fiber, projects it (optionally into the ball), flattens the
    ``resolution + 1`` vertices into a position buffer and fills a color
    buffer sized for ``max_fiber_resolution + 1`` vertices so a resolution
    change never needs a larger buffer. Every call creates its own material.
    """
    if resolution > max_fiber_resolution:
        raise ParameterRangeError(
            f"Fiber resolution {resolution} exceeds the buffer bound {max_fiber_resolution}"
        )
    points = project_fiber(hopf_fiber(base_point, resolution), compress_to_ball)
    colors = np.tile(np.asarray(color, dtype=np.float64), max_fiber_resolution + 1)

    geometry = LineGeometry(positions=points.reshape(-1).copy(), colors=colors)
    curve = FiberCurve(geometry, LineMaterial(linewidth=linewidth))
    return curve.compute_line_distances()


@dataclass(eq=False)
class PointsGeometry(_Disposable):
    positions: np.ndarray      # (n, 3), rotated in place by the owning circle
    colors: np.ndarray         # (n, 3), channels in [0, 1]


@dataclass(eq=False)
class PointsMaterial(_Disposable):
    size: float = 5.0
    size_attenuation: bool = False
    vertex_colors: bool = True


class BasePointCloud:
    """The sampled base points, drawn on the base-space sphere."""

    def __init__(self, geometry: PointsGeometry, material: Optional[PointsMaterial] = None, owner: Any = None):
        self.geometry = geometry
        self.material = material if material is not None else PointsMaterial()
        self.owner = owner

    @property
    def points(self) -> np.ndarray:
        return self.geometry.positions

    @property
    def colors(self) -> np.ndarray:
        return self.geometry.colors

    @property
    def disposed(self) -> bool:
        return self.geometry.disposed and self.material.disposed

    def dispose(self) -> None:
        self.geometry.dispose()
        self.material.dispose()

    def __repr__(self) -> str:
        return f"BasePointCloud(points={len(self.geometry.positions)})"
