"""
The Hopf fibration pipeline: fiber generation on S³, stereographic
projection to R³ and the optional compression of R³ into the unit ball.

Quaternions are scalar-last ``(x, y, z, w)`` rows; component 0 is the
projection pole axis.

Exports:
    - hopf_fiber: Sample the fiber over a base point of S².
    - hopf_map: Map points of S³ back to the base point they lie over.
    - stereographic_projection: S³ minus the pole -> R³.
    - compress_r3_to_ball: R³ -> open unit ball.
    - project_fiber: Projection followed by the optional compression.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy.spatial.transform import Rotation

from hopfviz.core.exceptions import DegenerateBasePointError, ParameterRangeError
from hopfviz.core.logging import logger
from hopfviz.core.quaternion import IDENTITY, quat_multiply

__all__ = [
    "POLE_CLAMP",
    "UNIT_NORM_TOLERANCE",
    "hopf_fiber",
    "hopf_map",
    "stereographic_projection",
    "compress_r3_to_ball",
    "project_fiber",
]

POLE_CLAMP = 0.001
UNIT_NORM_TOLERANCE = 1e-6
# Below this, 1 + bx is treated as the antipode (-1, 0, 0) itself.
ANTIPODE_TOLERANCE = 1e-12


def _as_base_point(base_point: Sequence[float]) -> np.ndarray:
    b = np.asarray(base_point, dtype=np.float64)
    if b.shape != (3,):
        raise DegenerateBasePointError(f"Base point must have 3 components, got shape {b.shape}")
    if not np.all(np.isfinite(b)):
        raise DegenerateBasePointError(f"Base point is not finite: {b}")
    norm = np.linalg.norm(b)
    if abs(norm - 1.0) > UNIT_NORM_TOLERANCE:
        raise DegenerateBasePointError(f"Base point must lie on the unit sphere, |b|={norm:.9f}")
    return b


def hopf_fiber(base_point: Sequence[float], resolution: int) -> np.ndarray:
    """Sample the Hopf fiber over `base_point`.

    Parameters
    ----------
    base_point : (3,) array_like
        Unit vector ``(bx, by, bz)`` on S².
    resolution : int
        Number of samples along the fiber.

    Returns
    -------
    fiber : (resolution, 4) ndarray
        ``fiber[i] = r1 * e_i`` with ``r1 = (0, 1+bx, by, bz) / sqrt(2+2bx)``
        and ``e_i = (cos(2 pi i/n), sin(2 pi i/n), 0, 0)``.

    At the antipode ``bx = -1`` the normalizer vanishes; the exact limiting
    fiber (``r1`` = identity) is returned instead.
    """
    if int(resolution) != resolution or resolution < 1:
        raise ParameterRangeError(f"Fiber resolution must be a positive integer, got {resolution}")
    resolution = int(resolution)
    bx, by, bz = _as_base_point(base_point)

    r1 = np.array([0.0, 1.0 + bx, by, bz])
    # |r1|^2 == 2 + 2 bx for a unit base point
    norm_sq = float(np.dot(r1, r1))
    if 1.0 + bx <= ANTIPODE_TOLERANCE or norm_sq <= 2.0 * ANTIPODE_TOLERANCE:
        logger.debug("Base point at the antipode (-1, 0, 0); using the limiting fiber")
        r1 = IDENTITY.copy()
    else:
        r1 = r1 / np.sqrt(norm_sq)

    angles = 2.0 * np.pi * np.arange(resolution) / resolution
    circle = np.zeros((resolution, 4))
    circle[:, 0] = np.cos(angles)
    circle[:, 1] = np.sin(angles)
    return quat_multiply(r1, circle)


def hopf_map(points: np.ndarray) -> np.ndarray:
    """Base point(s) on S² that the given S³ point(s) lie over.

    Inverse direction of :func:`hopf_fiber`: ``q -> q k q*`` followed by the
    coordinate change ``(hx, hy, hz) -> (hz, -hy, -hx)``.
    """
    points = np.asarray(points, dtype=np.float64)
    h = Rotation.from_quat(points.reshape(-1, 4)).apply([0.0, 0.0, 1.0])
    base = np.stack([h[:, 2], -h[:, 1], -h[:, 0]], axis=-1)
    return base.reshape(points.shape[:-1] + (3,))


def stereographic_projection(fiber: np.ndarray, compress_to_ball: bool = False) -> np.ndarray:
    """Project S³ points to R³ from the pole at component 0.

    The denominator ``1 - p[0]`` is clamped at ``POLE_CLAMP`` so points at the
    pole stay finite. Unless `compress_to_ball` is set (the compressor closes
    the loop instead), the first projected point is repeated at the end.
    """
    fiber = np.asarray(fiber, dtype=np.float64)
    denom = np.maximum(1.0 - fiber[:, 0], POLE_CLAMP)
    projected = fiber[:, 1:4] / denom[:, None]
    if not compress_to_ball:
        projected = np.vstack([projected, projected[:1]])
    return projected


def compress_r3_to_ball(points: np.ndarray, compress_to_ball: bool = True) -> np.ndarray:
    """Squeeze R³ into the open unit ball along rays from the origin.

    Each point is scaled by ``(d / sqrt(1 + d^2)) / d`` where ``d`` is its
    distance from the origin; the origin itself is left in place. When active,
    the compressed first point is appended to close the loop. With
    `compress_to_ball` off the points are returned untouched.
    """
    points = np.asarray(points, dtype=np.float64)
    if not compress_to_ball:
        return points

    dist = np.linalg.norm(points, axis=1)
    scale = np.ones_like(dist)
    nonzero = dist > 0.0
    d = dist[nonzero]
    scale[nonzero] = (d / np.hypot(1.0, d)) / d
    compressed = points * scale[:, None]
    return np.vstack([compressed, compressed[:1]])


def project_fiber(fiber: np.ndarray, compress_to_ball: bool = False) -> np.ndarray:
    """Closed polyline in R³ (or the unit ball) for one fiber: ``len(fiber) + 1`` points."""
    projected = stereographic_projection(fiber, compress_to_ball)
    return compress_r3_to_ball(projected, compress_to_ball)
