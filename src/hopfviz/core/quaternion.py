"""
Thin quaternion helpers on top of numpy and scipy.spatial.transform.

All quaternions use the scalar-last layout ``(x, y, z, w)`` that
``scipy.spatial.transform.Rotation`` uses, so arrays can be handed to
``Rotation.from_quat`` without reordering.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy.spatial.transform import Rotation

__all__ = [
    "AXIS_EPSILON",
    "IDENTITY",
    "quat_multiply",
    "axis_angle_rotation",
    "default_orientation",
]

# Axis components at or below this magnitude count as "no axis".
AXIS_EPSILON = 1e-3

IDENTITY = np.array([0.0, 0.0, 0.0, 1.0])


def quat_multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Hamilton product ``a * b`` for scalar-last quaternions.

    Either argument may be a single quaternion of shape (4,) or a stack of
    shape (n, 4); broadcasting follows numpy rules.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    ax, ay, az, aw = np.moveaxis(a, -1, 0)
    bx, by, bz, bw = np.moveaxis(b, -1, 0)
    return np.stack(
        [
            ax * bw + aw * bx + ay * bz - az * by,
            ay * bw + aw * by + az * bx - ax * bz,
            az * bw + aw * bz + ax * by - ay * bx,
            aw * bw - ax * bx - ay * by - az * bz,
        ],
        axis=-1,
    )


def axis_angle_rotation(axis: Sequence[float], angle: float) -> Rotation:
    """Rotation by `angle` radians about `axis` (normalized here).

    A zero-length axis yields the identity rotation.
    """
    axis = np.asarray(axis, dtype=np.float64)
    norm = np.linalg.norm(axis)
    if norm == 0.0:
        return Rotation.identity()
    return Rotation.from_rotvec(axis / norm * float(angle))


def default_orientation() -> Rotation:
    """Fixed orientation applied to freshly built base circles (pi/2 about +z)."""
    return axis_angle_rotation((0.0, 0.0, 1.0), np.pi / 2)
