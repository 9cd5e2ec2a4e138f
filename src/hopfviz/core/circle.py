"""
Base-space circles and the fibers drawn over them.

A BaseSpaceCircle samples `point_count` points along a circle of latitude on
S², keeps them oriented by a fixed default rotation, and owns one FiberCurve
per point. Structural parameters are immutable: changing them means
destroying the circle and constructing a new one from ``parameters()``.

Lifecycle (CircleState):
    CONSTRUCTING -> RENDERED           points sampled, fibers built
    RENDERED -> ROTATING -> RENDERED   rotate_step() on every animation tick
    any -> DESTROYED                   destroy(); the object is not reused
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

import numpy as np
from scipy.spatial.transform import Rotation

from hopfviz.core.color import rainbow
from hopfviz.core.config import MIN_FIBER_RESOLUTION, CircleParameters, FiberSettings, validated
from hopfviz.core.curve import (
    BasePointCloud,
    FiberCurve,
    PointsGeometry,
    assemble_fiber_curve,
)
from hopfviz.core.enums import CircleState, SceneRole
from hopfviz.core.exceptions import CircleDestroyedError, ParameterRangeError
from hopfviz.core.logging import logger
from hopfviz.core.quaternion import AXIS_EPSILON, axis_angle_rotation, default_orientation
from hopfviz.core.scene import Scene

__all__ = ["BaseSpaceCircle"]


class BaseSpaceCircle:
    """One parametrized circle of base points and its rendered fibers.

    Parameters
    ----------
    distance_to_center : float
        Linear offset in [-1, 0.999], mapped to latitude ``offset * pi / 2``.
    circumference : float
        Angle in [0, 2 pi] covered by the points.
    point_count : int
        Number of base points (>= 1).
    default_rotation : scipy Rotation, optional
        Fixed orientation applied once to the sampled points.
    rotation_axis, rotation_angle :
        Incremental rotation applied by every ``rotate_step()``.
    settings : FiberSettings, optional
        Shared global settings; read on every rebuild.
    scene, base_scene : Scene, optional
        Where fibers and base points are registered.
    """

    def __init__(
        self,
        distance_to_center: float,
        circumference: float,
        point_count: int,
        default_rotation: Optional[Rotation] = None,
        rotation_axis: Sequence[float] = (0.0, 0.0, 0.0),
        rotation_angle: float = 0.0,
        *,
        settings: Optional[FiberSettings] = None,
        scene: Optional[Scene] = None,
        base_scene: Optional[Scene] = None,
        linewidth: float = 0.003,
    ):
        params = validated(
            CircleParameters,
            distance_to_center=distance_to_center,
            circumference=circumference,
            point_count=point_count,
            rotation_axis=tuple(rotation_axis),
            rotation_angle=rotation_angle,
        )
        self.state = CircleState.CONSTRUCTING

        self.distance_to_center = params.distance_to_center
        self.distance_to_center_radians = params.distance_to_center * math.pi / 2
        self.circumference = params.circumference
        self.point_count = params.point_count
        self.default_rotation = default_rotation if default_rotation is not None else default_orientation()
        self.rotation_axis = np.array(params.rotation_axis, dtype=np.float64)
        self.rotation_angle = params.rotation_angle
        self.applied_rotation = Rotation.identity()
        self.set_applied_rotation()

        self.settings = settings if settings is not None else FiberSettings()
        self.scene = scene if scene is not None else Scene(SceneRole.MAIN)
        self.base_scene = base_scene if base_scene is not None else Scene(SceneRole.BASE_SPACE)
        self.linewidth = linewidth

        indices = range(self.point_count)
        positions = self.default_rotation.apply(np.array([self.point_coordinate(j) for j in indices]))
        colors = np.array([rainbow(j, self.point_count).to_unit() for j in indices])
        self.base_points = BasePointCloud(PointsGeometry(positions.reshape(-1, 3), colors), owner=self)
        self.base_scene.add(self.base_points)

        self.curves: List[FiberCurve] = []
        self.rebuild_fibers()
        self.state = CircleState.RENDERED
        logger.debug(
            f"Circle built: offset={self.distance_to_center}, circumference={self.circumference:.4f}, "
            f"points={self.point_count}"
        )

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def point_coordinate(self, point_index: int) -> np.ndarray:
        """Base point `point_index` before the default orientation is applied."""
        theta = self.distance_to_center_radians
        phi = self.circumference * point_index / self.point_count
        return np.array([
            math.cos(theta) * math.sin(phi),
            math.sin(theta),
            math.cos(theta) * math.cos(phi),
        ])

    @property
    def points(self) -> np.ndarray:
        return self.base_points.points

    @property
    def colors(self) -> np.ndarray:
        return self.base_points.colors

    # ------------------------------------------------------------------
    # Incremental rotation
    # ------------------------------------------------------------------
    def set_applied_rotation(self) -> None:
        self.applied_rotation = axis_angle_rotation(self.rotation_axis, self.rotation_angle)

    def set_rotation_axis(self, axis: Sequence[float]) -> None:
        self._check_alive()
        axis = np.asarray(axis, dtype=np.float64)
        if axis.shape != (3,) or not np.all(np.isfinite(axis)):
            raise ParameterRangeError(f"Rotation axis must be 3 finite components, got {axis}")
        self.rotation_axis = axis.copy()
        self.set_applied_rotation()

    def set_rotation_axis_component(self, index: int, value: float) -> None:
        axis = self.rotation_axis.copy()
        axis[index] = value
        self.set_rotation_axis(axis)

    def set_rotation_angle(self, angle: float) -> None:
        self._check_alive()
        if not math.isfinite(angle) or angle < 0.0:
            raise ParameterRangeError(f"Rotation angle must be finite and >= 0, got {angle}")
        self.rotation_angle = float(angle)
        self.set_applied_rotation()

    def rotate_step(self) -> bool:
        """Advance one animation tick.

        Rotates the base points in place when the axis is non-trivial and
        rebuilds every fiber when the angle is positive.

        Returns:
            bool: True if the fibers were rebuilt.
        """
        self._check_alive()
        self.state = CircleState.ROTATING
        if np.any(np.abs(self.rotation_axis) > AXIS_EPSILON):
            positions = self.base_points.geometry.positions
            positions[:] = self.applied_rotation.apply(positions)
        rebuilt = self.rotation_angle > 0
        if rebuilt:
            self.rebuild_fibers()
        self.state = CircleState.RENDERED
        return rebuilt

    # ------------------------------------------------------------------
    # Fibers
    # ------------------------------------------------------------------
    def rebuild_fibers(self, resolution: Optional[int] = None, compress_to_ball: Optional[bool] = None) -> None:
        """Drop every fiber and build them again from the current base points.

        `resolution` and `compress_to_ball` default to the shared settings.

        Raises:
            ParameterRangeError: If `resolution` is outside
                [MIN_FIBER_RESOLUTION, settings.max_fiber_resolution]; the
                current fibers are kept.
        """
        self._check_alive()
        if resolution is None:
            resolution = self.settings.fiber_resolution
        if compress_to_ball is None:
            compress_to_ball = self.settings.compress_to_ball

        if not MIN_FIBER_RESOLUTION <= resolution <= self.settings.max_fiber_resolution:
            raise ParameterRangeError(
                f"Fiber resolution must be in [{MIN_FIBER_RESOLUTION}, "
                f"{self.settings.max_fiber_resolution}], got {resolution}"
            )

        curves = []
        for position, color in zip(self.base_points.points, self.base_points.colors):
            curve = assemble_fiber_curve(
                position,
                color,
                resolution,
                compress_to_ball=compress_to_ball,
                max_fiber_resolution=self.settings.max_fiber_resolution,
                linewidth=self.linewidth,
            )
            curve.owner = self
            curves.append(curve)

        self._release_curves()
        for curve in curves:
            self.scene.add(curve)
        self.curves = curves

    def _release_curves(self) -> None:
        for curve in self.curves:
            curve.dispose()
            self.scene.remove(curve)
        self.curves = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def destroy(self) -> None:
        """Release every owned renderable and deregister it from both scenes."""
        if self.state is CircleState.DESTROYED:
            logger.warning("destroy() called on an already destroyed circle; ignoring")
            return
        self.base_points.dispose()
        self.base_scene.remove(self.base_points)
        self._release_curves()
        self.state = CircleState.DESTROYED
        logger.debug(f"Circle destroyed: points={self.point_count}")

    @property
    def destroyed(self) -> bool:
        return self.state is CircleState.DESTROYED

    def parameters(self) -> CircleParameters:
        """Current parametrization, for destroy-then-reconstruct."""
        return CircleParameters(
            distance_to_center=self.distance_to_center,
            circumference=self.circumference,
            point_count=self.point_count,
            rotation_axis=tuple(float(c) for c in self.rotation_axis),
            rotation_angle=self.rotation_angle,
        )

    def _check_alive(self) -> None:
        if self.state is CircleState.DESTROYED:
            raise CircleDestroyedError("Circle has been destroyed")

    def __repr__(self) -> str:
        return (
            f"BaseSpaceCircle(offset={self.distance_to_center}, circumference={self.circumference:.4f}, "
            f"points={self.point_count}, state={self.state.value})"
        )
