"""
Application state: shared fiber settings, the two scenes and the ordered
collection of base-space circles.

Every structural change goes through destroy-then-reconstruct: a circle is
never reparametrized in place. Only the most recent circle responds to the
parametrization controls; every circle is advanced by ``tick()``.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from scipy.spatial.transform import Rotation

from hopfviz.core.circle import BaseSpaceCircle
from hopfviz.core.config import AppConfig, CircleParameters, FiberSettings, validated
from hopfviz.core.enums import SceneRole
from hopfviz.core.exceptions import ParameterRangeError
from hopfviz.core.logging import logger
from hopfviz.core.quaternion import default_orientation
from hopfviz.core.scene import Scene

__all__ = ["AppState"]


class AppState:
    def __init__(
        self,
        config: Optional[AppConfig] = None,
        scene: Optional[Scene] = None,
        base_scene: Optional[Scene] = None,
        create_default: bool = True,
    ):
        self.config = config if config is not None else AppConfig()
        # Copy so that runtime changes do not leak back into the loaded config.
        self.settings: FiberSettings = self.config.fibers.model_copy()
        self.scene = scene if scene is not None else Scene(SceneRole.MAIN)
        self.base_scene = base_scene if base_scene is not None else Scene(SceneRole.BASE_SPACE)
        self.default_rotation: Rotation = default_orientation()
        self.circles: List[BaseSpaceCircle] = []
        if create_default:
            self.create_circle(**self.config.circle.model_dump())

    # ------------------------------------------------------------------
    # Circle collection
    # ------------------------------------------------------------------
    def create_circle(
        self,
        distance_to_center: float,
        circumference: float,
        point_count: int,
        default_rotation: Optional[Rotation] = None,
        rotation_axis: Sequence[float] = (0.0, 0.0, 0.0),
        rotation_angle: float = 0.0,
    ) -> BaseSpaceCircle:
        circle = BaseSpaceCircle(
            distance_to_center,
            circumference,
            point_count,
            default_rotation if default_rotation is not None else self.default_rotation,
            rotation_axis,
            rotation_angle,
            settings=self.settings,
            scene=self.scene,
            base_scene=self.base_scene,
        )
        self.circles.append(circle)
        return circle

    @property
    def active_circle(self) -> Optional[BaseSpaceCircle]:
        """The circle the parametrization controls act on (the last one created)."""
        return self.circles[-1] if self.circles else None

    def detach(self) -> BaseSpaceCircle:
        """Leave the current circle in place and start a fresh default one."""
        logger.info(f"Detaching circle #{len(self.circles)}")
        return self.create_circle(**self._default_parameters().model_dump())

    def clear_all(self) -> BaseSpaceCircle:
        """Destroy every circle, then start over with a single default circle."""
        logger.info(f"Clearing {len(self.circles)} circle(s)")
        for circle in self.circles:
            circle.destroy()
        self.circles = []
        return self.create_circle(**self._default_parameters().model_dump())

    def _default_parameters(self) -> CircleParameters:
        # Spawned circles always start unrotated, as a fresh GUI reset does.
        return CircleParameters(
            distance_to_center=self.config.circle.distance_to_center,
            circumference=self.config.circle.circumference,
            point_count=self.config.circle.point_count,
        )

    # ------------------------------------------------------------------
    # Global settings
    # ------------------------------------------------------------------
    def set_fiber_resolution(self, resolution: int) -> None:
        """Change the shared resolution and rebuild every circle.

        Raises:
            ParameterRangeError: Outside the configured bounds; nothing is rebuilt.
        """
        candidate = validated(FiberSettings, **{**self.settings.model_dump(), "fiber_resolution": resolution})
        self.settings.fiber_resolution = candidate.fiber_resolution
        self.rebuild_all()

    def set_compress_to_ball(self, flag: bool) -> None:
        self.settings.compress_to_ball = bool(flag)
        self.rebuild_all()

    def rebuild_all(self) -> None:
        logger.debug(
            f"Rebuilding {len(self.circles)} circle(s): resolution={self.settings.fiber_resolution}, "
            f"ball={self.settings.compress_to_ball}"
        )
        for circle in self.circles:
            circle.rebuild_fibers(self.settings.fiber_resolution, self.settings.compress_to_ball)

    # ------------------------------------------------------------------
    # Parametrization of the active circle
    # ------------------------------------------------------------------
    def _reconstruct_active(self, **changes) -> BaseSpaceCircle:
        circle = self._require_active()
        params = validated(CircleParameters, **{**circle.parameters().model_dump(), **changes})
        default_rotation = circle.default_rotation
        self.circles.pop().destroy()
        return self.create_circle(default_rotation=default_rotation, **params.model_dump())

    def set_center_offset(self, value: float) -> BaseSpaceCircle:
        return self._reconstruct_active(distance_to_center=value)

    def set_circumference(self, value: float) -> BaseSpaceCircle:
        return self._reconstruct_active(circumference=value)

    def set_point_count(self, value: int) -> BaseSpaceCircle:
        return self._reconstruct_active(point_count=value)

    def set_rotation_axis_component(self, index: int, value: float) -> None:
        if index not in (0, 1, 2):
            raise ParameterRangeError(f"Axis component index must be 0, 1 or 2, got {index}")
        self._require_active().set_rotation_axis_component(index, value)

    def set_rotation_angle(self, angle: float) -> None:
        self._require_active().set_rotation_angle(angle)

    def _require_active(self) -> BaseSpaceCircle:
        circle = self.active_circle
        if circle is None:
            raise ParameterRangeError("No circle to modify")
        return circle

    # ------------------------------------------------------------------
    # Animation
    # ------------------------------------------------------------------
    def tick(self) -> int:
        """Advance every circle by one frame; returns how many were rebuilt."""
        return sum(1 for circle in self.circles if circle.rotate_step())
