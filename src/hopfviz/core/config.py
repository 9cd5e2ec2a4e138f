"""
Validated configuration models for hopfviz.

Exports:
    - FiberSettings: Global settings shared by every circle (resolution, ball mode).
    - CircleParameters: Parametrization of one base-space circle.
    - ViewSettings: Viewer-only knobs (figure, camera, animation).
    - AppConfig: Top-level model, usually loaded from YAML.
    - validated: Build a model, turning pydantic errors into ParameterRangeError.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from hopfviz.core.exceptions import ParameterRangeError

__all__ = [
    "FiberSettings",
    "CircleParameters",
    "ViewSettings",
    "AppConfig",
    "validated",
    "MIN_FIBER_RESOLUTION",
    "MAX_FIBER_RESOLUTION",
]

MIN_FIBER_RESOLUTION = 10
MAX_FIBER_RESOLUTION = 500
TWO_PI = 2.0 * math.pi

ModelT = TypeVar("ModelT", bound=BaseModel)


class FiberSettings(BaseModel):
    """Settings read by every circle rebuild."""
    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    fiber_resolution: int = Field(
        128, ge=MIN_FIBER_RESOLUTION, le=MAX_FIBER_RESOLUTION,
        description="Samples per fiber before closing the loop",
    )
    max_fiber_resolution: int = Field(
        512, ge=1, description="Vertex bound for the per-curve color buffer"
    )
    compress_to_ball: bool = Field(False, description="Map R³ into the open unit ball")

    @model_validator(mode="after")
    def _resolution_fits_buffer(self) -> "FiberSettings":
        if self.fiber_resolution > self.max_fiber_resolution:
            raise ValueError(
                f"fiber_resolution ({self.fiber_resolution}) exceeds "
                f"max_fiber_resolution ({self.max_fiber_resolution})"
            )
        return self


class CircleParameters(BaseModel):
    """Fields carried forward when a circle is rebuilt with new parameters."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    distance_to_center: float = Field(0.0, ge=-1.0, le=0.999, description="Latitude offset, -1..0.999")
    circumference: float = Field(TWO_PI, ge=0.0, le=TWO_PI, description="Arc covered by the points")
    point_count: int = Field(10, ge=1, description="Number of base points")
    rotation_axis: Tuple[float, float, float] = Field((0.0, 0.0, 0.0), description="Incremental rotation axis")
    rotation_angle: float = Field(0.0, ge=0.0, description="Incremental rotation per tick (radians)")

    @field_validator("rotation_axis")
    @classmethod
    def _finite_axis(cls, v):
        if not all(math.isfinite(c) for c in v):
            raise ValueError("rotation_axis components must be finite")
        return v


class ViewSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    figure_size: Tuple[float, float] = (12.0, 8.0)
    line_width: float = Field(1.0, gt=0.0, description="Matplotlib line width in points")
    point_size: float = Field(25.0, gt=0.0)
    camera_elevation: float = 33.7
    camera_azimuth: float = 180.0
    axis_limit: float = Field(3.0, gt=0.0, description="Half-width of the R³ view box")
    interval_ms: int = Field(30, ge=1, description="Animation frame interval")
    background: str = "black"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    fibers: FiberSettings = Field(default_factory=FiberSettings)
    circle: CircleParameters = Field(default_factory=CircleParameters)
    view: ViewSettings = Field(default_factory=ViewSettings)

    @classmethod
    def from_mapping(cls, data: Dict[str, Any] | None) -> "AppConfig":
        return validated(cls, **(data or {}))


def validated(model_cls: Type[ModelT], **fields: Any) -> ModelT:
    """
    Construct `model_cls` from `fields`.

    Raises:
        ParameterRangeError: If any field is rejected by the model.
    """
    try:
        return model_cls.model_validate(fields)
    except ValidationError as exc:
        raise ParameterRangeError(str(exc)) from exc

