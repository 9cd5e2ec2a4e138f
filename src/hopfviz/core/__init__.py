"""
Core pipeline: color mapping, fiber generation, projection, curve assembly
and the base-space circle manager.
"""

from hopfviz.core.circle import BaseSpaceCircle
from hopfviz.core.color import HSV, RGB, hsv_to_rgb, rainbow
from hopfviz.core.curve import FiberCurve, assemble_fiber_curve
from hopfviz.core.fibration import (
    compress_r3_to_ball,
    hopf_fiber,
    hopf_map,
    project_fiber,
    stereographic_projection,
)
from hopfviz.core.scene import Scene
from hopfviz.core.state import AppState

__all__ = [
    "AppState",
    "BaseSpaceCircle",
    "FiberCurve",
    "HSV",
    "RGB",
    "Scene",
    "assemble_fiber_curve",
    "compress_r3_to_ball",
    "hopf_fiber",
    "hopf_map",
    "hsv_to_rgb",
    "project_fiber",
    "rainbow",
    "stereographic_projection",
]
