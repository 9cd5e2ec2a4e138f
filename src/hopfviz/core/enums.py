# hopfviz/core/enums.py

from enum import Enum

class CircleState(str, Enum):
    CONSTRUCTING = "constructing"
    RENDERED = "rendered"
    ROTATING = "rotating"
    DESTROYED = "destroyed"

class SceneRole(str, Enum):
    MAIN = "main"            # projected fibers
    BASE_SPACE = "base"      # S² with the sampled base points

__all__ = [
    "CircleState",
    "SceneRole",
]
