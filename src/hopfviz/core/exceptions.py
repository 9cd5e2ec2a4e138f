"""
Exception hierarchy for hopfviz.

Exports:
    - HopfVizError: Base class for every error raised by the package.
    - DegenerateBasePointError: Base point the fiber generator cannot use.
    - ParameterRangeError: Setting rejected at the configuration boundary.
    - CircleDestroyedError: Operation on a circle after destroy().
    - ResourceError: Renderable released more than once.
    - ConfigError: Missing or unreadable configuration file.
"""

__all__ = [
    "HopfVizError",
    "DegenerateBasePointError",
    "ParameterRangeError",
    "CircleDestroyedError",
    "ResourceError",
    "ConfigError",
]


class HopfVizError(Exception):
    """Base class for hopfviz errors."""


class DegenerateBasePointError(HopfVizError, ValueError):
    """Base point is not a finite unit vector on S²."""


class ParameterRangeError(HopfVizError, ValueError):
    """A parameter falls outside its configured bounds."""


class CircleDestroyedError(HopfVizError, RuntimeError):
    """The circle has been destroyed and cannot be used again."""


class ResourceError(HopfVizError, RuntimeError):
    """A geometry or material was disposed twice."""


class ConfigError(HopfVizError):
    """Configuration file could not be found or parsed."""
