"""
hopfviz: interactive visualization of the Hopf fibration.

Base-space circles on S² are sampled, every sample's fiber on S³ is
stereographically projected to R³ (optionally squeezed into the unit ball)
and drawn as a colored polyline.
"""

from hopfviz.core.version import __version__

__all__ = ["__version__"]
