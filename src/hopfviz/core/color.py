"""
HSV -> RGB mapping and the rainbow palette used to tell fibers apart.

Exports:
    - HSV: (h, s, v) record accepted by hsv_to_rgb.
    - RGB: Integer color in [0, 255].
    - hsv_to_rgb: Six-sector HSV conversion.
    - rainbow: Deterministic color for index i out of n.
"""

import math
from typing import Any, NamedTuple, Optional, Tuple

__all__ = [
    "HSV",
    "RGB",
    "hsv_to_rgb",
    "rainbow",
    "RAINBOW_HUE_SPAN",
]

# Stops short of the full wheel so the last fiber is violet, not red again.
RAINBOW_HUE_SPAN = 0.85


class HSV(NamedTuple):
    h: float
    s: float
    v: float


class RGB(NamedTuple):
    r: int
    g: int
    b: int

    def to_unit(self) -> Tuple[float, float, float]:
        """Channels rescaled to [0, 1]."""
        return (self.r / 255.0, self.g / 255.0, self.b / 255.0)


# Channel order per sector, picking from (v, t, p, q).
_SECTOR_TABLE = (
    ("v", "t", "p"),
    ("q", "v", "p"),
    ("p", "v", "t"),
    ("p", "q", "v"),
    ("t", "p", "v"),
    ("v", "p", "q"),
)


def _unpack_hsv(record: Any) -> Tuple[float, float, float]:
    if isinstance(record, dict):
        return record["h"], record["s"], record["v"]
    return record.h, record.s, record.v


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def hsv_to_rgb(h: Any, s: Optional[float] = None, v: Optional[float] = None) -> RGB:
    """Convert HSV to an integer RGB triple.

    Call either as ``hsv_to_rgb(h, s, v)`` or with a single record holding
    ``h``, ``s`` and ``v`` (a mapping, an :class:`HSV`, or any object with
    those attributes). Hues outside [0, 1) wrap around through the sector
    index.

    Raises:
        TypeError: If only one of `s` and `v` is given.
    """
    if s is None and v is None:
        h, s, v = _unpack_hsv(h)
    elif s is None or v is None:
        raise TypeError("hsv_to_rgb() takes either a single HSV record or all three of h, s, v")

    i = math.floor(h * 6)
    f = h * 6 - i
    channels = {
        "v": v,
        "p": v * (1 - s),
        "q": v * (1 - f * s),
        "t": v * (1 - (1 - f) * s),
    }
    r_key, g_key, b_key = _SECTOR_TABLE[i % 6]
    return RGB(
        _round_half_up(channels[r_key] * 255),
        _round_half_up(channels[g_key] * 255),
        _round_half_up(channels[b_key] * 255),
    )


def rainbow(index: int, count: int) -> RGB:
    """Color for item `index` of `count`, spread over 85% of the hue wheel."""
    return hsv_to_rgb(index / count * RAINBOW_HUE_SPAN, 1.0, 1.0)
