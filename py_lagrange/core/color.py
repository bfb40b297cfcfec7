"""
RGB colors in the unit range and their RGBA8 byte form.

All color math happens on floats in ``[0, 1]``; conversion to pixel bytes uses
``floor(c * 255)`` everywhere, clipped to ``[0, 255]``.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

# Byte to unit-range multiplier
INT8_TO_UNIT_MUL = 1.0 / 255.0


def unit_to_byte(value: float) -> int:
    """Convert a unit-range channel to a byte with the floor rule."""
    return int(min(255, max(0, math.floor(value * 255.0))))


def units_to_bytes(values: np.ndarray) -> np.ndarray:
    """Array version of :func:`unit_to_byte`, returns ``uint8``."""
    return np.clip(np.floor(values * 255.0), 0, 255).astype(np.uint8)


@dataclass
class Color:
    """Linear RGB color with float channels."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0

    @classmethod
    def from_hex(cls, value) -> "Color":
        """
        Build a color from ``"#rrggbb"``, ``"rrggbb"``, ``"#rgb"`` or an int.

        Raises:
            ValueError: If the string is not a hex color
        """
        if isinstance(value, int):
            n = value
        else:
            text = value.strip().lstrip("#")
            if len(text) == 3:
                text = "".join(ch * 2 for ch in text)
            if len(text) != 6:
                raise ValueError(f"Invalid hex color: {value!r}")
            n = int(text, 16)
        return cls(
            ((n >> 16) & 0xFF) / 255.0,
            ((n >> 8) & 0xFF) / 255.0,
            (n & 0xFF) / 255.0,
        )

    def to_hex(self) -> str:
        r, g, b = (clamped_byte(c) for c in (self.r, self.g, self.b))
        return f"#{r:02x}{g:02x}{b:02x}"

    def to_bytes(self) -> Tuple[int, int, int]:
        return unit_to_byte(self.r), unit_to_byte(self.g), unit_to_byte(self.b)

    def as_array(self) -> np.ndarray:
        return np.array([self.r, self.g, self.b], dtype=float)

    def lerp(self, other: "Color", t: float) -> "Color":
        return lerp_colors(self, other, t)

    def clone(self) -> "Color":
        return Color(self.r, self.g, self.b)


def clamped_byte(value: float) -> int:
    # hex output rounds instead of flooring so from_hex/to_hex round-trips
    return int(min(255, max(0, round(value * 255.0))))


def lerp_colors(a: Color, b: Color, t: float) -> Color:
    """Per-channel ``a + (b - a) * t``."""
    return Color(
        a.r + (b.r - a.r) * t,
        a.g + (b.g - a.g) * t,
        a.b + (b.b - a.b) * t,
    )


def lerp_arrays(a: np.ndarray, b: np.ndarray, t) -> np.ndarray:
    """Vectorized :func:`lerp_colors`; ``t`` broadcasts against the channels."""
    return a + (b - a) * t
