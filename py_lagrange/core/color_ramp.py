"""
Color ramp model and 1-D gradient synthesis.

This module implements:
- Color ramp steps and the capped, sorted ramp container
- Shader uniform views (fixed-length colors/factors arrays)
- Ramp synthesis into a caller-owned ``width x 1`` RGBA8 buffer
"""

import math
import uuid
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import structlog

from .buffers import BufferLike, TextureData, allocate_buffer, check_buffer
from .color import Color, lerp_arrays, units_to_bytes
from .geometry import CHANNELS, clamp, offset_of, truncate_to
from ..config import settings

logger = structlog.get_logger()


class RampCapacityError(ValueError):
    """Raised when a ramp would exceed its maximum step count."""


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass
class ColorRampStep:
    """A color stop at ``factor`` along the ramp."""

    factor: float
    color: Color
    id: str = field(default_factory=_new_id)

    def clone(self) -> "ColorRampStep":
        return ColorRampStep(self.factor, self.color.clone(), self.id)


class ColorRamp:
    """
    Ordered list of color stops, sorted ascending by factor.

    The step count is capped because the planet shaders receive the ramp as
    fixed-length uniform arrays.
    """

    def __init__(self, steps: Optional[Iterable[ColorRampStep]] = None, max_steps: Optional[int] = None):
        self.max_steps = max_steps or settings.max_ramp_steps
        self._steps: List[ColorRampStep] = []
        for step in steps or []:
            self.add_step(step.factor, step.color, step.id)

    @classmethod
    def from_hex(cls, stops: Sequence[Tuple[float, str]], max_steps: Optional[int] = None) -> "ColorRamp":
        """Build a ramp from ``(factor, "#rrggbb")`` pairs."""
        return cls(
            [ColorRampStep(factor, Color.from_hex(hex_color)) for factor, hex_color in stops],
            max_steps=max_steps,
        )

    @property
    def steps(self) -> List[ColorRampStep]:
        return self._steps

    @property
    def size(self) -> int:
        return len(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self):
        return iter(self._steps)

    @property
    def colors(self) -> List[Color]:
        """Step colors padded with black to ``max_steps``."""
        colors = [step.color for step in self._steps]
        return colors + [Color() for _ in range(self.max_steps - len(colors))]

    @property
    def factors(self) -> List[float]:
        """Step factors padded with ``0.0`` to ``max_steps``."""
        factors = [step.factor for step in self._steps]
        return factors + [0.0] * (self.max_steps - len(factors))

    def get_step(self, step_id: str) -> ColorRampStep:
        for step in self._steps:
            if step.id == step_id:
                return step
        raise KeyError(step_id)

    def add_step(self, factor: float, color: Color, step_id: Optional[str] = None) -> ColorRampStep:
        """
        Insert a step, keeping the ramp sorted.

        Args:
            factor: Position along the ramp, clamped to ``[0, 1]``
            color: Step color
            step_id: Optional explicit identifier

        Returns:
            The inserted step

        Raises:
            RampCapacityError: If the ramp is full
        """
        if len(self._steps) >= self.max_steps:
            raise RampCapacityError(f"Color ramp is limited to {self.max_steps} steps")

        step = ColorRampStep(clamp(factor, 0.0, 1.0), color.clone(), step_id or _new_id())
        self._steps.append(step)
        self.sort()
        return step

    def update_step(self, step_id: str, factor: Optional[float] = None, color: Optional[Color] = None) -> ColorRampStep:
        step = self.get_step(step_id)
        if factor is not None:
            step.factor = clamp(factor, 0.0, 1.0)
        if color is not None:
            step.color = color.clone()
        self.sort()
        return step

    def remove_step(self, step_id: str) -> ColorRampStep:
        step = self.get_step(step_id)
        self._steps.remove(step)
        return step

    def sort(self) -> None:
        # stable: steps sharing a factor keep insertion order
        self._steps.sort(key=lambda s: s.factor)

    def clone(self) -> "ColorRamp":
        return ColorRamp([step.clone() for step in self._steps], max_steps=self.max_steps)


def _fill_ramp(data: np.ndarray, width: int, steps: Sequence[ColorRampStep]) -> None:
    for current, following in zip(steps, steps[1:]):
        start_x = truncate_to(current.factor * width)
        end_x = truncate_to(following.factor * width)
        total_pixels = math.ceil(end_x - start_x)
        if total_pixels <= 0:
            continue

        start = math.floor(start_x)
        lo = max(start, 0)
        hi = min(start + total_pixels, width)
        if lo >= hi:
            continue

        t = truncate_to(np.arange(lo - start, hi - start) / total_pixels)
        rgb = lerp_arrays(current.color.as_array(), following.color.as_array(), t[:, None])
        segment = data[offset_of(lo, 0, width):offset_of(hi, 0, width)].reshape(-1, CHANNELS)
        segment[:, :3] = units_to_bytes(rgb)
        segment[:, 3] = 255


def synthesize_ramp(buffer: BufferLike, width: int, steps: Sequence[ColorRampStep]) -> None:
    """
    Fill a ``width x 1`` RGBA8 buffer with the gradient described by ``steps``.

    An empty step list leaves the buffer untouched. Otherwise the buffer is
    zeroed, then each consecutive pair of steps writes its segment starting
    at ``floor(round4(factor * width))``. A later segment overwrites the last
    pixel of the previous one when their ranges touch.

    Args:
        buffer: Caller-owned buffer of at least ``width * 4`` bytes
        width: Texture width in pixels
        steps: Steps sorted ascending by factor

    Raises:
        BufferSizeError: If the buffer is too small for ``width``
    """
    data = check_buffer(buffer, width, 1)
    steps = list(steps)
    if not steps:
        return

    data.fill(0)
    _fill_ramp(data, width, steps)
    logger.debug("Ramp synthesized", width=width, steps=len(steps))


def create_ramp_texture(width: int, steps: Sequence[ColorRampStep]) -> TextureData:
    """Allocate a new ramp texture and synthesize it."""
    data = allocate_buffer(width, 1)
    synthesize_ramp(data, width, steps)
    return TextureData(data=data, width=width, height=1)


def recalculate_ramp_texture(texture: TextureData, steps: Sequence[ColorRampStep]) -> TextureData:
    """Re-synthesize an existing ramp texture in place."""
    synthesize_ramp(texture.data, texture.width, steps)
    texture.needs_update = True
    return texture
