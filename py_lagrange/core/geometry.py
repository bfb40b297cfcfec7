"""
Pixel-grid geometry helpers shared by the texture synthesizers.

This module implements:
- Rect mapping from normalized bounds onto a pixel grid
- Overlap detection between placed rects
- Distance-to-edge computation that ignores edges shared with overlaps
- Fixed-precision truncation used to keep recomputation bit-stable
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, Union

import numpy as np

# Decimal precision applied to every interpolation parameter (4 digits)
DEFAULT_PRECISION = 1e4

# RGBA8 pixels
CHANNELS = 4


def clamp(n, min_value, max_value):
    """Clamp ``n`` so that ``min_value <= n <= max_value``."""
    return max(min_value, min(n, max_value))


def avg(*values: float) -> float:
    """Arithmetic mean of the given values (0.0 when empty)."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def truncate_to(value: Union[float, np.ndarray], precision: float = DEFAULT_PRECISION):
    """
    Truncate a value (or array of values) to a fixed decimal precision.

    Truncation is toward zero, so ``truncate_to(0.12349)`` is ``0.1234``.
    Inputs that only differ below the precision map to the same output,
    which keeps repeated synthesis byte-identical.

    Args:
        value: Scalar or numpy array
        precision: Power of ten to keep, ``1e4`` keeps 4 decimals

    Returns:
        Truncated float, or a new float array for array input
    """
    if isinstance(value, np.ndarray):
        return np.trunc(value * precision) / precision
    return math.trunc(value * precision) / precision


def round4(value):
    """Shorthand for 4-decimal truncation."""
    return truncate_to(value, DEFAULT_PRECISION)


def offset_of(x: int, y: int, width: int) -> int:
    """
    Byte index of pixel ``(x, y)`` in a row-major RGBA8 buffer.

    All byte-level pixel addressing goes through this helper.
    """
    return (y * width + x) * CHANNELS


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rect in pixel coordinates, ``[x, x + w) x [y, y + h)``."""

    x: int
    y: int
    w: int
    h: int

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    @property
    def is_empty(self) -> bool:
        return self.w <= 0 or self.h <= 0

    @property
    def area(self) -> int:
        return 0 if self.is_empty else self.w * self.h

    def contains(self, px: int, py: int) -> bool:
        return self.x <= px < self.right and self.y <= py < self.bottom

    def touches(self, other: "Rect") -> bool:
        """True if the rects intersect or share an edge."""
        return (
            other.x <= self.right
            and self.x <= other.right
            and other.y <= self.bottom
            and self.y <= other.bottom
        )

    def clip(self, width: int, height: int) -> "Rect":
        """Intersection with the ``width x height`` grid (may be empty)."""
        x0 = clamp(self.x, 0, width)
        y0 = clamp(self.y, 0, height)
        x1 = clamp(self.right, 0, width)
        y1 = clamp(self.bottom, 0, height)
        return Rect(x0, y0, max(0, x1 - x0), max(0, y1 - y0))


def rect_from_bounds(x_min: float, x_max: float, y_min: float, y_max: float, size: int) -> Rect:
    """
    Map normalized ``[0, 1]`` bounds onto a ``size x size`` pixel grid.

    The origin is floored and the extent is ceiled, so a rect never loses
    the pixel its fractional bound starts in.
    """
    return Rect(
        x=math.floor(x_min * size),
        y=math.floor(y_min * size),
        w=math.ceil((x_max - x_min) * size),
        h=math.ceil((y_max - y_min) * size),
    )


def find_rect_overlaps(rect: Rect, placed: Sequence[Rect], width: int, height: int) -> List[Rect]:
    """
    Find previously placed rects that overlap or border ``rect``.

    Both sides are clipped to the ``width x height`` grid first. Rects that
    only share an edge count: the shared edge is what the distance
    computation needs to know about.

    Args:
        rect: Candidate rect
        placed: Rects already painted
        width: Grid width
        height: Grid height

    Returns:
        Clipped overlapping rects, in placement order
    """
    target = rect.clip(width, height)
    if target.is_empty:
        return []

    overlaps = []
    for other in placed:
        clipped = other.clip(width, height)
        if clipped.is_empty:
            continue
        if target.touches(clipped):
            overlaps.append(clipped)
    return overlaps


def _covered(overlaps: Sequence[Rect], px: int, py: int) -> bool:
    return any(o.contains(px, py) for o in overlaps)


def find_min_distance_to_rect(rect: Rect, px: int, py: int, overlaps: Sequence[Rect] = ()) -> float:
    """
    Distance from pixel ``(px, py)`` to the nearest relevant edge of ``rect``.

    Distances are measured in whole pixels along each axis, so pixels on
    the outermost row/column of the rect are at distance 0. An edge is
    skipped for this pixel when the neighbouring pixel just across it
    belongs to an overlapping rect: that edge is shared, not a border.

    Returns:
        The smallest remaining edge distance, ``inf`` when every edge is shared
    """
    candidates = []
    if not _covered(overlaps, rect.x - 1, py):
        candidates.append(px - rect.x)
    if not _covered(overlaps, rect.right, py):
        candidates.append(rect.right - 1 - px)
    if not _covered(overlaps, px, rect.y - 1):
        candidates.append(py - rect.y)
    if not _covered(overlaps, px, rect.bottom):
        candidates.append(rect.bottom - 1 - py)

    if not candidates:
        return math.inf
    return float(min(candidates))


def _coverage_mask(overlaps: Sequence[Rect], xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    # xs and ys broadcast against each other; one of them is usually a scalar
    mask = np.zeros(np.broadcast(xs, ys).shape, dtype=bool)
    for o in overlaps:
        mask |= (xs >= o.x) & (xs < o.right) & (ys >= o.y) & (ys < o.bottom)
    return mask


def distance_field(rect: Rect, overlaps: Sequence[Rect] = (), window: Rect = None) -> np.ndarray:
    """
    Vectorized :func:`find_min_distance_to_rect` over a window of ``rect``.

    Args:
        rect: Rect whose edges are measured
        overlaps: Rects sharing edges with ``rect``
        window: Sub-rect to evaluate, defaults to ``rect`` itself

    Returns:
        Float array of shape ``(window.h, window.w)``
    """
    window = window or rect
    cols = np.arange(window.x, window.right)
    rows = np.arange(window.y, window.bottom)

    left = (cols - rect.x).astype(float)[None, :]
    right = (rect.right - 1 - cols).astype(float)[None, :]
    top = (rows - rect.y).astype(float)[:, None]
    bottom = (rect.bottom - 1 - rows).astype(float)[:, None]

    shape = (rows.size, cols.size)
    left_shared = _coverage_mask(overlaps, rect.x - 1, rows)[:, None]
    right_shared = _coverage_mask(overlaps, rect.right, rows)[:, None]
    top_shared = _coverage_mask(overlaps, cols, rect.y - 1)[None, :]
    bottom_shared = _coverage_mask(overlaps, cols, rect.bottom)[None, :]

    dist = np.full(shape, np.inf)
    dist = np.minimum(dist, np.where(left_shared, np.inf, left))
    dist = np.minimum(dist, np.where(right_shared, np.inf, right))
    dist = np.minimum(dist, np.where(top_shared, np.inf, top))
    dist = np.minimum(dist, np.where(bottom_shared, np.inf, bottom))
    return dist
