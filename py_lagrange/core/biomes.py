"""
Biome regions and 2-D soft-blended biome map synthesis.

A biome is an axis-aligned rect in humidity (x) / temperature (y) space
with a fill color and a smoothness factor. Synthesis paints every region
into a ``size x size`` RGBA8 buffer where alpha is the accumulated
coverage, fading in from each region's border over a width proportional
to the region's own footprint.
"""

import uuid
from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np
import structlog

from .buffers import BufferLike, TextureData, allocate_buffer, check_buffer
from .color import INT8_TO_UNIT_MUL, Color, lerp_arrays, units_to_bytes
from .geometry import (
    CHANNELS,
    Rect,
    avg,
    distance_field,
    find_rect_overlaps,
    rect_from_bounds,
    truncate_to,
)

logger = structlog.get_logger()


@dataclass
class BiomeDimensions:
    """Normalized temperature/humidity bounds of a biome."""

    temperature_min: float = 0.0
    temperature_max: float = 1.0
    humidity_min: float = 0.0
    humidity_max: float = 1.0


@dataclass
class BiomeRegion:
    """A rectangular biome in humidity/temperature space."""

    dims: BiomeDimensions
    color: Color
    smoothness: float = 0.0
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    @property
    def temp_min(self) -> float:
        return self.dims.temperature_min

    @property
    def temp_max(self) -> float:
        return self.dims.temperature_max

    @property
    def humi_min(self) -> float:
        return self.dims.humidity_min

    @property
    def humi_max(self) -> float:
        return self.dims.humidity_max

    def to_rect(self, size: int) -> Rect:
        """Pixel rect of this region on a ``size x size`` grid."""
        return rect_from_bounds(self.humi_min, self.humi_max, self.temp_min, self.temp_max, size)

    def clone(self) -> "BiomeRegion":
        return BiomeRegion(
            BiomeDimensions(
                temperature_min=self.temp_min,
                temperature_max=self.temp_max,
                humidity_min=self.humi_min,
                humidity_max=self.humi_max,
            ),
            self.color.clone(),
            self.smoothness,
            self.id,
        )


def edge_factors(dist: np.ndarray, avg_smoothness: float) -> np.ndarray:
    """
    Coverage in ``[0, 1]`` for each pixel given its distance to the border.

    A zero smoothness gives a hard edge: border pixels (distance 0) stay
    transparent and every other pixel, shared-edge ones included, is fully
    covered.
    """
    if avg_smoothness <= 0:
        return np.where(dist > 0, 1.0, 0.0)
    return truncate_to(np.clip(dist / avg_smoothness, 0.0, 1.0))


def _paint_region(pixels: np.ndarray, size: int, region: BiomeRegion, rect: Rect, overlaps: List[Rect]) -> None:
    window = rect.clip(size, size)
    if window.is_empty:
        return

    avg_smoothness = avg(rect.w * region.smoothness, rect.h * region.smoothness)
    a = edge_factors(distance_field(rect, overlaps, window), avg_smoothness)

    view = pixels[window.y:window.bottom, window.x:window.right]
    existing_alpha_bytes = view[..., 3].astype(float)
    existing_alpha = existing_alpha_bytes * INT8_TO_UNIT_MUL
    existing_rgb = view[..., :3] * INT8_TO_UNIT_MUL
    painted = existing_alpha > 0

    biome_rgb = region.color.as_array()
    blended = lerp_arrays(existing_rgb, biome_rgb, (1.0 - existing_alpha)[..., None])
    fresh = np.broadcast_to(biome_rgb, blended.shape)

    rgb = np.where(painted[..., None], blended, fresh)
    alpha = np.where(
        painted,
        np.clip(existing_alpha_bytes + a * 255.0, 0.0, 255.0),
        a * 255.0,
    )

    view[..., :3] = units_to_bytes(rgb)
    view[..., 3] = np.floor(alpha).astype(np.uint8)


def synthesize_biomes(buffer: BufferLike, size: int, regions: Sequence[BiomeRegion]) -> None:
    """
    Fill a ``size x size`` RGBA8 buffer with soft-blended biome regions.

    An empty region list leaves the buffer untouched. Otherwise the buffer
    is zeroed and regions are painted from last to first. A pixel painted
    for the first time takes the region color with alpha equal to its edge
    coverage. A pixel that already has alpha blends toward the region color
    by ``1 - existing_alpha`` and accumulates coverage, so opaque pixels of
    later-inserted regions keep their color.

    Edges a region shares with an already-painted region are not treated
    as borders, so neighbouring biomes do not fade out along their seam.

    Args:
        buffer: Caller-owned buffer of at least ``size * size * 4`` bytes
        size: Side of the square texture in pixels
        regions: Biome regions in insertion order

    Raises:
        BufferSizeError: If the buffer is too small for ``size``
    """
    data = check_buffer(buffer, size, size)
    regions = list(regions)
    if not regions:
        return

    pixels = data.reshape(size, size, CHANNELS)
    pixels.fill(0)

    placed: List[Rect] = []
    for region in reversed(regions):
        rect = region.to_rect(size)
        overlaps = find_rect_overlaps(rect, placed, size, size)
        _paint_region(pixels, size, region, rect, overlaps)
        if not rect.is_empty:
            placed.append(rect)

    logger.debug("Biomes synthesized", size=size, regions=len(regions))


def create_biome_texture(size: int, regions: Sequence[BiomeRegion]) -> TextureData:
    """Allocate a new biome texture and synthesize it."""
    data = allocate_buffer(size, size)
    synthesize_biomes(data, size, regions)
    return TextureData(data=data, width=size, height=size)


def recalculate_biome_texture(texture: TextureData, regions: Sequence[BiomeRegion]) -> TextureData:
    """Re-synthesize an existing biome texture in place."""
    synthesize_biomes(texture.data, texture.width, regions)
    texture.needs_update = True
    return texture
