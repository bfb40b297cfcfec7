"""
Core texture synthesis functionality.
"""

from .buffers import BufferSizeError, TextureData, allocate_buffer, check_buffer
from .color import Color, lerp_colors
from .color_ramp import (
    ColorRamp,
    ColorRampStep,
    RampCapacityError,
    create_ramp_texture,
    recalculate_ramp_texture,
    synthesize_ramp,
)
from .biomes import (
    BiomeDimensions,
    BiomeRegion,
    create_biome_texture,
    recalculate_biome_texture,
    synthesize_biomes,
)
from .geometry import Rect, find_min_distance_to_rect, find_rect_overlaps, offset_of, round4, truncate_to
from .textures import TextureKind, TextureService, TextureSlot

__all__ = ['BufferSizeError', 'TextureData', 'allocate_buffer', 'check_buffer',
           'Color', 'lerp_colors',
           'ColorRamp', 'ColorRampStep', 'RampCapacityError',
           'create_ramp_texture', 'recalculate_ramp_texture', 'synthesize_ramp',
           'BiomeDimensions', 'BiomeRegion',
           'create_biome_texture', 'recalculate_biome_texture', 'synthesize_biomes',
           'Rect', 'find_min_distance_to_rect', 'find_rect_overlaps', 'offset_of', 'round4', 'truncate_to',
           'TextureKind', 'TextureService', 'TextureSlot']
