"""
Named, reusable texture buffers with one synthesis in flight per buffer.

Each slot owns a single buffer that is re-synthesized in place whenever its
parameters change. Requests for the same slot are serialized; a request
that is overtaken by a newer one while waiting is dropped rather than run,
since only the latest parameter set matters.
"""

import threading
from enum import Enum
from typing import Dict, Optional, Sequence

import structlog

from .biomes import BiomeRegion, synthesize_biomes
from .buffers import TextureData, allocate_buffer
from .color_ramp import ColorRampStep, synthesize_ramp
from ..config import settings

logger = structlog.get_logger()


class TextureKind(str, Enum):
    """Which synthesizer fills a slot."""

    RAMP = "ramp"
    BIOME = "biome"


class TextureSlot:
    """A texture buffer guarded by a per-buffer critical section."""

    def __init__(self, name: str, kind: TextureKind, size: int):
        self.name = name
        self.kind = kind
        self._lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._requested = 0
        self._completed = 0
        self.texture = self._allocate(size)

    def _allocate(self, size: int) -> TextureData:
        height = 1 if self.kind == TextureKind.RAMP else size
        return TextureData(data=allocate_buffer(size, height), width=size, height=height, needs_update=False)

    @property
    def size(self) -> int:
        return self.texture.width

    @property
    def generation(self) -> int:
        """Ticket of the last request that actually ran."""
        return self._completed

    def _next_ticket(self) -> int:
        with self._state_lock:
            self._requested += 1
            return self._requested

    def _is_latest(self, ticket: int) -> bool:
        with self._state_lock:
            return ticket == self._requested

    def submit(self, params: Sequence) -> bool:
        """
        Re-synthesize the slot buffer from ``params``.

        Args:
            params: Ramp steps for ramp slots, biome regions for biome slots

        Returns:
            True if the synthesis ran, False if a newer request superseded it
        """
        ticket = self._next_ticket()
        with self._lock:
            if not self._is_latest(ticket):
                logger.debug("Synthesis superseded", slot=self.name, ticket=ticket)
                return False

            if self.kind == TextureKind.RAMP:
                synthesize_ramp(self.texture.data, self.texture.width, params)
            else:
                synthesize_biomes(self.texture.data, self.texture.width, params)
            self.texture.needs_update = True
            self._completed = ticket

        logger.debug("Slot synthesized", slot=self.name, ticket=ticket, params=len(params))
        return True

    def resize(self, size: int) -> TextureData:
        """Swap in a fresh zeroed buffer for a new texture size."""
        with self._lock:
            self.texture = self._allocate(size)
        logger.info("Slot resized", slot=self.name, size=size)
        return self.texture

    def snapshot(self) -> bytes:
        """Copy of the current buffer contents, taken between syntheses."""
        with self._lock:
            return self.texture.to_bytes()

    def snapshot_base64(self) -> str:
        """Base64 copy of the current buffer, taken between syntheses."""
        with self._lock:
            return self.texture.to_base64()


class TextureService:
    """Holds the planet's texture slots, sized from settings."""

    def __init__(self, sizes: Optional[Dict[str, int]] = None):
        sizes = sizes or {}
        self.slots: Dict[str, TextureSlot] = {
            "surface": TextureSlot("surface", TextureKind.RAMP, sizes.get("surface", settings.surface_texture_size)),
            "biome": TextureSlot("biome", TextureKind.BIOME, sizes.get("biome", settings.biome_texture_size)),
            "clouds": TextureSlot("clouds", TextureKind.RAMP, sizes.get("clouds", settings.clouds_texture_size)),
            "ring": TextureSlot("ring", TextureKind.RAMP, sizes.get("ring", settings.ring_texture_size)),
        }
        logger.info("Texture service initialized", slots=list(self.slots))

    def slot(self, name: str) -> TextureSlot:
        try:
            return self.slots[name]
        except KeyError:
            raise KeyError(f"Unknown texture slot: {name}") from None

    def update_ramp(self, name: str, steps: Sequence[ColorRampStep]) -> bool:
        slot = self.slot(name)
        if slot.kind != TextureKind.RAMP:
            raise ValueError(f"Slot '{name}' is not a ramp texture")
        return slot.submit(list(steps))

    def update_biomes(self, name: str, regions: Sequence[BiomeRegion]) -> bool:
        slot = self.slot(name)
        if slot.kind != TextureKind.BIOME:
            raise ValueError(f"Slot '{name}' is not a biome texture")
        return slot.submit(list(regions))
