"""
Caller-owned RGBA8 pixel buffers.

Synthesizers never allocate or resize: they receive a buffer, check that it
is large enough, and mutate it in place. The same buffer can be reused for
every recomputation as long as the texture dimensions stay the same.
"""

import base64
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from .geometry import CHANNELS, offset_of

BufferLike = Union[np.ndarray, bytearray, memoryview]


class BufferSizeError(ValueError):
    """Raised when a buffer cannot hold the requested texture."""


def buffer_length(width: int, height: int = 1) -> int:
    """Number of bytes needed for a ``width x height`` RGBA8 texture."""
    return width * height * CHANNELS


def allocate_buffer(width: int, height: int = 1) -> np.ndarray:
    """
    Allocate a zeroed RGBA8 buffer.

    Raises:
        BufferSizeError: If a dimension is not positive
    """
    if width <= 0 or height <= 0:
        raise BufferSizeError(f"Invalid texture dimensions {width}x{height}")
    return np.zeros(buffer_length(width, height), dtype=np.uint8)


def as_pixel_array(buffer: BufferLike) -> np.ndarray:
    """
    View a buffer as a flat ``uint8`` array without copying.

    Raises:
        BufferSizeError: If the buffer is read-only or not byte-typed
    """
    if isinstance(buffer, np.ndarray):
        if buffer.dtype != np.uint8:
            raise BufferSizeError(f"Pixel buffer must be uint8, got {buffer.dtype}")
        array = buffer.reshape(-1)
        if not np.shares_memory(array, buffer):
            raise BufferSizeError("Pixel buffer must be contiguous")
    else:
        array = np.frombuffer(buffer, dtype=np.uint8)

    if not array.flags.writeable:
        raise BufferSizeError("Pixel buffer is read-only")
    return array


def check_buffer(buffer: BufferLike, width: int, height: int = 1) -> np.ndarray:
    """
    Validate a buffer against texture dimensions.

    Args:
        buffer: Caller-owned buffer
        width: Texture width in pixels
        height: Texture height in pixels

    Returns:
        Flat ``uint8`` view over exactly ``width * height * 4`` bytes

    Raises:
        BufferSizeError: If dimensions are not positive or the buffer is too small
    """
    if width <= 0 or height <= 0:
        raise BufferSizeError(f"Invalid texture dimensions {width}x{height}")

    array = as_pixel_array(buffer)
    required = buffer_length(width, height)
    if array.size < required:
        raise BufferSizeError(
            f"Buffer holds {array.size} bytes, {width}x{height} RGBA needs {required}"
        )
    return array[:required]


@dataclass
class TextureData:
    """A pixel buffer together with the dimensions it was synthesized for."""

    data: np.ndarray
    width: int
    height: int
    needs_update: bool = True

    @property
    def pixels(self) -> np.ndarray:
        """``(height, width, 4)`` view of the buffer."""
        return self.data[: buffer_length(self.width, self.height)].reshape(
            self.height, self.width, CHANNELS
        )

    def pixel(self, x: int, y: int = 0) -> Tuple[int, int, int, int]:
        """RGBA bytes of pixel ``(x, y)``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} texture")
        offset = offset_of(x, y, self.width)
        return tuple(int(v) for v in self.data[offset:offset + CHANNELS])

    def to_bytes(self) -> bytes:
        return self.data[: buffer_length(self.width, self.height)].tobytes()

    def to_base64(self) -> str:
        return base64.b64encode(self.to_bytes()).decode("ascii")
