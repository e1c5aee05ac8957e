"""RGBA pixel buffer exchanged with the adjustment pipeline."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..errors import PixelBufferError

CHANNELS = 4


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """A ``height x width`` grid of unpremultiplied 8-bit RGBA samples.

    ``pixels`` is a C-contiguous ``(height, width, 4)`` ``uint8`` array in
    row-major order.  Buffers are value-like: the pipeline copies its input
    and never keeps a reference to a caller's array after returning.
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        array = self.pixels
        if not isinstance(array, np.ndarray):
            raise PixelBufferError("pixels must be a numpy array")
        if array.dtype != np.uint8:
            raise PixelBufferError(f"pixels must be uint8, got {array.dtype}")
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise PixelBufferError(f"pixels must have shape (height, width, 4), got {array.shape}")
        if not array.flags.c_contiguous:
            object.__setattr__(self, "pixels", np.ascontiguousarray(array))

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @classmethod
    def empty(cls, width: int, height: int) -> PixelBuffer:
        if width < 0 or height < 0:
            raise PixelBufferError(f"Invalid buffer size {width}x{height}")
        return cls(np.zeros((height, width, CHANNELS), dtype=np.uint8))

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes | bytearray | memoryview) -> PixelBuffer:
        """Copy interleaved RGBA *data* into a new buffer."""

        expected = width * height * CHANNELS
        view = memoryview(data).cast("B")
        if width < 0 or height < 0 or len(view) != expected:
            raise PixelBufferError(
                f"Expected {expected} bytes for {width}x{height} RGBA, got {len(view)}"
            )
        array = np.frombuffer(view, dtype=np.uint8).reshape((height, width, CHANNELS))
        return cls(array.copy())

    @classmethod
    def filled(cls, width: int, height: int, rgba: tuple[int, int, int, int]) -> PixelBuffer:
        buffer = cls.empty(width, height)
        buffer.pixels[...] = np.asarray(rgba, dtype=np.uint8)
        return buffer

    def copy(self) -> PixelBuffer:
        return PixelBuffer(self.pixels.copy())

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and bool(
            np.array_equal(self.pixels, other.pixels)
        )


__all__ = ["CHANNELS", "PixelBuffer"]
