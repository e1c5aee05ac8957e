"""Pillow adapters for callers that hold ``PIL.Image`` objects.

The engine itself works on :class:`PixelBuffer`; these helpers convert at the
boundary so import and export code can stay in Pillow.
"""

from __future__ import annotations

import numpy as np
from PIL import Image

from ..adjustments import Adjustments
from ..pixel_buffer import PixelBuffer
from .facade import apply_adjustments


def buffer_from_image(image: Image.Image) -> PixelBuffer:
    """Return an RGBA :class:`PixelBuffer` copy of *image*.

    Images without alpha gain an opaque channel; palette and greyscale modes
    are expanded by Pillow's own conversion.
    """

    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return PixelBuffer(np.array(image, dtype=np.uint8, copy=True))


def buffer_to_image(buffer: PixelBuffer) -> Image.Image:
    """Return an ``RGBA`` Pillow image holding a copy of *buffer*."""

    return Image.fromarray(buffer.pixels.copy())


def apply_adjustments_to_image(
    image: Image.Image,
    adjustments: Adjustments,
    *,
    rng: np.random.Generator | None = None,
) -> Image.Image:
    """Render *adjustments* onto *image* and return a new ``RGBA`` image."""

    result = apply_adjustments(buffer_from_image(image), adjustments, rng=rng)
    return buffer_to_image(result)


__all__ = ["apply_adjustments_to_image", "buffer_from_image", "buffer_to_image"]
