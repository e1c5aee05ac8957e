"""NumPy vectorised executor for the film grain pass.

Grain runs as a separate sweep over the finished destination buffer.  Every
pixel receives one uniform draw that is added to R, G and B alike, so the
noise shifts luminance without tinting.
"""

from __future__ import annotations

import numpy as np


def apply_grain_vectorized(
    pixels: np.ndarray,
    grain: float,
    rng: np.random.Generator,
) -> None:
    """Add uniform ``[-grain, grain]`` noise to the RGB channels of *pixels* in place.

    *pixels* is a ``(height, width, 4)`` ``uint8`` array; alpha is untouched.
    The whole noise field is drawn in a single call so the result does not
    depend on the order pixels are visited.
    """

    amount = float(grain)
    if amount <= 0.0:
        return

    height, width = pixels.shape[:2]
    if width <= 0 or height <= 0:
        return

    noise = rng.uniform(-amount, amount, size=(height, width, 1))
    rgb = pixels[..., :3].astype(np.float64) + noise
    np.clip(rgb, 0.0, 255.0, out=rgb)
    pixels[..., :3] = np.rint(rgb).astype(np.uint8)
