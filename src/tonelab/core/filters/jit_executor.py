"""JIT-accelerated adjustment executor using Numba.

The kernel walks the source buffer once and writes every output pixel into a
separate destination array, so the caller's pixels are never modified.
"""

from __future__ import annotations

import numpy as np
from numba import jit

from ...errors import PixelBufferError
from .algorithms import (
    _apply_clarity,
    _apply_selective_color,
    _apply_tonal_regions,
    _clamp_byte,
    _float_to_uint8,
    _vignette_factor,
)


def apply_adjustments_fast(
    source: np.ndarray,
    destination: np.ndarray,
    luts: np.ndarray,
    band_offsets: np.ndarray,
    exposure_multiplier: float,
    r_balance: float,
    g_balance: float,
    b_balance: float,
    clarity_factor: float,
    highlights: float,
    shadows: float,
    whites: float,
    blacks: float,
    contrast_factor: float,
    saturation: float,
    vibrance: float,
    apply_color: bool,
    vignette: float,
) -> None:
    """Fill ``destination`` with the adjusted pixels of ``source``.

    Both arrays must be ``(height, width, 4)`` ``uint8``.  ``luts`` is the
    ``(4, 256)`` master/red/green/blue table and ``band_offsets`` the
    ``(8, 3)`` selective colour table.
    """

    if source.shape != destination.shape:
        raise PixelBufferError(
            f"Source {source.shape} and destination {destination.shape} differ in size"
        )
    if luts.shape != (4, 256) or luts.dtype != np.uint8:
        raise ValueError(f"Expected a (4, 256) uint8 lookup table, got {luts.shape} {luts.dtype}")

    height, width = source.shape[:2]
    if width <= 0 or height <= 0:
        return

    _apply_adjustments_fast(
        source,
        destination,
        width,
        height,
        luts,
        np.ascontiguousarray(band_offsets, dtype=np.float64),
        float(exposure_multiplier),
        float(r_balance),
        float(g_balance),
        float(b_balance),
        float(clarity_factor),
        float(highlights),
        float(shadows),
        float(whites),
        float(blacks),
        float(contrast_factor),
        float(saturation),
        float(vibrance),
        bool(apply_color),
        float(vignette),
    )


@jit(nopython=True, cache=True)
def _apply_adjustments_fast(
    source: np.ndarray,
    destination: np.ndarray,
    width: int,
    height: int,
    luts: np.ndarray,
    band_offsets: np.ndarray,
    exposure_multiplier: float,
    r_balance: float,
    g_balance: float,
    b_balance: float,
    clarity_factor: float,
    highlights: float,
    shadows: float,
    whites: float,
    blacks: float,
    contrast_factor: float,
    saturation: float,
    vibrance: float,
    apply_color: bool,
    vignette: float,
) -> None:
    """JIT-compiled pixel processing kernel."""
    for y in range(height):
        for x in range(width):
            r = float(source[y, x, 0])
            g = float(source[y, x, 1])
            b = float(source[y, x, 2])

            r *= exposure_multiplier
            g *= exposure_multiplier
            b *= exposure_multiplier

            r *= r_balance
            g *= g_balance
            b *= b_balance

            if clarity_factor != 0.0:
                r, g, b = _apply_clarity(r, g, b, clarity_factor)

            r, g, b = _apply_tonal_regions(r, g, b, highlights, shadows, whites, blacks)

            r = contrast_factor * (r - 128.0) + 128.0
            g = contrast_factor * (g - 128.0) + 128.0
            b = contrast_factor * (b - 128.0) + 128.0

            r = _clamp_byte(r)
            g = _clamp_byte(g)
            b = _clamp_byte(b)

            # Clamped values are non-negative, so truncation equals floor.
            r = float(luts[0, int(r)])
            g = float(luts[0, int(g)])
            b = float(luts[0, int(b)])

            r = float(luts[1, int(r)])
            g = float(luts[2, int(g)])
            b = float(luts[3, int(b)])

            if apply_color:
                r, g, b = _apply_selective_color(r, g, b, saturation, vibrance, band_offsets)

            if vignette > 0.0:
                factor = _vignette_factor(x, y, width, height, vignette)
                r *= factor
                g *= factor
                b *= factor

            destination[y, x, 0] = _float_to_uint8(r)
            destination[y, x, 1] = _float_to_uint8(g)
            destination[y, x, 2] = _float_to_uint8(b)
            destination[y, x, 3] = source[y, x, 3]
