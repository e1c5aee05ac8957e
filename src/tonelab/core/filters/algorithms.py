"""Pure per-pixel maths for the adjustment pipeline.

Functions here operate on plain floats in the ``[0, 255]`` channel domain and
are compiled with Numba so the executor kernel can inline them.  They remain
callable from Python, which is how the unit tests exercise them.
"""

from __future__ import annotations

import math

from numba import jit

from ..selective_color_resolver import _hue_band_index


@jit(nopython=True, inline="always")
def _clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp *value* to the inclusive range [min_val, max_val]."""
    if value < min_val:
        return min_val
    if value > max_val:
        return max_val
    return value


@jit(nopython=True, inline="always")
def _clamp_byte(value: float) -> float:
    return _clamp(value, 0.0, 255.0)


@jit(nopython=True, inline="always")
def _float_to_uint8(value: float) -> int:
    """Round *value* from the ``[0, 255]`` domain to an 8-bit channel value."""

    scaled = round(value)
    if scaled < 0:
        return 0
    if scaled > 255:
        return 255
    return int(scaled)


@jit(nopython=True, inline="always")
def _luminance(r: float, g: float, b: float) -> float:
    """Rec. 709 luminance normalised to ``[0, 1]`` for in-range input."""

    return (0.2126 * r + 0.7152 * g + 0.0722 * b) / 255.0


@jit(nopython=True, inline="always")
def _contrast_factor(contrast: float) -> float:
    """Return the slope used by the contrast stage.

    The denominator vanishes at ``contrast == 259``; callers clamp to
    ``[-100, 100]`` first, the guard below only protects direct calls.
    """

    denominator = 255.0 * (259.0 - contrast)
    if abs(denominator) < 1e-9:
        return 259.0 * (contrast + 255.0) / 1e-9
    return 259.0 * (contrast + 255.0) / denominator


@jit(nopython=True, inline="always")
def _apply_clarity(
    r: float, g: float, b: float, clarity_factor: float
) -> tuple[float, float, float]:
    """Boost contrast around mid-grey, strongest for mid-tone pixels."""

    lum = _luminance(r, g, b)
    weight = 1.0 - abs(lum - 0.5) * 2.0
    boost = 1.0 + clarity_factor * weight * 0.5
    return (r - 128.0) * boost + 128.0, (g - 128.0) * boost + 128.0, (b - 128.0) * boost + 128.0


@jit(nopython=True, inline="always")
def _apply_tonal_regions(
    r: float,
    g: float,
    b: float,
    highlights: float,
    shadows: float,
    whites: float,
    blacks: float,
) -> tuple[float, float, float]:
    """Apply highlights, shadows, whites and blacks in that order.

    Luminance is re-measured before every stage so each one sees the result
    of the previous stage.
    """

    lum = _luminance(r, g, b)
    weight = max(0.0, lum) ** 2
    factor = 1.0 + (highlights / 100.0) * weight
    r *= factor
    g *= factor
    b *= factor

    lum = _luminance(r, g, b)
    weight = max(0.0, 1.0 - lum) ** 2
    factor = 1.0 + (shadows / 100.0) * weight
    r *= factor
    g *= factor
    b *= factor

    lum = _luminance(r, g, b)
    weight = max(0.0, lum) ** 4
    lift = (whites / 100.0) * weight * 255.0
    r += lift
    g += lift
    b += lift

    lum = _luminance(r, g, b)
    weight = max(0.0, 1.0 - lum) ** 4
    lift = (blacks / 100.0) * weight * 255.0
    r += lift
    g += lift
    b += lift

    return r, g, b


@jit(nopython=True, inline="always")
def _rgb_to_hsl(r: float, g: float, b: float) -> tuple[float, float, float]:
    """Convert ``[0, 255]`` RGB into HSL with every component in ``[0, 1]``."""

    r /= 255.0
    g /= 255.0
    b /= 255.0
    max_c = max(r, g, b)
    min_c = min(r, g, b)
    lightness = (max_c + min_c) / 2.0
    if max_c == min_c:
        return 0.0, 0.0, lightness

    delta = max_c - min_c
    if lightness > 0.5:
        saturation = delta / (2.0 - max_c - min_c)
    else:
        saturation = delta / (max_c + min_c)

    if max_c == r:
        hue = (g - b) / delta + (6.0 if g < b else 0.0)
    elif max_c == g:
        hue = (b - r) / delta + 2.0
    else:
        hue = (r - g) / delta + 4.0
    return hue / 6.0, saturation, lightness


@jit(nopython=True, inline="always")
def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 0.0:
        t += 1.0
    if t > 1.0:
        t -= 1.0
    if t < 1.0 / 6.0:
        return p + (q - p) * 6.0 * t
    if t < 0.5:
        return q
    if t < 2.0 / 3.0:
        return p + (q - p) * (2.0 / 3.0 - t) * 6.0
    return p


@jit(nopython=True, inline="always")
def _hsl_to_rgb(h: float, s: float, l: float) -> tuple[float, float, float]:
    """Convert HSL in ``[0, 1]`` back to RGB in the ``[0, 255]`` domain."""

    if s == 0.0:
        grey = l * 255.0
        return grey, grey, grey
    q = l * (1.0 + s) if l < 0.5 else l + s - l * s
    p = 2.0 * l - q
    r = _hue_to_rgb(p, q, h + 1.0 / 3.0)
    g = _hue_to_rgb(p, q, h)
    b = _hue_to_rgb(p, q, h - 1.0 / 3.0)
    return r * 255.0, g * 255.0, b * 255.0


@jit(nopython=True, inline="always")
def _apply_selective_color(
    r: float,
    g: float,
    b: float,
    saturation: float,
    vibrance: float,
    band_offsets,
) -> tuple[float, float, float]:
    """Apply global saturation/vibrance and the pixel's hue band offsets.

    ``band_offsets`` is an ``(8, 3)`` array of hue (degrees), saturation and
    luminance (percent) offsets in band order.
    """

    h, s, l = _rgb_to_hsl(r, g, b)

    s += saturation / 100.0
    if vibrance != 0.0:
        s += (vibrance / 100.0) * (1.0 - s)

    band = _hue_band_index(h * 360.0)
    h += band_offsets[band, 0] / 360.0
    s += band_offsets[band, 1] / 100.0
    l += band_offsets[band, 2] / 100.0

    s = _clamp(s, 0.0, 1.0)
    l = _clamp(l, 0.0, 1.0)
    h = h - math.floor(h)

    return _hsl_to_rgb(h, s, l)


@jit(nopython=True, inline="always")
def _vignette_factor(
    x: int, y: int, width: int, height: int, vignette: float
) -> float:
    """Radial darkening factor for pixel ``(x, y)``; ``1.0`` at the centre."""

    cx = width / 2.0
    cy = height / 2.0
    max_dist = math.sqrt(cx * cx + cy * cy)
    if max_dist <= 0.0:
        return 1.0
    dist = math.sqrt((x - cx) ** 2 + (y - cy) ** 2) / max_dist
    return max(0.0, 1.0 - dist * (vignette / 100.0))
