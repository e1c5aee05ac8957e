"""Hue band classification for the selective colour (HSL) adjustment.

The hue circle is split into eight fixed, half-open ranges.  Red wraps around
``0°`` so it covers both ``[330, 360)`` and ``[0, 15)``:

=========  ==============
Band       Hue (degrees)
=========  ==============
red        330 – 15
orange     15 – 45
yellow     45 – 75
green      75 – 155
aqua       155 – 185
blue       185 – 255
purple     255 – 285
magenta    285 – 330
=========  ==============
"""

from __future__ import annotations

import numpy as np
from numba import jit

from .adjustments import HSLParams, HUE_BANDS, HueBand

# Indices into ``HUE_BANDS``.
_BAND_RED = 0
_BAND_ORANGE = 1
_BAND_YELLOW = 2
_BAND_GREEN = 3
_BAND_AQUA = 4
_BAND_BLUE = 5
_BAND_PURPLE = 6
_BAND_MAGENTA = 7

BAND_BOUNDARIES: tuple[tuple[HueBand, float, float], ...] = (
    (HueBand.RED, 330.0, 15.0),
    (HueBand.ORANGE, 15.0, 45.0),
    (HueBand.YELLOW, 45.0, 75.0),
    (HueBand.GREEN, 75.0, 155.0),
    (HueBand.AQUA, 155.0, 185.0),
    (HueBand.BLUE, 185.0, 255.0),
    (HueBand.PURPLE, 255.0, 285.0),
    (HueBand.MAGENTA, 285.0, 330.0),
)
"""``(band, start, end)`` triples; ``start`` is inclusive, ``end`` exclusive."""


@jit(nopython=True, inline="always")
def _hue_band_index(hue_degrees: float) -> int:
    """Return the index into ``HUE_BANDS`` for *hue_degrees*."""

    hue = hue_degrees % 360.0
    if hue >= 330.0 or hue < 15.0:
        return _BAND_RED
    if hue < 45.0:
        return _BAND_ORANGE
    if hue < 75.0:
        return _BAND_YELLOW
    if hue < 155.0:
        return _BAND_GREEN
    if hue < 185.0:
        return _BAND_AQUA
    if hue < 255.0:
        return _BAND_BLUE
    if hue < 285.0:
        return _BAND_PURPLE
    return _BAND_MAGENTA


def classify_hue(hue_degrees: float) -> HueBand:
    """Return the band containing *hue_degrees* (wrapped into ``[0, 360)``)."""

    return HUE_BANDS[_hue_band_index(float(hue_degrees))]


def band_offsets(hsl: HSLParams) -> np.ndarray:
    """Pack *hsl* into the ``(8, 3)`` float table consumed by the kernel."""

    table = np.zeros((len(HUE_BANDS), 3), dtype=np.float64)
    for index, band in enumerate(HUE_BANDS):
        params = hsl.band(band)
        table[index, 0] = params.hue
        table[index, 1] = params.saturation
        table[index, 2] = params.luminance
    return table


def is_identity(hsl: HSLParams | None) -> bool:
    """Return ``True`` when no band carries an offset."""

    return hsl is None or hsl.is_identity()


__all__ = ["BAND_BOUNDARIES", "band_offsets", "classify_hue", "is_identity"]
