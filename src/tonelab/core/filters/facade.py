"""Facade coordinating the adjustment executors.

This module provides the main public API for rendering an
:class:`~tonelab.core.adjustments.Adjustments` snapshot onto a pixel buffer:
it resolves the per-render constants once, runs the compiled per-pixel kernel
and finishes with the optional grain pass.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from ..adjustments import Adjustments
from ..curve_resolver import build_channel_luts
from ..pixel_buffer import PixelBuffer
from ..selective_color_resolver import band_offsets
from .algorithms import _contrast_factor
from .jit_executor import apply_adjustments_fast
from .numpy_executor import apply_grain_vectorized

_LOGGER = logging.getLogger(__name__)


def needs_color_pass(adjustments: Adjustments) -> bool:
    """Return ``True`` when the HSL stage can change any pixel."""

    return (
        adjustments.saturation != 0
        or adjustments.vibrance != 0
        or not adjustments.hsl.is_identity()
    )


def apply_adjustments(
    source: PixelBuffer,
    adjustments: Adjustments,
    *,
    rng: np.random.Generator | None = None,
) -> PixelBuffer:
    """Return a new :class:`PixelBuffer` with *adjustments* applied.

    *source* is never modified; the result is always a fresh buffer of the
    same size with alpha copied through.

    Parameters
    ----------
    source:
        The original, unedited pixels.
    adjustments:
        Parameter snapshot.  Scalars outside their declared ranges are clamped
        before rendering; non-finite values must be rejected by the caller.
    rng:
        Random generator for the grain pass.  It is only consulted when
        ``grain > 0``; ``numpy.random.default_rng()`` is used when omitted.
    """

    params = adjustments.clamped()
    destination = np.empty_like(source.pixels)

    if source.width == 0 or source.height == 0:
        return PixelBuffer(destination)

    luts = build_channel_luts(params.curve)

    apply_adjustments_fast(
        source.pixels,
        destination,
        luts,
        band_offsets(params.hsl),
        math.pow(2.0, params.exposure),
        1.0 + params.temperature / 100.0,
        1.0 + params.tint / 100.0,
        1.0 - params.temperature / 100.0,
        params.clarity / 100.0,
        params.highlights,
        params.shadows,
        params.whites,
        params.blacks,
        _contrast_factor(params.contrast),
        params.saturation,
        params.vibrance,
        needs_color_pass(params),
        params.vignette,
    )

    if params.grain > 0:
        generator = rng if rng is not None else np.random.default_rng()
        apply_grain_vectorized(destination, params.grain, generator)

    _LOGGER.debug("Rendered %dx%d buffer", source.width, source.height)
    return PixelBuffer(destination)


__all__ = ["apply_adjustments", "needs_color_pass"]
