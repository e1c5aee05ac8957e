"""Tone mapping helpers powering the non-destructive edit pipeline.

The implementation lives in :mod:`tonelab.core.filters`; this module re-exports
the public API together with the curve and hue band helpers collaborators
usually need alongside it.
"""

from __future__ import annotations

from .curve_resolver import build_channel_luts, build_lookup_table
from .filters import apply_adjustments
from .selective_color_resolver import classify_hue

__all__ = ["apply_adjustments", "build_channel_luts", "build_lookup_table", "classify_hue"]
