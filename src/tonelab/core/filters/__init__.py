"""Modular image filtering package for non-destructive photo editing.

This package provides image adjustment functionality through a clean separation
of concerns:
- algorithms: Numba-compiled per-pixel maths
- executors: the compiled pixel sweep, the NumPy grain pass and Pillow adapters
- facade: the public entry point wiring them together
"""

from __future__ import annotations

from .facade import apply_adjustments

__all__ = ["apply_adjustments"]
