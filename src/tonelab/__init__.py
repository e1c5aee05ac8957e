"""ToneLab: non-destructive tone and colour adjustments for RGBA buffers."""

from __future__ import annotations

__version__ = "0.1.0"
