"""Exception hierarchy for ToneLab."""

from __future__ import annotations


class ToneLabError(Exception):
    """Base class for all errors raised by the package."""


class PresetInvalidError(ToneLabError):
    """A preset record or adjustment mapping could not be decoded."""


class PresetStoreError(ToneLabError):
    """The preset file exists but could not be read or written."""


class CurveEditError(ToneLabError, IndexError):
    """A curve edit referenced a point index that does not exist."""


class PixelBufferError(ToneLabError, ValueError):
    """Pixel data does not match the declared dimensions or layout."""


__all__ = [
    "CurveEditError",
    "PixelBufferError",
    "PresetInvalidError",
    "PresetStoreError",
    "ToneLabError",
]
