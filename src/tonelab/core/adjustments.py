"""Immutable parameter snapshot consumed by the adjustment pipeline.

Every edit produces a new :class:`Adjustments` instance; nothing in this module
mutates an existing snapshot.  The ``to_dict``/``from_dict`` helpers use the
camelCase keys of the preset records exchanged with the persistence layer so a
snapshot survives a JSON round trip unchanged.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Iterable, Mapping

from ..config import ADJUSTMENT_RANGES, DEFAULT_CURVE_POINTS, SCALAR_KEYS
from ..errors import PresetInvalidError


class CurveChannel(str, Enum):
    """Selector for the four tone curves."""

    MASTER = "master"
    RED = "red"
    GREEN = "green"
    BLUE = "blue"


class HueBand(str, Enum):
    """The eight fixed hue ranges targeted by selective colour."""

    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    AQUA = "aqua"
    BLUE = "blue"
    PURPLE = "purple"
    MAGENTA = "magenta"


HUE_BANDS: tuple[HueBand, ...] = tuple(HueBand)
"""Canonical band order shared by the kernel's offset table."""


def _coerce_float(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PresetInvalidError(f"{key} must be a number, got {value!r}")
    try:
        numeric = float(value)
    except OverflowError as exc:
        raise PresetInvalidError(f"{key} is too large to represent") from exc
    if not math.isfinite(numeric):
        raise PresetInvalidError(f"{key} must be finite, got {value!r}")
    return numeric


def _require_mapping(value: Any, key: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise PresetInvalidError(f"{key} must be an object, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Point:
    """One control point of a tone curve; ``x`` is input, ``y`` output level."""

    x: float
    y: float

    def clamped(self) -> Point:
        return Point(min(1.0, max(0.0, float(self.x))), min(1.0, max(0.0, float(self.y))))

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Any) -> Point:
        if isinstance(data, (list, tuple)) and len(data) == 2:
            return cls(_coerce_float(data[0], "point.x"), _coerce_float(data[1], "point.y"))
        mapping = _require_mapping(data, "point")
        if "x" not in mapping or "y" not in mapping:
            raise PresetInvalidError("curve points need both 'x' and 'y'")
        return cls(_coerce_float(mapping["x"], "point.x"), _coerce_float(mapping["y"], "point.y"))


def sort_points(points: Iterable[Point]) -> tuple[Point, ...]:
    """Return *points* as a tuple ordered by ascending ``x`` (stable for ties)."""

    return tuple(sorted(points, key=lambda point: point.x))


def default_points() -> tuple[Point, ...]:
    """Return the linear five point curve."""

    return tuple(Point(x, y) for x, y in DEFAULT_CURVE_POINTS)


@dataclass(frozen=True)
class CurveState:
    """Control points for the master and per-channel curves.

    Each channel is normalised to a tuple sorted by ``x`` on construction, so
    the ordering invariant holds for every instance regardless of how it was
    built.
    """

    master: tuple[Point, ...] = field(default_factory=default_points)
    red: tuple[Point, ...] = field(default_factory=default_points)
    green: tuple[Point, ...] = field(default_factory=default_points)
    blue: tuple[Point, ...] = field(default_factory=default_points)

    def __post_init__(self) -> None:
        for channel in CurveChannel:
            object.__setattr__(self, channel.value, sort_points(getattr(self, channel.value)))

    def points(self, channel: CurveChannel | str) -> tuple[Point, ...]:
        return getattr(self, CurveChannel(channel).value)

    def with_channel(self, channel: CurveChannel | str, points: Iterable[Point]) -> CurveState:
        """Return a copy with *channel* replaced by *points*."""

        return replace(self, **{CurveChannel(channel).value: tuple(points)})

    def to_dict(self) -> dict[str, list[dict[str, float]]]:
        return {
            channel.value: [point.to_dict() for point in self.points(channel)]
            for channel in CurveChannel
        }

    @classmethod
    def from_dict(cls, data: Any) -> CurveState:
        mapping = _require_mapping(data, "curve")
        channels: dict[str, tuple[Point, ...]] = {}
        for channel in CurveChannel:
            raw = mapping.get(channel.value)
            if raw is None:
                continue
            if not isinstance(raw, (list, tuple)):
                raise PresetInvalidError(f"curve.{channel.value} must be a list of points")
            channels[channel.value] = tuple(Point.from_dict(item) for item in raw)
        return cls(**channels)


@dataclass(frozen=True)
class HSLBandParams:
    """Hue (degrees), saturation and luminance (percent) offsets for one band."""

    hue: float = 0.0
    saturation: float = 0.0
    luminance: float = 0.0

    def is_identity(self) -> bool:
        return self.hue == 0.0 and self.saturation == 0.0 and self.luminance == 0.0

    def to_dict(self) -> dict[str, float]:
        return {"hue": self.hue, "saturation": self.saturation, "luminance": self.luminance}

    @classmethod
    def from_dict(cls, data: Any, key: str = "hsl") -> HSLBandParams:
        mapping = _require_mapping(data, key)
        return cls(
            **{
                name: _coerce_float(mapping[name], f"{key}.{name}")
                for name in ("hue", "saturation", "luminance")
                if name in mapping
            }
        )


@dataclass(frozen=True)
class HSLParams:
    red: HSLBandParams = field(default_factory=HSLBandParams)
    orange: HSLBandParams = field(default_factory=HSLBandParams)
    yellow: HSLBandParams = field(default_factory=HSLBandParams)
    green: HSLBandParams = field(default_factory=HSLBandParams)
    aqua: HSLBandParams = field(default_factory=HSLBandParams)
    blue: HSLBandParams = field(default_factory=HSLBandParams)
    purple: HSLBandParams = field(default_factory=HSLBandParams)
    magenta: HSLBandParams = field(default_factory=HSLBandParams)

    def band(self, band: HueBand | str) -> HSLBandParams:
        return getattr(self, HueBand(band).value)

    def with_band(self, band: HueBand | str, params: HSLBandParams) -> HSLParams:
        return replace(self, **{HueBand(band).value: params})

    def is_identity(self) -> bool:
        return all(self.band(band).is_identity() for band in HUE_BANDS)

    def to_dict(self) -> dict[str, dict[str, float]]:
        return {band.value: self.band(band).to_dict() for band in HUE_BANDS}

    @classmethod
    def from_dict(cls, data: Any) -> HSLParams:
        mapping = _require_mapping(data, "hsl")
        return cls(
            **{
                band.value: HSLBandParams.from_dict(mapping[band.value], f"hsl.{band.value}")
                for band in HUE_BANDS
                if band.value in mapping
            }
        )


@dataclass(frozen=True)
class ColorGradingRegion:
    hue: float = 0.0
    saturation: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {"hue": self.hue, "saturation": self.saturation}

    @classmethod
    def from_dict(cls, data: Any, key: str) -> ColorGradingRegion:
        mapping = _require_mapping(data, key)
        return cls(
            **{
                name: _coerce_float(mapping[name], f"{key}.{name}")
                for name in ("hue", "saturation")
                if name in mapping
            }
        )


@dataclass(frozen=True)
class ColorGradingParams:
    """Split-toning offsets.  Stored and serialised but not rendered."""

    shadows: ColorGradingRegion = field(default_factory=ColorGradingRegion)
    highlights: ColorGradingRegion = field(default_factory=ColorGradingRegion)

    def to_dict(self) -> dict[str, dict[str, float]]:
        return {"shadows": self.shadows.to_dict(), "highlights": self.highlights.to_dict()}

    @classmethod
    def from_dict(cls, data: Any) -> ColorGradingParams:
        mapping = _require_mapping(data, "colorGrading")
        return cls(
            **{
                region: ColorGradingRegion.from_dict(mapping[region], f"colorGrading.{region}")
                for region in ("shadows", "highlights")
                if region in mapping
            }
        )


@dataclass(frozen=True)
class Adjustments:
    """Complete parameter snapshot for one render."""

    exposure: float = 0.0
    contrast: float = 0.0
    highlights: float = 0.0
    shadows: float = 0.0
    whites: float = 0.0
    blacks: float = 0.0
    temperature: float = 0.0
    tint: float = 0.0
    vibrance: float = 0.0
    saturation: float = 0.0
    clarity: float = 0.0
    vignette: float = 0.0
    grain: float = 0.0
    hsl: HSLParams = field(default_factory=HSLParams)
    color_grading: ColorGradingParams = field(default_factory=ColorGradingParams)
    curve: CurveState = field(default_factory=CurveState)

    def clamped(self) -> Adjustments:
        """Return a copy with every scalar forced into its declared range.

        The editor keeps sliders in range already; presets loaded from disk and
        programmatic callers go through this before the kernel sees them.
        """

        changes = {}
        for key, (minimum, maximum) in ADJUSTMENT_RANGES.items():
            value = float(getattr(self, key))
            bounded = min(maximum, max(minimum, value))
            if bounded != value:
                changes[key] = bounded
        return replace(self, **changes) if changes else self

    def scalars(self) -> dict[str, float]:
        return {key: float(getattr(self, key)) for key in SCALAR_KEYS}

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = self.scalars()
        data["hsl"] = self.hsl.to_dict()
        data["colorGrading"] = self.color_grading.to_dict()
        data["curve"] = self.curve.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Any) -> Adjustments:
        """Decode *data*; missing keys keep their identity defaults."""

        mapping = _require_mapping(data, "adjustments")
        kwargs: dict[str, Any] = {
            key: _coerce_float(mapping[key], key) for key in SCALAR_KEYS if key in mapping
        }
        if "hsl" in mapping:
            kwargs["hsl"] = HSLParams.from_dict(mapping["hsl"])
        if "colorGrading" in mapping:
            kwargs["color_grading"] = ColorGradingParams.from_dict(mapping["colorGrading"])
        if "curve" in mapping:
            kwargs["curve"] = CurveState.from_dict(mapping["curve"])
        return cls(**kwargs)


SCALAR_FIELDS = frozenset(f.name for f in fields(Adjustments)) & frozenset(SCALAR_KEYS)

IDENTITY_ADJUSTMENTS = Adjustments()
"""Snapshot assigned to freshly imported images."""


__all__ = [
    "Adjustments",
    "ColorGradingParams",
    "ColorGradingRegion",
    "CurveChannel",
    "CurveState",
    "HSLBandParams",
    "HSLParams",
    "HUE_BANDS",
    "HueBand",
    "IDENTITY_ADJUSTMENTS",
    "Point",
    "SCALAR_FIELDS",
    "default_points",
    "sort_points",
]
