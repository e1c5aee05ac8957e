"""Preset records and the in-memory preset library."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping

from ..errors import PresetInvalidError
from .adjustments import (
    IDENTITY_ADJUSTMENTS,
    Adjustments,
    CurveChannel,
    HSLBandParams,
    HueBand,
    Point,
)

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Preset:
    id: str
    name: str
    adjustments: Adjustments


def preset_to_dict(preset: Preset) -> dict[str, Any]:
    """Return the JSON-ready ``{id, name, adjustments}`` record for *preset*."""

    return {"id": preset.id, "name": preset.name, "adjustments": preset.adjustments.to_dict()}


def preset_from_dict(data: Any) -> Preset:
    """Decode a preset record, raising :class:`PresetInvalidError` if malformed."""

    if not isinstance(data, Mapping):
        raise PresetInvalidError(f"Preset record must be an object, got {type(data).__name__}")
    preset_id = data.get("id")
    name = data.get("name")
    if not isinstance(preset_id, str) or not preset_id:
        raise PresetInvalidError("Preset record needs a non-empty string 'id'")
    if not isinstance(name, str):
        raise PresetInvalidError(f"Preset {preset_id!r} needs a string 'name'")
    if "adjustments" not in data:
        raise PresetInvalidError(f"Preset {preset_id!r} has no adjustments")
    return Preset(preset_id, name, Adjustments.from_dict(data["adjustments"]))


def load_presets(records: Iterable[Any]) -> list[Preset]:
    """Decode *records*, skipping (and logging) any that are corrupt."""

    presets: list[Preset] = []
    for position, record in enumerate(records):
        try:
            presets.append(preset_from_dict(record))
        except PresetInvalidError as exc:
            _LOGGER.warning("Skipping preset record %d: %s", position, exc)
    return presets


_MATTE_CURVE = IDENTITY_ADJUSTMENTS.curve.with_channel(
    CurveChannel.MASTER,
    (
        Point(0.0, 0.1),
        Point(0.25, 0.25),
        Point(0.5, 0.5),
        Point(0.75, 0.75),
        Point(1.0, 0.9),
    ),
)

BUILTIN_PRESETS: tuple[Preset, ...] = (
    Preset("natural", "Natural", replace(IDENTITY_ADJUSTMENTS, contrast=10.0, saturation=5.0)),
    Preset(
        "vivid",
        "Vivid",
        replace(IDENTITY_ADJUSTMENTS, exposure=0.2, contrast=20.0, saturation=30.0, vibrance=10.0),
    ),
    Preset(
        "bw-high-contrast",
        "B&W High Contrast",
        replace(IDENTITY_ADJUSTMENTS, saturation=-100.0, contrast=40.0, exposure=0.1),
    ),
    Preset(
        "matte",
        "Matte",
        replace(IDENTITY_ADJUSTMENTS, contrast=-20.0, blacks=20.0, curve=_MATTE_CURVE),
    ),
    Preset(
        "vintage-warm",
        "Vintage Warm",
        replace(IDENTITY_ADJUSTMENTS, temperature=20.0, tint=5.0, contrast=10.0, vignette=20.0),
    ),
    Preset(
        "cool-shadows",
        "Cool Shadows",
        replace(
            IDENTITY_ADJUSTMENTS,
            temperature=-15.0,
            hsl=IDENTITY_ADJUSTMENTS.hsl.with_band(
                HueBand.BLUE, HSLBandParams(saturation=10.0, luminance=-10.0)
            ),
        ),
    ),
)

_BUILTIN_IDS = frozenset(preset.id for preset in BUILTIN_PRESETS)


class PresetLibrary:
    """Built-in presets followed by user presets, in insertion order."""

    def __init__(self, custom: Iterable[Preset] = ()) -> None:
        self._presets: list[Preset] = list(BUILTIN_PRESETS)
        for preset in custom:
            if self.get(preset.id) is not None:
                _LOGGER.warning("Ignoring duplicate preset id %r", preset.id)
                continue
            self._presets.append(preset)

    def __iter__(self):
        return iter(tuple(self._presets))

    def __len__(self) -> int:
        return len(self._presets)

    def get(self, preset_id: str) -> Preset | None:
        for preset in self._presets:
            if preset.id == preset_id:
                return preset
        return None

    @staticmethod
    def is_builtin(preset_id: str) -> bool:
        return preset_id in _BUILTIN_IDS

    def add(self, preset: Preset) -> None:
        """Append *preset*, replacing an existing custom preset with the same id."""

        if self.is_builtin(preset.id):
            raise ValueError(f"Cannot replace built-in preset {preset.id!r}")
        self._presets = [item for item in self._presets if item.id != preset.id]
        self._presets.append(preset)

    def remove(self, preset_id: str) -> bool:
        if self.is_builtin(preset_id):
            raise ValueError(f"Cannot delete built-in preset {preset_id!r}")
        remaining = [item for item in self._presets if item.id != preset_id]
        removed = len(remaining) != len(self._presets)
        self._presets = remaining
        return removed

    def custom_presets(self) -> list[Preset]:
        """Return the presets that need persisting."""

        return [preset for preset in self._presets if not self.is_builtin(preset.id)]


__all__ = [
    "BUILTIN_PRESETS",
    "Preset",
    "PresetLibrary",
    "load_presets",
    "preset_from_dict",
    "preset_to_dict",
]
