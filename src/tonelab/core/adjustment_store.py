"""Edit reducer and undo history for adjustment snapshots.

Edits form a closed set of frozen dataclasses.  :func:`reduce_edit` turns the
current snapshot plus one edit into the next snapshot; it never touches
persistence, so callers save presets or sidecars after a transition through
their own port.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Sequence, Union, assert_never

from .adjustments import (
    IDENTITY_ADJUSTMENTS,
    SCALAR_FIELDS,
    Adjustments,
    ColorGradingRegion,
    CurveChannel,
    CurveState,
    HSLBandParams,
    HueBand,
    Point,
)

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SetScalar:
    """Set one scalar slider such as ``exposure`` or ``vignette``."""

    field: str
    value: float


@dataclass(frozen=True)
class UpdateHSLBand:
    """Change some of a band's offsets; ``None`` keeps the current value."""

    band: HueBand
    hue: float | None = None
    saturation: float | None = None
    luminance: float | None = None


@dataclass(frozen=True)
class UpdateColorGrading:
    region: str
    hue: float | None = None
    saturation: float | None = None


@dataclass(frozen=True)
class SetCurveChannel:
    channel: CurveChannel
    points: tuple[Point, ...]


@dataclass(frozen=True)
class ReplaceCurve:
    curve: CurveState


@dataclass(frozen=True)
class ApplyPreset:
    adjustments: Adjustments


@dataclass(frozen=True)
class ResetAdjustments:
    pass


Edit = Union[
    SetScalar,
    UpdateHSLBand,
    UpdateColorGrading,
    SetCurveChannel,
    ReplaceCurve,
    ApplyPreset,
    ResetAdjustments,
]


def _merge(current: float, value: float | None) -> float:
    return current if value is None else float(value)


def reduce_edit(adjustments: Adjustments, edit: Edit) -> Adjustments:
    """Return the snapshot that results from applying *edit* to *adjustments*."""

    if isinstance(edit, SetScalar):
        if edit.field not in SCALAR_FIELDS:
            raise ValueError(f"Unknown adjustment {edit.field!r}")
        return replace(adjustments, **{edit.field: float(edit.value)})
    elif isinstance(edit, UpdateHSLBand):
        band = adjustments.hsl.band(edit.band)
        updated = HSLBandParams(
            hue=_merge(band.hue, edit.hue),
            saturation=_merge(band.saturation, edit.saturation),
            luminance=_merge(band.luminance, edit.luminance),
        )
        return replace(adjustments, hsl=adjustments.hsl.with_band(edit.band, updated))
    elif isinstance(edit, UpdateColorGrading):
        if edit.region not in ("shadows", "highlights"):
            raise ValueError(f"Unknown colour grading region {edit.region!r}")
        region = getattr(adjustments.color_grading, edit.region)
        updated_region = ColorGradingRegion(
            hue=_merge(region.hue, edit.hue),
            saturation=_merge(region.saturation, edit.saturation),
        )
        grading = replace(adjustments.color_grading, **{edit.region: updated_region})
        return replace(adjustments, color_grading=grading)
    elif isinstance(edit, SetCurveChannel):
        return replace(adjustments, curve=adjustments.curve.with_channel(edit.channel, edit.points))
    elif isinstance(edit, ReplaceCurve):
        return replace(adjustments, curve=edit.curve)
    elif isinstance(edit, ApplyPreset):
        return edit.adjustments
    elif isinstance(edit, ResetAdjustments):
        return IDENTITY_ADJUSTMENTS
    else:
        assert_never(edit)


Listener = Callable[[Adjustments], None]


class AdjustmentStore:
    """Hold the current snapshot and a linear undo history.

    The history is a list of snapshots with a cursor.  A new edit drops any
    redo entries past the cursor before appending.  Listeners are called with
    the new snapshot after every change so a render scheduler can pick it up.
    """

    def __init__(self, initial: Adjustments = IDENTITY_ADJUSTMENTS) -> None:
        self._history: list[Adjustments] = [initial]
        self._index = 0
        self._listeners: list[Listener] = []

    @property
    def adjustments(self) -> Adjustments:
        return self._history[self._index]

    @property
    def history(self) -> Sequence[Adjustments]:
        return tuple(self._history)

    @property
    def history_index(self) -> int:
        return self._index

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._history) - 1

    # ------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; the returned callable removes it again."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.adjustments
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                _LOGGER.exception("Adjustment listener %r failed", listener)

    # ------------------------------------------------------------------
    def dispatch(self, edit: Edit) -> Adjustments:
        """Apply *edit*, record it in the history and notify listeners."""

        updated = reduce_edit(self.adjustments, edit)
        del self._history[self._index + 1 :]
        self._history.append(updated)
        self._index = len(self._history) - 1
        self._notify()
        return updated

    def undo(self) -> bool:
        if not self.can_undo():
            return False
        self._index -= 1
        self._notify()
        return True

    def redo(self) -> bool:
        if not self.can_redo():
            return False
        self._index += 1
        self._notify()
        return True

    def load_image(self) -> None:
        """Start a fresh history at the identity snapshot for a new image."""

        self._history = [IDENTITY_ADJUSTMENTS]
        self._index = 0
        self._notify()


__all__ = [
    "AdjustmentStore",
    "ApplyPreset",
    "Edit",
    "ReplaceCurve",
    "ResetAdjustments",
    "SetCurveChannel",
    "SetScalar",
    "UpdateColorGrading",
    "UpdateHSLBand",
    "reduce_edit",
]
