"""Tone curve editing and lookup-table generation.

Curves are immutable tuples of :class:`Point` sorted by ``x``.  The editing
helpers mirror the interactions of the curve canvas (click to add or select,
drag, numeric entry, reset) and always return a new tuple together with the
index of the edited point *after* re-sorting, since sorting can move a point
past its neighbours.
"""

from __future__ import annotations

import math
from functools import lru_cache
from typing import Sequence

import numpy as np

from ..config import CURVE_HIT_THRESHOLD, LUT_SIZE
from ..errors import CurveEditError
from .adjustments import CurveChannel, CurveState, Point, default_points, sort_points

CHANNEL_ORDER: tuple[CurveChannel, ...] = (
    CurveChannel.MASTER,
    CurveChannel.RED,
    CurveChannel.GREEN,
    CurveChannel.BLUE,
)
"""Row order of the table returned by :func:`build_channel_luts`."""

# Added before flooring: ``(level / 255) * 255`` can come out one ulp below
# ``level``, and a bare floor would then map a linear curve to ``level - 1``.
_FLOOR_EPSILON = 1e-9


def _identity_lut() -> np.ndarray:
    return np.arange(LUT_SIZE, dtype=np.uint8)


def build_lookup_table(points: Sequence[Point]) -> np.ndarray:
    """Return the 256-entry ``uint8`` response table for *points*.

    Each level is linearly interpolated between the pair of consecutive points
    that brackets it.  Levels left of the first point or right of the last
    have no bracketing pair and fall back to the (first, last) pair, which
    keeps the curve defined for sparse or degenerate inputs.
    """

    ordered = sort_points(points)
    if not ordered:
        return _identity_lut()

    lut = np.empty(LUT_SIZE, dtype=np.uint8)
    first = ordered[0]
    last = ordered[-1]
    for level in range(LUT_SIZE):
        x = level / (LUT_SIZE - 1)
        p0, p1 = first, last
        for left, right in zip(ordered, ordered[1:]):
            if left.x <= x <= right.x:
                p0, p1 = left, right
                break
        span = p1.x - p0.x
        t = 0.0 if span == 0 else (x - p0.x) / span
        y = p0.y + t * (p1.y - p0.y)
        lut[level] = min(255, max(0, math.floor(y * 255 + _FLOOR_EPSILON)))
    return lut


@lru_cache(maxsize=64)
def _cached_lookup_table(points: tuple[Point, ...]) -> bytes:
    return build_lookup_table(points).tobytes()


def build_channel_luts(curve: CurveState) -> np.ndarray:
    """Return a ``(4, 256)`` table ordered master, red, green, blue.

    Tables are cached by point content, so unchanged channels are not rebuilt
    while the user drags a point on another channel.
    """

    rows = [
        np.frombuffer(_cached_lookup_table(curve.points(channel)), dtype=np.uint8)
        for channel in CHANNEL_ORDER
    ]
    return np.stack(rows)


def _check_index(points: Sequence[Point], index: int) -> None:
    if not 0 <= index < len(points):
        raise CurveEditError(f"Point index {index} out of range for {len(points)} points")


def _locate(points: tuple[Point, ...], target: Point) -> int:
    # Identity lookup so duplicate coordinates resolve to the edited instance.
    for index, point in enumerate(points):
        if point is target:
            return index
    return points.index(target)


def insert_or_select(
    points: Sequence[Point],
    click: Point,
    *,
    threshold: float = CURVE_HIT_THRESHOLD,
) -> tuple[tuple[Point, ...], int]:
    """Select the point under *click* or insert a new one.

    Returns the (possibly unchanged) points and the selected index.
    """

    current = tuple(points)
    for index, point in enumerate(current):
        if abs(point.x - click.x) < threshold and abs(point.y - click.y) < threshold:
            return current, index

    new_point = click.clamped()
    updated = sort_points(current + (new_point,))
    return updated, _locate(updated, new_point)


def move_point(
    points: Sequence[Point],
    index: int,
    position: Point,
) -> tuple[tuple[Point, ...], int]:
    """Move the point at *index* to *position* and return the new selection.

    Any point may travel anywhere inside the unit square, including across
    its neighbours; the returned index follows it through the re-sort.
    """

    _check_index(points, index)
    moved = position.clamped()
    updated = list(points)
    updated[index] = moved
    ordered = sort_points(updated)
    return ordered, _locate(ordered, moved)


def set_point_axis(
    points: Sequence[Point],
    index: int,
    axis: str,
    value: float,
) -> tuple[tuple[Point, ...], int]:
    """Set one axis of the point at *index* from a byte level in ``[0, 255]``."""

    _check_index(points, index)
    if axis not in ("x", "y"):
        raise ValueError(f"axis must be 'x' or 'y', got {axis!r}")
    normalised = min(1.0, max(0.0, float(value) / 255.0))
    current = points[index]
    if axis == "x":
        position = Point(normalised, current.y)
    else:
        position = Point(current.x, normalised)
    return move_point(points, index, position)


def reset_channel(curve: CurveState, channel: CurveChannel | str) -> CurveState:
    """Return *curve* with *channel* restored to the linear default."""

    return curve.with_channel(channel, default_points())


__all__ = [
    "CHANNEL_ORDER",
    "build_channel_luts",
    "build_lookup_table",
    "default_points",
    "insert_or_select",
    "move_point",
    "reset_channel",
    "set_point_axis",
]
