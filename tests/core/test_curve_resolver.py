"""Tests for tone curve lookup tables and interactive point editing."""

from __future__ import annotations

import numpy as np
import pytest

from tonelab.core.adjustments import CurveChannel, CurveState, Point, default_points
from tonelab.core.curve_resolver import (
    build_channel_luts,
    build_lookup_table,
    insert_or_select,
    move_point,
    reset_channel,
    set_point_axis,
)
from tonelab.errors import CurveEditError


def _xs(points):
    return [point.x for point in points]


def test_default_curve_is_identity_within_rounding() -> None:
    lut = build_lookup_table(default_points())

    assert lut.dtype == np.uint8
    assert lut.shape == (256,)
    assert np.abs(lut.astype(int) - np.arange(256)).max() <= 1


def test_non_monotonic_curve_rises_then_falls() -> None:
    lut = build_lookup_table([Point(0.0, 0.0), Point(0.5, 1.0), Point(1.0, 0.0)])

    assert lut[0] == 0
    assert abs(int(lut[127]) - 255) <= 1
    assert lut[255] == 0
    assert lut[127] > lut[64] > lut[0]


def test_single_point_curve_is_constant() -> None:
    lut = build_lookup_table([Point(0.3, 0.5)])

    assert np.all(lut == 127)


def test_empty_curve_falls_back_to_identity() -> None:
    np.testing.assert_array_equal(build_lookup_table([]), np.arange(256, dtype=np.uint8))


def test_levels_outside_points_use_first_and_last_pair() -> None:
    lut = build_lookup_table([Point(0.5, 0.5), Point(1.0, 1.0)])

    # Extrapolated along the first-to-last segment, then clamped.
    assert lut[0] == 0
    assert abs(int(lut[64]) - 64) <= 1
    assert lut[255] == 255


def test_unsorted_points_are_sorted_before_interpolation() -> None:
    shuffled = [Point(1.0, 1.0), Point(0.0, 0.0), Point(0.5, 0.5)]

    np.testing.assert_array_equal(
        build_lookup_table(shuffled), build_lookup_table(sorted(shuffled, key=lambda p: p.x))
    )


def test_build_channel_luts_orders_master_red_green_blue() -> None:
    curve = CurveState().with_channel(CurveChannel.GREEN, [Point(0.0, 1.0), Point(1.0, 0.0)])

    luts = build_channel_luts(curve)

    assert luts.shape == (4, 256)
    assert luts[2, 0] == 255
    assert luts[2, 255] == 0
    assert abs(int(luts[0, 200]) - 200) <= 1
    np.testing.assert_array_equal(luts[1], np.arange(256, dtype=np.uint8))


def test_insert_reports_index_after_sorting() -> None:
    points = (Point(0.0, 0.0), Point(0.5, 0.5), Point(1.0, 1.0))

    updated, index = insert_or_select(points, Point(0.2, 0.7))

    assert _xs(updated) == sorted(_xs(updated))
    assert len(updated) == 4
    assert index == 1
    assert updated[index] == Point(0.2, 0.7)


def test_click_near_existing_point_selects_without_mutation() -> None:
    points = (Point(0.0, 0.0), Point(0.5, 0.5), Point(1.0, 1.0))

    updated, index = insert_or_select(points, Point(0.52, 0.47))

    assert updated == points
    assert index == 1


def test_click_close_on_one_axis_only_inserts() -> None:
    points = (Point(0.0, 0.0), Point(0.5, 0.5), Point(1.0, 1.0))

    updated, index = insert_or_select(points, Point(0.51, 0.9))

    assert len(updated) == 4
    assert updated[index] == Point(0.51, 0.9)


def test_move_point_follows_point_through_resort() -> None:
    points = default_points()

    updated, index = move_point(points, 1, Point(0.9, 0.2))

    assert _xs(updated) == [0.0, 0.5, 0.75, 0.9, 1.0]
    assert index == 3
    assert updated[index] == Point(0.9, 0.2)


def test_move_point_clamps_to_unit_square() -> None:
    updated, index = move_point(default_points(), 0, Point(-0.3, 1.7))

    assert updated[index] == Point(0.0, 1.0)


def test_endpoints_are_not_pinned() -> None:
    updated, index = move_point(default_points(), 4, Point(0.6, 0.1))

    assert updated[-1] == Point(0.75, 0.75)
    assert updated[index] == Point(0.6, 0.1)


def test_set_point_axis_normalises_byte_value() -> None:
    updated, index = set_point_axis(default_points(), 2, "y", 51)

    assert updated[index] == Point(0.5, 0.2)

    updated, index = set_point_axis(updated, index, "x", 300)
    assert updated[index] == Point(1.0, 0.2)


def test_set_point_axis_rejects_unknown_axis() -> None:
    with pytest.raises(ValueError):
        set_point_axis(default_points(), 0, "z", 10)


@pytest.mark.parametrize("index", [-1, 5, 99])
def test_invalid_index_raises(index: int) -> None:
    with pytest.raises(CurveEditError):
        move_point(default_points(), index, Point(0.5, 0.5))
    with pytest.raises(IndexError):
        set_point_axis(default_points(), index, "x", 10)


def test_reset_channel_restores_linear_curve() -> None:
    curve = CurveState().with_channel(CurveChannel.RED, [Point(0.0, 1.0)])

    restored = reset_channel(curve, "red")

    assert restored.red == default_points()
    assert restored == CurveState()


def test_default_curve_maps_every_level_onto_itself() -> None:
    luts = build_channel_luts(CurveState())

    for row in luts:
        np.testing.assert_array_equal(row, np.arange(256, dtype=np.uint8))
