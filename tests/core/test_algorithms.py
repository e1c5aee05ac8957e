"""Unit tests for the compiled per-pixel helpers."""

from __future__ import annotations

import math

import pytest

from tonelab.core.filters.algorithms import (
    _apply_clarity,
    _apply_selective_color,
    _apply_tonal_regions,
    _contrast_factor,
    _float_to_uint8,
    _hsl_to_rgb,
    _rgb_to_hsl,
    _vignette_factor,
)
from tonelab.core.selective_color_resolver import band_offsets
from tonelab.core.adjustments import HSLParams


def test_contrast_factor_is_neutral_at_zero() -> None:
    assert _contrast_factor(0.0) == pytest.approx(1.0)
    assert _contrast_factor(50.0) > 1.0
    assert _contrast_factor(-50.0) < 1.0


def test_contrast_factor_does_not_divide_by_zero() -> None:
    assert math.isfinite(_contrast_factor(259.0))


@pytest.mark.parametrize(
    ("rgb", "hsl"),
    [
        ((255.0, 0.0, 0.0), (0.0, 1.0, 0.5)),
        ((0.0, 255.0, 0.0), (1.0 / 3.0, 1.0, 0.5)),
        ((0.0, 0.0, 255.0), (2.0 / 3.0, 1.0, 0.5)),
        ((128.0, 128.0, 128.0), (0.0, 0.0, 128.0 / 255.0)),
    ],
)
def test_rgb_to_hsl_primaries(rgb, hsl) -> None:
    assert _rgb_to_hsl(*rgb) == pytest.approx(hsl)


def test_hsl_round_trip() -> None:
    h, s, l = _rgb_to_hsl(200.0, 120.0, 40.0)

    assert _hsl_to_rgb(h, s, l) == pytest.approx((200.0, 120.0, 40.0))


def test_tonal_regions_are_neutral_at_zero() -> None:
    assert _apply_tonal_regions(90.0, 140.0, 30.0, 0.0, 0.0, 0.0, 0.0) == pytest.approx(
        (90.0, 140.0, 30.0)
    )


def test_whites_lift_bright_pixels_more_than_dark() -> None:
    bright = _apply_tonal_regions(230.0, 230.0, 230.0, 0.0, 0.0, 50.0, 0.0)
    dark = _apply_tonal_regions(30.0, 30.0, 30.0, 0.0, 0.0, 50.0, 0.0)

    assert bright[0] - 230.0 > dark[0] - 30.0 > 0.0


def test_full_desaturation_produces_grey() -> None:
    r, g, b = _apply_selective_color(200.0, 100.0, 50.0, -100.0, 0.0, band_offsets(HSLParams()))

    assert r == pytest.approx(g)
    assert g == pytest.approx(b)


def test_vignette_factor_is_one_at_centre_and_zero_at_corner() -> None:
    assert _vignette_factor(50, 50, 100, 100, 100.0) == pytest.approx(1.0)
    assert _vignette_factor(0, 0, 100, 100, 100.0) == pytest.approx(0.0)
    assert _vignette_factor(0, 0, 100, 100, 50.0) == pytest.approx(0.5)


@pytest.mark.parametrize(("value", "expected"), [(-4.0, 0), (0.4, 0), (127.6, 128), (300.0, 255)])
def test_float_to_uint8_rounds_and_clamps(value: float, expected: int) -> None:
    assert _float_to_uint8(value) == expected


def test_clarity_boosts_around_mid_grey() -> None:
    # lum = 117.65 / 255, weight = 1 - |lum - 0.5| * 2, boost = 1 + 0.6 * weight * 0.5
    r, g, b = _apply_clarity(200.0, 100.0, 50.0, 0.6)

    assert r == pytest.approx(219.93129, abs=1e-4)
    assert g == pytest.approx(92.24894, abs=1e-4)
    assert b == pytest.approx(28.40776, abs=1e-4)


def test_clarity_leaves_extremes_alone() -> None:
    assert _apply_clarity(255.0, 255.0, 255.0, 1.0) == pytest.approx((255.0, 255.0, 255.0))
    assert _apply_clarity(0.0, 0.0, 0.0, 1.0) == pytest.approx((0.0, 0.0, 0.0))


def _lum(r: float, g: float, b: float) -> float:
    return (0.2126 * r + 0.7152 * g + 0.0722 * b) / 255.0


def _tonal_regions_reference(rgb, highlights, shadows, whites, blacks, *, remeasure=True):
    r, g, b = rgb
    lum = _lum(r, g, b)

    factor = 1.0 + highlights / 100.0 * max(0.0, lum) ** 2
    r, g, b = r * factor, g * factor, b * factor
    if remeasure:
        lum = _lum(r, g, b)

    factor = 1.0 + shadows / 100.0 * max(0.0, 1.0 - lum) ** 2
    r, g, b = r * factor, g * factor, b * factor
    if remeasure:
        lum = _lum(r, g, b)

    lift = whites / 100.0 * max(0.0, lum) ** 4 * 255.0
    r, g, b = r + lift, g + lift, b + lift
    if remeasure:
        lum = _lum(r, g, b)

    lift = blacks / 100.0 * max(0.0, 1.0 - lum) ** 4 * 255.0
    return r + lift, g + lift, b + lift


def test_tonal_regions_remeasure_luminance_between_stages() -> None:
    pixel = (180.0, 120.0, 60.0)
    params = (50.0, 40.0, 60.0, -30.0)

    result = _apply_tonal_regions(*pixel, *params)

    expected = _tonal_regions_reference(pixel, *params)
    stale = _tonal_regions_reference(pixel, *params, remeasure=False)
    assert result == pytest.approx(expected, abs=1e-9)
    assert max(abs(a - b) for a, b in zip(expected, stale)) > 1.0


def test_highlights_scale_by_squared_luminance() -> None:
    # lum = 128.424 / 255; factor = 1 + 0.5 * lum**2
    r, g, b = _apply_tonal_regions(180.0, 120.0, 60.0, 50.0, 0.0, 0.0, 0.0)

    factor = 1.0 + 0.5 * (128.424 / 255.0) ** 2
    assert (r, g, b) == pytest.approx((180.0 * factor, 120.0 * factor, 60.0 * factor))


def test_blacks_lift_dark_pixels() -> None:
    # lum = 20 / 255; lift = 0.4 * (1 - lum)**4 * 255
    r, g, b = _apply_tonal_regions(20.0, 20.0, 20.0, 0.0, 0.0, 0.0, 40.0)

    lift = 0.4 * (1.0 - 20.0 / 255.0) ** 4 * 255.0
    assert r == pytest.approx(20.0 + lift)
    assert r == g == b


def test_vibrance_pushes_saturation_towards_one() -> None:
    # (200, 100, 50) is h = 1/18, s = 0.6, l = 125/255; vibrance 50 gives s = 0.8.
    offsets = band_offsets(HSLParams())

    r, g, b = _apply_selective_color(200.0, 100.0, 50.0, 0.0, 50.0, offsets)

    assert r == pytest.approx(225.0, abs=1e-6)
    assert g == pytest.approx(91.6667, abs=1e-3)
    assert b == pytest.approx(25.0, abs=1e-6)


def test_vibrance_is_applied_after_saturation() -> None:
    offsets = band_offsets(HSLParams())

    # s = 0.6 - 0.2 = 0.4, then 0.4 + 0.5 * 0.6 = 0.7
    combined = _apply_selective_color(200.0, 100.0, 50.0, -20.0, 50.0, offsets)
    h, s, l = _rgb_to_hsl(*combined)

    assert s == pytest.approx(0.7, abs=1e-6)
    assert h == pytest.approx(1.0 / 18.0, abs=1e-6)
    assert l == pytest.approx(125.0 / 255.0, abs=1e-6)
