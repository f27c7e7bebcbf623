# tests/test_visuals.py

import dataclasses

import pytest

from waqt.core.types import Timeline
from waqt.timeline import visuals as v

# Fractions of the reference day (fajr 05:28 to fajr 05:28).
TL = Timeline(
    fajr=0.0,
    sunrise=82 / 1440,
    dhuhr=447 / 1440,
    asr=652 / 1440,
    maghrib=812 / 1440,
    isha=892 / 1440,
    mid_night=1126 / 1440,
    last_third=1231 / 1440,
)

EPS = 1e-9


def _edges(tl):
    """Every sub-interval boundary used by the visual functions."""
    out = list(tl.as_tuple())
    orange = v.orange_start(tl)
    out += [
        orange,
        v.lerp(tl.sunrise, tl.dhuhr, v.SUN_RISE_FADE),
        v.lerp(orange, tl.maghrib, 1 - v.SUN_FADE_PRE_MAGHRIB),
        v.lerp(orange, tl.maghrib, 1 - v.MOON_PRE_MAGHRIB_APPEAR),
        v.lerp(tl.maghrib, tl.isha, v.SUNSET_HOLD_AFTER_MAGHRIB),
        v.lerp(tl.maghrib, tl.isha, 1 - v.SUNSET_FADE_BEFORE_ISHA),
        tl.sunrise + (tl.sunrise - tl.fajr) * v.FAJR_GLOW_TAIL_OF_SUNRISE,
        tl.sunrise + (tl.sunrise - tl.fajr) * v.LIGHT_RAYS_TAIL_OF_SUNRISE,
    ]
    return out


def _channel(fn, i):
    return lambda p, tl: fn(p, tl)[i]


SCALAR_FUNCTIONS = {
    "sun_x": v.sun_x,
    "sun_y": v.sun_y,
    "sun_opacity": v.sun_opacity,
    "sun_r": lambda p, tl: v.sun_color_channel(p, tl, "r"),
    "sun_g": lambda p, tl: v.sun_color_channel(p, tl, "g"),
    "sun_b": lambda p, tl: v.sun_color_channel(p, tl, "b"),
    "moon_x": v.moon_x,
    "moon_opacity": v.moon_opacity,
    "stars_opacity": v.stars_opacity,
    "fajr_gradient_opacity": v.fajr_gradient_opacity,
    "sunset_gradient_opacity": v.sunset_gradient_opacity,
    "light_rays_opacity": v.light_rays_opacity,
    "sky_r": _channel(v.sky_color, 0),
    "sky_g": _channel(v.sky_color, 1),
    "sky_b": _channel(v.sky_color, 2),
    "sky_a": _channel(v.sky_color, 3),
}


@pytest.mark.parametrize("name", sorted(SCALAR_FUNCTIONS))
def test_continuous_at_every_edge(name):
    fn = SCALAR_FUNCTIONS[name]
    for edge in _edges(TL):
        at_edge = fn(edge, TL)
        assert fn(edge - EPS, TL) == pytest.approx(at_edge, abs=1e-4), (name, edge)
        assert fn(edge + EPS, TL) == pytest.approx(at_edge, abs=1e-4), (name, edge)


@pytest.mark.parametrize("name", sorted(SCALAR_FUNCTIONS))
def test_progress_is_clamped(name):
    fn = SCALAR_FUNCTIONS[name]
    assert fn(-0.5, TL) == fn(0.0, TL)
    assert fn(1.5, TL) == fn(1.0, TL)


def test_opacities_stay_in_unit_range():
    opacities = [
        v.sun_opacity, v.moon_opacity, v.stars_opacity,
        v.fajr_gradient_opacity, v.sunset_gradient_opacity, v.light_rays_opacity,
    ]
    for i in range(1001):
        p = i / 1000
        for fn in opacities:
            assert 0.0 <= fn(p, TL) <= 1.0


def test_sun_path():
    assert v.sun_x(0.0, TL) == v.EAST_X
    assert v.sun_x(TL.maghrib, TL) == v.WEST_X
    mid = (TL.sunrise + TL.maghrib) / 2
    assert v.sun_y(mid, TL) == pytest.approx(v.LOW_Y - v.SUN_PEAK_Y_DELTA)
    assert v.sun_y(TL.sunrise, TL) == v.LOW_Y
    assert v.sun_y(TL.isha, TL) == v.LOW_Y
    assert v.sun_y(mid - 0.05, TL) == pytest.approx(v.sun_y(mid + 0.05, TL))


def test_sun_visible_only_between_sunrise_and_maghrib():
    assert v.sun_opacity(TL.fajr, TL) == 0.0
    assert v.sun_opacity(TL.sunrise, TL) == 0.0
    assert v.sun_opacity(TL.dhuhr, TL) == 1.0
    assert v.sun_opacity(TL.maghrib, TL) == 0.0
    assert 0.0 < v.sun_opacity(TL.sunrise + 0.01, TL) < 1.0


def test_sun_colour_shifts_through_warm_window():
    assert v.sun_color(TL.dhuhr, TL) == (255.0, 223.0, 102.0)
    assert v.sun_color(TL.maghrib, TL) == (255.0, 140.0, 0.0)
    g = v.sun_color_channel((v.orange_start(TL) + TL.maghrib) / 2, TL, "g")
    assert g == pytest.approx((223.0 + 140.0) / 2)


def test_moon_and_stars():
    assert v.moon_opacity(TL.dhuhr, TL) == 0.0
    assert v.moon_opacity(TL.maghrib, TL) == 1.0
    assert v.moon_x(TL.dhuhr, TL) == v.WEST_X
    assert v.moon_x(1.0, TL) == v.EAST_X
    assert v.stars_opacity(TL.maghrib, TL) == 0.0
    assert v.stars_opacity(TL.mid_night, TL) == 1.0
    assert v.stars_opacity(TL.last_third, TL) == 1.0


def test_fajr_glow_and_light_rays():
    assert v.fajr_gradient_opacity(0.0, TL) == pytest.approx(0.7)
    assert v.fajr_gradient_opacity(TL.sunrise, TL) == pytest.approx(1.0)
    assert v.fajr_gradient_opacity(TL.dhuhr, TL) == 0.0
    assert v.light_rays_opacity(TL.sunrise, TL) == pytest.approx(v.LIGHT_RAYS_MAX)
    assert v.light_rays_opacity(TL.dhuhr, TL) == 0.0


def test_sunset_glow_holds_after_maghrib():
    hold = (v.lerp(TL.maghrib, TL.isha, 0.25) + v.lerp(TL.maghrib, TL.isha, 0.75)) / 2
    assert v.sunset_gradient_opacity(hold, TL) == 1.0
    assert v.sunset_gradient_opacity(TL.isha, TL) == 0.0
    assert v.sunset_gradient_opacity(TL.dhuhr, TL) == 0.0


def test_sky_colour_pinned_to_events():
    assert v.sky_color(0.0, TL) == v.SKY_NIGHT
    assert v.sky_color(TL.dhuhr, TL) == pytest.approx(v.SKY_NOON)
    assert v.sky_color(TL.isha, TL) == pytest.approx(v.SKY_DUSK)
    assert v.sky_color(1.0, TL) == v.SKY_NIGHT


def test_cross_fade():
    first = v.cross_fade(0.0, 0, 3)
    assert first["has_prev"] is False
    assert first["top_seam_stars_opacity"] == 0.0

    middle = v.cross_fade(0.0, 1, 3)
    assert middle["has_prev"] and middle["has_next"]
    assert middle["top_seam_stars_opacity"] == 1.0
    assert v.cross_fade(v.SEAM_FRAC, 1, 3)["top_seam_stars_opacity"] == 0.0
    assert v.cross_fade(1.0, 1, 3)["bottom_seam_fajr_opacity"] == 1.0
    assert v.cross_fade(0.5, 1, 3)["bottom_seam_fajr_opacity"] == 0.0

    last = v.cross_fade(1.0, 2, 3)
    assert last["has_next"] is False
    assert last["bottom_seam_fajr_opacity"] == 0.0


LATE_FAJR = dataclasses.replace(TL, fajr=0.02)


@pytest.mark.parametrize("name", sorted(SCALAR_FUNCTIONS))
def test_continuous_when_fajr_is_not_the_start(name):
    fn = SCALAR_FUNCTIONS[name]
    for edge in _edges(LATE_FAJR):
        at_edge = fn(edge, LATE_FAJR)
        assert fn(edge - EPS, LATE_FAJR) == pytest.approx(at_edge, abs=1e-4), (name, edge)
        assert fn(edge + EPS, LATE_FAJR) == pytest.approx(at_edge, abs=1e-4), (name, edge)


def test_fajr_glow_ramps_in_before_fajr():
    assert v.fajr_gradient_opacity(0.0, LATE_FAJR) == 0.0
    assert v.fajr_gradient_opacity(0.01, LATE_FAJR) == pytest.approx(v.FAJR_GLOW_BASE / 2)
    assert v.fajr_gradient_opacity(0.02, LATE_FAJR) == pytest.approx(v.FAJR_GLOW_BASE)
