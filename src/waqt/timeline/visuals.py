"""
waqt.timeline.visuals
---------------------
Pure functions of (progress, timeline) consumed by a renderer.

progress is the position within one Islamic day in [0, 1] (values outside
are clamped). Every function is continuous at each of its sub-interval
edges: the value at an edge equals the limit from either side. Values are
raw and unsmoothed; channel values are not rounded.

Screen positions are percentages with y growing downwards, so the sun's
arc peaks at the smallest y.
"""

from __future__ import annotations

from typing import Dict, Literal, Sequence, Tuple

from ..core.types import Timeline

Channel = Literal["r", "g", "b"]
RGB = Tuple[float, float, float]
RGBA = Tuple[float, float, float, float]

# Screen-space positions (percent)
EAST_X = 85.0
WEST_X = 15.0
LOW_Y = 80.0
MOON_Y = 76.0
SUN_PEAK_Y_DELTA = 40.0

# Transition fractions, relative to the intervals they act on
FAJR_GLOW_TAIL_OF_SUNRISE = 0.25   # tail after sunrise, share of [fajr, sunrise]
LIGHT_RAYS_TAIL_OF_SUNRISE = 0.15
FAJR_GLOW_BASE = 0.7
LIGHT_RAYS_MAX = 0.4
MOON_PRE_MAGHRIB_APPEAR = 0.2      # share of [orange start, maghrib]
SUN_FADE_PRE_MAGHRIB = 0.25        # share of [orange start, maghrib]
SUN_RISE_FADE = 0.1                # share of [sunrise, dhuhr]
SUNSET_HOLD_AFTER_MAGHRIB = 0.25   # share of [maghrib, isha]
SUNSET_FADE_BEFORE_ISHA = 0.25     # share of [maghrib, isha]

# Seam band for inter-day crossfades, as a fraction of the day
SEAM_FRAC = 0.015

SUN_DAY: Dict[str, float] = {"r": 255.0, "g": 223.0, "b": 102.0}
SUN_DUSK: Dict[str, float] = {"r": 255.0, "g": 140.0, "b": 0.0}

SKY_NIGHT: RGBA = (5.0, 7.0, 16.0, 0.98)
SKY_MORNING: RGBA = (135.0, 206.0, 235.0, 0.30)
SKY_NOON: RGBA = (150.0, 215.0, 245.0, 0.32)
SKY_AFTERNOON: RGBA = (160.0, 220.0, 255.0, 0.35)
SKY_DUSK: RGBA = (40.0, 40.0, 60.0, 0.60)
SKY_EVENING: RGBA = (10.0, 12.0, 28.0, 0.90)
SKY_LATE: RGBA = (6.0, 8.0, 20.0, 0.95)


def clamp01(v: float) -> float:
    return min(1.0, max(0.0, v))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def inv_lerp(a: float, b: float, v: float) -> float:
    """Position of v within [a, b], clamped to [0, 1]; 0 for an empty interval."""
    if a == b:
        return 0.0
    return clamp01((v - a) / (b - a))


def orange_start(tl: Timeline) -> float:
    """Start of the warm window, halfway between asr and maghrib."""
    return (tl.asr + tl.maghrib) / 2


# ============================================================
# Sun
# ============================================================

def sun_x(p: float, tl: Timeline) -> float:
    """East -> west across [sunrise, maghrib]."""
    p = clamp01(p)
    if p <= tl.sunrise:
        return EAST_X
    if p >= tl.maghrib:
        return WEST_X
    return lerp(EAST_X, WEST_X, inv_lerp(tl.sunrise, tl.maghrib, p))


def sun_y(p: float, tl: Timeline) -> float:
    """Parabolic arc peaking at the midpoint of [sunrise, maghrib]; LOW_Y outside."""
    p = clamp01(p)
    if p <= tl.sunrise or p >= tl.maghrib:
        return LOW_Y
    t = inv_lerp(tl.sunrise, tl.maghrib, p)
    return LOW_Y - SUN_PEAK_Y_DELTA * (1 - (2 * t - 1) ** 2)


def sun_opacity(p: float, tl: Timeline) -> float:
    p = clamp01(p)
    if p <= tl.sunrise or p >= tl.maghrib:
        return 0.0
    rise_end = lerp(tl.sunrise, tl.dhuhr, SUN_RISE_FADE)
    fade_start = lerp(orange_start(tl), tl.maghrib, 1 - SUN_FADE_PRE_MAGHRIB)
    rising = inv_lerp(tl.sunrise, rise_end, p)
    setting = 1 - inv_lerp(fade_start, tl.maghrib, p)
    return min(rising, setting)


def sun_color_channel(p: float, tl: Timeline, ch: Channel) -> float:
    """Day colour until the warm window opens, dusk colour from maghrib on."""
    p = clamp01(p)
    start = orange_start(tl)
    if p <= start:
        return SUN_DAY[ch]
    return lerp(SUN_DAY[ch], SUN_DUSK[ch], inv_lerp(start, tl.maghrib, p))


def sun_color(p: float, tl: Timeline) -> RGB:
    return (
        sun_color_channel(p, tl, "r"),
        sun_color_channel(p, tl, "g"),
        sun_color_channel(p, tl, "b"),
    )


# ============================================================
# Moon and night sky
# ============================================================

def _moon_appear_start(tl: Timeline) -> float:
    return lerp(orange_start(tl), tl.maghrib, 1 - MOON_PRE_MAGHRIB_APPEAR)


def moon_x(p: float, tl: Timeline) -> float:
    """Waits in the west, then crosses west -> east in a straight line until the day ends."""
    p = clamp01(p)
    appear = _moon_appear_start(tl)
    if p <= appear:
        return WEST_X
    return lerp(WEST_X, EAST_X, inv_lerp(appear, tl.end, p))


def moon_opacity(p: float, tl: Timeline) -> float:
    p = clamp01(p)
    appear = _moon_appear_start(tl)
    if p < appear:
        return 0.0
    if p < tl.maghrib:
        return inv_lerp(appear, tl.maghrib, p)
    return 1.0


def stars_opacity(p: float, tl: Timeline) -> float:
    """Ramp over [isha, mid_night], full from mid_night through the end of the night."""
    p = clamp01(p)
    if p < tl.isha:
        return 0.0
    if p < tl.mid_night:
        return inv_lerp(tl.isha, tl.mid_night, p)
    return 1.0


def fajr_gradient_opacity(p: float, tl: Timeline) -> float:
    """Ramps to FAJR_GLOW_BASE by fajr, brightens to 1 at sunrise, then fades."""
    p = clamp01(p)
    if p < tl.fajr:
        return FAJR_GLOW_BASE * inv_lerp(0.0, tl.fajr, p)
    if p < tl.sunrise:
        return lerp(FAJR_GLOW_BASE, 1.0, inv_lerp(tl.fajr, tl.sunrise, p))
    tail = lerp(0.0, tl.sunrise - tl.fajr, FAJR_GLOW_TAIL_OF_SUNRISE)
    if p < tl.sunrise + tail:
        return 1 - inv_lerp(tl.sunrise, tl.sunrise + tail, p)
    return 0.0


def sunset_gradient_opacity(p: float, tl: Timeline) -> float:
    p = clamp01(p)
    start = orange_start(tl)
    if p < start:
        return 0.0
    hold_end = lerp(tl.maghrib, tl.isha, SUNSET_HOLD_AFTER_MAGHRIB)
    fade_start = lerp(tl.maghrib, tl.isha, 1 - SUNSET_FADE_BEFORE_ISHA)
    if p < hold_end:
        return inv_lerp(start, hold_end, p)
    if p < fade_start:
        return 1.0
    if p < tl.isha:
        return 1 - inv_lerp(fade_start, tl.isha, p)
    return 0.0


def light_rays_opacity(p: float, tl: Timeline) -> float:
    p = clamp01(p)
    if p < tl.fajr:
        return 0.0
    if p < tl.sunrise:
        return inv_lerp(tl.fajr, tl.sunrise, p) * LIGHT_RAYS_MAX
    tail = lerp(0.0, tl.sunrise - tl.fajr, LIGHT_RAYS_TAIL_OF_SUNRISE)
    if p < tl.sunrise + tail:
        return (1 - inv_lerp(tl.sunrise, tl.sunrise + tail, p)) * LIGHT_RAYS_MAX
    return 0.0


# ============================================================
# Sky
# ============================================================

def _sky_keyframes(tl: Timeline) -> Sequence[Tuple[float, RGBA]]:
    return (
        (tl.fajr, SKY_NIGHT),
        (tl.sunrise, SKY_MORNING),
        (tl.dhuhr, SKY_NOON),
        (tl.asr, SKY_AFTERNOON),
        (tl.maghrib, SKY_AFTERNOON),
        (tl.isha, SKY_DUSK),
        (tl.mid_night, SKY_EVENING),
        (tl.last_third, SKY_LATE),
        (tl.end, SKY_NIGHT),
    )


def sky_color(p: float, tl: Timeline) -> RGBA:
    """Base sky RGBA, interpolated linearly between colours pinned to the timeline events."""
    p = clamp01(p)
    frames = _sky_keyframes(tl)
    if p <= frames[0][0]:
        return frames[0][1]
    for (a, ca), (b, cb) in zip(frames, frames[1:]):
        if p < b:
            t = inv_lerp(a, b, p)
            return tuple(lerp(x, y, t) for x, y in zip(ca, cb))  # type: ignore[return-value]
    return frames[-1][1]


def cross_fade(p: float, current_index: int, days_len: int) -> Dict[str, object]:
    """Seam opacities where one buffered day meets the next."""
    has_prev = current_index > 0
    has_next = current_index < days_len - 1
    return {
        "has_prev": has_prev,
        "has_next": has_next,
        "top_seam_stars_opacity": 1 - inv_lerp(0.0, SEAM_FRAC, p) if has_prev else 0.0,
        "bottom_seam_fajr_opacity": inv_lerp(1 - SEAM_FRAC, 1.0, p) if has_next else 0.0,
    }
