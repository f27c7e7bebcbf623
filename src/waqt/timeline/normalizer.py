"""
waqt.timeline.normalizer
------------------------
Absolute event instants -> fractions of the Islamic day.

The Islamic day runs from one fajr to the next, so 0 is this day's fajr and
1 is the following fajr. Without a next fajr the span falls back to 24 hours.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Dict, Optional, Sequence

from ..core.time import elapsed
from ..core.types import EVENT_ORDER, DayData, Timeline, Timing

logger = logging.getLogger(__name__)

FALLBACK_SPAN = timedelta(hours=24)
MIN_SPAN = timedelta(milliseconds=1)

# Timeline field for each event, in enumeration order.
_FIELDS = {
    "fajr": "fajr",
    "sunrise": "sunrise",
    "dhuhr": "dhuhr",
    "asr": "asr",
    "maghrib": "maghrib",
    "isha": "isha",
    "middle_of_night": "mid_night",
    "last_third_of_night": "last_third",
}


def clamp01(v: float) -> float:
    return min(1.0, max(0.0, v))


def _by_event(timings: Sequence[Timing]) -> Dict[str, datetime]:
    return {t.event: t.value for t in timings}


def normalize(
    timings: Sequence[Timing],
    next_fajr: Optional[datetime] = None,
    *,
    centered_dhuhr: bool = False,
) -> Optional[Timeline]:
    """
    Timeline for one day's timings, or None when any event is absent.

    Out-of-order input is not reordered: the result carries ordered=False,
    a warning is logged, and each fraction is clamped up to its predecessor
    so consumers still see a non-decreasing sequence.

    With centered_dhuhr, dhuhr sits at the midpoint of [sunrise, maghrib]
    (the peak of the sun's arc) instead of its solar instant.
    """
    values = _by_event(timings)
    missing = [e for e in EVENT_ORDER if e not in values]
    if missing:
        return None

    start = values["fajr"]
    span = elapsed(start, next_fajr) if next_fajr is not None else FALLBACK_SPAN
    span = max(span, MIN_SPAN)

    raw = [elapsed(start, values[e]) / span for e in EVENT_ORDER]
    ordered = all(a <= b for a, b in zip(raw, raw[1:])) and raw[-1] <= 1.0
    if not ordered:
        logger.warning(
            "Out-of-order events for day starting %s: %s",
            start.isoformat(),
            ", ".join(f"{e}={r:.4f}" for e, r in zip(EVENT_ORDER, raw)),
        )

    fractions: Dict[str, float] = {}
    floor = 0.0
    for event, r in zip(EVENT_ORDER, raw):
        p = max(clamp01(r), floor)
        fractions[_FIELDS[event]] = p
        floor = p

    if centered_dhuhr:
        mid = (fractions["sunrise"] + fractions["maghrib"]) / 2
        fractions["dhuhr"] = min(mid, fractions["asr"])

    return Timeline(end=1.0, ordered=ordered, **fractions)


def build_timeline(day: DayData, *, centered_dhuhr: bool = False) -> Optional[Timeline]:
    return normalize(day.timings, day.next_fajr, centered_dhuhr=centered_dhuhr)


def time_to_progress(now: datetime, day: DayData) -> float:
    """
    Wall-clock instant -> progress within the day's timeline.

    0 at or before fajr, 0.999 at or after the next fajr (never wraps to the
    following day's start).
    """
    fajr = day.pick("fajr")
    if fajr is None or day.next_fajr is None:
        return 0.0
    if now <= fajr:
        return 0.0
    if now >= day.next_fajr:
        return 0.999
    return clamp01(elapsed(fajr, now) / elapsed(fajr, day.next_fajr))
