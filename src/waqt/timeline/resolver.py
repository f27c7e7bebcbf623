from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from ..core.labels import SALAT_LABELS, label_for
from ..core.time import format_time, ms_between
from ..core.types import PRE_FAJR, DayData, Timeline, Timing

ONE_DAY = timedelta(hours=24)


def resolve_active_event(timings: Sequence[Timing], now: datetime) -> Optional[str]:
    """
    The last timing whose value <= now.

    Lower bounds are inclusive: at exactly a timing's instant that timing is
    active. Returns PRE_FAJR when now precedes every timing, the day's last
    event when now is past all of them, and None for an empty day.
    """
    if not timings:
        return None
    for t in reversed(timings):
        if t.value <= now:
            return t.event
    return PRE_FAJR


def resolve_across_days(current: DayData, now: datetime, previous: Optional[DayData] = None) -> Optional[str]:
    """
    Active event when the caller owns adjacent days.

    A pre-fajr result belongs to the previous Islamic day. With that day at
    hand its timings decide; otherwise the current day's night events are
    shifted back 24 hours as an estimate, falling back to its last event.
    """
    event = resolve_active_event(current.timings, now)
    if event != PRE_FAJR:
        return event

    if previous is not None and previous.timings:
        prev_event = resolve_active_event(previous.timings, now)
        if prev_event != PRE_FAJR:
            return prev_event

    night = current.timings[-3:]
    for t in reversed(night):
        if t.value - ONE_DAY <= now:
            return t.event
    return current.timings[-1].event


def next_event(timings: Sequence[Timing], now: datetime) -> Optional[Timing]:
    """The first timing strictly after now."""
    for t in timings:
        if t.value > now:
            return t
    return None


def time_until_next(timings: Sequence[Timing], now: datetime) -> Optional[float]:
    """Milliseconds until the next timing, or None if the day is over."""
    t = next_event(timings, now)
    return ms_between(now, t.value) if t is not None else None


# ---------------------------------------------------------
# Scroll progress
# ---------------------------------------------------------

_PHASES: Tuple[Tuple[str, str], ...] = (
    ("sunrise", "fajr"),
    ("dhuhr", "sunrise"),
    ("asr", "dhuhr"),
    ("maghrib", "asr"),
    ("isha", "maghrib"),
    ("mid_night", "isha"),
    ("last_third", "middle_of_night"),
)


def event_at_progress(progress: float, timeline: Timeline) -> str:
    """Active event at a timeline position, with the same inclusive lower bounds."""
    for boundary, event in _PHASES:
        if progress < getattr(timeline, boundary):
            return event
    return "last_third_of_night"


def phase_label_and_time(
    progress: float,
    timeline: Timeline,
    day: DayData,
    tz: ZoneInfo,
    labels: Dict[str, str] = SALAT_LABELS,
) -> Dict[str, str]:
    event = event_at_progress(progress, timeline)
    value = day.pick(event)  # type: ignore[arg-type]
    return {
        "event": event,
        "label": label_for(event, labels),
        "time": format_time(value, tz) if value is not None else "",
    }
