"""
waqt.engines.daily
------------------
One calendar day of timings: the solver's six events plus the two
night-fraction events derived from maghrib and the following day's fajr.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from ..core.labels import SALAT_LABELS, is_obligatory, label_for
from ..core.time import add_days, elapsed, format_time, resolve_zone, round_to_minute, shift
from ..core.types import EVENT_ORDER, SOLAR_EVENTS, CalculationConfig, DayData, Timing
from .interfaces import EventTimeSource

logger = logging.getLogger(__name__)


def night_events(maghrib: Optional[datetime], next_fajr: Optional[datetime]) -> Dict[str, Optional[datetime]]:
    """Middle and last third of the night, rounded to the nearest minute."""
    if maghrib is None or next_fajr is None:
        return {"middle_of_night": None, "last_third_of_night": None}
    night = elapsed(maghrib, next_fajr)
    return {
        "middle_of_night": round_to_minute(shift(maghrib, night / 2)),
        "last_third_of_night": round_to_minute(shift(maghrib, night * 2 / 3)),
    }


def solar_events(source: EventTimeSource, config: CalculationConfig, d: date) -> Dict[str, Optional[datetime]]:
    raw = source.compute_day(config, d)
    out: Dict[str, Optional[datetime]] = {}
    for event in SOLAR_EVENTS:
        value = raw.get(event)
        if value is None:
            logger.warning("No %s for %s at (%s, %s); omitting", event, d, config.latitude, config.longitude)
        out[event] = value
    return out


def compute_timings(
    source: EventTimeSource,
    config: CalculationConfig,
    d: date,
    *,
    labels: Dict[str, str] = SALAT_LABELS,
) -> Tuple[Tuple[Timing, ...], Optional[datetime]]:
    """
    Timings of calendar day d in enumeration order, and the next day's fajr.

    Events the solver could not produce are omitted, never defaulted.
    """
    tz = resolve_zone(config.time_zone)
    today = solar_events(source, config, d)
    next_fajr = source.compute_day(config, add_days(d, 1)).get("fajr")

    values: Dict[str, Optional[datetime]] = dict(today)
    values.update(night_events(today.get("maghrib"), next_fajr))

    timings: List[Timing] = []
    for event in EVENT_ORDER:
        value = values.get(event)
        if value is None:
            continue
        timings.append(
            Timing(
                event=event,
                label=label_for(event, labels),
                time=format_time(value, tz),
                value=value,
                is_obligatory=is_obligatory(event),
            )
        )
    return tuple(timings), next_fajr


def build_day_data(
    source: EventTimeSource,
    config: CalculationConfig,
    d: date,
    day_index: int,
    *,
    labels: Dict[str, str] = SALAT_LABELS,
) -> DayData:
    timings, next_fajr = compute_timings(source, config, d, labels=labels)
    return DayData(date=d, day_index=day_index, timings=timings, next_fajr=next_fajr)
