from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Dict, List, Optional

from .core.labels import SALAT_LABELS
from .core.time import add_days, format_date, local_date, resolve_zone, utc_now
from .core.types import CalculationConfig, DailyResult, DayData, Timeline
from .engines.daily import build_day_data, compute_timings
from .engines.interfaces import EventTimeSource
from .timeline.normalizer import build_timeline
from .timeline.resolver import next_event, resolve_across_days

_default_source: Optional[EventTimeSource] = None


def default_source() -> EventTimeSource:
    """The adhanpy-backed source, created on first use."""
    global _default_source
    if _default_source is None:
        from .engines.adhan_source import AdhanEventSource
        _default_source = AdhanEventSource()
    return _default_source


def daily(
    config: CalculationConfig,
    d: date,
    *,
    source: Optional[EventTimeSource] = None,
    now: Optional[datetime] = None,
    labels: Dict[str, str] = SALAT_LABELS,
) -> DailyResult:
    """Timetable of calendar day d and the first of its events after now."""
    src = source or default_source()
    timings, _ = compute_timings(src, config, d, labels=labels)
    now = now if now is not None else utc_now()
    nxt = next_event(timings, now)
    return DailyResult(
        date=format_date(d),
        timings=timings,
        next_event_time=nxt.value if nxt is not None else None,
    )


def monthly(
    config: CalculationConfig,
    year: int,
    month: int,
    *,
    source: Optional[EventTimeSource] = None,
) -> Dict[str, object]:
    src = source or default_source()
    last = calendar.monthrange(year, month)[1]
    dates = [daily(config, date(year, month, day), source=src) for day in range(1, last + 1)]
    return {"label": f"{calendar.month_name[month]} {year}", "dates": dates}


def yearly(
    config: CalculationConfig,
    year: int,
    *,
    source: Optional[EventTimeSource] = None,
) -> Dict[str, object]:
    src = source or default_source()
    dates: List[DailyResult] = []
    d = date(year, 1, 1)
    while d.year == year:
        dates.append(daily(config, d, source=src))
        d = add_days(d, 1)
    return {"label": str(year), "dates": dates}


def day_data(
    config: CalculationConfig,
    d: date,
    *,
    source: Optional[EventTimeSource] = None,
    day_index: int = 0,
) -> DayData:
    return build_day_data(source or default_source(), config, d, day_index)


def day_timeline(
    config: CalculationConfig,
    d: date,
    *,
    source: Optional[EventTimeSource] = None,
    centered_dhuhr: bool = False,
) -> Optional[Timeline]:
    return build_timeline(day_data(config, d, source=source), centered_dhuhr=centered_dhuhr)


def active_event(
    config: CalculationConfig,
    *,
    now: Optional[datetime] = None,
    source: Optional[EventTimeSource] = None,
) -> Optional[str]:
    """Active event at now, looking back one calendar day for the pre-fajr period."""
    src = source or default_source()
    now = now if now is not None else utc_now()
    today = local_date(now, resolve_zone(config.time_zone))
    current = build_day_data(src, config, today, 1)
    previous = build_day_data(src, config, add_days(today, -1), 0)
    return resolve_across_days(current, now, previous)
