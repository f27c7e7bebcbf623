#!/usr/bin/env python3
"""
Line chart of each event's local clock time across a date range.

Values are minutes after local midnight; night events past midnight are
carried above 1440 so a series never wraps back to the bottom of the chart.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence

import waqt
from waqt.core.labels import label_for
from waqt.core.time import MINUTES_IN_DAY, add_days, format_minutes_label, minutes_since_midnight, resolve_zone
from waqt.core.types import EVENT_ORDER, CalculationConfig, DailyResult


def _need_matplotlib():
    try:
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise RuntimeError('Need matplotlib. Install: pip install "waqt[diagnostics]"') from e


@dataclass(frozen=True)
class Series:
    event: str
    label: str
    values: List[Optional[float]]


@dataclass(frozen=True)
class ChartData:
    dates: List[date]
    series: List[Series]


def series_order(days: Sequence[DailyResult]) -> List[str]:
    """Events present on any day, in enumeration order."""
    order: List[str] = []
    for day in days:
        for t in day.timings:
            if t.event not in order:
                order.append(t.event)
    return sorted(order, key=EVENT_ORDER.index)


def prepare_chart_data(
    config: CalculationConfig,
    start: date,
    end: date,
    *,
    source=None,
) -> ChartData:
    tz = resolve_zone(config.time_zone)
    dates: List[date] = []
    days: List[DailyResult] = []
    d = start
    while d <= end:
        dates.append(d)
        days.append(waqt.daily(config, d, source=source))
        d = add_days(d, 1)

    series: List[Series] = []
    for event in series_order(days):
        values: List[Optional[float]] = []
        for d, day in zip(dates, days):
            t = next((t for t in day.timings if t.event == event), None)
            if t is None:
                values.append(None)
                continue
            minutes = minutes_since_midnight(t.value, tz)
            if t.value.astimezone(tz).date() > d:
                minutes += MINUTES_IN_DAY
            values.append(minutes)
        series.append(Series(event, label_for(event), values))
    return ChartData(dates, series)


def padded_range(values: Sequence[Optional[float]]) -> Optional[tuple]:
    """(low, high) y-range with 15% (at least 5 minute) padding, or None when empty."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    lo, hi = min(present), max(present)
    padding = max(5.0, (hi - lo) * 0.15)
    low = max(0.0, lo - padding)
    high = hi + padding
    if high <= low:
        high = low + 30.0
    return low, high


def main(argv: Optional[List[str]] = None) -> int:
    from waqt.cli import add_config_args, config_from_args, parse_ymd

    p = argparse.ArgumentParser(prog="waqt chart", description="Plot event times over a date range")
    p.add_argument("start", help="YYYY-MM-DD")
    p.add_argument("end", help="YYYY-MM-DD")
    p.add_argument("--event", action="append", default=[], help="event to plot (repeatable; default all)")
    p.add_argument("--out", default="waqt_timeline.png")
    p.add_argument("--title", default="Event times")
    add_config_args(p)
    args = p.parse_args(argv)

    start, end = parse_ymd(args.start), parse_ymd(args.end)
    if end < start:
        raise SystemExit("end must be >= start")

    plt = _need_matplotlib()
    data = prepare_chart_data(config_from_args(args), start, end)
    wanted = set(args.event) if args.event else None

    fig, ax = plt.subplots(figsize=(12, 6))
    all_values: List[Optional[float]] = []
    for s in data.series:
        if wanted is not None and s.event not in wanted:
            continue
        ys = [float("nan") if v is None else v for v in s.values]
        ax.plot(data.dates, ys, marker="o", markersize=2.5, linewidth=1.4, label=s.label)
        all_values.extend(s.values)

    rng = padded_range(all_values)
    if rng is not None:
        ax.set_ylim(*rng)
    ticks: Dict[float, str] = {}
    for v in ax.get_yticks():
        ticks[v] = format_minutes_label(v)
    ax.set_yticks(list(ticks))
    ax.set_yticklabels(list(ticks.values()))
    ax.set_title(args.title)
    ax.grid(True, color="0.88")
    ax.legend(loc="center left", bbox_to_anchor=(1.01, 0.5), frameon=False)
    fig.autofmt_xdate()
    fig.tight_layout()
    fig.savefig(args.out, dpi=150)
    print(f"Saved: {args.out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
