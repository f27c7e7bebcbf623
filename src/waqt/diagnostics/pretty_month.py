from __future__ import annotations

import argparse
from datetime import date
from typing import List, Optional

import waqt
from waqt.core.types import EVENT_ORDER, DailyResult


def header(events=EVENT_ORDER) -> str:
    cols = [f"{'Date':<12}"] + [f"{short_label(e):>10}" for e in events]
    return " ".join(cols)


def short_label(event: str) -> str:
    short = {"middle_of_night": "1/2 Night", "last_third_of_night": "Last 1/3"}
    return short.get(event, event.capitalize())


def row(d: date, result: DailyResult, events=EVENT_ORDER) -> str:
    by_event = {t.event: t.time for t in result.timings}
    cols = [f"{d.isoformat():<12}"] + [f"{by_event.get(e, '--'):>10}" for e in events]
    return " ".join(cols)


def month_table(config: waqt.CalculationConfig, year: int, month: int, *, source=None) -> List[str]:
    out = waqt.monthly(config, year, month, source=source)
    lines = [str(out["label"]), header(), "-" * len(header())]
    for i, result in enumerate(out["dates"], start=1):
        lines.append(row(date(year, month, i), result))
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    from waqt.cli import add_config_args, config_from_args

    p = argparse.ArgumentParser(prog="waqt month", description="Print one month of event times")
    p.add_argument("year", type=int)
    p.add_argument("month", type=int)
    add_config_args(p)
    args = p.parse_args(argv)

    if not 1 <= args.month <= 12:
        raise SystemExit("month must be in 1..12")
    for line in month_table(config_from_args(args), args.year, args.month):
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
