from __future__ import annotations

import argparse
import asyncio
import importlib
import inspect
import logging
import re
import sys
from datetime import date
from typing import List, Optional

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_ymd(s: str) -> date:
    y, m, d = map(int, s.split("-"))
    return date(y, m, d)


def add_config_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--lat", type=float, required=True, help="Latitude in degrees (positive north)")
    p.add_argument("--lon", type=float, required=True, help="Longitude in degrees (positive east)")
    p.add_argument("--method", default="Other", help="Calculation method preset (see `waqt methods`)")
    p.add_argument("--fajr-angle", type=float, default=None, help="Override the preset's fajr angle")
    p.add_argument("--isha-angle", type=float, default=None, help="Override the preset's isha angle")
    p.add_argument("--isha-interval", type=float, default=None, help="Isha as minutes after maghrib")
    p.add_argument("--tz", default="UTC", help="IANA time zone, e.g. Europe/London")


def config_from_args(args: argparse.Namespace):
    from waqt.engines.methods import make_config

    return make_config(
        args.lat,
        args.lon,
        method=args.method,
        fajr_angle=args.fajr_angle,
        isha_angle=args.isha_angle,
        isha_interval=args.isha_interval,
        time_zone=args.tz,
    )


def _run_module_main(modpath: str, argv: list[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def cmd_day(argv: list[str]) -> int:
    import waqt

    p = argparse.ArgumentParser(prog="waqt day", description="Event times for one calendar day")
    p.add_argument("date", help="YYYY-MM-DD")
    add_config_args(p)
    args = p.parse_args(argv)

    result = waqt.daily(config_from_args(args), parse_ymd(args.date))
    print(result.date)
    for t in result.timings:
        mark = "*" if t.is_obligatory else " "
        print(f" {mark} {t.label:<22} {t.time:>8}")
    return 0


def cmd_timeline(argv: list[str]) -> int:
    import waqt

    p = argparse.ArgumentParser(prog="waqt timeline", description="Normalized [0,1] timeline of one Islamic day")
    p.add_argument("date", help="YYYY-MM-DD")
    p.add_argument("--centered-dhuhr", action="store_true", help="Place dhuhr at the peak of the sun's arc")
    add_config_args(p)
    args = p.parse_args(argv)

    tl = waqt.day_timeline(config_from_args(args), parse_ymd(args.date), centered_dhuhr=args.centered_dhuhr)
    if tl is None:
        print("Timeline unavailable: one or more events could not be computed for this day.")
        return 1
    for name in ("fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha", "mid_night", "last_third", "end"):
        print(f"  {name:<11} {getattr(tl, name):.6f}")
    if not tl.ordered:
        print("  (warning: events were out of order; fractions clamped)")
    return 0


def cmd_now(argv: list[str]) -> int:
    import waqt
    from waqt.core.labels import label_for
    from waqt.core.time import format_time, format_time_remaining, resolve_zone, utc_now
    from waqt.timeline.buffer import DayBufferManager

    p = argparse.ArgumentParser(prog="waqt now", description="Active and next event right now")
    add_config_args(p)
    args = p.parse_args(argv)

    config = config_from_args(args)
    tz = resolve_zone(config.time_zone)
    now = utc_now()
    buf = DayBufferManager(waqt.default_source())
    days = buf.initialize(config, now)
    if not days:
        print("No valid coordinates.")
        return 1
    buf.add_previous_day()
    current = buf.find(days[0].date)
    previous, _ = buf.neighbours(current)

    event = waqt.resolve_across_days(current, now, previous)
    print(f"Islamic day : {current.date.isoformat()}")
    print(f"Now         : {format_time(now, tz)}")
    print(f"Active      : {label_for(event) if event else '--'}")
    nxt = waqt.next_event(current.timings, now)
    if nxt is not None:
        remaining = waqt.time_until_next(current.timings, now)
        print(f"Next        : {nxt.label} at {nxt.time} (in {format_time_remaining(remaining)})")
    elif current.next_fajr is not None:
        print(f"Next        : {label_for('fajr')} at {format_time(current.next_fajr, tz)}")
    return 0


def cmd_watch(argv: list[str]) -> int:
    import waqt
    from waqt.core.labels import label_for
    from waqt.core.time import format_time, resolve_zone

    p = argparse.ArgumentParser(
        prog="waqt watch",
        description="Print the active event at every event boundary until interrupted",
    )
    add_config_args(p)
    args = p.parse_args(argv)
    config = config_from_args(args)
    tz = resolve_zone(config.time_zone)

    async def run() -> None:
        session = waqt.TimelineSession(waqt.default_source(), waqt.LoopScheduler())

        def show(event, day) -> None:
            stamp = format_time(session.clock(), tz)
            print(f"[{stamp}] {label_for(event) if event else '--'}", flush=True)

        session.subscribe(show)
        try:
            session.start(config)
            await asyncio.Event().wait()
        finally:
            session.teardown()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass
    return 0


def cmd_methods(argv: list[str]) -> int:
    from waqt.engines.methods import list_methods

    argparse.ArgumentParser(prog="waqt methods", description="List calculation method presets").parse_args(argv)
    for name, label in list_methods().items():
        print(f"  {name:<22} {label}")
    return 0


def _dispatch(args: argparse.Namespace, rest: List[str]) -> int:
    if args.cmd == "day":
        return cmd_day(rest)

    if args.cmd == "timeline":
        return cmd_timeline(rest)

    if args.cmd == "now":
        return cmd_now(rest)

    if args.cmd == "watch":
        return cmd_watch(rest)

    if args.cmd == "methods":
        return cmd_methods(rest)

    if args.cmd == "month":
        return _run_module_main("waqt.diagnostics.pretty_month", rest)

    if args.cmd == "chart":
        return _run_module_main("waqt.diagnostics.timeline_chart", rest)

    raise RuntimeError("unreachable")


def main(argv: Optional[List[str]] = None) -> int:
    from waqt.core.errors import WaqtError

    if argv is None:
        argv = sys.argv[1:]

    # Shorthand: `waqt YYYY-MM-DD --lat .. --lon ..`
    if argv and _DATE_RE.match(argv[0]):
        argv = ["day"] + argv

    p = argparse.ArgumentParser(prog="waqt", description="Prayer-time day buffer and timeline toolkit CLI.")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("day", help="Event times for one calendar day", add_help=False)
    sub.add_parser("timeline", help="Normalized [0,1] timeline of one Islamic day", add_help=False)
    sub.add_parser("now", help="Active and next event right now", add_help=False)
    sub.add_parser("watch", help="Follow event boundaries live", add_help=False)
    sub.add_parser("methods", help="List calculation method presets", add_help=False)

    # diagnostics
    sub.add_parser("month", help="Print one month of event times (diagnostics)", add_help=False)
    sub.add_parser("chart", help="Plot event times over a date range (needs matplotlib)", add_help=False)

    args, rest = p.parse_known_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        return _dispatch(args, rest)
    except WaqtError as e:
        print(f"waqt: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
