from __future__ import annotations
import math
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import InvalidConfigError

MINUTES_IN_DAY = 24 * 60
MS_PER_DAY = 24 * 60 * 60 * 1000


def utc_now() -> datetime:
    """Default clock: current instant, timezone-aware UTC."""
    return datetime.now(timezone.utc)


def resolve_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidConfigError(f"Unknown time zone '{name}'") from e


def add_days(d: date, n: int) -> date:
    return d + timedelta(days=n)


def noon_anchor(d: date, tz: ZoneInfo) -> datetime:
    """
    Local noon of calendar date d.

    Solver inputs are anchored at noon so a DST transition near midnight can
    never shift the instant onto a neighbouring calendar day.
    """
    return datetime(d.year, d.month, d.day, 12, 0, 0, tzinfo=tz)


def local_date(instant: datetime, tz: ZoneInfo) -> date:
    return instant.astimezone(tz).date()


def next_local_midnight(now: datetime, tz: ZoneInfo) -> datetime:
    tomorrow = add_days(local_date(now, tz), 1)
    return datetime.combine(tomorrow, time(0, 0), tzinfo=tz)


def elapsed(start: datetime, end: datetime) -> timedelta:
    """Absolute time from start to end; same-zone subtraction would count wall-clock time across DST."""
    return end.astimezone(timezone.utc) - start.astimezone(timezone.utc)


def shift(instant: datetime, delta: timedelta) -> datetime:
    """instant + delta in absolute time, expressed in instant's own zone."""
    return (instant.astimezone(timezone.utc) + delta).astimezone(instant.tzinfo)


def ms_between(start: datetime, end: datetime) -> float:
    return elapsed(start, end).total_seconds() * 1000.0


def round_to_minute(instant: datetime) -> datetime:
    """Round to the nearest whole minute (30s rounds up)."""
    utc = instant.astimezone(timezone.utc) + timedelta(seconds=30)
    utc = utc.replace(second=0, microsecond=0)
    return utc.astimezone(instant.tzinfo)


def minutes_since_midnight(instant: datetime, tz: ZoneInfo) -> float:
    local = instant.astimezone(tz)
    return local.hour * 60 + local.minute + local.second / 60 + local.microsecond / 60e6


def format_time(instant: datetime, tz: ZoneInfo) -> str:
    """12-hour clock label, e.g. '5:28 AM'."""
    local = instant.astimezone(tz)
    suffix = "PM" if local.hour >= 12 else "AM"
    hour = (local.hour + 11) % 12 + 1
    return f"{hour}:{local.minute:02d} {suffix}"


def format_date(d: date) -> str:
    """E.g. 'Friday, March 15, 2024'."""
    return f"{d:%A}, {d:%B} {d.day}, {d.year}"


def format_minutes_label(value: float) -> str:
    if not math.isfinite(value):
        return ""
    normalized = round(value) % MINUTES_IN_DAY
    hours, minutes = divmod(normalized, 60)
    suffix = "PM" if hours >= 12 else "AM"
    display_hour = (hours + 11) % 12 + 1
    return f"{display_hour}:{minutes:02d} {suffix}"


def format_time_remaining(milliseconds: float) -> str:
    """'Xh Ym Zs'."""
    total = int(milliseconds // 1000)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours}h {minutes}m {seconds}s"
