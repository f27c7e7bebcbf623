# tests/conftest.py

from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Optional, Set

import pytest

from waqt.core.time import resolve_zone
from waqt.core.types import CalculationConfig

# Local wall-clock times used by the fake solver unless overridden per date.
BASE_TIMES: Dict[str, time] = {
    "fajr": time(5, 28),
    "sunrise": time(6, 50),
    "dhuhr": time(12, 55),
    "asr": time(16, 20),
    "maghrib": time(19, 0),
    "isha": time(20, 20),
}


class FakeSource:
    """Deterministic EventTimeSource: fixed local times, optional per-date overrides and gaps."""

    def __init__(self, overrides: Optional[Dict[date, Dict[str, Optional[time]]]] = None,
                 missing: Optional[Set[str]] = None):
        self.overrides = overrides or {}
        self.missing = missing or set()
        self.calls: List[date] = []

    def compute_day(self, config: CalculationConfig, d: date):
        self.calls.append(d)
        tz = resolve_zone(config.time_zone)
        times = dict(BASE_TIMES)
        times.update(self.overrides.get(d, {}))
        out = {}
        for event, t in times.items():
            if event in self.missing or t is None:
                continue
            out[event] = datetime.combine(d, t, tzinfo=tz)
        return out


class ManualClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class FakeToken:
    def __init__(self, due: datetime, callback):
        self.due = due
        self.callback = callback
        self.cancelled = False


class FakeScheduler:
    """Scheduler driven by a ManualClock; run_until() fires due callbacks in order."""

    def __init__(self, clock: ManualClock):
        self.clock = clock
        self.tokens: List[FakeToken] = []

    def schedule(self, delay_ms, callback):
        token = FakeToken(self.clock() + timedelta(milliseconds=delay_ms), callback)
        self.tokens.append(token)
        return token

    def cancel(self, token):
        token.cancelled = True

    @property
    def pending(self) -> List[FakeToken]:
        return [t for t in self.tokens if not t.cancelled and t.callback is not None]

    def run_until(self, target: datetime) -> int:
        fired = 0
        while True:
            due = [t for t in self.pending if t.due <= target]
            if not due:
                break
            token = min(due, key=lambda t: t.due)
            self.clock.now = max(self.clock.now, token.due)
            callback, token.callback = token.callback, None
            callback()
            fired += 1
        self.clock.now = max(self.clock.now, target)
        return fired


def at(d: date, hh: int, mm: int, ss: int = 0, tz=timezone.utc) -> datetime:
    return datetime(d.year, d.month, d.day, hh, mm, ss, tzinfo=tz)


@pytest.fixture
def config():
    return CalculationConfig(latitude=21.4225, longitude=39.8262, method="Other", time_zone="UTC")


@pytest.fixture
def source():
    return FakeSource()


@pytest.fixture
def clock():
    return ManualClock(datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc))


@pytest.fixture
def scheduler(clock):
    return FakeScheduler(clock)
