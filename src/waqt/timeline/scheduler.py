"""
waqt.timeline.scheduler
-----------------------
Self-perpetuating recomputation chain.

schedule_next() arms exactly one timer for the next event boundary of the
current day (or local midnight when the day has no further event). When it
fires, the recompute callback runs against the actual current time and the
chain re-arms itself from the fresh data. Arming a new timer always cancels
the outstanding one, so at most one is pending.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from ..core.time import ms_between, next_local_midnight, resolve_zone, utc_now
from ..core.types import DayData
from ..engines.interfaces import CancelToken, Clock, Scheduler
from .resolver import next_event

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoopToken:
    handle: asyncio.TimerHandle


class LoopScheduler:
    """Scheduler on an asyncio event loop; callbacks run on the loop's thread."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule(self, delay_ms: float, callback: Callable[[], Any]) -> LoopToken:
        return LoopToken(self.loop.call_later(max(0.0, delay_ms) / 1000.0, callback))

    def cancel(self, token: CancelToken) -> None:
        if isinstance(token, LoopToken):
            token.handle.cancel()


def delay_until_next_update(current: Optional[DayData], now: datetime, time_zone: str = "UTC") -> float:
    """
    Milliseconds until the next event boundary after now. Past the last
    timing the next boundary is the following fajr; without one, local
    midnight. Never negative.
    """
    if current is not None:
        t = next_event(current.timings, now)
        if t is not None:
            return max(0.0, ms_between(now, t.value))
        if current.next_fajr is not None and current.next_fajr > now:
            return ms_between(now, current.next_fajr)
    midnight = next_local_midnight(now, resolve_zone(time_zone))
    return max(0.0, ms_between(now, midnight))


class UpdateScheduler:
    def __init__(
        self,
        scheduler: Scheduler,
        recompute: Callable[[], Optional[DayData]],
        *,
        clock: Clock = utc_now,
        time_zone: str = "UTC",
    ):
        self.scheduler = scheduler
        self.recompute = recompute
        self.clock = clock
        self.time_zone = time_zone
        self._token: Optional[CancelToken] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._token is not None

    def schedule_next(self, current: Optional[DayData]) -> CancelToken:
        self.cancel()
        generation = self._generation
        now = self.clock()
        delay = delay_until_next_update(current, now, self.time_zone)

        def fire() -> None:
            if self._generation != generation:
                return
            self._token = None
            logger.debug("Scheduled recomputation fired at %s", self.clock().isoformat())
            data = self.recompute()
            # recompute may have restarted or cancelled the chain itself
            if self._generation == generation:
                self.schedule_next(data)

        self._token = self.scheduler.schedule(delay, fire)
        logger.debug("Next recomputation in %.0f ms", delay)
        return self._token

    def cancel(self) -> None:
        self._generation += 1
        if self._token is not None:
            self.scheduler.cancel(self._token)
            self._token = None
