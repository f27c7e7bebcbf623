"""
waqt.timeline.session
---------------------
Owner of one day buffer and its recomputation chain.

A session is constructed explicitly by its caller and torn down by it;
nothing here is module-global. Starting or reconfiguring cancels the
outstanding chain before arming a new one, so two chains never overlap.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from ..core.errors import SchedulerError
from ..core.time import add_days, utc_now
from ..core.types import CalculationConfig, DayData
from ..engines.interfaces import Clock, EventTimeSource, Scheduler
from .buffer import MAX_BUFFERED_DAYS, DayBufferManager
from .resolver import resolve_across_days
from .scheduler import UpdateScheduler

logger = logging.getLogger(__name__)

Listener = Callable[[Optional[str], Optional[DayData]], None]


class TimelineSession:
    def __init__(
        self,
        source: EventTimeSource,
        scheduler: Scheduler,
        *,
        clock: Clock = utc_now,
        max_days: int = MAX_BUFFERED_DAYS,
    ):
        self.clock = clock
        self.buffer = DayBufferManager(source, max_days=max_days, clock=clock)
        self.updater = UpdateScheduler(scheduler, self.recompute, clock=clock)
        self._listeners: List[Listener] = []
        self._closed = False

    # ---------------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------------

    def start(self, config: CalculationConfig) -> Optional[DayData]:
        self._check_open()
        self.updater.cancel()
        self.buffer.initialize(config, self.clock())
        return self._restart_chain(config)

    def update_config(self, config: CalculationConfig) -> bool:
        """Rebuild and re-arm when the config changed; returns whether it did."""
        self._check_open()
        if config == self.buffer.config and self.buffer.state != "uninitialized":
            return False
        self.updater.cancel()
        self.buffer.update_config(config, self.clock())
        self._restart_chain(config)
        return True

    def teardown(self) -> None:
        self.updater.cancel()
        self.buffer.teardown()
        self._listeners.clear()
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise SchedulerError("TimelineSession has been torn down")

    def _restart_chain(self, config: CalculationConfig) -> Optional[DayData]:
        self.updater.time_zone = config.time_zone
        day = self.current_day()
        self._notify(day)
        if self.buffer.days:
            self.updater.schedule_next(day)
        return day

    # ---------------------------------------------------------
    # Queries
    # ---------------------------------------------------------

    def current_day(self, now: Optional[datetime] = None) -> Optional[DayData]:
        """The buffered Islamic day whose [fajr, next fajr) contains now."""
        now = now if now is not None else self.clock()
        for day in self.buffer.days:
            fajr = day.pick("fajr")
            if fajr is None or now < fajr:
                continue
            if day.next_fajr is None or now < day.next_fajr:
                return day
        return None

    def active_event(self, now: Optional[datetime] = None) -> Optional[str]:
        now = now if now is not None else self.clock()
        day = self.current_day(now)
        if day is None:
            return None
        previous, _ = self.buffer.neighbours(day)
        return resolve_across_days(day, now, previous)

    # ---------------------------------------------------------
    # Recomputation
    # ---------------------------------------------------------

    def recompute(self) -> Optional[DayData]:
        """
        Re-evaluate against the actual current time.

        Runs when the chain fires, possibly long after the planned instant
        (e.g. after device sleep), so nothing is assumed about which boundary
        was crossed.
        """
        config = self.buffer.config
        if self._closed or config is None or not config.has_valid_coordinates:
            return None

        now = self.clock()
        day = self.current_day(now)
        if day is None:
            d = self.buffer.islamic_day(config, now)
            days = self.buffer.days
            if days and d == add_days(days[-1].date, 1):
                self.buffer.add_next_day()
            else:
                logger.info("Current Islamic day %s outside buffer; re-initializing", d)
                self.buffer.initialize(config, now)
            day = self.current_day(now)

        self._notify(day)
        return day

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for (active event, current day); returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, day: Optional[DayData]) -> None:
        event = self.active_event() if day is not None else None
        for listener in list(self._listeners):
            listener(event, day)
