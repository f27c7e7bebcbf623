"""
waqt.timeline.buffer
--------------------
Sliding window of computed days, keyed by the Islamic (fajr-to-fajr) day.

States:
  uninitialized -> initialize(config) -> ready | invalid
  ready: add_previous_day / add_next_day extend one day and trim the
         opposite end beyond max_days
  invalid: non-finite coordinates; the buffer is empty and extension is a no-op

Every mutation installs a new tuple; a tuple handed out by `days` is never
modified afterwards.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Literal, Optional, Tuple

from ..core.labels import SALAT_LABELS
from ..core.time import add_days, local_date, resolve_zone, utc_now
from ..core.types import CalculationConfig, DayData
from ..engines.daily import build_day_data, solar_events
from ..engines.interfaces import Clock, EventTimeSource

logger = logging.getLogger(__name__)

MAX_BUFFERED_DAYS = 5

BufferState = Literal["uninitialized", "ready", "invalid"]


class DayBufferManager:
    def __init__(
        self,
        source: EventTimeSource,
        *,
        max_days: int = MAX_BUFFERED_DAYS,
        clock: Clock = utc_now,
        labels: Dict[str, str] = SALAT_LABELS,
    ):
        if max_days < 1:
            raise ValueError("max_days must be >= 1")
        self.source = source
        self.max_days = max_days
        self.clock = clock
        self.labels = labels
        self.config: Optional[CalculationConfig] = None
        self._days: Tuple[DayData, ...] = ()
        self._counter = 0
        self._state: BufferState = "uninitialized"

    @property
    def days(self) -> Tuple[DayData, ...]:
        return self._days

    @property
    def state(self) -> BufferState:
        return self._state

    def __len__(self) -> int:
        return len(self._days)

    # ---------------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------------

    def islamic_day(self, config: CalculationConfig, now=None) -> date:
        """
        Calendar date of the Islamic day containing `now`.

        Before today's fajr we are still in yesterday's Islamic day.
        """
        now = now if now is not None else self.clock()
        tz = resolve_zone(config.time_zone)
        today = local_date(now, tz)
        fajr = solar_events(self.source, config, today).get("fajr")
        if fajr is not None and now < fajr:
            return add_days(today, -1)
        return today

    def initialize(self, config: CalculationConfig, now=None) -> Tuple[DayData, ...]:
        """Discard any previous buffer and load the single current Islamic day."""
        self.config = config
        self._counter = 0
        if not config.has_valid_coordinates:
            self._days = ()
            self._state = "invalid"
            return self._days

        d = self.islamic_day(config, now)
        logger.info("Initializing day buffer at %s (%s, %s)", d, config.latitude, config.longitude)
        self._days = (self.load_day(d),)
        self._state = "ready"
        return self._days

    def update_config(self, config: CalculationConfig, now=None) -> bool:
        """Re-initialize when the config differs from the current one; returns whether it did."""
        if config == self.config and self._state != "uninitialized":
            return False
        logger.info("Calculation config changed; rebuilding day buffer")
        self.initialize(config, now)
        return True

    def teardown(self) -> None:
        self.config = None
        self._days = ()
        self._counter = 0
        self._state = "uninitialized"

    # ---------------------------------------------------------
    # Window
    # ---------------------------------------------------------

    def load_day(self, d: date) -> DayData:
        """Compute day d and assign it the next day index."""
        if self.config is None:
            raise RuntimeError("DayBufferManager.load_day called before initialize")
        day = build_day_data(self.source, self.config, d, self._counter, labels=self.labels)
        self._counter += 1
        return day

    def add_previous_day(self) -> Tuple[DayData, ...]:
        if not self._days:
            return self._days
        day = self.load_day(add_days(self._days[0].date, -1))
        days = (day,) + self._days
        if len(days) > self.max_days:
            logger.debug("Evicting %s from end of buffer", days[-1].date)
            days = days[: self.max_days]
        self._days = days
        return days

    def add_next_day(self) -> Tuple[DayData, ...]:
        if not self._days:
            return self._days
        day = self.load_day(add_days(self._days[-1].date, 1))
        days = self._days + (day,)
        if len(days) > self.max_days:
            logger.debug("Evicting %s from start of buffer", days[0].date)
            days = days[len(days) - self.max_days:]
        self._days = days
        return days

    def find(self, d: date) -> Optional[DayData]:
        for day in self._days:
            if day.date == d:
                return day
        return None

    def neighbours(self, day: DayData) -> Tuple[Optional[DayData], Optional[DayData]]:
        """The buffered days immediately before and after `day`."""
        return self.find(add_days(day.date, -1)), self.find(add_days(day.date, 1))
