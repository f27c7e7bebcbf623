from __future__ import annotations
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal, Optional, Tuple

EventId = Literal[
    "fajr",
    "sunrise",
    "dhuhr",
    "asr",
    "maghrib",
    "isha",
    "middle_of_night",
    "last_third_of_night",
]

# Enumeration order; a day's timings are non-decreasing in this order.
EVENT_ORDER: Tuple[EventId, ...] = (
    "fajr",
    "sunrise",
    "dhuhr",
    "asr",
    "maghrib",
    "isha",
    "middle_of_night",
    "last_third_of_night",
)

# Events the solver produces directly; the last two are derived from maghrib and next fajr.
SOLAR_EVENTS: Tuple[EventId, ...] = EVENT_ORDER[:6]
NIGHT_EVENTS: Tuple[EventId, ...] = EVENT_ORDER[6:]

# Returned by the resolver when `now` precedes every timing of the day.
PRE_FAJR = "pre_fajr"


@dataclass(frozen=True)
class CalculationConfig:
    latitude: float
    longitude: float
    method: str = "Other"
    fajr_angle: float = 12.0
    isha_angle: float = 12.0
    isha_interval: float = 0.0
    time_zone: str = "UTC"

    @property
    def has_valid_coordinates(self) -> bool:
        return math.isfinite(self.latitude) and math.isfinite(self.longitude)


@dataclass(frozen=True)
class Timing:
    event: EventId
    label: str
    time: str        # formatted in the config's time zone, e.g. "5:28 AM"
    value: datetime  # timezone-aware instant
    is_obligatory: bool


@dataclass(frozen=True)
class DayData:
    date: date
    day_index: int
    timings: Tuple[Timing, ...]
    next_fajr: Optional[datetime]

    def pick(self, event: EventId) -> Optional[datetime]:
        for t in self.timings:
            if t.event == event:
                return t.value
        return None


@dataclass(frozen=True)
class Timeline:
    """Fraction of the Islamic day elapsed at each event, all in [0, 1]."""
    fajr: float
    sunrise: float
    dhuhr: float
    asr: float
    maghrib: float
    isha: float
    mid_night: float
    last_third: float
    end: float = 1.0
    ordered: bool = True  # False when the raw events arrived out of order

    def as_tuple(self) -> Tuple[float, ...]:
        return (
            self.fajr,
            self.sunrise,
            self.dhuhr,
            self.asr,
            self.maghrib,
            self.isha,
            self.mid_night,
            self.last_third,
            self.end,
        )


@dataclass(frozen=True)
class DailyResult:
    date: str
    timings: Tuple[Timing, ...]
    next_event_time: Optional[datetime]
