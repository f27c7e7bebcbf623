"""
waqt.engines.interfaces
-----------------------
Boundaries between the timeline core and its collaborators: the
astronomical solver that produces event instants, and the timer facility
that drives the recomputation chain.

All instants crossing these boundaries are timezone-aware datetimes.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Dict, Optional, Protocol

from ..core.types import CalculationConfig


class EventTimeSource(Protocol):
    """
    Black-box solver. Given a config and a calendar date, returns the six
    canonical instants (fajr, sunrise, dhuhr, asr, maghrib, isha).

    An event the solver cannot produce (polar edge cases) is omitted from the
    mapping or mapped to None; it is never defaulted.
    Implementations must not depend on the time of the call.
    """
    def compute_day(self, config: CalculationConfig, d: date) -> Dict[str, Optional[datetime]]: ...


class CancelToken(Protocol):
    """Opaque handle for one scheduled callback."""
    ...


class Scheduler(Protocol):
    def schedule(self, delay_ms: float, callback: Callable[[], Any]) -> CancelToken: ...
    def cancel(self, token: CancelToken) -> None: ...


Clock = Callable[[], datetime]
