"""
waqt.engines.adhan_source
-------------------------
EventTimeSource backed by the `adhanpy` solver.

The config's angles and isha interval are passed through as explicit
calculation parameters, so any preset (or a hand-tuned "Other") is solved
the same way.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Dict, Optional

from adhanpy.PrayerTimes import PrayerTimes
from adhanpy.calculation.CalculationParameters import CalculationParameters

from ..core.time import noon_anchor, resolve_zone
from ..core.types import SOLAR_EVENTS, CalculationConfig

logger = logging.getLogger(__name__)


class AdhanEventSource:
    def __init__(self, *, madhab: str = "shafi"):
        if madhab not in ("shafi", "hanafi"):
            raise ValueError("madhab must be 'shafi' or 'hanafi'")
        self.madhab = madhab

    def _parameters(self, config: CalculationConfig) -> CalculationParameters:
        interval = int(round(config.isha_interval))
        params = CalculationParameters(
            fajr_angle=config.fajr_angle,
            isha_angle=config.isha_angle,
            isha_interval=interval,
        )
        if self.madhab == "hanafi":
            from adhanpy.calculation.Madhab import Madhab
            params.madhab = Madhab.HANAFI
        return params

    def compute_day(self, config: CalculationConfig, d: date) -> Dict[str, Optional[datetime]]:
        tz = resolve_zone(config.time_zone)
        anchor = noon_anchor(d, tz)
        try:
            pt = PrayerTimes(
                (config.latitude, config.longitude),
                anchor,
                calculation_parameters=self._parameters(config),
                time_zone=tz,
            )
        except (ValueError, ArithmeticError) as e:
            logger.warning("Solver failed for %s at (%s, %s): %s", d, config.latitude, config.longitude, e)
            return {}

        out: Dict[str, Optional[datetime]] = {}
        for event in SOLAR_EVENTS:
            value = getattr(pt, event, None)
            if isinstance(value, datetime):
                out[event] = value.astimezone(tz)
            else:
                out[event] = None
        return out
