from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from ..core.errors import UnknownMethodError
from ..core.types import CalculationConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MethodPreset:
    label: str
    fajr_angle: float
    isha_angle: float
    isha_interval: float = 0.0  # minutes after maghrib; overrides isha_angle when > 0


# ============================================================
# CALCULATION METHOD PRESETS
# ============================================================

METHOD_PRESETS: Dict[str, MethodPreset] = {
    "Other": MethodPreset("Nautical Twilight (12°, 12°)", 12.0, 12.0),
    "MuslimWorldLeague": MethodPreset("Muslim World League (18°, 17°)", 18.0, 17.0),
    "Egyptian": MethodPreset("Egyptian General Authority (19.5°, 17.5°)", 19.5, 17.5),
    "Karachi": MethodPreset("Karachi - University of Islamic Sciences (18°, 18°)", 18.0, 18.0),
    "UmmAlQura": MethodPreset("Umm al-Qura - Makkah (18.5°, 90 min)", 18.5, 0.0, 90.0),
    "Dubai": MethodPreset("Dubai (18.2°, 18.2°)", 18.2, 18.2),
    "MoonsightingCommittee": MethodPreset("Moonsighting Committee Worldwide (18°, 18°)", 18.0, 18.0),
    "NorthAmerica": MethodPreset("North America - ISNA (15°, 15°)", 15.0, 15.0),
    "Kuwait": MethodPreset("Kuwait (18°, 17.5°)", 18.0, 17.5),
    "Qatar": MethodPreset("Qatar (18°, 90 min)", 18.0, 0.0, 90.0),
    "Singapore": MethodPreset("Singapore (20°, 18°)", 20.0, 18.0),
    "Turkey": MethodPreset("Turkey - Diyanet (18°, 17°)", 18.0, 17.0),
}

DEFAULT_METHOD = "Other"
METHOD_TOLERANCE = 0.01


def get_preset(method: str) -> MethodPreset:
    if method not in METHOD_PRESETS:
        raise UnknownMethodError(f"Unknown method '{method}'. Available: {sorted(METHOD_PRESETS)}")
    return METHOD_PRESETS[method]


def list_methods() -> Dict[str, str]:
    return {name: p.label for name, p in METHOD_PRESETS.items()}


def detect_method_for(fajr_angle: float, isha_angle: float, isha_interval: float) -> str:
    """Name of the preset matching the given parameters, else 'Other'."""
    for name, p in METHOD_PRESETS.items():
        if (
            abs(p.fajr_angle - fajr_angle) < METHOD_TOLERANCE
            and abs(p.isha_angle - isha_angle) < METHOD_TOLERANCE
            and abs(p.isha_interval - isha_interval) < METHOD_TOLERANCE
        ):
            return name
    return DEFAULT_METHOD


def make_config(
    latitude: float,
    longitude: float,
    *,
    method: str = DEFAULT_METHOD,
    fajr_angle: Optional[float] = None,
    isha_angle: Optional[float] = None,
    isha_interval: Optional[float] = None,
    time_zone: str = "UTC",
) -> CalculationConfig:
    """Build a config, filling unspecified angles/interval from the method preset."""
    preset = get_preset(method)
    return CalculationConfig(
        latitude=latitude,
        longitude=longitude,
        method=method,
        fajr_angle=preset.fajr_angle if fajr_angle is None else fajr_angle,
        isha_angle=preset.isha_angle if isha_angle is None else isha_angle,
        isha_interval=preset.isha_interval if isha_interval is None else isha_interval,
        time_zone=time_zone,
    )


def _parse_float(value: object) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return math.nan


def config_from_settings(settings: Mapping[str, object]) -> CalculationConfig:
    """
    Parse the persisted string-valued settings form.

    Unparsable coordinates become NaN, which puts the buffer in its empty
    (invalid) state. Unparsable angles fall back to the method preset.
    """
    method = str(settings.get("method") or DEFAULT_METHOD)
    if method not in METHOD_PRESETS:
        logger.warning("Unknown method %r in settings; using %s", method, DEFAULT_METHOD)
        method = DEFAULT_METHOD
    preset = METHOD_PRESETS[method]

    def angle(key: str, fallback: float) -> float:
        v = _parse_float(settings.get(key))
        return v if math.isfinite(v) else fallback

    return CalculationConfig(
        latitude=_parse_float(settings.get("latitude")),
        longitude=_parse_float(settings.get("longitude")),
        method=method,
        fajr_angle=angle("fajrAngle", preset.fajr_angle),
        isha_angle=angle("ishaAngle", preset.isha_angle),
        isha_interval=angle("ishaInterval", preset.isha_interval),
        time_zone=str(settings.get("timeZone") or "UTC"),
    )
