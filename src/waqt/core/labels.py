from __future__ import annotations
from typing import Dict, FrozenSet

SALAT_LABELS: Dict[str, str] = {
    "fajr": "Fajr",
    "sunrise": "Sunrise",
    "dhuhr": "Dhuhr",
    "asr": "ʿAṣr",
    "maghrib": "Maġrib",
    "isha": "ʿIshāʾ",
    "middle_of_night": "1/2 Night Begins",
    "last_third_of_night": "Last 1/3 Night Begins",
}

OBLIGATORY: FrozenSet[str] = frozenset({"fajr", "dhuhr", "asr", "maghrib", "isha"})


def is_obligatory(event: str) -> bool:
    return event in OBLIGATORY


def label_for(event: str, labels: Dict[str, str] = SALAT_LABELS) -> str:
    return labels.get(event, event)
