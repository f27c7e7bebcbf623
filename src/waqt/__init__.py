"""waqt public API.

Keep this surface small: users should mostly interact with functions re-exported here.
"""

from .api import (
    active_event,
    daily,
    day_data,
    day_timeline,
    default_source,
    monthly,
    yearly,
)
from .core.errors import InvalidConfigError, SchedulerError, UnknownMethodError, WaqtError
from .core.types import (
    EVENT_ORDER,
    PRE_FAJR,
    CalculationConfig,
    DailyResult,
    DayData,
    Timeline,
    Timing,
)
from .engines.methods import config_from_settings, detect_method_for, list_methods, make_config
from .timeline.buffer import MAX_BUFFERED_DAYS, DayBufferManager
from .timeline.normalizer import build_timeline, normalize, time_to_progress
from .timeline.resolver import (
    event_at_progress,
    next_event,
    resolve_across_days,
    resolve_active_event,
    time_until_next,
)
from .timeline.scheduler import LoopScheduler, UpdateScheduler
from .timeline.session import TimelineSession

__all__ = [
    "active_event",
    "daily",
    "day_data",
    "day_timeline",
    "default_source",
    "monthly",
    "yearly",
    "WaqtError",
    "InvalidConfigError",
    "SchedulerError",
    "UnknownMethodError",
    "EVENT_ORDER",
    "PRE_FAJR",
    "CalculationConfig",
    "DailyResult",
    "DayData",
    "Timeline",
    "Timing",
    "config_from_settings",
    "detect_method_for",
    "list_methods",
    "make_config",
    "MAX_BUFFERED_DAYS",
    "DayBufferManager",
    "build_timeline",
    "normalize",
    "time_to_progress",
    "event_at_progress",
    "next_event",
    "resolve_across_days",
    "resolve_active_event",
    "time_until_next",
    "LoopScheduler",
    "UpdateScheduler",
    "TimelineSession",
]
