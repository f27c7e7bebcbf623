class WaqtError(Exception):
    """Base error."""

class UnknownMethodError(WaqtError, KeyError):
    """Raised when a calculation method name has no preset."""

class InvalidConfigError(WaqtError, ValueError):
    """Raised when a configuration value cannot be used (e.g. unknown time zone)."""

class SchedulerError(WaqtError):
    """Raised when a recomputation is scheduled on a torn-down session."""
