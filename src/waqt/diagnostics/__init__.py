"""Diagnostics package.

- pretty_month: text timetable for one month (no extras needed)
- timeline_chart: event times over a date range (requires the diagnostics extra)
"""

__all__ = ["pretty_month", "timeline_chart"]
