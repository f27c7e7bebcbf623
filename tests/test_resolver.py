# tests/test_resolver.py

from datetime import date, time, timezone

import pytest

from conftest import FakeSource, at
from waqt.core.labels import label_for
from waqt.core.types import PRE_FAJR
from waqt.engines.daily import build_day_data
from waqt.timeline.normalizer import build_timeline
from waqt.timeline.resolver import (
    event_at_progress,
    next_event,
    phase_label_and_time,
    resolve_across_days,
    resolve_active_event,
    time_until_next,
)

D = date(2024, 3, 15)
PREV = date(2024, 3, 14)


@pytest.fixture
def day(config, source):
    return build_day_data(source, config, D, 1)


@pytest.fixture
def previous(config, source):
    return build_day_data(source, config, PREV, 0)


def test_lower_bound_is_inclusive(config):
    src = FakeSource(overrides={D: {"dhuhr": time(12, 30)}})
    timings = build_day_data(src, config, D, 0).timings
    assert resolve_active_event(timings, at(D, 12, 30)) == "dhuhr"
    assert resolve_active_event(timings, at(D, 12, 29, 59)) == "sunrise"


def test_before_every_timing_is_pre_fajr(day):
    assert resolve_active_event(day.timings, at(D, 5, 0)) == PRE_FAJR


def test_after_every_timing_is_last_event(day):
    assert resolve_active_event(day.timings, at(date(2024, 3, 16), 3, 0)) == "last_third_of_night"


def test_empty_day_has_no_active_event():
    assert resolve_active_event((), at(D, 12, 0)) is None


@pytest.mark.parametrize(
    "hh,mm,expected",
    [
        (5, 28, "fajr"),
        (10, 0, "sunrise"),
        (16, 20, "asr"),
        (19, 30, "maghrib"),
        (23, 0, "isha"),
    ],
)
def test_active_event_through_the_day(day, hh, mm, expected):
    assert resolve_active_event(day.timings, at(D, hh, mm)) == expected


def test_pre_fajr_resolved_from_previous_day(day, previous):
    assert resolve_across_days(day, at(D, 1, 0), previous) == "middle_of_night"
    assert resolve_across_days(day, at(D, 3, 0), previous) == "last_third_of_night"
    # past fajr the current day decides
    assert resolve_across_days(day, at(D, 6, 0), previous) == "fajr"


def test_pre_fajr_estimated_without_previous_day(day):
    # night events shifted back 24h: middle 00:14, last third 01:59
    assert resolve_across_days(day, at(D, 1, 0)) == "middle_of_night"
    assert resolve_across_days(day, at(D, 2, 30)) == "last_third_of_night"
    assert resolve_across_days(day, at(PREV, 23, 0)) == "isha"
    # earlier than any shifted event: the day's last event
    assert resolve_across_days(day, at(PREV, 12, 0)) == "last_third_of_night"


def test_next_event_and_time_until_next(day):
    now = at(D, 10, 0)
    assert next_event(day.timings, now).event == "dhuhr"
    assert time_until_next(day.timings, now) == pytest.approx((2 * 60 + 55) * 60 * 1000)
    # strictly after: at dhuhr the next one is asr
    assert next_event(day.timings, at(D, 12, 55)).event == "asr"


def test_no_next_event_after_the_night(day):
    later = at(date(2024, 3, 16), 4, 0)
    assert next_event(day.timings, later) is None
    assert time_until_next(day.timings, later) is None


def test_event_at_progress_boundaries(day):
    tl = build_timeline(day)
    assert event_at_progress(0.0, tl) == "fajr"
    assert event_at_progress(tl.dhuhr, tl) == "dhuhr"
    assert event_at_progress(tl.dhuhr - 1e-9, tl) == "sunrise"
    assert event_at_progress(tl.mid_night, tl) == "middle_of_night"
    assert event_at_progress(tl.last_third, tl) == "last_third_of_night"
    assert event_at_progress(1.0, tl) == "last_third_of_night"


def test_phase_label_and_time(day):
    tl = build_timeline(day)
    phase = phase_label_and_time(tl.asr + 0.01, tl, day, timezone.utc)
    assert phase == {"event": "asr", "label": label_for("asr"), "time": "4:20 PM"}
