"""Tests for focus statistics: period windows, aggregation, formatting."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

import pytest

from pomodian.stats import (
    FocusStats,
    StatsPeriod,
    focus_stats,
    format_focus_time,
    period_bounds,
)
from pomodian.timer.engine import Mode
from pomodian.timer.records import SessionLog, SessionRecord


TODAY = date(2026, 3, 4)
REFERENCE = datetime.combine(TODAY, time(18, 0))     # naive → local time


def at(day: date, hour: int = 12) -> datetime:
    """A UTC timestamp falling at *hour* local time on *day*."""
    return datetime.combine(day, time(hour)).astimezone(timezone.utc)


def work(day: date, seconds: int, hour: int = 12) -> SessionRecord:
    return SessionRecord(at(day, hour), Mode.WORK, seconds)


# ═══════════════════════════════════════════════════════════════════════
#  PERIOD BOUNDS
# ═══════════════════════════════════════════════════════════════════════


class TestPeriodBounds:

    def test_daily_is_single_day(self):
        assert period_bounds(StatsPeriod.DAILY, REFERENCE) == (TODAY, TODAY)

    def test_weekly_is_rolling_seven_days(self):
        first, last = period_bounds(StatsPeriod.WEEKLY, REFERENCE)
        assert last == TODAY
        assert first == TODAY - timedelta(days=6)

    def test_accepts_plain_date(self):
        assert period_bounds(StatsPeriod.DAILY, TODAY) == (TODAY, TODAY)


# ═══════════════════════════════════════════════════════════════════════
#  AGGREGATION
# ═══════════════════════════════════════════════════════════════════════


class TestFocusStats:

    @pytest.fixture
    def log(self):
        yesterday = TODAY - timedelta(days=1)
        return SessionLog([
            work(yesterday, 1500),
            work(TODAY, 600, hour=9),
            SessionRecord(at(TODAY, 10), Mode.SHORT_BREAK, 300),
            work(TODAY, 900, hour=11),
            work(TODAY, 1500, hour=15),
        ])

    def test_daily(self, log):
        stats = focus_stats(log, StatsPeriod.DAILY, REFERENCE)
        assert stats == FocusStats(completed_count=3, total_focus_seconds=3000)

    def test_weekly(self, log):
        stats = focus_stats(log, StatsPeriod.WEEKLY, REFERENCE)
        assert stats == FocusStats(completed_count=4, total_focus_seconds=4500)

    def test_empty_log(self):
        assert focus_stats([], StatsPeriod.WEEKLY, REFERENCE) == FocusStats()

    def test_breaks_are_ignored(self):
        records = [
            SessionRecord(at(TODAY), Mode.SHORT_BREAK, 300),
            SessionRecord(at(TODAY), Mode.LONG_BREAK, 900),
        ]
        assert focus_stats(records, StatsPeriod.DAILY, REFERENCE).completed_count == 0

    def test_week_excludes_eighth_day_back(self):
        records = [
            work(TODAY - timedelta(days=6), 600),
            work(TODAY - timedelta(days=7), 600),
        ]
        stats = focus_stats(records, StatsPeriod.WEEKLY, REFERENCE)
        assert stats.completed_count == 1

    def test_future_records_excluded(self):
        records = [work(TODAY + timedelta(days=1), 600)]
        assert focus_stats(records, StatsPeriod.WEEKLY, REFERENCE) == FocusStats()

    def test_day_boundaries_use_local_time(self):
        records = [
            work(TODAY, 600, hour=0),
            work(TODAY, 600, hour=23),
            work(TODAY - timedelta(days=1), 600, hour=23),
        ]
        stats = focus_stats(records, StatsPeriod.DAILY, REFERENCE)
        assert stats.completed_count == 2

    def test_is_rederived_every_call(self):
        log = SessionLog([work(TODAY, 600)])
        first = focus_stats(log, StatsPeriod.DAILY, REFERENCE)
        log.append(work(TODAY, 900))
        second = focus_stats(log, StatsPeriod.DAILY, REFERENCE)
        assert first.total_focus_seconds == 600
        assert second.total_focus_seconds == 1500

    def test_defaults_to_now(self):
        records = [SessionRecord(datetime.now(timezone.utc), Mode.WORK, 1500)]
        assert focus_stats(records, StatsPeriod.DAILY).completed_count == 1

    def test_total_focus_minutes(self):
        assert FocusStats(2, 3000).total_focus_minutes == 50


# ═══════════════════════════════════════════════════════════════════════
#  FORMAT HELPERS
# ═══════════════════════════════════════════════════════════════════════


class TestFormatFocusTime:
    def test_zero(self):
        assert format_focus_time(0) == "0m"

    def test_negative(self):
        assert format_focus_time(-300) == "0m"

    def test_under_a_minute(self):
        assert format_focus_time(59) == "0m"

    def test_minutes_only(self):
        assert format_focus_time(45 * 60) == "45m"

    def test_exact_hour(self):
        assert format_focus_time(3600) == "1h 0m"

    def test_hours_and_minutes(self):
        assert format_focus_time(125 * 60) == "2h 5m"
