"""Focus statistics derived from the session log.

Everything here is a pure function of the records passed in, so the
numbers can be recomputed from the full log at any time.

Periods
-------
DAILY    The local calendar day containing the reference instant.
WEEKLY   The 7 local calendar days ending with (and including) the
         reference day.  Records dated after the reference day are
         never counted.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable

from .timer.engine import Mode
from .timer.records import SessionRecord


class StatsPeriod(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


WEEK_DAYS = 7


@dataclass(frozen=True)
class FocusStats:
    completed_count: int = 0
    total_focus_seconds: int = 0

    @property
    def total_focus_minutes(self) -> int:
        return self.total_focus_seconds // 60


def _local_date(moment: datetime | date) -> date:
    """Calendar day of *moment* in local time.

    Naive datetimes are taken to already be local time.
    """
    if isinstance(moment, datetime):
        return moment.astimezone().date()
    return moment


def period_bounds(period: StatsPeriod, reference: datetime | date) -> tuple[date, date]:
    """Inclusive ``(first_day, last_day)`` covered by *period*."""
    last = _local_date(reference)
    if period == StatsPeriod.DAILY:
        return last, last
    return last - timedelta(days=WEEK_DAYS - 1), last


def focus_stats(
    records: Iterable[SessionRecord],
    period: StatsPeriod,
    reference: datetime | date | None = None,
) -> FocusStats:
    """Completed work sessions and focus time within *period*.

    *reference* defaults to now.  Break sessions are ignored.
    """
    if reference is None:
        reference = datetime.now().astimezone()
    first, last = period_bounds(period, reference)

    count = 0
    seconds = 0
    for record in records:
        if record.mode != Mode.WORK:
            continue
        if first <= _local_date(record.timestamp) <= last:
            count += 1
            seconds += record.duration_seconds
    return FocusStats(completed_count=count, total_focus_seconds=seconds)


def format_focus_time(total_seconds: int) -> str:
    """7500 → '2h 5m', 0 → '0m', 3600 → '1h 0m'."""
    total_minutes = total_seconds // 60
    if total_minutes <= 0:
        return "0m"
    hours = total_minutes // 60
    mins = total_minutes % 60
    if hours == 0:
        return f"{mins}m"
    return f"{hours}h {mins}m"
