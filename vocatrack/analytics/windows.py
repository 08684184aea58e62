"""Time windows: turns a period tag into a concrete [start, end] range.

Every window ends at the caller-supplied "now". Calendar-day boundaries
are taken in now's own time zone, so a clock configured for Asia/Seoul
starts "today" at Seoul midnight.

Two families of windows:
- Leaderboard periods (daily/weekly/monthly/all_time) anchor to calendar
  boundaries: midnight, ISO Monday, first of the month.
- Classroom periods (week/month) are trailing runs of 7 or 30 calendar
  days ending today, matching the trend series drawn for them.

Tier 1 leaf module: stdlib only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

# Predates the product launch; "all time" starts here.
ALL_TIME_START = date(2000, 1, 1)

CLASS_PERIOD_DAYS: dict[str, int] = {
    "week": 7,
    "month": 30,
}


@dataclass(frozen=True)
class TimeWindow:
    """A resolved [start, end] instant range."""

    start: datetime
    end: datetime

    @property
    def first_day(self) -> date:
        return self.start.date()

    @property
    def last_day(self) -> date:
        return self.end.date()

    def contains_day(self, day: date) -> bool:
        """True if day falls inside the window, inclusive at day granularity."""
        return self.first_day <= day <= self.last_day

    def days(self) -> list[date]:
        """Every calendar day in the window, oldest first."""
        span = (self.last_day - self.first_day).days
        return [self.first_day + timedelta(days=offset) for offset in range(span + 1)]


def _start_of_day(day: date, now: datetime) -> datetime:
    return datetime.combine(day, time.min, tzinfo=now.tzinfo)


def resolve_window(period: str, now: datetime) -> TimeWindow:
    """Resolves a leaderboard period into a window ending at now.

    Args:
        period: One of "daily", "weekly", "monthly", "all_time".
        now: The caller's current instant (timezone-aware).

    Returns:
        The resolved TimeWindow.

    Raises:
        ValueError: If period is not a known leaderboard period.
    """
    today = now.date()
    if period == "daily":
        start_day = today
    elif period == "weekly":
        # ISO week: Monday is weekday() == 0.
        start_day = today - timedelta(days=today.weekday())
    elif period == "monthly":
        start_day = today.replace(day=1)
    elif period == "all_time":
        start_day = ALL_TIME_START
    else:
        raise ValueError(
            f"Unknown leaderboard period: {period!r}. "
            f"Expected 'daily', 'weekly', 'monthly' or 'all_time'."
        )
    return TimeWindow(start=_start_of_day(start_day, now), end=now)


def trailing_window(days: int, now: datetime) -> TimeWindow:
    """A window covering the last `days` calendar days, today included.

    Raises:
        ValueError: If days is not positive.
    """
    if days < 1:
        raise ValueError(f"Trailing window needs at least one day, got {days}.")
    start_day = now.date() - timedelta(days=days - 1)
    return TimeWindow(start=_start_of_day(start_day, now), end=now)


def class_period_window(period: str, now: datetime) -> TimeWindow:
    """Resolves a classroom period ("week" or "month") into a trailing window.

    Raises:
        ValueError: If period is not a known classroom period.
    """
    try:
        days = CLASS_PERIOD_DAYS[period]
    except KeyError:
        raise ValueError(
            f"Unknown class analytics period: {period!r}. Expected 'week' or 'month'."
        ) from None
    return trailing_window(days, now)
