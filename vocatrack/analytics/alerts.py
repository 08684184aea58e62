"""Attention alerts: flag students a teacher should look at.

Rules are checked in a fixed priority order and evaluation stops at the
first match, so a student carries at most one alert:

1. inactive (high):          last activity more than 7 days ago
2. streak_lost (medium):     longest streak above 7, current streak 0
3. low_performance (medium): 3+ scored quizzes averaging below 60

A student who was inactive for ten days and also lost a twelve-day streak
gets only the inactive alert.

Tier 2 module: imports from analytics.fanout / analytics.scoring (Tier 2),
hooks.interfaces (Tier 1), schemas (Tier 1).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime, timedelta

from vocatrack.analytics.fanout import RecordFetcher
from vocatrack.analytics.scoring import quiz_scores, round_half_up
from vocatrack.hooks.interfaces import Clock
from vocatrack.schemas import StudentAlert, UserRecord

INACTIVITY_THRESHOLD = timedelta(days=7)
STREAK_LOSS_MIN_LONGEST = 7
LOW_PERFORMANCE_MIN_QUIZZES = 3
LOW_PERFORMANCE_THRESHOLD = 60


def _alert(record: UserRecord, alert_type: str, message: str, severity: str) -> StudentAlert:
    return StudentAlert(
        user_id=record.user_id,
        display_name=record.display_name,
        photo_url=record.photo_url,
        alert_type=alert_type,  # type: ignore[arg-type]
        message=message,
        severity=severity,  # type: ignore[arg-type]
        current_streak=record.current_streak,
        last_active_date=record.last_active_date,
    )


def check_inactive(record: UserRecord, now: datetime) -> StudentAlert | None:
    if record.last_active_date is None:
        return _alert(record, "inactive", "No activity recorded yet", "high")
    idle = now - record.last_active_date
    if idle <= INACTIVITY_THRESHOLD:
        return None
    return _alert(record, "inactive", f"No activity for {idle.days} days", "high")


def check_streak_lost(record: UserRecord, now: datetime) -> StudentAlert | None:
    if record.longest_streak > STREAK_LOSS_MIN_LONGEST and record.current_streak == 0:
        return _alert(record, "streak_lost", f"Lost {record.longest_streak}-day streak", "medium")
    return None


def check_low_performance(record: UserRecord, now: datetime) -> StudentAlert | None:
    scores = quiz_scores(record)
    if len(scores) < LOW_PERFORMANCE_MIN_QUIZZES:
        return None
    average = sum(scores) / len(scores)
    if average >= LOW_PERFORMANCE_THRESHOLD:
        return None
    return _alert(record, "low_performance", f"Low quiz average: {round_half_up(average)}%", "medium")


AlertRule = Callable[[UserRecord, datetime], StudentAlert | None]

# Priority order matters: the first matching rule wins.
ALERT_RULES: tuple[AlertRule, ...] = (
    check_inactive,
    check_streak_lost,
    check_low_performance,
)


def evaluate_student(record: UserRecord, now: datetime) -> StudentAlert | None:
    """Runs the rules in priority order and returns the first alert, if any."""
    for rule in ALERT_RULES:
        alert = rule(record, now)
        if alert is not None:
            return alert
    return None


class AttentionAlertDetector:
    """Flags students that need attention.

    Args:
        fetcher: Bounded record reader. Unreadable students are skipped.
        clock: Source of "now" for the inactivity rule.
    """

    def __init__(self, fetcher: RecordFetcher, clock: Clock) -> None:
        self._fetcher = fetcher
        self._clock = clock

    async def detect(self, student_ids: Iterable[str]) -> list[StudentAlert]:
        """Reads every student and returns their alerts in roster order."""
        records = await self._fetcher.fetch_many(student_ids)
        return self.detect_in(records.values(), self._clock.now())

    @staticmethod
    def detect_in(records: Iterable[UserRecord], now: datetime) -> list[StudentAlert]:
        """Evaluates already-fetched records. No I/O."""
        alerts = []
        for record in records:
            alert = evaluate_student(record, now)
            if alert is not None:
                alerts.append(alert)
        return alerts
