"""Classroom analytics: the teacher's dashboard numbers for one class.

For a trailing week (7 days) or month (30 days) ending today:

- active students: at least one activity day inside the window
- avg_words_learned / avg_time_spent: over active students only
- avg_accuracy: quiz-based, over active students with at least one scored quiz
- completion_rate: active / enrolled, as a percentage
- top_performers: five active students with the most in-window words
  (students with none are left out), ties kept in roster order
- needs_attention: the attention rules, capped at five
- trend_data: one point per day, summing every student's words that day

Enrolled students whose record can't be read still count towards
total_students but contribute nothing else. An empty roster yields a
zero-filled result, not an error. An unknown class is an error.

Tier 3 orchestration module: imports from analytics/* (Tier 1-2),
hooks.interfaces (Tier 1), schemas (Tier 1).
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta

from vocatrack.analytics.alerts import AttentionAlertDetector
from vocatrack.analytics.errors import RecordNotFoundError
from vocatrack.analytics.fanout import RecordFetcher
from vocatrack.analytics.scoring import days_in_window, quiz_scores, round_half_up
from vocatrack.analytics.windows import TimeWindow, class_period_window
from vocatrack.hooks.interfaces import ClassDirectory, Clock
from vocatrack.schemas import (
    ClassAnalytics,
    ClassRoster,
    StudentAlert,
    StudentSummary,
    TeacherOverview,
    TrendDataPoint,
    UserRecord,
)

logger = logging.getLogger("vocatrack.analytics.classroom")

TOP_PERFORMER_COUNT = 5
ATTENTION_CAP = 5
OVERVIEW_ACTIVE_WINDOW = timedelta(days=7)


def _mean(total: float, count: int) -> float:
    return total / count if count else 0.0


def daily_words(records: list[UserRecord], window: TimeWindow) -> list[TrendDataPoint]:
    """One point per window day, summing words learned across all records."""
    totals: dict[date, int] = defaultdict(int)
    for record in records:
        for day in days_in_window(record, window):
            totals[day.date] += day.words_learned
    return [TrendDataPoint(date=day, value=totals.get(day, 0)) for day in window.days()]


def _summarize(record: UserRecord, window: TimeWindow) -> tuple[StudentSummary, bool, list[int]]:
    """Builds a student's in-window summary.

    Returns:
        (summary, is_active, quiz scores)
    """
    in_window = days_in_window(record, window)
    scores = quiz_scores(record)
    summary = StudentSummary(
        user_id=record.user_id,
        display_name=record.display_name,
        photo_url=record.photo_url,
        current_streak=record.current_streak,
        words_learned=sum(day.words_learned for day in in_window),
        time_spent=sum(day.time_spent_minutes for day in in_window),
        accuracy=round_half_up(_mean(sum(scores), len(scores))),
        last_active_date=record.last_active_date,
    )
    return summary, bool(in_window), scores


class ClassAnalyticsAggregator:
    """Aggregates a class's student records into dashboard figures.

    Args:
        fetcher: Bounded record reader. Unreadable students are skipped.
        classes: Roster lookups.
        clock: Source of "now" for windows and the inactivity rule.
    """

    def __init__(self, fetcher: RecordFetcher, classes: ClassDirectory, clock: Clock) -> None:
        self._fetcher = fetcher
        self._classes = classes
        self._clock = clock
        self._alerts = AttentionAlertDetector(fetcher, clock)

    async def get_roster(self, class_id: str) -> ClassRoster:
        """Looks up a class roster.

        Raises:
            RecordNotFoundError: If the class does not exist.
        """
        roster = await self._classes.get_class_roster(class_id)
        if roster is None:
            raise RecordNotFoundError("class", class_id)
        return roster

    async def class_analytics(self, class_id: str, period: str = "week") -> ClassAnalytics:
        """Dashboard figures for a class looked up by id.

        Raises:
            RecordNotFoundError: If the class does not exist.
            ValueError: If period is not "week" or "month".
        """
        roster = await self.get_roster(class_id)
        return await self.aggregate(roster, period)

    async def aggregate(self, roster: ClassRoster, period: str = "week") -> ClassAnalytics:
        """Dashboard figures for a roster already in hand.

        Raises:
            ValueError: If period is not "week" or "month".
        """
        now = self._clock.now()
        window = class_period_window(period, now)
        student_ids = roster.student_ids
        total_students = len(student_ids)

        if total_students == 0:
            return ClassAnalytics(
                class_id=roster.class_id,
                period=period,  # type: ignore[arg-type]
                trend_data=daily_words([], window),
            )

        fetched = await self._fetcher.fetch_many(student_ids)
        records = list(fetched.values())

        active: list[StudentSummary] = []
        quiz_averages: list[float] = []
        for record in records:
            summary, is_active, scores = _summarize(record, window)
            if not is_active:
                continue
            active.append(summary)
            if scores:
                quiz_averages.append(sum(scores) / len(scores))

        # sorted() is stable, so equal word counts keep roster order.
        top_performers = sorted(
            (s for s in active if s.words_learned > 0),
            key=lambda s: s.words_learned,
            reverse=True,
        )
        needs_attention = AttentionAlertDetector.detect_in(records, now)

        analytics = ClassAnalytics(
            class_id=roster.class_id,
            period=period,  # type: ignore[arg-type]
            total_students=total_students,
            active_students=len(active),
            avg_words_learned=round_half_up(
                _mean(sum(s.words_learned for s in active), len(active))
            ),
            avg_accuracy=round_half_up(_mean(sum(quiz_averages), len(quiz_averages))),
            avg_time_spent=round_half_up(_mean(sum(s.time_spent for s in active), len(active))),
            completion_rate=round_half_up(len(active) / total_students * 100),
            top_performers=top_performers[:TOP_PERFORMER_COUNT],
            needs_attention=needs_attention[:ATTENTION_CAP],
            trend_data=daily_words(records, window),
        )

        logger.info(
            "Class analytics: class=%s period=%s students=%d read=%d active=%d",
            roster.class_id,
            period,
            total_students,
            len(records),
            len(active),
            extra={
                "class_id": roster.class_id,
                "period": period,
                "total_students": total_students,
                "records_read": len(records),
                "active_students": len(active),
            },
        )
        return analytics

    async def needs_attention(self, class_id: str) -> list[StudentAlert]:
        """Every attention alert for a class (uncapped), in roster order.

        Raises:
            RecordNotFoundError: If the class does not exist.
        """
        roster = await self.get_roster(class_id)
        return await self.alerts_for(roster)

    async def alerts_for(self, roster: ClassRoster) -> list[StudentAlert]:
        """Every attention alert for a roster already in hand."""
        return await self._alerts.detect(roster.student_ids)

    async def teacher_overview(self, teacher_id: str) -> TeacherOverview:
        """Class and student counts across a teacher's non-archived classes.

        A student counts as active if their last activity falls within
        the past seven days. Unreadable students are counted as enrolled
        but not active.
        """
        classes = await self._classes.list_teacher_classes(teacher_id)
        student_ids = list(dict.fromkeys(sid for roster in classes for sid in roster.student_ids))

        now = self._clock.now()
        fetched = await self._fetcher.fetch_many(student_ids)
        active = sum(1 for record in fetched.values() if _recently_active(record, now))

        return TeacherOverview(
            teacher_id=teacher_id,
            total_classes=len(classes),
            total_students=len(student_ids),
            active_students=active,
        )


def _recently_active(record: UserRecord, now: datetime) -> bool:
    if record.last_active_date is None:
        return False
    return now - record.last_active_date <= OVERVIEW_ACTIVE_WINDOW
