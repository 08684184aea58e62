"""Student analytics: one student's full progress rollup.

Unlike classroom aggregation, this is a strict single-record lookup: a
student whose record can't be read is an error, not an empty rollup.

Totals are all-time. avg_accuracy is the quiz-based definition (mean quiz
score across every course), not the answer-level leaderboard metric. The
activity trend always covers the last 30 calendar days, today included,
with 0 for days without an entry.

Tier 3 orchestration module: imports from analytics/* (Tier 1-2),
hooks.interfaces (Tier 1), schemas (Tier 1).
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime

from vocatrack.analytics.fanout import RecordFetcher
from vocatrack.analytics.scoring import average_quiz_score, round_half_up
from vocatrack.analytics.windows import trailing_window
from vocatrack.hooks.interfaces import Clock
from vocatrack.schemas import CourseSummary, StudentAnalytics, TrendDataPoint, UserRecord

TREND_DAYS = 30


def activity_trend(record: UserRecord, now: datetime, days: int = TREND_DAYS) -> list[TrendDataPoint]:
    """Words learned per day for the last `days` days, oldest first."""
    window = trailing_window(days, now)
    per_day: dict[date, int] = defaultdict(int)
    for day in record.activity_days:
        if window.contains_day(day.date):
            per_day[day.date] += day.words_learned
    return [TrendDataPoint(date=day, value=per_day.get(day, 0)) for day in window.days()]


def course_summaries(record: UserRecord) -> list[CourseSummary]:
    """Per-course completion and quiz rollup, ordered by course id."""
    summaries = []
    for course_id in sorted(record.course_progress):
        course_days = record.course_progress[course_id].values()
        scores = [day.quiz_score for day in course_days if day.is_quiz_scored]
        summaries.append(
            CourseSummary(
                course_id=course_id,
                days_completed=sum(1 for day in course_days if day.completed),
                quizzes_taken=len(scores),
                avg_quiz_score=round_half_up(sum(scores) / len(scores)) if scores else 0,
            )
        )
    return summaries


def project_student(record: UserRecord, now: datetime) -> StudentAnalytics:
    """Builds the rollup from a record already in hand. No I/O."""
    days_completed = sum(
        1
        for course in record.course_progress.values()
        for day in course.values()
        if day.completed
    )
    return StudentAnalytics(
        student_id=record.user_id,
        display_name=record.display_name,
        photo_url=record.photo_url,
        total_words_learned=sum(day.words_learned for day in record.activity_days),
        total_time_spent=sum(day.time_spent_minutes for day in record.activity_days),
        avg_accuracy=round_half_up(average_quiz_score(record)),
        current_streak=record.current_streak,
        longest_streak=record.longest_streak,
        days_completed=days_completed,
        last_active_date=record.last_active_date,
        activity_trend=activity_trend(record, now),
        course_progress=record.course_progress,
        course_summaries=course_summaries(record),
    )


class StudentAnalyticsProjector:
    """Reads one student record and projects it into StudentAnalytics.

    Args:
        fetcher: Record reader used in strict mode.
        clock: Source of "now" for the 30-day trend.
    """

    def __init__(self, fetcher: RecordFetcher, clock: Clock) -> None:
        self._fetcher = fetcher
        self._clock = clock

    async def project(self, student_id: str) -> StudentAnalytics:
        """Full rollup for one student.

        Raises:
            RecordNotFoundError: If the record is absent or unreadable.
        """
        record = await self._fetcher.fetch_one(student_id, record_type="student")
        return project_student(record, self._clock.now())
