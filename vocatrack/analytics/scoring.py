"""Score calculation: one number per user per metric per window.

Two accuracy definitions live side by side and must not be merged:

- The leaderboard ``accuracy`` metric is answer-level: correct answers
  over total answers across the window's activity days.
- Classroom and student analytics use quiz-level accuracy: the mean
  quiz score across every quiz-scored course day, regardless of window.

All functions are total. Empty denominators yield 0, never an error.

Tier 2 module: imports from vocatrack.analytics.windows (Tier 1) and
vocatrack.schemas (Tier 1).
"""

from __future__ import annotations

import math

from vocatrack.analytics.windows import TimeWindow
from vocatrack.schemas import ActivityDay, UserRecord


def round_half_up(value: float) -> int:
    """Rounds a non-negative number to the nearest integer, .5 going up.

    Python's round() uses banker's rounding (round(2.5) == 2); dashboards
    expect 2.5 to read as 3.
    """
    return math.floor(value + 0.5)


def days_in_window(record: UserRecord, window: TimeWindow) -> list[ActivityDay]:
    """The record's activity days that fall inside the window."""
    return [day for day in record.activity_days if window.contains_day(day.date)]


def quiz_scores(record: UserRecord) -> list[int]:
    """Every recorded quiz score across all of the record's courses."""
    return [
        day.quiz_score
        for course in record.course_progress.values()
        for day in course.values()
        if day.is_quiz_scored
    ]


def average_quiz_score(record: UserRecord) -> float:
    """Mean quiz score across all courses, 0.0 when no quiz was scored."""
    scores = quiz_scores(record)
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


def calculate_score(record: UserRecord, metric: str, window: TimeWindow) -> int:
    """Computes a user's score for one metric over a window.

    Args:
        record: The user's progress record.
        metric: One of "words_learned", "current_streak", "accuracy",
            "time_spent".
        window: The resolved scoring window. Ignored for current_streak,
            which is a point-in-time value.

    Returns:
        A non-negative integer. Accuracy is a 0-100 percentage.

    Raises:
        ValueError: If metric is unknown (a caller bug, not user input).
    """
    if metric == "current_streak":
        return record.current_streak

    days = days_in_window(record, window)

    if metric == "words_learned":
        return sum(day.words_learned for day in days)

    if metric == "time_spent":
        return sum(day.time_spent_minutes for day in days)

    if metric == "accuracy":
        total = sum(day.total_answers for day in days)
        if total == 0:
            return 0
        correct = sum(day.correct_answers for day in days)
        return round_half_up(correct / total * 100)

    raise ValueError(
        f"Unknown leaderboard metric: {metric!r}. "
        f"Expected 'words_learned', 'current_streak', 'accuracy' or 'time_spent'."
    )
