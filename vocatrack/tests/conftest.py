"""Shared analytics test fixtures.

Factory-pattern fixtures that return callables accepting **overrides, plus
a frozen clock so every window, trend and inactivity check is
deterministic.

"Now" is Wednesday 2026-03-04 15:30 UTC. The ISO week therefore starts on
Monday 2026-03-02 and the month on 2026-03-01.

Fixtures:
    now: The frozen instant
    clock: FixedClock at that instant
    store: Empty InMemoryStore (records + rosters)
    social: Empty InMemorySocialGraph
    fetcher: RecordFetcher over the store
    make_day: Factory for ActivityDay instances, dated relative to now
    make_record: Factory for UserRecord instances
    make_roster: Factory for ClassRoster instances
    quiz_progress: Builds course_progress from a list of quiz scores
"""

from datetime import datetime, timedelta, timezone

import pytest

from vocatrack.analytics.fanout import RecordFetcher
from vocatrack.hooks.clock import FixedClock
from vocatrack.hooks.database import InMemoryStore
from vocatrack.hooks.social import InMemorySocialGraph
from vocatrack.schemas import ActivityDay, ClassRoster, CourseDayProgress, UserRecord

FROZEN_NOW = datetime(2026, 3, 4, 15, 30, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------


@pytest.fixture
def now() -> datetime:
    """The frozen instant all analytics tests run at."""
    return FROZEN_NOW


@pytest.fixture
def clock(now: datetime) -> FixedClock:
    """A FixedClock stopped at `now`."""
    return FixedClock(now)


# ---------------------------------------------------------------------------
# Collaborator stubs
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> InMemoryStore:
    """A fresh, empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def social() -> InMemorySocialGraph:
    """A fresh, empty social graph."""
    return InMemorySocialGraph()


@pytest.fixture
def fetcher(store: InMemoryStore) -> RecordFetcher:
    """Bounded fetcher over the store with a short timeout."""
    return RecordFetcher(store, max_concurrency=4, timeout_seconds=1.0)


# ---------------------------------------------------------------------------
# Record factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_day(now: datetime):
    """Returns a factory for ActivityDay instances.

    ``days_ago`` is counted in calendar days back from now's date, so
    ``make_day(0)`` is today and ``make_day(1)`` yesterday.
    """

    def _make(days_ago: int = 0, **overrides) -> ActivityDay:
        defaults = {
            "date": now.date() - timedelta(days=days_ago),
            "words_learned": 0,
            "correct_answers": 0,
            "total_answers": 0,
            "time_spent_minutes": 0,
        }
        defaults.update(overrides)
        return ActivityDay(**defaults)

    return _make


@pytest.fixture
def make_record(now: datetime):
    """Returns a factory for UserRecord instances.

    Defaults produce a user active right now with no activity days, no
    streak and no course progress. Override any field via kwargs.
    """

    def _make(user_id: str, **overrides) -> UserRecord:
        defaults = {
            "user_id": user_id,
            "display_name": f"Name {user_id}",
            "last_active_date": now,
        }
        defaults.update(overrides)
        return UserRecord(**defaults)

    return _make


@pytest.fixture
def make_roster():
    """Returns a factory for ClassRoster instances owned by teacher-1."""

    def _make(class_id: str = "class-1", student_ids: list[str] | None = None, **overrides) -> ClassRoster:
        defaults = {
            "class_id": class_id,
            "teacher_id": "teacher-1",
            "name": f"Class {class_id}",
            "student_ids": student_ids or [],
        }
        defaults.update(overrides)
        return ClassRoster(**defaults)

    return _make


@pytest.fixture
def quiz_progress():
    """Returns a builder that turns quiz scores into course_progress.

    Every score becomes one completed, quiz-scored day of ``course_id``.
    """

    def _make(scores: list[int], course_id: str = "course-a") -> dict:
        return {
            course_id: {
                day_number: CourseDayProgress(completed=True, quiz_completed=True, quiz_score=score)
                for day_number, score in enumerate(scores, start=1)
            }
        }

    return _make
