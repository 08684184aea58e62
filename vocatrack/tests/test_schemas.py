"""Tests for vocatrack.schemas: model validation and serialization."""

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from vocatrack.schemas import (
    ActivityDay,
    ApiError,
    ApiResponse,
    ClassRoster,
    CourseDayProgress,
    LeaderboardEntry,
    LeaderboardFilter,
    UserRecord,
)


class TestActivityDay:
    def test_correct_cannot_exceed_total(self) -> None:
        with pytest.raises(ValidationError, match="exceeds"):
            ActivityDay(date=date(2026, 3, 4), correct_answers=5, total_answers=4)

    def test_counts_non_negative(self) -> None:
        with pytest.raises(ValidationError):
            ActivityDay(date=date(2026, 3, 4), words_learned=-1)


class TestUserRecord:
    def test_blank_display_name_becomes_unknown(self) -> None:
        assert UserRecord(user_id="u1", display_name="   ").display_name == "Unknown"
        assert UserRecord(user_id="u1", display_name=None).display_name == "Unknown"
        assert UserRecord(user_id="u1").display_name == "Unknown"

    def test_naive_last_active_treated_as_utc(self) -> None:
        record = UserRecord(user_id="u1", last_active_date=datetime(2026, 3, 1, 12, 0))
        assert record.last_active_date == datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def test_frozen(self) -> None:
        record = UserRecord(user_id="u1")
        with pytest.raises(ValidationError):
            record.current_streak = 5

    def test_course_progress_from_json_keys(self) -> None:
        record = UserRecord.model_validate(
            {"user_id": "u1", "course_progress": {"c1": {"1": {"completed": True}}}}
        )
        assert record.course_progress["c1"][1].completed


class TestOtherModels:
    def test_quiz_scored_needs_both_flag_and_score(self) -> None:
        assert CourseDayProgress(quiz_completed=True, quiz_score=70).is_quiz_scored
        assert not CourseDayProgress(quiz_completed=True).is_quiz_scored
        assert not CourseDayProgress(quiz_completed=False, quiz_score=70).is_quiz_scored

    def test_quiz_score_bounded(self) -> None:
        with pytest.raises(ValidationError):
            CourseDayProgress(quiz_completed=True, quiz_score=101)

    def test_roster_drops_duplicate_students(self) -> None:
        roster = ClassRoster(class_id="c1", teacher_id="t1", student_ids=["a", "b", "a", "c"])
        assert roster.student_ids == ["a", "b", "c"]

    def test_filter_limit_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            LeaderboardFilter(metric="words_learned", period="weekly", limit=0)

    def test_filter_rejects_unknown_metric(self) -> None:
        with pytest.raises(ValidationError):
            LeaderboardFilter(metric="xp", period="weekly")

    def test_entry_rank_starts_at_one(self) -> None:
        with pytest.raises(ValidationError):
            LeaderboardEntry(rank=0, user_id="u1", display_name="x", score=1)


class TestApiResponse:
    def test_success_shape(self) -> None:
        assert ApiResponse(ok=True, data={"x": 1}).model_dump() == {
            "ok": True,
            "data": {"x": 1},
            "error": None,
        }

    def test_error_shape(self) -> None:
        dumped = ApiResponse(ok=False, error=ApiError(code="FORBIDDEN", message="no")).model_dump()
        assert dumped["error"] == {"code": "FORBIDDEN", "message": "no"}
        assert dumped["data"] is None
