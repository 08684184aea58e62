"""Core data models: shared Pydantic types for the VocaTrack analytics engine.

Raw activity records flow in from the repository, ranked leaderboards and
classroom dashboards flow out. Every structure the engine reads or returns
is declared here so the API layer, the analytics components, and the tests
all speak the same vocabulary.

This is a Tier 1 leaf module: it imports only from pydantic and the stdlib.
No project imports allowed, everything else imports from here.

Usage:
    from vocatrack.schemas import UserRecord, Leaderboard, ClassAnalytics
"""

from datetime import date, datetime, timezone
from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

Metric = Literal["words_learned", "current_streak", "accuracy", "time_spent"]
LeaderboardPeriod = Literal["daily", "weekly", "monthly", "all_time"]
Scope = Literal["global", "friends"]
ClassPeriod = Literal["week", "month"]
AlertType = Literal["inactive", "streak_lost", "low_performance"]
Severity = Literal["low", "medium", "high"]
Role = Literal["student", "teacher", "admin"]

METRICS: tuple[str, ...] = get_args(Metric)
LEADERBOARD_PERIODS: tuple[str, ...] = get_args(LeaderboardPeriod)
SCOPES: tuple[str, ...] = get_args(Scope)
CLASS_PERIODS: tuple[str, ...] = get_args(ClassPeriod)

UNKNOWN_DISPLAY_NAME = "Unknown"


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class User(BaseModel):
    """Identity model returned by the auth layer.

    Frozen: users are identity objects, no mutation after creation.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    role: Role
    name: str


# ---------------------------------------------------------------------------
# Stored records (read-only to the engine)
# ---------------------------------------------------------------------------


class ActivityDay(BaseModel):
    """One user's study activity for a single calendar day.

    Written by the study-session recorder, never by this engine. At most
    one entry per calendar day per user.
    """

    model_config = ConfigDict(frozen=True)

    date: date
    words_learned: int = Field(default=0, ge=0)
    correct_answers: int = Field(default=0, ge=0)
    total_answers: int = Field(default=0, ge=0)
    time_spent_minutes: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _correct_within_total(self) -> "ActivityDay":
        if self.correct_answers > self.total_answers:
            raise ValueError(
                f"correct_answers ({self.correct_answers}) exceeds "
                f"total_answers ({self.total_answers})"
            )
        return self


class CourseDayProgress(BaseModel):
    """Completion and quiz state for one (course, day) pair."""

    model_config = ConfigDict(frozen=True)

    completed: bool = False
    quiz_completed: bool = False
    quiz_score: int | None = Field(default=None, ge=0, le=100)

    @property
    def is_quiz_scored(self) -> bool:
        """True when the quiz was completed and a score was recorded."""
        return self.quiz_completed and self.quiz_score is not None


class UserRecord(BaseModel):
    """A user's full progress document as held by the repository.

    course_progress maps course id -> day number -> CourseDayProgress.
    Frozen: the engine only reads records, it never writes them back.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    display_name: str = UNKNOWN_DISPLAY_NAME
    photo_url: str | None = None
    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_active_date: datetime | None = None
    activity_days: list[ActivityDay] = Field(default_factory=list)
    course_progress: dict[str, dict[int, CourseDayProgress]] = Field(default_factory=dict)

    @field_validator("display_name", mode="before")
    @classmethod
    def _blank_name_is_unknown(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return UNKNOWN_DISPLAY_NAME
        return value

    @field_validator("last_active_date")
    @classmethod
    def _naive_means_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ClassRoster(BaseModel):
    """A teacher's class and the students enrolled in it.

    student_ids keeps enrolment order (it drives tie-breaking in top
    performer lists) but duplicates are dropped on construction.
    """

    model_config = ConfigDict(frozen=True)

    class_id: str
    teacher_id: str
    name: str = ""
    student_ids: list[str] = Field(default_factory=list)
    is_archived: bool = False

    @field_validator("student_ids")
    @classmethod
    def _dedupe_students(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))


# ---------------------------------------------------------------------------
# Leaderboards
# ---------------------------------------------------------------------------


class LeaderboardFilter(BaseModel):
    """What to rank, over which period, among whom."""

    model_config = ConfigDict(frozen=True)

    metric: Metric
    period: LeaderboardPeriod
    scope: Scope = "global"
    limit: int | None = Field(default=None, ge=1)


class LeaderboardEntry(BaseModel):
    """One ranked row. Computed fresh per request, never persisted."""

    model_config = ConfigDict(frozen=True)

    rank: int = Field(ge=1)
    user_id: str
    display_name: str
    photo_url: str | None = None
    score: int = Field(ge=0)
    is_requesting_user: bool = False


class Leaderboard(BaseModel):
    """A ranked, size-limited leaderboard plus the window it was scored over."""

    model_config = ConfigDict(frozen=True)

    metric: Metric
    period: LeaderboardPeriod
    scope: Scope
    limit: int
    entries: list[LeaderboardEntry] = Field(default_factory=list)
    period_start: datetime
    period_end: datetime
    generated_at: datetime


class UserLeaderboardPosition(BaseModel):
    """A single user's standing within the full (untruncated) ranking."""

    model_config = ConfigDict(frozen=True)

    rank: int
    score: int
    total_participants: int
    percentile: int


class LeaderboardSummary(BaseModel):
    """A user's rank on each metric board. None means not ranked."""

    model_config = ConfigDict(frozen=True)

    words_learned_rank: int | None = None
    current_streak_rank: int | None = None
    accuracy_rank: int | None = None
    time_spent_rank: int | None = None
    total_participants: int = 0


# ---------------------------------------------------------------------------
# Teacher analytics
# ---------------------------------------------------------------------------


class TrendDataPoint(BaseModel):
    """One day's value in a daily trend series."""

    model_config = ConfigDict(frozen=True)

    date: date
    value: int


class StudentSummary(BaseModel):
    """A student row as shown in classroom top-performer lists."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    display_name: str
    photo_url: str | None = None
    current_streak: int = 0
    words_learned: int = 0
    time_spent: int = 0
    accuracy: int = 0
    last_active_date: datetime | None = None


class StudentAlert(BaseModel):
    """A "needs attention" flag. At most one per student per call."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    display_name: str
    photo_url: str | None = None
    alert_type: AlertType
    message: str
    severity: Severity
    current_streak: int = 0
    last_active_date: datetime | None = None


class ClassAnalytics(BaseModel):
    """Classroom dashboard for one class over a trailing week or month."""

    model_config = ConfigDict(frozen=True)

    class_id: str
    period: ClassPeriod
    total_students: int = 0
    active_students: int = 0
    avg_words_learned: int = 0
    avg_accuracy: int = 0
    avg_time_spent: int = 0
    completion_rate: int = 0
    top_performers: list[StudentSummary] = Field(default_factory=list)
    needs_attention: list[StudentAlert] = Field(default_factory=list)
    trend_data: list[TrendDataPoint] = Field(default_factory=list)


class CourseSummary(BaseModel):
    """Per-course rollup inside StudentAnalytics."""

    model_config = ConfigDict(frozen=True)

    course_id: str
    days_completed: int = 0
    quizzes_taken: int = 0
    avg_quiz_score: int = 0


class StudentAnalytics(BaseModel):
    """One student's full progress rollup."""

    model_config = ConfigDict(frozen=True)

    student_id: str
    display_name: str
    photo_url: str | None = None
    total_words_learned: int = 0
    total_time_spent: int = 0
    avg_accuracy: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    days_completed: int = 0
    last_active_date: datetime | None = None
    activity_trend: list[TrendDataPoint] = Field(default_factory=list)
    course_progress: dict[str, dict[int, CourseDayProgress]] = Field(default_factory=dict)
    course_summaries: list[CourseSummary] = Field(default_factory=list)


class TeacherOverview(BaseModel):
    """Headline numbers across all of a teacher's active classes."""

    model_config = ConfigDict(frozen=True)

    teacher_id: str
    total_classes: int = 0
    total_students: int = 0
    active_students: int = 0


# ---------------------------------------------------------------------------
# API envelope
# ---------------------------------------------------------------------------


class ApiError(BaseModel):
    """Error detail inside ApiResponse.error.

    code is an uppercase string like "CLASS_NOT_FOUND" or "FORBIDDEN".
    Not an enum: error codes grow with the API.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    message: str


class ApiResponse(BaseModel):
    """Universal response envelope: every API endpoint returns this shape."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    data: Any | None = None
    error: ApiError | None = None
