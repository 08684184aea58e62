"""Teacher-facing API routes: overview, class analytics, attention alerts.

Four endpoints that form the teacher's window into class progress:
- Overview: class and student counts across the teacher's classes
- Class analytics: weekly/monthly dashboard for one class
- Attention: every student in a class flagged by the alert rules
- Student analytics: one enrolled student's full rollup

All responses use the ApiResponse envelope. Teacher/admin role required on
all endpoints; teachers may only read their own classes, admins any class.

Tier 3 orchestration module: imports from deps (Tier 2), analytics
(Tier 2-3), schemas (Tier 1).
"""

from fastapi import APIRouter, Depends, HTTPException

from vocatrack.analytics.classroom import ClassAnalyticsAggregator
from vocatrack.analytics.errors import RecordNotFoundError
from vocatrack.analytics.student import StudentAnalyticsProjector
from vocatrack.api.deps import get_class_aggregator, get_current_user, get_student_projector
from vocatrack.schemas import ApiError, ApiResponse, ClassPeriod, ClassRoster, User

router = APIRouter()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _error(status_code: int, code: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail=ApiResponse(ok=False, error=ApiError(code=code, message=message)).model_dump(),
    )


def _require_teacher(user: User) -> None:
    """Verifies the authenticated user has teacher or admin role.

    Raises 403 with FORBIDDEN error code if the user is a student.
    """
    if user.role not in ("teacher", "admin"):
        raise _error(403, "FORBIDDEN", "Teacher or admin role required.")


def _require_class_access(user: User, roster: ClassRoster) -> None:
    """Teachers see only their own classes. Admins see every class."""
    if user.role != "admin" and roster.teacher_id != user.id:
        raise _error(403, "FORBIDDEN", "This class belongs to another teacher.")


async def _load_roster(aggregator: ClassAnalyticsAggregator, class_id: str, user: User) -> ClassRoster:
    """Resolves a class for the current teacher, or raises 404/403."""
    try:
        roster = await aggregator.get_roster(class_id)
    except RecordNotFoundError:
        raise _error(404, "CLASS_NOT_FOUND", f"Class '{class_id}' not found.") from None
    _require_class_access(user, roster)
    return roster


# ---------------------------------------------------------------------------
# Overview
# ---------------------------------------------------------------------------


@router.get("/overview")
async def teacher_overview(
    user: User = Depends(get_current_user),
    aggregator: ClassAnalyticsAggregator = Depends(get_class_aggregator),
) -> dict:
    """Counts across every non-archived class the caller teaches."""
    _require_teacher(user)

    overview = await aggregator.teacher_overview(user.id)
    return ApiResponse(ok=True, data=overview.model_dump(mode="json")).model_dump()


# ---------------------------------------------------------------------------
# Class endpoints
# ---------------------------------------------------------------------------


@router.get("/class/{class_id}/analytics")
async def class_analytics(
    class_id: str,
    period: ClassPeriod = "week",
    user: User = Depends(get_current_user),
    aggregator: ClassAnalyticsAggregator = Depends(get_class_aggregator),
) -> dict:
    """Dashboard figures for one class over the trailing week or month.

    Students whose records can't be read are left out of the figures
    rather than failing the request. An empty class returns zeros.
    """
    _require_teacher(user)

    roster = await _load_roster(aggregator, class_id, user)
    analytics = await aggregator.aggregate(roster, period)
    return ApiResponse(ok=True, data=analytics.model_dump(mode="json")).model_dump()


@router.get("/class/{class_id}/attention")
async def class_attention(
    class_id: str,
    user: User = Depends(get_current_user),
    aggregator: ClassAnalyticsAggregator = Depends(get_class_aggregator),
) -> dict:
    """Every student in the class flagged by the attention rules."""
    _require_teacher(user)

    roster = await _load_roster(aggregator, class_id, user)
    alerts = await aggregator.alerts_for(roster)
    return ApiResponse(
        ok=True,
        data={"alerts": [alert.model_dump(mode="json") for alert in alerts]},
    ).model_dump()


@router.get("/class/{class_id}/students/{student_id}/analytics")
async def student_analytics(
    class_id: str,
    student_id: str,
    user: User = Depends(get_current_user),
    aggregator: ClassAnalyticsAggregator = Depends(get_class_aggregator),
    projector: StudentAnalyticsProjector = Depends(get_student_projector),
) -> dict:
    """Full rollup for one student enrolled in the class.

    Returns 404 STUDENT_NOT_IN_CLASS for students outside the roster and
    404 STUDENT_NOT_FOUND when the student's record can't be read.
    """
    _require_teacher(user)

    roster = await _load_roster(aggregator, class_id, user)
    if student_id not in roster.student_ids:
        raise _error(
            404,
            "STUDENT_NOT_IN_CLASS",
            f"Student '{student_id}' is not enrolled in class '{class_id}'.",
        )

    try:
        analytics = await projector.project(student_id)
    except RecordNotFoundError:
        raise _error(404, "STUDENT_NOT_FOUND", f"Student '{student_id}' not found.") from None

    return ApiResponse(ok=True, data=analytics.model_dump(mode="json")).model_dump()
