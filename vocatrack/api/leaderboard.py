"""Leaderboard API routes: rankings, positions, dashboard boards.

Every route ranks on behalf of the authenticated user: their row is
flagged (is_requesting_user) and always present when they qualify, and
the friends scope is resolved around them.

All responses use the ApiResponse envelope. Unknown metric/period/scope
values are rejected by FastAPI's Literal validation (422).

Tier 3 orchestration module: imports from deps (Tier 2), analytics
(Tier 2-3), schemas (Tier 1).
"""

from fastapi import APIRouter, Depends, Query

from vocatrack.analytics.leaderboard import DASHBOARD_LIMIT, LeaderboardBuilder
from vocatrack.analytics.position import DEFAULT_CONTEXT, PositionResolver
from vocatrack.api.deps import get_current_user, get_leaderboard_builder, get_position_resolver
from vocatrack.schemas import (
    ApiResponse,
    LeaderboardFilter,
    LeaderboardPeriod,
    Metric,
    Scope,
    User,
)

router = APIRouter()

MAX_LIMIT = 500


@router.get("")
async def get_leaderboard(
    metric: Metric = "words_learned",
    period: LeaderboardPeriod = "weekly",
    scope: Scope = "global",
    limit: int | None = Query(default=None, ge=1, le=MAX_LIMIT),
    user: User = Depends(get_current_user),
    builder: LeaderboardBuilder = Depends(get_leaderboard_builder),
) -> dict:
    """Ranked leaderboard for one metric/period/scope.

    Returns at most ``limit`` entries, plus the caller's own row if it
    fell outside the limit.
    """
    board = await builder.build(
        LeaderboardFilter(metric=metric, period=period, scope=scope, limit=limit),
        requesting_user_id=user.id,
    )
    return ApiResponse(ok=True, data=board.model_dump(mode="json")).model_dump()


@router.get("/position")
async def get_position(
    metric: Metric = "words_learned",
    period: LeaderboardPeriod = "weekly",
    scope: Scope = "global",
    user: User = Depends(get_current_user),
    resolver: PositionResolver = Depends(get_position_resolver),
) -> dict:
    """The caller's rank, score and percentile.

    ``data`` is null when the caller is not ranked (e.g. no activity in
    the period), that is a normal answer, not an error.
    """
    position = await resolver.position(
        user.id, LeaderboardFilter(metric=metric, period=period, scope=scope)
    )
    return ApiResponse(
        ok=True,
        data=position.model_dump(mode="json") if position is not None else None,
    ).model_dump()


@router.get("/around")
async def get_around_me(
    metric: Metric = "words_learned",
    period: LeaderboardPeriod = "weekly",
    scope: Scope = "global",
    context: int = Query(default=DEFAULT_CONTEXT, ge=0, le=50),
    user: User = Depends(get_current_user),
    resolver: PositionResolver = Depends(get_position_resolver),
) -> dict:
    """Entries surrounding the caller's own rank."""
    entries = await resolver.around_user(
        user.id,
        LeaderboardFilter(metric=metric, period=period, scope=scope),
        context=context,
    )
    return ApiResponse(
        ok=True,
        data={"entries": [entry.model_dump(mode="json") for entry in entries]},
    ).model_dump()


@router.get("/top")
async def get_top_users(
    metric: Metric = "words_learned",
    period: LeaderboardPeriod = "weekly",
    limit: int = Query(default=DASHBOARD_LIMIT, ge=1, le=MAX_LIMIT),
    user: User = Depends(get_current_user),
    builder: LeaderboardBuilder = Depends(get_leaderboard_builder),
) -> dict:
    """Top users on the global board. The caller is not appended."""
    entries = await builder.top_users(metric, period, limit)
    return ApiResponse(
        ok=True,
        data={"entries": [entry.model_dump(mode="json") for entry in entries]},
    ).model_dump()


@router.get("/dashboard")
async def get_dashboard_boards(
    period: LeaderboardPeriod = "weekly",
    user: User = Depends(get_current_user),
    builder: LeaderboardBuilder = Depends(get_leaderboard_builder),
) -> dict:
    """One global board per metric, for the home dashboard."""
    boards = await builder.multiple_leaderboards(user.id, period)
    return ApiResponse(
        ok=True,
        data={metric: board.model_dump(mode="json") for metric, board in boards.items()},
    ).model_dump()


@router.get("/summary")
async def get_summary(
    period: LeaderboardPeriod = "weekly",
    scope: Scope = "global",
    user: User = Depends(get_current_user),
    resolver: PositionResolver = Depends(get_position_resolver),
) -> dict:
    """The caller's rank on every metric board."""
    summary = await resolver.summary(user.id, period, scope)
    return ApiResponse(ok=True, data=summary.model_dump(mode="json")).model_dump()
