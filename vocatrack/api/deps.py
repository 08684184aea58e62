"""Shared FastAPI dependencies: auth, repositories, clock, analytics services.

Module-level singletons for each collaborator stub. Route handlers access
them via FastAPI's Depends() system, never by importing stubs directly.
When the team swaps a stub for a real implementation, they change the
class here and every downstream handler picks it up automatically.

Analytics components (LeaderboardBuilder, ClassAnalyticsAggregator, ...)
are cheap and stateless, so they are assembled per request from the
injected collaborators. The only shared analytics state is the optional
leaderboard cache, which main.py creates at startup.

TEAM: To wire your real services, replace the stub class on the right side
of each singleton assignment below. The get_* functions and all route
handlers stay unchanged.

Tier 2 service module: imports from hooks/* (Tier 2), hooks/interfaces
(Tier 1), analytics/* (Tier 2-3), config (Tier 2), schemas (Tier 1).

Usage:
    from vocatrack.api.deps import get_current_user, get_leaderboard_builder

    @router.get("/something")
    async def do_thing(
        user: User = Depends(get_current_user),
        builder: LeaderboardBuilder = Depends(get_leaderboard_builder),
    ): ...
"""

import logging

from fastapi import Depends, Header, HTTPException

from vocatrack.analytics.cache import LeaderboardCache
from vocatrack.analytics.classroom import ClassAnalyticsAggregator
from vocatrack.analytics.fanout import RecordFetcher
from vocatrack.analytics.leaderboard import LeaderboardBuilder
from vocatrack.analytics.population import PopulationSelector
from vocatrack.analytics.position import PositionResolver
from vocatrack.analytics.student import StudentAnalyticsProjector
from vocatrack.config import Settings, get_settings
from vocatrack.hooks.auth import FakeAuthService
from vocatrack.hooks.clock import SystemClock
from vocatrack.hooks.database import InMemoryStore
from vocatrack.hooks.interfaces import (
    AuthService,
    ClassDirectory,
    Clock,
    SocialGraph,
    UserRepository,
)
from vocatrack.hooks.social import InMemorySocialGraph
from vocatrack.schemas import ApiError, ApiResponse, User

logger = logging.getLogger("vocatrack")

# ---------------------------------------------------------------------------
# Service singletons: the swap point
# ---------------------------------------------------------------------------

# TEAM: Replace with your real implementations here.
_auth_service: AuthService = FakeAuthService()
_store = InMemoryStore()
_user_repository: UserRepository = _store
_class_directory: ClassDirectory = _store
_social_graph: SocialGraph = InMemorySocialGraph()

# Set by _init_analytics_services() in main.py at startup
_clock: Clock = SystemClock()
_leaderboard_cache: LeaderboardCache | None = None


# ---------------------------------------------------------------------------
# Collaborator providers
# ---------------------------------------------------------------------------


def get_auth_service() -> AuthService:
    """Returns the auth service singleton."""
    return _auth_service


def get_user_repository() -> UserRepository:
    """Returns the user record repository singleton."""
    return _user_repository


def get_class_directory() -> ClassDirectory:
    """Returns the class roster directory singleton."""
    return _class_directory


def get_social_graph() -> SocialGraph:
    """Returns the social graph singleton."""
    return _social_graph


def get_clock() -> Clock:
    """Returns the clock singleton."""
    return _clock


def get_leaderboard_cache() -> LeaderboardCache | None:
    """Returns the leaderboard cache, or None when caching is disabled."""
    return _leaderboard_cache


# ---------------------------------------------------------------------------
# Analytics component providers
# ---------------------------------------------------------------------------


def get_record_fetcher(
    repository: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_settings),
) -> RecordFetcher:
    """Bounded record reader configured from FANOUT_LIMIT / READ_TIMEOUT_SECONDS."""
    return RecordFetcher(
        repository,
        max_concurrency=settings.fanout_limit,
        timeout_seconds=settings.read_timeout_seconds,
    )


def get_leaderboard_builder(
    fetcher: RecordFetcher = Depends(get_record_fetcher),
    social_graph: SocialGraph = Depends(get_social_graph),
    clock: Clock = Depends(get_clock),
    cache: LeaderboardCache | None = Depends(get_leaderboard_cache),
    settings: Settings = Depends(get_settings),
) -> LeaderboardBuilder:
    """Leaderboard builder wired to the shared population and cache."""
    return LeaderboardBuilder(
        PopulationSelector(fetcher, social_graph),
        clock,
        default_limit=settings.leaderboard_default_limit,
        cache=cache,
    )


def get_position_resolver(
    builder: LeaderboardBuilder = Depends(get_leaderboard_builder),
) -> PositionResolver:
    """Position resolver on top of the request's leaderboard builder."""
    return PositionResolver(builder)


def get_class_aggregator(
    fetcher: RecordFetcher = Depends(get_record_fetcher),
    classes: ClassDirectory = Depends(get_class_directory),
    clock: Clock = Depends(get_clock),
) -> ClassAnalyticsAggregator:
    """Classroom analytics aggregator."""
    return ClassAnalyticsAggregator(fetcher, classes, clock)


def get_student_projector(
    fetcher: RecordFetcher = Depends(get_record_fetcher),
    clock: Clock = Depends(get_clock),
) -> StudentAnalyticsProjector:
    """Single-student analytics projector."""
    return StudentAnalyticsProjector(fetcher, clock)


# ---------------------------------------------------------------------------
# Auth dependency: used by route handlers
# ---------------------------------------------------------------------------


async def get_current_user(
    authorization: str | None = Header(default=None),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """Extracts and validates a Bearer token from the Authorization header.

    Returns the authenticated User on success. Raises HTTPException(401)
    on missing header, malformed header, or invalid token.

    Args:
        authorization: The raw Authorization header value.
        auth_service: Injected auth service.

    Returns:
        The authenticated User.

    Raises:
        HTTPException: 401 with ApiResponse envelope on auth failure.
    """
    if not authorization:
        raise HTTPException(
            status_code=401,
            detail=ApiResponse(
                ok=False,
                error=ApiError(code="UNAUTHORIZED", message="Missing authorization header."),
            ).model_dump(),
        )

    parts = authorization.split(" ", maxsplit=1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise HTTPException(
            status_code=401,
            detail=ApiResponse(
                ok=False,
                error=ApiError(code="UNAUTHORIZED", message="Invalid authorization header format."),
            ).model_dump(),
        )

    token = parts[1].strip()
    user = await auth_service.validate_token(token)

    if user is None:
        raise HTTPException(
            status_code=401,
            detail=ApiResponse(
                ok=False,
                error=ApiError(code="UNAUTHORIZED", message="Invalid or expired token."),
            ).model_dump(),
        )

    return user
