"""Leaderboard building: scoring, tie-aware ranking, truncation.

Pipeline for one request:
1. Resolve the period into a window and the scope into candidate records.
2. Score every candidate. A zero score drops the candidate unless the
   metric is current_streak (a streak of 0 is information, a word count
   of 0 is noise).
3. Sort by score descending. The sort is stable and candidates arrive
   ordered by user id, so equal scores always list in the same order.
4. Assign standard competition ranks: equal scores share a rank, the
   next distinct score resumes at its 1-based position (1, 1, 3).
5. Truncate to the limit.
6. If the requesting user is ranked but fell outside the limit, append
   their entry with its true rank. Result size is at most limit + 1.

Steps 1-4 are exposed separately as rank() for callers that need the
full ordering (positions, around-user views, summaries).

Tier 3 orchestration module: imports from analytics/* (Tier 1-2),
hooks.interfaces (Tier 1), schemas (Tier 1).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime

from vocatrack.analytics.cache import LeaderboardCache
from vocatrack.analytics.population import PopulationSelector
from vocatrack.analytics.scoring import calculate_score
from vocatrack.analytics.windows import TimeWindow, resolve_window
from vocatrack.hooks.interfaces import Clock
from vocatrack.schemas import (
    METRICS,
    Leaderboard,
    LeaderboardEntry,
    LeaderboardFilter,
    UserRecord,
)

logger = logging.getLogger("vocatrack.analytics.leaderboard")

DEFAULT_LIMIT = 50
DASHBOARD_LIMIT = 10


@dataclass(frozen=True)
class RankedBoard:
    """The full, untruncated ranking for one metric/period/scope."""

    metric: str
    period: str
    scope: str
    window: TimeWindow
    generated_at: datetime
    entries: list[LeaderboardEntry]

    def find(self, user_id: str) -> LeaderboardEntry | None:
        """The user's entry, or None if they were excluded or absent."""
        for entry in self.entries:
            if entry.user_id == user_id:
                return entry
        return None

    def index_of(self, user_id: str) -> int | None:
        for index, entry in enumerate(self.entries):
            if entry.user_id == user_id:
                return index
        return None


def _check_metric(metric: str) -> None:
    if metric not in METRICS:
        raise ValueError(f"Unknown leaderboard metric: {metric!r}. Expected one of {', '.join(METRICS)}.")


def is_excluded(metric: str, score: int) -> bool:
    """Zero scores are dropped for every metric except current_streak."""
    return score == 0 and metric != "current_streak"


def rank_entries(
    scored: list[tuple[UserRecord, int]],
    requesting_user_id: str | None = None,
) -> list[LeaderboardEntry]:
    """Sorts scored candidates and assigns standard competition ranks.

    Args:
        scored: (record, score) pairs. Their order breaks ties.
        requesting_user_id: Flags the matching entry as the requester's.

    Returns:
        Entries ordered by score descending, ranked 1, 1, 3, ... on ties.
    """
    # sorted() keeps equal elements in input order even with reverse=True.
    ordered = sorted(scored, key=lambda pair: pair[1], reverse=True)

    entries: list[LeaderboardEntry] = []
    for index, (record, score) in enumerate(ordered):
        if entries and score == entries[-1].score:
            rank = entries[-1].rank
        else:
            rank = index + 1
        entries.append(
            LeaderboardEntry(
                rank=rank,
                user_id=record.user_id,
                display_name=record.display_name,
                photo_url=record.photo_url,
                score=score,
                is_requesting_user=record.user_id == requesting_user_id,
            )
        )
    return entries


def truncate_with_requester(
    entries: list[LeaderboardEntry],
    limit: int,
    requesting_user_id: str | None,
) -> list[LeaderboardEntry]:
    """Cuts the ranking to limit, re-appending the requester if they fell off."""
    limited = entries[:limit]
    if requesting_user_id is None:
        return limited
    if any(entry.user_id == requesting_user_id for entry in limited):
        return limited
    for entry in entries[limit:]:
        if entry.user_id == requesting_user_id:
            limited.append(entry)
            break
    return limited


class LeaderboardBuilder:
    """Builds ranked leaderboards from user activity records.

    Args:
        population: Resolves scopes into candidate records.
        clock: Source of "now" for window resolution.
        default_limit: Size used when a filter carries no limit.
        cache: Optional non-authoritative cache for build() results.
    """

    def __init__(
        self,
        population: PopulationSelector,
        clock: Clock,
        *,
        default_limit: int = DEFAULT_LIMIT,
        cache: LeaderboardCache | None = None,
    ) -> None:
        if default_limit < 1:
            raise ValueError(f"default_limit must be >= 1, got {default_limit}.")
        self._population = population
        self._clock = clock
        self._default_limit = default_limit
        self._cache = cache

    async def rank(
        self,
        metric: str,
        period: str,
        scope: str = "global",
        requesting_user_id: str | None = None,
    ) -> RankedBoard:
        """Scores and ranks the whole population (no truncation).

        Raises:
            ValueError: For an unknown metric, period or scope, or friends
                scope without a requesting user.
        """
        _check_metric(metric)
        now = self._clock.now()
        window = resolve_window(period, now)
        records = await self._population.load(scope, requesting_user_id)

        scored: list[tuple[UserRecord, int]] = []
        for record in records:
            score = calculate_score(record, metric, window)
            if is_excluded(metric, score):
                continue
            scored.append((record, score))

        return RankedBoard(
            metric=metric,
            period=period,
            scope=scope,
            window=window,
            generated_at=now,
            entries=rank_entries(scored, requesting_user_id),
        )

    async def build(
        self,
        leaderboard_filter: LeaderboardFilter,
        requesting_user_id: str | None = None,
    ) -> Leaderboard:
        """Builds a size-limited leaderboard for one filter.

        Args:
            leaderboard_filter: Metric, period, scope and optional limit.
            requesting_user_id: The viewer. Their row is always included
                if they have a qualifying score. Omit for population-only
                views.

        Returns:
            The Leaderboard, with at most limit + 1 entries.
        """
        limit = leaderboard_filter.limit or self._default_limit

        cache_key = None
        if self._cache is not None:
            cache_key = LeaderboardCache.key_for(leaderboard_filter, limit, requesting_user_id)
            cached = self._cache.get(cache_key)
            if cached is not None:
                return cached

        ranked = await self.rank(
            leaderboard_filter.metric,
            leaderboard_filter.period,
            leaderboard_filter.scope,
            requesting_user_id,
        )
        entries = truncate_with_requester(ranked.entries, limit, requesting_user_id)

        board = Leaderboard(
            metric=leaderboard_filter.metric,
            period=leaderboard_filter.period,
            scope=leaderboard_filter.scope,
            limit=limit,
            entries=entries,
            period_start=ranked.window.start,
            period_end=ranked.window.end,
            generated_at=ranked.generated_at,
        )

        logger.info(
            "Leaderboard built: %s/%s/%s ranked=%d returned=%d",
            board.metric,
            board.period,
            board.scope,
            len(ranked.entries),
            len(entries),
            extra={
                "metric": board.metric,
                "period": board.period,
                "scope": board.scope,
                "ranked": len(ranked.entries),
                "returned": len(entries),
            },
        )

        if self._cache is not None and cache_key is not None:
            self._cache.put(cache_key, board)
        return board

    async def top_users(
        self, metric: str, period: str, limit: int = DASHBOARD_LIMIT
    ) -> list[LeaderboardEntry]:
        """The first `limit` entries of the global board, no viewer."""
        board = await self.build(
            LeaderboardFilter(metric=metric, period=period, scope="global", limit=limit)
        )
        return board.entries[:limit]

    async def multiple_leaderboards(
        self,
        user_id: str,
        period: str = "weekly",
        limit: int = DASHBOARD_LIMIT,
    ) -> dict[str, Leaderboard]:
        """One global board per metric, built concurrently, for a dashboard."""
        boards = await asyncio.gather(
            *(
                self.build(
                    LeaderboardFilter(metric=metric, period=period, scope="global", limit=limit),
                    user_id,
                )
                for metric in METRICS
            )
        )
        return dict(zip(METRICS, boards))
