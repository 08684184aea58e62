"""Position resolution: one user's standing within a full ranking.

Positions are read off the untruncated ranking, so a user ranked 120th on
a board displayed with limit 50 still gets rank 120 and a percentile
computed against every ranked participant.

"Not ranked" is a normal outcome (e.g. zero words this week) and comes
back as None / an empty list, never as an error.

Tier 3 orchestration module: imports from analytics.leaderboard (Tier 3),
analytics.scoring (Tier 2), schemas (Tier 1).
"""

from __future__ import annotations

import asyncio

from vocatrack.analytics.leaderboard import LeaderboardBuilder, RankedBoard
from vocatrack.analytics.scoring import round_half_up
from vocatrack.schemas import (
    METRICS,
    LeaderboardEntry,
    LeaderboardFilter,
    LeaderboardSummary,
    UserLeaderboardPosition,
)

DEFAULT_CONTEXT = 5


def percentile_for(rank: int, total_participants: int) -> int:
    """Share of participants at or below this rank, as a 0-100 integer.

    Rank 1 of 4 is 100, rank 2 of 4 is 75. Zero participants gives 0.
    """
    if total_participants <= 0:
        return 0
    return round_half_up((total_participants - rank + 1) / total_participants * 100)


def position_in(board: RankedBoard, user_id: str) -> UserLeaderboardPosition | None:
    """Derives a position from an already ranked board."""
    entry = board.find(user_id)
    if entry is None:
        return None
    total = len(board.entries)
    return UserLeaderboardPosition(
        rank=entry.rank,
        score=entry.score,
        total_participants=total,
        percentile=percentile_for(entry.rank, total),
    )


class PositionResolver:
    """Answers "where do I stand?" questions on top of a LeaderboardBuilder."""

    def __init__(self, builder: LeaderboardBuilder) -> None:
        self._builder = builder

    async def position(
        self, user_id: str, leaderboard_filter: LeaderboardFilter
    ) -> UserLeaderboardPosition | None:
        """The user's rank, score and percentile, or None if not ranked.

        The filter's limit is ignored; positions always use the full
        ranking.
        """
        board = await self._builder.rank(
            leaderboard_filter.metric,
            leaderboard_filter.period,
            leaderboard_filter.scope,
            user_id,
        )
        return position_in(board, user_id)

    async def around_user(
        self,
        user_id: str,
        leaderboard_filter: LeaderboardFilter,
        context: int = DEFAULT_CONTEXT,
    ) -> list[LeaderboardEntry]:
        """Entries from `context` places above to `context` below the user.

        Clipped at both ends of the ranking. Empty if the user is not
        ranked.

        Raises:
            ValueError: If context is negative.
        """
        if context < 0:
            raise ValueError(f"context must be >= 0, got {context}.")
        board = await self._builder.rank(
            leaderboard_filter.metric,
            leaderboard_filter.period,
            leaderboard_filter.scope,
            user_id,
        )
        index = board.index_of(user_id)
        if index is None:
            return []
        start = max(0, index - context)
        return board.entries[start:index + context + 1]

    async def summary(
        self, user_id: str, period: str = "weekly", scope: str = "global"
    ) -> LeaderboardSummary:
        """The user's rank on every metric board, ranked concurrently.

        total_participants is the size of the words-learned board.
        """
        boards = await asyncio.gather(
            *(self._builder.rank(metric, period, scope, user_id) for metric in METRICS)
        )
        ranks: dict[str, int | None] = {}
        for metric, board in zip(METRICS, boards):
            entry = board.find(user_id)
            ranks[f"{metric}_rank"] = entry.rank if entry is not None else None

        words_board = boards[METRICS.index("words_learned")]
        return LeaderboardSummary(**ranks, total_participants=len(words_board.entries))
