"""Optional leaderboard cache: a latency aid, never a source of truth.

Entries are never invalidated when the underlying records change; they
only fall out when the cache is full (least recently used first) or when
clear() is called. Whatever is served from here may be stale.

The key includes the requesting user because the returned entry list
depends on them (is_requesting_user flags, the appended out-of-limit
row, and the friends population).

Tier 2 module: imports from vocatrack.schemas (Tier 1) + stdlib.
"""

from __future__ import annotations

from collections import OrderedDict

from vocatrack.schemas import Leaderboard, LeaderboardFilter

CacheKey = tuple[str, str, str, int, str | None]


class LeaderboardCache:
    """Size-bounded LRU map from filter (+ requester) to Leaderboard.

    Args:
        max_entries: Capacity. Must be >= 1; disable caching by not
            constructing one at all.
    """

    def __init__(self, max_entries: int) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}.")
        self._max_entries = max_entries
        self._entries: OrderedDict[CacheKey, Leaderboard] = OrderedDict()

    @staticmethod
    def key_for(
        leaderboard_filter: LeaderboardFilter, limit: int, requesting_user_id: str | None
    ) -> CacheKey:
        return (
            leaderboard_filter.metric,
            leaderboard_filter.period,
            leaderboard_filter.scope,
            limit,
            requesting_user_id,
        )

    def get(self, key: CacheKey) -> Leaderboard | None:
        board = self._entries.get(key)
        if board is not None:
            self._entries.move_to_end(key)
        return board

    def put(self, key: CacheKey, board: Leaderboard) -> None:
        self._entries[key] = board
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
