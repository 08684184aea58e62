"""Population selection: who gets ranked on a leaderboard.

global:  every known user.
friends: the requester's accepted friends plus the requester, so a user
         with no friends still sees their own row.

Friends scope reads only the friend records it needs through the bounded
fetcher rather than scanning the whole user base and filtering; the
resulting population is the same either way.

Candidates come back sorted by user id. Ranking uses a stable sort, so
this fixes the order of tied scores independent of repository scan order.

Tier 2 module: imports from vocatrack.analytics.fanout (Tier 2),
vocatrack.hooks.interfaces (Tier 1), vocatrack.schemas (Tier 1).
"""

from __future__ import annotations

from vocatrack.analytics.fanout import RecordFetcher
from vocatrack.hooks.interfaces import SocialGraph
from vocatrack.schemas import UserRecord


class PopulationSelector:
    """Resolves a leaderboard scope into candidate users.

    Args:
        fetcher: Bounded record reader (wraps the UserRepository).
        social_graph: Friendship lookups for the friends scope.
    """

    def __init__(self, fetcher: RecordFetcher, social_graph: SocialGraph) -> None:
        self._fetcher = fetcher
        self._social_graph = social_graph

    async def candidate_ids(self, scope: str, requesting_user_id: str | None = None) -> set[str]:
        """Returns the ids of every user to evaluate for this scope.

        Raises:
            ValueError: For an unknown scope, or friends scope without a
                requesting user.
        """
        if scope == "global":
            records = await self._fetcher.list_all()
            return {record.user_id for record in records}
        return await self._friend_ids_with_self(scope, requesting_user_id)

    async def load(self, scope: str, requesting_user_id: str | None = None) -> list[UserRecord]:
        """Returns the candidate records, sorted by user id.

        Friend records that can't be read are dropped (tolerant fan-out).

        Raises:
            ValueError: For an unknown scope, or friends scope without a
                requesting user.
        """
        if scope == "global":
            records = await self._fetcher.list_all()
        else:
            ids = await self._friend_ids_with_self(scope, requesting_user_id)
            fetched = await self._fetcher.fetch_many(sorted(ids))
            records = list(fetched.values())
        return sorted(records, key=lambda record: record.user_id)

    async def _friend_ids_with_self(self, scope: str, requesting_user_id: str | None) -> set[str]:
        if scope != "friends":
            raise ValueError(f"Unknown leaderboard scope: {scope!r}. Expected 'global' or 'friends'.")
        if not requesting_user_id:
            raise ValueError("The friends scope needs a requesting user.")
        friend_ids = await self._social_graph.get_friend_ids(requesting_user_id)
        return set(friend_ids) | {requesting_user_id}
