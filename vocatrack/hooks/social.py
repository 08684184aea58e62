"""In-memory social graph: development stub for SocialGraph.

Friendships are undirected: befriending a and b makes each appear in the
other's friend set. Self-friendship is ignored.

TEAM: Replace this with your friends service. Subclass SocialGraph from
vocatrack.hooks.interfaces and return accepted friendships only.

Tier 2 service module: imports from vocatrack.hooks.interfaces (Tier 1).
"""

from collections import defaultdict

from vocatrack.hooks.interfaces import SocialGraph


class InMemorySocialGraph(SocialGraph):
    """STUB: adjacency sets in a dict, loses data on restart."""

    def __init__(self) -> None:
        self._friends: dict[str, set[str]] = defaultdict(set)

    async def get_friend_ids(self, user_id: str) -> set[str]:
        """Returns a copy of the user's friend set (empty if unknown)."""
        return set(self._friends.get(user_id, ()))

    def add_friendship(self, user_a: str, user_b: str) -> None:
        """Records an accepted friendship in both directions."""
        if user_a == user_b:
            return
        self._friends[user_a].add(user_b)
        self._friends[user_b].add(user_a)

    def remove_friendship(self, user_a: str, user_b: str) -> None:
        """Removes a friendship in both directions. No-op if absent."""
        self._friends.get(user_a, set()).discard(user_b)
        self._friends.get(user_b, set()).discard(user_a)
