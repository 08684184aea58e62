"""Hook interfaces: abstract base classes for all swappable collaborators.

These ABCs define the contracts between the analytics engine and the
infrastructure around it. Each one has a stub implementation that lets the
engine run end-to-end without real infrastructure, and a production
implementation that the team wires in when ready.

The engine only ever reads through these interfaces. Nothing here writes
progress data, recording study sessions is somebody else's job.

Tier 1 leaf module: imports only from abc, datetime (stdlib) and
vocatrack.schemas (also Tier 1). No project services, no orchestration.

TEAM: To implement a real service, subclass the relevant ABC and implement
every abstract method. Python will raise TypeError at instantiation if
any method is missing, you'll know immediately what's left to do.

Usage:
    from vocatrack.hooks.interfaces import UserRepository, SocialGraph
    from vocatrack.hooks.interfaces import ClassDirectory, AuthService, Clock
"""

from abc import ABC, abstractmethod
from datetime import datetime

from vocatrack.schemas import ClassRoster, User, UserRecord


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class AuthService(ABC):
    """Validates auth tokens and resolves users.

    The auth provider (OAuth, JWT, Firebase ID tokens, team's choice) lives
    behind this interface. The platform never touches tokens directly; it
    asks the AuthService and gets a User back.

    TEAM: Replace the stub (FakeAuthService) with your auth provider.
    """

    @abstractmethod
    async def validate_token(self, token: str) -> User | None:
        """Validates an auth token and returns the associated user.

        Args:
            token: Bearer token from the request.

        Returns:
            The User if the token is valid and not expired, None otherwise.
        """
        ...

    @abstractmethod
    async def get_user(self, user_id: str) -> User | None:
        """Looks up a user by their ID.

        Args:
            user_id: The opaque user identifier.

        Returns:
            The User if found, None if the user doesn't exist.
        """
        ...


# ---------------------------------------------------------------------------
# User progress records
# ---------------------------------------------------------------------------


class UserRepository(ABC):
    """Read access to users' progress documents.

    Each UserRecord carries the user's daily activity log, streak counters
    and per-course progress. The engine fans out one get_user_record call
    per candidate, so implementations must be safe to call concurrently.

    TEAM: Replace the stub (InMemoryStore) with your document store.
    """

    @abstractmethod
    async def get_user_record(self, user_id: str) -> UserRecord | None:
        """Fetches one user's progress record.

        Args:
            user_id: The opaque user identifier.

        Returns:
            The UserRecord if it exists, None otherwise. Transport failures
            should raise, callers decide whether a failure is fatal.
        """
        ...

    @abstractmethod
    async def list_user_records(self) -> list[UserRecord]:
        """Returns every known user's record (global leaderboard scope).

        An index- or pagination-backed implementation is preferable at
        scale, but the engine only relies on getting the full set.

        Returns:
            All user records. Empty list if there are none.
        """
        ...


# ---------------------------------------------------------------------------
# Social graph
# ---------------------------------------------------------------------------


class SocialGraph(ABC):
    """Friendship lookups for the friends leaderboard scope.

    TEAM: Replace the stub (InMemorySocialGraph) with your friends service.
    Only accepted friendships count; pending requests must not appear.
    """

    @abstractmethod
    async def get_friend_ids(self, user_id: str) -> set[str]:
        """Returns the ids of the user's accepted friends.

        Args:
            user_id: The user whose friends to list.

        Returns:
            A set of user ids, never containing user_id itself. Empty set
            for users with no friends or unknown users.
        """
        ...


# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------


class ClassDirectory(ABC):
    """Class roster lookups for teacher analytics.

    TEAM: Replace the stub (InMemoryStore) with your class service.
    """

    @abstractmethod
    async def get_class_roster(self, class_id: str) -> ClassRoster | None:
        """Fetches a class and its enrolled student ids.

        Args:
            class_id: The class identifier.

        Returns:
            The ClassRoster if the class exists, None otherwise.
        """
        ...

    @abstractmethod
    async def list_teacher_classes(self, teacher_id: str) -> list[ClassRoster]:
        """Lists every non-archived class owned by a teacher.

        Args:
            teacher_id: The teacher's user id.

        Returns:
            The teacher's active classes. Empty list if there are none.
        """
        ...


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class Clock(ABC):
    """Source of "now" for every time-window computation.

    Injected so window boundaries, trends and inactivity checks are
    deterministic under test. The returned datetime must be timezone-aware;
    its zone defines what a "calendar day" is.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Returns the current instant as an aware datetime."""
        ...
