"""Fake auth service: development stub for AuthService.

Accepts any non-empty token and returns a configurable test user. Empty
tokens return None (simulates a missing/invalid Authorization header).

TEAM: Replace this with your real auth provider. Subclass AuthService from
vocatrack.hooks.interfaces and implement validate_token and get_user.

Tier 2 service module: imports from vocatrack.hooks.interfaces (Tier 1)
and vocatrack.schemas (Tier 1).

Usage:
    from vocatrack.hooks.auth import FakeAuthService

    auth = FakeAuthService()                          # default: student
    auth = FakeAuthService(default_role="teacher")    # teacher user
"""

from vocatrack.hooks.interfaces import AuthService
from vocatrack.schemas import User

_ROLE_NAMES: dict[str, str] = {
    "student": "Test Student",
    "teacher": "Test Teacher",
    "admin": "Test Admin",
}


class FakeAuthService(AuthService):
    """STUB: returns a test user for any non-empty token.

    The token itself becomes the user id when it looks like one
    ("user-42"), so a dev client can impersonate a seeded user by sending
    that id as its bearer token. Anything else maps to default_user_id.
    """

    def __init__(self, default_role: str = "student", default_user_id: str = "fake-user-1") -> None:
        """Initialises the fake auth service.

        Args:
            default_role: The role assigned to all returned users.
                Must be "student", "teacher", or "admin".
            default_user_id: Id returned for tokens that don't name a user.
        """
        self._default_role = default_role
        self._default_user_id = default_user_id

    async def validate_token(self, token: str) -> User | None:
        """Returns a test user for any non-empty token.

        Args:
            token: Any string. Non-empty → valid user, empty → None.

        Returns:
            A User with the configured role, or None if token is empty.
        """
        if not token:
            return None
        user_id = token if token.startswith(("user-", "teacher-", "admin-")) else self._default_user_id
        return self._make_user(user_id)

    async def get_user(self, user_id: str) -> User | None:
        """Returns a test user with the given ID, or None for an empty ID."""
        if not user_id:
            return None
        return self._make_user(user_id)

    def _make_user(self, user_id: str) -> User:
        return User(
            id=user_id,
            role=self._default_role,  # type: ignore[arg-type]
            name=_ROLE_NAMES.get(self._default_role, "Test User"),
        )
