"""In-memory database: development stub for UserRepository and ClassDirectory.

Python dict-backed storage for user progress records and class rosters.
Data lives only in memory and is lost on restart.

TEAM: Replace this with your real document store. Subclass UserRepository
and ClassDirectory from vocatrack.hooks.interfaces and implement their
abstract methods. The seed_* helpers are stub conveniences, not part of
either interface, production data is written by the study-session
recorder and the class management flow, never by this engine.

Tier 2 service module: imports from vocatrack.hooks.interfaces (Tier 1)
and vocatrack.schemas (Tier 1).

Usage:
    from vocatrack.hooks.database import InMemoryStore

    db = InMemoryStore()
    db.seed_user_record(record)
    await db.get_user_record("user-1")
"""

from vocatrack.hooks.interfaces import ClassDirectory, UserRepository
from vocatrack.schemas import ClassRoster, UserRecord


class InMemoryStore(UserRepository, ClassDirectory):
    """STUB: dict-backed storage, loses data on restart.

    Records are keyed by user_id, rosters by class_id. Listing order is
    insertion order, which keeps test output stable.
    """

    def __init__(self) -> None:
        """Initialises empty in-memory stores."""
        self._records: dict[str, UserRecord] = {}
        self._rosters: dict[str, ClassRoster] = {}

    # -- UserRepository ----------------------------------------------------

    async def get_user_record(self, user_id: str) -> UserRecord | None:
        """Retrieves a user record by id, None if unknown."""
        return self._records.get(user_id)

    async def list_user_records(self) -> list[UserRecord]:
        """Returns every stored record in insertion order."""
        return list(self._records.values())

    # -- ClassDirectory ----------------------------------------------------

    async def get_class_roster(self, class_id: str) -> ClassRoster | None:
        """Retrieves a class roster by id, None if unknown."""
        return self._rosters.get(class_id)

    async def list_teacher_classes(self, teacher_id: str) -> list[ClassRoster]:
        """Returns the teacher's non-archived classes in insertion order."""
        return [
            roster
            for roster in self._rosters.values()
            if roster.teacher_id == teacher_id and not roster.is_archived
        ]

    # -- Seeding (stub conveniences) ---------------------------------------

    def seed_user_record(self, record: UserRecord) -> None:
        """Stores or overwrites a user record."""
        self._records[record.user_id] = record

    def seed_class_roster(self, roster: ClassRoster) -> None:
        """Stores or overwrites a class roster."""
        self._rosters[roster.class_id] = roster

    def remove_user_record(self, user_id: str) -> None:
        """Deletes a user record. No-op if not found (idempotent)."""
        self._records.pop(user_id, None)
