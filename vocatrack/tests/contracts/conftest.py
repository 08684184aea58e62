"""Fixtures for contract tests: one parameterized fixture per hook interface.

Each fixture yields a fresh implementation instance. Today there's only the
stub ("stub" param). When the team adds a real implementation (e.g., a
document store or a friends service), they add a second param value and an
elif branch.

TEAM: To test your implementation against the contracts:
    1. Add your param string (e.g., "firestore") to the params list.
    2. Add an elif branch that yields your implementation instance.
    3. Run: python -m pytest vocatrack/tests/contracts/ -v
    All tests should pass. If any fail, your implementation doesn't satisfy
    the contract, read the failing test's docstring for what's expected.

Uses @pytest_asyncio.fixture (not @pytest.fixture) for async fixture support
in strict mode.
"""

from datetime import date, datetime, timezone

import pytest_asyncio

from vocatrack.hooks.auth import FakeAuthService
from vocatrack.hooks.database import InMemoryStore
from vocatrack.hooks.social import InMemorySocialGraph
from vocatrack.schemas import ActivityDay, ClassRoster, CourseDayProgress, UserRecord


# ---------------------------------------------------------------------------
# Interface fixtures (parameterized for future implementations)
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture(params=["stub"])
async def auth_service(request):
    """Yields an AuthService implementation."""
    if request.param == "stub":
        yield FakeAuthService()


@pytest_asyncio.fixture(params=["stub"])
async def user_repository(request):
    """Yields a UserRepository implementation.

    TEAM: Add your document store here:
        @pytest_asyncio.fixture(params=["stub", "firestore"])
        async def user_repository(request):
            if request.param == "stub":
                yield InMemoryStore()
            elif request.param == "firestore":
                repo = YourFirestoreRepository(test_project)
                yield repo
                await repo.cleanup()  # if needed
    """
    if request.param == "stub":
        yield InMemoryStore()


@pytest_asyncio.fixture(params=["stub"])
async def class_directory(request):
    """Yields a ClassDirectory implementation."""
    if request.param == "stub":
        yield InMemoryStore()


@pytest_asyncio.fixture(params=["stub"])
async def social_graph(request):
    """Yields a SocialGraph implementation."""
    if request.param == "stub":
        yield InMemorySocialGraph()


# ---------------------------------------------------------------------------
# Helper fixtures (shared test data)
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def sample_record():
    """A UserRecord with non-default values for data integrity assertions."""
    return UserRecord(
        user_id="student-contract-1",
        display_name="Contract Student",
        photo_url="https://example.com/p.png",
        current_streak=4,
        longest_streak=9,
        last_active_date=datetime(2026, 3, 1, 18, 0, tzinfo=timezone.utc),
        activity_days=[
            ActivityDay(
                date=date(2026, 3, 1),
                words_learned=25,
                correct_answers=18,
                total_answers=20,
                time_spent_minutes=14,
            ),
        ],
        course_progress={
            "course-a": {1: CourseDayProgress(completed=True, quiz_completed=True, quiz_score=88)},
        },
    )


@pytest_asyncio.fixture
async def seed_record(user_repository, sample_record):
    """Seeds the sample record into the repository fixture.

    seed_user_record() is a stub convenience, not part of the
    UserRepository ABC.

    TEAM: Extend this fixture for your implementation:
        if hasattr(user_repository, "seed_user_record"):
            user_repository.seed_user_record(sample_record)
        else:
            await your_seed_function(user_repository, sample_record)
    """
    if hasattr(user_repository, "seed_user_record"):
        user_repository.seed_user_record(sample_record)
    return sample_record


@pytest_asyncio.fixture
async def seed_classes(class_directory):
    """Seeds two active classes and one archived class for teacher-contract-1."""
    rosters = [
        ClassRoster(class_id="class-a", teacher_id="teacher-contract-1", student_ids=["s1", "s2"]),
        ClassRoster(class_id="class-b", teacher_id="teacher-contract-1", student_ids=["s3"]),
        ClassRoster(
            class_id="class-old", teacher_id="teacher-contract-1", student_ids=["s9"], is_archived=True
        ),
        ClassRoster(class_id="class-x", teacher_id="teacher-contract-2", student_ids=["s4"]),
    ]
    if hasattr(class_directory, "seed_class_roster"):
        for roster in rosters:
            class_directory.seed_class_roster(roster)
    return rosters


@pytest_asyncio.fixture
async def seed_friends(social_graph):
    """Makes alice friends with bob and carol."""
    if hasattr(social_graph, "add_friendship"):
        social_graph.add_friendship("alice", "bob")
        social_graph.add_friendship("alice", "carol")
