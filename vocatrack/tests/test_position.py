"""Tests for vocatrack.analytics.position: ranks, percentiles, neighbours."""

import pytest

from vocatrack.analytics.leaderboard import LeaderboardBuilder
from vocatrack.analytics.population import PopulationSelector
from vocatrack.analytics.position import PositionResolver, percentile_for
from vocatrack.schemas import LeaderboardFilter

WORDS_WEEKLY = LeaderboardFilter(metric="words_learned", period="weekly")


@pytest.fixture
def resolver(fetcher, social, clock) -> PositionResolver:
    return PositionResolver(LeaderboardBuilder(PopulationSelector(fetcher, social), clock))


@pytest.fixture
def ladder(store, make_record, make_day):
    """u1..u9 with 90, 80, ... 10 words today."""
    for i in range(1, 10):
        store.seed_user_record(
            make_record(f"u{i}", activity_days=[make_day(0, words_learned=100 - 10 * i)])
        )


class TestPercentile:
    def test_examples(self) -> None:
        assert percentile_for(1, 4) == 100
        assert percentile_for(2, 4) == 75
        assert percentile_for(4, 4) == 25
        assert percentile_for(2, 3) == 67

    def test_no_participants(self) -> None:
        assert percentile_for(1, 0) == 0


class TestPosition:
    @pytest.mark.asyncio
    async def test_rank_two_of_four(self, resolver, store, make_record, make_day) -> None:
        for user_id, words in (("a", 40), ("b", 30), ("c", 20), ("d", 10)):
            store.seed_user_record(make_record(user_id, activity_days=[make_day(0, words_learned=words)]))
        position = await resolver.position("b", WORDS_WEEKLY)
        assert position is not None
        assert (position.rank, position.score, position.total_participants, position.percentile) == (
            2,
            30,
            4,
            75,
        )

    @pytest.mark.asyncio
    @pytest.mark.usefixtures("ladder")
    async def test_limit_ignored(self, resolver) -> None:
        limited = LeaderboardFilter(metric="words_learned", period="weekly", limit=1)
        position = await resolver.position("u7", limited)
        assert position is not None
        assert position.rank == 7
        assert position.total_participants == 9

    @pytest.mark.asyncio
    async def test_unranked_user_is_none(self, resolver, store, make_record) -> None:
        store.seed_user_record(make_record("idle"))
        assert await resolver.position("idle", WORDS_WEEKLY) is None
        assert await resolver.position("ghost", WORDS_WEEKLY) is None


class TestAroundUser:
    @pytest.mark.asyncio
    @pytest.mark.usefixtures("ladder")
    async def test_context_both_sides(self, resolver) -> None:
        entries = await resolver.around_user("u5", WORDS_WEEKLY, context=2)
        assert [e.user_id for e in entries] == ["u3", "u4", "u5", "u6", "u7"]
        assert [e.is_requesting_user for e in entries] == [False, False, True, False, False]

    @pytest.mark.asyncio
    @pytest.mark.usefixtures("ladder")
    async def test_clipped_at_top(self, resolver) -> None:
        entries = await resolver.around_user("u1", WORDS_WEEKLY, context=2)
        assert [e.user_id for e in entries] == ["u1", "u2", "u3"]

    @pytest.mark.asyncio
    @pytest.mark.usefixtures("ladder")
    async def test_clipped_at_bottom(self, resolver) -> None:
        entries = await resolver.around_user("u9", WORDS_WEEKLY, context=1)
        assert [e.user_id for e in entries] == ["u8", "u9"]

    @pytest.mark.asyncio
    @pytest.mark.usefixtures("ladder")
    async def test_zero_context_is_just_the_user(self, resolver) -> None:
        entries = await resolver.around_user("u4", WORDS_WEEKLY, context=0)
        assert [e.user_id for e in entries] == ["u4"]

    @pytest.mark.asyncio
    @pytest.mark.usefixtures("ladder")
    async def test_unranked_user_gets_empty_list(self, resolver) -> None:
        assert await resolver.around_user("ghost", WORDS_WEEKLY) == []

    @pytest.mark.asyncio
    async def test_negative_context_raises(self, resolver) -> None:
        with pytest.raises(ValueError):
            await resolver.around_user("u1", WORDS_WEEKLY, context=-1)


class TestSummary:
    @pytest.mark.asyncio
    async def test_ranks_per_metric(self, resolver, store, make_record, make_day) -> None:
        store.seed_user_record(
            make_record(
                "me",
                current_streak=2,
                activity_days=[make_day(0, words_learned=10, time_spent_minutes=30)],
            )
        )
        store.seed_user_record(
            make_record(
                "rival",
                current_streak=5,
                activity_days=[make_day(0, words_learned=20, correct_answers=9, total_answers=10)],
            )
        )
        summary = await resolver.summary("me", "weekly")
        assert summary.words_learned_rank == 2
        assert summary.current_streak_rank == 2
        assert summary.accuracy_rank is None
        assert summary.time_spent_rank == 1
        assert summary.total_participants == 2
