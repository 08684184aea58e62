"""Tests for vocatrack.analytics.fanout: bounded, tolerant record reads.

Uses small fake repositories that sleep, fail, or count in-flight reads,
so concurrency and timeout behaviour can be observed directly.
"""

import asyncio

import pytest

from vocatrack.analytics.errors import RecordNotFoundError
from vocatrack.analytics.fanout import RecordFetcher
from vocatrack.hooks.interfaces import UserRepository
from vocatrack.schemas import UserRecord


class _FakeRepository(UserRepository):
    """Serves records from a dict with optional per-id delay or failure."""

    def __init__(
        self,
        records: dict[str, UserRecord],
        *,
        delays: dict[str, float] | None = None,
        failing: set[str] | None = None,
        default_delay: float = 0.0,
        scan_delay: float = 0.0,
    ) -> None:
        self._records = records
        self._delays = delays or {}
        self._failing = failing or set()
        self._default_delay = default_delay
        self._scan_delay = scan_delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.calls: list[str] = []

    async def get_user_record(self, user_id: str) -> UserRecord | None:
        self.calls.append(user_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self._delays.get(user_id, self._default_delay))
            if user_id in self._failing:
                raise ConnectionError(f"backend unavailable for {user_id}")
            return self._records.get(user_id)
        finally:
            self.in_flight -= 1

    async def list_user_records(self) -> list[UserRecord]:
        await asyncio.sleep(self._scan_delay)
        return list(self._records.values())


def _records(*user_ids: str) -> dict[str, UserRecord]:
    return {user_id: UserRecord(user_id=user_id) for user_id in user_ids}


class TestConstruction:
    def test_rejects_zero_concurrency(self) -> None:
        with pytest.raises(ValueError, match="max_concurrency"):
            RecordFetcher(_FakeRepository({}), max_concurrency=0)

    def test_rejects_non_positive_timeout(self) -> None:
        with pytest.raises(ValueError, match="timeout_seconds"):
            RecordFetcher(_FakeRepository({}), timeout_seconds=0)


class TestFetchMany:
    """Tolerant batch reads never fail as a whole."""

    @pytest.mark.asyncio
    async def test_returns_records_in_requested_order(self) -> None:
        fetcher = RecordFetcher(_FakeRepository(_records("a", "b", "c")))
        result = await fetcher.fetch_many(["c", "a", "b"])
        assert list(result) == ["c", "a", "b"]

    @pytest.mark.asyncio
    async def test_duplicates_read_once(self) -> None:
        repo = _FakeRepository(_records("a", "b"))
        result = await RecordFetcher(repo).fetch_many(["a", "b", "a"])
        assert list(result) == ["a", "b"]
        assert sorted(repo.calls) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_missing_records_are_skipped(self) -> None:
        fetcher = RecordFetcher(_FakeRepository(_records("a")))
        result = await fetcher.fetch_many(["a", "ghost"])
        assert list(result) == ["a"]

    @pytest.mark.asyncio
    async def test_failed_reads_are_skipped(self) -> None:
        repo = _FakeRepository(_records("a", "b"), failing={"b"})
        result = await RecordFetcher(repo).fetch_many(["a", "b"])
        assert list(result) == ["a"]

    @pytest.mark.asyncio
    async def test_timed_out_reads_are_skipped(self) -> None:
        repo = _FakeRepository(_records("fast", "slow"), delays={"slow": 5.0})
        fetcher = RecordFetcher(repo, timeout_seconds=0.05)
        result = await fetcher.fetch_many(["fast", "slow"])
        assert list(result) == ["fast"]

    @pytest.mark.asyncio
    async def test_concurrency_is_capped(self) -> None:
        ids = [f"u{i}" for i in range(8)]
        repo = _FakeRepository(_records(*ids), default_delay=0.01)
        fetcher = RecordFetcher(repo, max_concurrency=2)
        result = await fetcher.fetch_many(ids)
        assert len(result) == 8
        assert repo.max_in_flight == 2

    @pytest.mark.asyncio
    async def test_empty_input_reads_nothing(self) -> None:
        repo = _FakeRepository(_records("a"))
        assert await RecordFetcher(repo).fetch_many([]) == {}
        assert repo.calls == []


class TestFetchOne:
    """Strict single reads turn every failure into RecordNotFoundError."""

    @pytest.mark.asyncio
    async def test_returns_record(self) -> None:
        fetcher = RecordFetcher(_FakeRepository(_records("a")))
        record = await fetcher.fetch_one("a")
        assert record.user_id == "a"

    @pytest.mark.asyncio
    async def test_absent_raises(self) -> None:
        fetcher = RecordFetcher(_FakeRepository({}))
        with pytest.raises(RecordNotFoundError) as exc_info:
            await fetcher.fetch_one("ghost")
        assert exc_info.value.record_type == "student"
        assert exc_info.value.record_id == "ghost"

    @pytest.mark.asyncio
    async def test_failure_raises_with_cause(self) -> None:
        fetcher = RecordFetcher(_FakeRepository(_records("a"), failing={"a"}))
        with pytest.raises(RecordNotFoundError) as exc_info:
            await fetcher.fetch_one("a")
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_timeout_raises(self) -> None:
        repo = _FakeRepository(_records("a"), delays={"a": 5.0})
        fetcher = RecordFetcher(repo, timeout_seconds=0.05)
        with pytest.raises(RecordNotFoundError):
            await fetcher.fetch_one("a")


class TestListAll:
    """Whole-population scans run under the read timeout."""

    @pytest.mark.asyncio
    async def test_returns_every_record(self) -> None:
        fetcher = RecordFetcher(_FakeRepository(_records("a", "b")))
        records = await fetcher.list_all()
        assert sorted(r.user_id for r in records) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_slow_scan_times_out(self, caplog: pytest.LogCaptureFixture) -> None:
        fetcher = RecordFetcher(_FakeRepository(_records("a"), scan_delay=1.0), timeout_seconds=0.05)
        with pytest.raises(TimeoutError):
            await fetcher.list_all()
        assert any("scan timed out" in r.message for r in caplog.records)
