"""Bounded concurrent record reads.

Aggregations read one UserRecord per candidate or student. The reads are
independent, so they run concurrently, capped by a semaphore so a large
class or friend list can't flood the repository. Each read gets its own
timeout.

Two policies:
- fetch_many (tolerant): an absent, failing, or timed-out read drops that
  one record. The batch always completes.
- fetch_one (strict): any of those outcomes raises RecordNotFoundError.

list_all scans the whole repository under the same timeout.

Cancellation is never swallowed: abandoning the enclosing call cancels
every in-flight read.

Tier 2 module: imports from vocatrack.hooks.interfaces (Tier 1),
vocatrack.analytics.errors, vocatrack.schemas (Tier 1).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from vocatrack.analytics.errors import RecordNotFoundError
from vocatrack.hooks.interfaces import UserRepository
from vocatrack.schemas import UserRecord

logger = logging.getLogger("vocatrack.analytics.fanout")

DEFAULT_MAX_CONCURRENCY = 16
DEFAULT_TIMEOUT_SECONDS = 5.0


class RecordFetcher:
    """Reads user records through a repository with bounded fan-out.

    Args:
        repository: Where records come from.
        max_concurrency: Maximum reads in flight at once for one call.
        timeout_seconds: Per-read timeout.
    """

    def __init__(
        self,
        repository: UserRepository,
        *,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}.")
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {timeout_seconds}.")
        self._repository = repository
        self._max_concurrency = max_concurrency
        self._timeout_seconds = timeout_seconds

    async def fetch_many(self, user_ids: Iterable[str]) -> dict[str, UserRecord]:
        """Reads many records concurrently, skipping any that can't be read.

        Args:
            user_ids: Ids to read. Duplicates are read once.

        Returns:
            user_id -> UserRecord for every successful read, in the order
            the ids were given.
        """
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return {}

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _bounded(user_id: str) -> UserRecord | None:
            async with semaphore:
                return await self._read_tolerant(user_id)

        results = await asyncio.gather(*(_bounded(user_id) for user_id in ids))
        records = {
            user_id: record
            for user_id, record in zip(ids, results)
            if record is not None
        }
        if len(records) < len(ids):
            logger.info(
                "Fan-out read %d of %d records (%d skipped)",
                len(records),
                len(ids),
                len(ids) - len(records),
            )
        return records

    async def list_all(self) -> list[UserRecord]:
        """Scans every user record under the read timeout.

        A whole-population scan has no per-record fallback, so failures
        propagate.

        Raises:
            TimeoutError: If the scan outlasts the read timeout.
        """
        try:
            async with asyncio.timeout(self._timeout_seconds):
                return await self._repository.list_user_records()
        except TimeoutError:
            logger.warning("User record scan timed out after %.1fs", self._timeout_seconds)
            raise

    async def fetch_one(self, user_id: str, record_type: str = "student") -> UserRecord:
        """Reads a single record, treating any failure as "not found".

        Raises:
            RecordNotFoundError: If the record is absent, the read fails,
                or the read times out.
        """
        try:
            async with asyncio.timeout(self._timeout_seconds):
                record = await self._repository.get_user_record(user_id)
        except TimeoutError as exc:
            logger.warning(
                "Read of %s record %s timed out after %.1fs",
                record_type,
                user_id,
                self._timeout_seconds,
            )
            raise RecordNotFoundError(record_type, user_id) from exc
        except Exception as exc:
            logger.warning("Read of %s record %s failed: %s", record_type, user_id, exc)
            raise RecordNotFoundError(record_type, user_id) from exc

        if record is None:
            raise RecordNotFoundError(record_type, user_id)
        return record

    async def _read_tolerant(self, user_id: str) -> UserRecord | None:
        """One read under the timeout. None on absence, failure, or timeout."""
        try:
            async with asyncio.timeout(self._timeout_seconds):
                record = await self._repository.get_user_record(user_id)
        except TimeoutError:
            logger.warning(
                "Read of user record %s timed out after %.1fs, skipping.",
                user_id,
                self._timeout_seconds,
            )
            return None
        except Exception as exc:
            logger.warning("Read of user record %s failed: %s, skipping.", user_id, exc)
            return None

        if record is None:
            logger.debug("User record %s not found, skipping.", user_id)
        return record
