"""Clock implementations: wall clock for production, fixed clock for tests.

Tier 2 service module: imports from vocatrack.hooks.interfaces (Tier 1).

Usage:
    from vocatrack.hooks.clock import SystemClock, FixedClock

    clock = SystemClock("Asia/Seoul")
    clock = FixedClock(datetime(2026, 3, 4, 15, 30, tzinfo=timezone.utc))
"""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from vocatrack.hooks.interfaces import Clock


class SystemClock(Clock):
    """Wall-clock time in a configured IANA time zone."""

    def __init__(self, tz_name: str = "UTC") -> None:
        self._tz = ZoneInfo(tz_name)

    def now(self) -> datetime:
        return datetime.now(self._tz)


class FixedClock(Clock):
    """Frozen clock for deterministic tests.

    Args:
        instant: The instant to report. Must be timezone-aware.

    Raises:
        ValueError: If instant is naive.
    """

    def __init__(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime.")
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, delta: timedelta) -> None:
        """Moves the frozen instant forward (or back, for negative deltas)."""
        self._instant = self._instant + delta
