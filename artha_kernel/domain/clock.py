"""
Clock -- where "now" comes from.

Dashboard month buckets, the seven-day deadline window and the tax year
default are all relative to the current instant.  Engines take that
instant as an argument; services obtain it from a Clock so tests can pin
it.  SystemClock is the only implementation that reads the real time.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

_DEFAULT_INSTANT = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class Clock(ABC):
    """Source of the current instant for services."""

    @abstractmethod
    def now(self) -> datetime:
        """Current time in the clock's own zone."""

    def now_utc(self) -> datetime:
        return self.now().astimezone(timezone.utc)


class SystemClock(Clock):
    """
    Wall-clock time of the host.

    ``now()`` carries the machine's local offset, so "this month" on the
    dashboard is the month the user sees on their calendar.
    """

    def now(self) -> datetime:
        return datetime.now().astimezone()

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Pinned clock for tests and ``--now`` on the CLI.

    Naive instants are returned naive; engines then treat them as local
    wall time.  Only ``advance``, ``tick`` and ``set_time`` move it.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._current = fixed_time or _DEFAULT_INSTANT

    def now(self) -> datetime:
        return self._current

    def set_time(self, time: datetime) -> None:
        self._current = time

    def advance(self, seconds: int = 1) -> None:
        self._current += timedelta(seconds=seconds)

    def tick(self) -> datetime:
        """Move forward one second and return the new instant."""
        self.advance()
        return self._current

