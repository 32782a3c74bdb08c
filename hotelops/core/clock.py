"""
Injectable time source.

Delegation windows and escalation thresholds depend on wall-clock time, so
every component that needs "now" receives a Clock instead of calling
``datetime.now()`` itself.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """Abstract clock interface. ``now()`` is always timezone-aware UTC."""

    @abstractmethod
    def now(self) -> datetime:
        ...


class SystemClock(Clock):
    """Production clock backed by the system time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Test clock with controlled time.

    Returns the same value on repeated calls until ``advance()`` or
    ``set_time()`` is called.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._fixed_time = ensure_utc(fixed_time) if fixed_time else datetime(
            2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc
        )
        self._advance = timedelta()

    def now(self) -> datetime:
        return self._fixed_time + self._advance

    def set_time(self, time: datetime) -> None:
        self._fixed_time = ensure_utc(time)
        self._advance = timedelta()

    def advance(self, seconds: int = 0, *, hours: int = 0, days: int = 0) -> datetime:
        self._advance += timedelta(seconds=seconds, hours=hours, days=days)
        return self.now()


def ensure_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.

    SQLite drops tzinfo on round-trip, so naive values read back from the
    store are interpreted as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


__all__ = ["Clock", "SystemClock", "DeterministicClock", "ensure_utc"]
