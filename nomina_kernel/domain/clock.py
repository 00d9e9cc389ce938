"""
Clock -- injectable source of "now" for the payroll service.

Responsibility:
    Answers two questions for the service layer: the instant a run was
    processed (``now``, UTC) and the payroll calendar date (``today``,
    Bogota local time), which selects the month that recurring novelties
    are reconciled into.  Engine code never asks a clock anything.

Architecture position:
    Kernel > Domain.  ``SystemClock`` is the only place the package reads
    the wall clock.

Failure modes:
    None.
"""

from abc import ABC, abstractmethod
from datetime import UTC, date, datetime, timedelta, timezone

# Colombia has no daylight saving time; a fixed offset is exact.
BOGOTA = timezone(timedelta(hours=-5), "America/Bogota")

DEFAULT_TEST_INSTANT = datetime(2024, 4, 15, 12, 0, tzinfo=UTC)


class Clock(ABC):
    """
    Time source handed to services at construction.

    Guarantees:
        - ``now()`` is timezone-aware.
        - ``today()`` is the Bogota date of ``now()``; at 21:00 Bogota on
          the last day of a month it is still that month, although UTC has
          already moved on.
    """

    @abstractmethod
    def now(self) -> datetime:
        ...

    def today(self) -> date:
        return self.now().astimezone(BOGOTA).date()


class SystemClock(Clock):
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class DeterministicClock(Clock):
    """
    Clock frozen at a chosen instant for tests.

    Stays put until moved with ``set_time`` or ``advance``.  Naive
    datetimes are read as UTC.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._current = self._aware(fixed_time or DEFAULT_TEST_INSTANT)

    @staticmethod
    def _aware(moment: datetime) -> datetime:
        return moment if moment.tzinfo is not None else moment.replace(tzinfo=UTC)

    def now(self) -> datetime:
        return self._current

    def set_time(self, time: datetime) -> None:
        self._current = self._aware(time)

    def advance(self, seconds: int = 1) -> None:
        self._current += timedelta(seconds=seconds)
