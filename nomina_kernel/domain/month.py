"""
PayrollMonth -- the calendar month a payroll run covers.

Responsibility:
    Parses and renders the ``YYYY-MM`` month selector and answers the
    calendar questions the engine needs: how many days the month has,
    its first and last day, and whether a date falls inside it.

Architecture position:
    Kernel > Domain -- pure value object, zero I/O.

Invariants enforced:
    - ``days_in_month`` follows the Gregorian calendar (28-31, leap-year
      February included).  It bounds attendance; salary proration uses a
      fixed 30-day payroll month elsewhere.
    - Months are totally ordered, so ``start_month <= current`` comparisons
      work directly.

Failure modes:
    - ``InvalidMonthError`` from ``parse`` for anything that is not a real
      ``YYYY-MM`` month.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date

from nomina_kernel.exceptions import InvalidMonthError

_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")

MONTH_NAMES_ES = (
    "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
    "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre",
)


@dataclass(frozen=True, order=True, slots=True)
class PayrollMonth:
    """A calendar month identified by year and month number."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be between 1 and 12, got {self.month}")
        if not 1 <= self.year <= 9999:
            raise ValueError(f"year must be between 1 and 9999, got {self.year}")

    @classmethod
    def parse(cls, value: str | PayrollMonth) -> PayrollMonth:
        """
        Parse a ``YYYY-MM`` selector.

        Raises:
            InvalidMonthError: If the value is not a valid month selector.
        """
        if isinstance(value, PayrollMonth):
            return value
        match = _MONTH_PATTERN.match(value.strip()) if isinstance(value, str) else None
        if match is None:
            raise InvalidMonthError(str(value))
        try:
            return cls(int(match.group(1)), int(match.group(2)))
        except ValueError as exc:
            raise InvalidMonthError(value) from exc

    @classmethod
    def of(cls, day: date) -> PayrollMonth:
        """The month containing ``day``."""
        return cls(day.year, day.month)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, self.days_in_month)

    @property
    def label(self) -> str:
        """Spanish display label, e.g. ``Abril 2024``."""
        return f"{MONTH_NAMES_ES[self.month - 1]} {self.year}"

    def contains(self, day: date) -> bool:
        return day.year == self.year and day.month == self.month

    def next(self) -> PayrollMonth:
        if self.month == 12:
            return PayrollMonth(self.year + 1, 1)
        return PayrollMonth(self.year, self.month + 1)

    def previous(self) -> PayrollMonth:
        if self.month == 1:
            return PayrollMonth(self.year - 1, 12)
        return PayrollMonth(self.year, self.month - 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
