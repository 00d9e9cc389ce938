"""
Payroll Ledgers (``nomina_modules.payroll.ledgers``).

Responsibility
--------------
Process-local stores for the records the engine reads: the employee
roster, the novelty ledger, the advance ledger, and the current rate
settings.  They hand out immutable snapshots (tuples of frozen records),
so a calculation never observes a mutation made while it runs.

Architecture position
---------------------
**Modules layer** -- in-memory state owned by ``PayrollService``.  No
persistence: records live for the lifetime of the process.

Invariants enforced
-------------------
* IDs are unique per store (``DuplicateRecordError``).
* Listing preserves insertion order (roster order drives output order).
* Records are replaced, never mutated in place.

Failure modes
-------------
* Unknown IDs  -> ``EmployeeNotFoundError`` / ``NoveltyNotFoundError`` /
  ``AdvanceNotFoundError``.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from decimal import Decimal

from nomina_config.schema import DEFAULT_DEDUCTION_RATES, DeductionRates
from nomina_kernel.domain.month import PayrollMonth
from nomina_kernel.domain.values import ZERO
from nomina_kernel.exceptions import (
    AdvanceNotFoundError,
    DuplicateRecordError,
    EmployeeNotFoundError,
    NoveltyNotFoundError,
)
from nomina_kernel.logging_config import get_logger
from nomina_modules.payroll.models import AdvancePayment, Employee, Novelty

logger = get_logger("modules.payroll.ledgers")


class EmployeeRoster:
    """Employees in insertion order."""

    def __init__(self, employees: Iterable[Employee] = ()):
        self._lock = threading.Lock()
        self._employees: dict[str, Employee] = {}
        for employee in employees:
            self.add(employee)

    def add(self, employee: Employee) -> Employee:
        with self._lock:
            if employee.id in self._employees:
                raise DuplicateRecordError("Employee", employee.id)
            self._employees[employee.id] = employee
        logger.info("employee_added", extra={
            "employee_id": employee.id,
            "contract_type": employee.contract_type.value,
        })
        return employee

    def get(self, employee_id: str) -> Employee:
        try:
            return self._employees[employee_id]
        except KeyError:
            raise EmployeeNotFoundError(employee_id) from None

    def update(self, employee: Employee) -> Employee:
        with self._lock:
            if employee.id not in self._employees:
                raise EmployeeNotFoundError(employee.id)
            self._employees[employee.id] = employee
        logger.info("employee_updated", extra={"employee_id": employee.id})
        return employee

    def remove(self, employee_id: str) -> Employee:
        with self._lock:
            try:
                removed = self._employees.pop(employee_id)
            except KeyError:
                raise EmployeeNotFoundError(employee_id) from None
        logger.info("employee_removed", extra={"employee_id": employee_id})
        return removed

    def __contains__(self, employee_id: object) -> bool:
        return employee_id in self._employees

    def __len__(self) -> int:
        return len(self._employees)

    def list(self) -> tuple[Employee, ...]:
        with self._lock:
            return tuple(self._employees.values())


class NoveltyLedger:
    """Novelty events, including auto-applied recurring instances."""

    def __init__(self, novelties: Iterable[Novelty] = ()):
        self._lock = threading.Lock()
        self._novelties: dict[str, Novelty] = {}
        for novelty in novelties:
            self.add(novelty)

    def add(self, novelty: Novelty) -> Novelty:
        with self._lock:
            if novelty.id in self._novelties:
                raise DuplicateRecordError("Novelty", novelty.id)
            self._novelties[novelty.id] = novelty
        logger.info("novelty_added", extra={
            "novelty_id": novelty.id,
            "employee_id": novelty.employee_id,
            "novelty_type": novelty.type.value,
            "auto_applied": novelty.auto_applied,
        })
        return novelty

    def add_many(self, novelties: Iterable[Novelty]) -> tuple[Novelty, ...]:
        return tuple(self.add(n) for n in novelties)

    def get(self, novelty_id: str) -> Novelty:
        try:
            return self._novelties[novelty_id]
        except KeyError:
            raise NoveltyNotFoundError(novelty_id) from None

    def update(self, novelty: Novelty) -> Novelty:
        with self._lock:
            if novelty.id not in self._novelties:
                raise NoveltyNotFoundError(novelty.id)
            self._novelties[novelty.id] = novelty
        logger.info("novelty_updated", extra={"novelty_id": novelty.id})
        return novelty

    def remove(self, novelty_id: str) -> Novelty:
        with self._lock:
            try:
                removed = self._novelties.pop(novelty_id)
            except KeyError:
                raise NoveltyNotFoundError(novelty_id) from None
        logger.info("novelty_removed", extra={"novelty_id": novelty_id})
        return removed

    def __len__(self) -> int:
        return len(self._novelties)

    def list(self) -> tuple[Novelty, ...]:
        with self._lock:
            return tuple(self._novelties.values())

    def for_month(self, month: PayrollMonth) -> tuple[Novelty, ...]:
        return tuple(n for n in self.list() if month.contains(n.date))

    def for_employee(self, employee_id: str) -> tuple[Novelty, ...]:
        return tuple(n for n in self.list() if n.employee_id == employee_id)


class AdvanceLedger:
    """Cash advances, keyed by the payroll month that absorbs them."""

    def __init__(self, advances: Iterable[AdvancePayment] = ()):
        self._lock = threading.Lock()
        self._advances: dict[str, AdvancePayment] = {}
        for advance in advances:
            self.add(advance)

    def add(self, advance: AdvancePayment) -> AdvancePayment:
        with self._lock:
            if advance.id in self._advances:
                raise DuplicateRecordError("AdvancePayment", advance.id)
            self._advances[advance.id] = advance
        logger.info("advance_added", extra={
            "advance_id": advance.id,
            "employee_id": advance.employee_id,
            "amount": str(advance.amount),
            "month": str(advance.month),
        })
        return advance

    def remove(self, advance_id: str) -> AdvancePayment:
        with self._lock:
            try:
                removed = self._advances.pop(advance_id)
            except KeyError:
                raise AdvanceNotFoundError(advance_id) from None
        logger.info("advance_removed", extra={"advance_id": advance_id})
        return removed

    def __len__(self) -> int:
        return len(self._advances)

    def list(self) -> tuple[AdvancePayment, ...]:
        with self._lock:
            return tuple(self._advances.values())

    def for_month(self, month: PayrollMonth) -> tuple[AdvancePayment, ...]:
        return tuple(a for a in self.list() if a.month == month)

    def total_for_month(self, month: PayrollMonth) -> Decimal:
        return sum((a.amount for a in self.for_month(month)), ZERO)


class RateSettings:
    """Holder of the current ``DeductionRates``."""

    def __init__(self, rates: DeductionRates = DEFAULT_DEDUCTION_RATES):
        self._lock = threading.Lock()
        self._rates = rates

    @property
    def current(self) -> DeductionRates:
        with self._lock:
            return self._rates

    def update(self, **changes: Decimal) -> DeductionRates:
        with self._lock:
            self._rates = self._rates.with_updates(**changes)
            return self._rates

    def replace(self, rates: DeductionRates) -> DeductionRates:
        with self._lock:
            self._rates = rates
        logger.info("deduction_rates_replaced", extra=rates.to_dict())
        return rates

    def reset(self) -> DeductionRates:
        logger.info("deduction_rates_reset_to_defaults")
        return self.replace(DEFAULT_DEDUCTION_RATES)
