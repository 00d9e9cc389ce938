"""
Pytest fixtures for the payroll test suite.

Provides:
- Structured logging configuration and a JSON log capture fixture
- Factory fixtures for employees, novelties and advances
- Deterministic clock and default rates
"""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from nomina_config.schema import DeductionRates
from nomina_kernel.domain.clock import DeterministicClock
from nomina_kernel.domain.month import PayrollMonth
from nomina_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from nomina_modules.payroll.models import (
    AdvancePayment,
    ContractType,
    Employee,
    Novelty,
    NoveltyType,
    Recurrence,
    quantity_for,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture nomina_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            service.run_payroll("2024-04")
            logs = captured_logs()
            assert any(r["message"] == "payroll_run_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("nomina_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Reference data
# =============================================================================


@pytest.fixture
def deterministic_clock():
    """Provide a deterministic clock for testing (2024-04-15)."""
    return DeterministicClock()


@pytest.fixture
def rates() -> DeductionRates:
    """2024 default rates."""
    return DeductionRates()


@pytest.fixture
def april() -> PayrollMonth:
    return PayrollMonth(2024, 4)


# =============================================================================
# Record factories
# =============================================================================


@pytest.fixture
def create_employee():
    """Factory fixture to create roster employees."""

    def _create_employee(
        salary: Decimal | str = "1300000",
        contract_type: ContractType = ContractType.NOMINA,
        created_date: date | None = date(2024, 1, 1),
        employee_id: str | None = None,
        name: str = "Ana María Gómez",
        legal_id: str = "1020304050",
    ) -> Employee:
        return Employee(
            id=employee_id or f"emp-{uuid4().hex[:8]}",
            name=name,
            legal_id=legal_id,
            contract_type=contract_type,
            salary=Decimal(salary),
            created_date=created_date,
        )

    return _create_employee


@pytest.fixture
def create_novelty():
    """Factory fixture to create novelties of any catalog type."""

    def _create_novelty(
        employee: Employee | str,
        novelty_type: NoveltyType,
        value: Decimal | str | int,
        novelty_date: date = date(2024, 4, 10),
        description: str = "",
        recurring_from: PayrollMonth | None = None,
        novelty_id: str | None = None,
    ) -> Novelty:
        employee_id = employee if isinstance(employee, str) else employee.id
        return Novelty(
            id=novelty_id or f"nov-{uuid4().hex[:8]}",
            employee_id=employee_id,
            type=novelty_type,
            date=novelty_date,
            quantity=quantity_for(novelty_type, Decimal(value)),
            description=description,
            recurrence=Recurrence(recurring_from) if recurring_from else None,
        )

    return _create_novelty


@pytest.fixture
def create_advance():
    """Factory fixture to create salary advances."""

    def _create_advance(
        employee: Employee | str,
        amount: Decimal | str,
        month: PayrollMonth | str = "2024-04",
        disbursed: date = date(2024, 4, 5),
        description: str = "",
    ) -> AdvancePayment:
        employee_id = employee if isinstance(employee, str) else employee.id
        return AdvancePayment(
            id=f"adv-{uuid4().hex[:8]}",
            employee_id=employee_id,
            amount=Decimal(amount),
            date=disbursed,
            month=PayrollMonth.parse(month),
            description=description,
        )

    return _create_advance
