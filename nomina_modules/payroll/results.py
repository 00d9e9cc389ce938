"""
Payroll run results (``nomina_modules.payroll.results``).

A ``PayrollRun`` bundles the calculations of one month with the rates and
processing time that produced them; ``summarize_run`` aggregates the
already-reported per-employee figures (no recomputation).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from nomina_config.schema import DeductionRates
from nomina_engines.payroll import PayrollCalculation
from nomina_kernel.domain.clock import BOGOTA
from nomina_kernel.domain.month import PayrollMonth
from nomina_kernel.domain.values import ZERO


@dataclass(frozen=True)
class PayrollRun:
    """The stored outcome of one payroll calculation."""

    run_id: str
    month: PayrollMonth
    rates: DeductionRates
    calculations: tuple[PayrollCalculation, ...]
    processed_at: datetime

    @property
    def processing_date(self) -> date:
        return self.processed_at.astimezone(BOGOTA).date()


@dataclass(frozen=True)
class PayrollSummary:
    employee_count: int
    total_gross: Decimal
    total_transport: Decimal
    total_bonuses: Decimal
    total_deductions: Decimal
    total_advances: Decimal
    total_net: Decimal
    negative_net_employee_ids: tuple[str, ...] = ()


def summarize_run(run: PayrollRun) -> PayrollSummary:
    """Aggregate reported figures across the run's calculations."""
    calculations = run.calculations
    return PayrollSummary(
        employee_count=len(calculations),
        total_gross=sum((c.gross_salary for c in calculations), ZERO),
        total_transport=sum((c.transport_allowance for c in calculations), ZERO),
        total_bonuses=sum((c.bonuses.total for c in calculations), ZERO),
        total_deductions=sum((c.deductions.total for c in calculations), ZERO),
        total_advances=sum((c.deductions.advances for c in calculations), ZERO),
        total_net=sum((c.net_salary for c in calculations), ZERO),
        negative_net_employee_ids=tuple(
            c.employee.id for c in calculations if c.has_negative_net
        ),
    )
