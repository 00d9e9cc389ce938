"""
nomina_engines.payroll -- Monthly gross-to-net payroll calculation.

Responsibility:
    Given an employee roster, the novelty ledger, the advance ledger, a rate
    configuration, and a target month, produce one ``PayrollCalculation``
    per eligible employee: worked days, gross salary, transport allowance,
    itemized bonuses, itemized deductions, and net salary.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Imports only kernel values, the config schema, and the payroll record
    types.  Consumed by ``PayrollService`` and tests.

Invariants enforced:
    - Determinism: identical inputs produce identical outputs; inputs are
      never mutated; no clock access.
    - Eligibility: employees hired after the last day of the target month
      are excluded from that month's run.
    - ``worked_days = max(0, days_in_month - discounted_days)``, where
      ``days_in_month`` is the Gregorian length of the month (28-31).
    - Daily rate always divides by the fixed 30-day payroll month, for both
      gross salary and the transport allowance.
    - Transport allowance only for NOMINA contracts with salary strictly
      below 2 minimum salaries; solidarity only for salary at or above 4.
    - Statutory percentages apply to gross salary; deduction novelties are
      separate line items and do not reduce that base.
    - Advances bind by their ``month`` field, never by disbursement date.
    - Net salary is not floored at zero.

Rounding:
    Calculations carry exact Decimal values.  Each reported figure is the
    exact value rounded once to 2 places (ROUND_HALF_UP); the deduction
    total is the rounding of the exact sum.  Net salary is assembled from
    the reported gross, allowance, bonus total and deduction total, so a
    printed breakdown always reconciles with the printed net.

Failure modes:
    None for well-typed input.  Novelties and advances referencing unknown
    employees are ignored.

Usage:
    from nomina_engines.payroll import PayrollEngine

    calculations = PayrollEngine().calculate(
        employees=roster,
        novelties=ledger,
        advances=advances,
        rates=get_active_rates(),
        target_month="2024-04",
    )
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, fields
from decimal import Decimal

from nomina_config.schema import DeductionRates
from nomina_engines.tracer import traced_engine
from nomina_kernel.domain.month import PayrollMonth
from nomina_kernel.domain.values import PAYROLL_MONTH_DAYS, ZERO, round_money
from nomina_kernel.logging_config import get_logger
from nomina_modules.payroll.models import (
    NOVELTY_CATALOG,
    AdvancePayment,
    ContractType,
    Employee,
    Novelty,
    NoveltyPolarity,
    NoveltyType,
    NoveltyUnit,
)

logger = get_logger("engines.payroll")

PERCENT = Decimal("100")

# Rate field that monetizes each hour/day-denominated addition.
MONETIZATION_RATE_FIELDS: dict[NoveltyType, str] = {
    NoveltyType.FIXED_OVERTIME: "ordinary_hour_rate",
    NoveltyType.UNEXPECTED_OVERTIME: "overtime_hour_rate",
    NoveltyType.NIGHT_SURCHARGE: "night_surcharge_rate",
    NoveltyType.SUNDAY_WORK: "holiday_day_rate",
}

BUCKET_LABELS: dict[str, str] = {
    spec.bucket: spec.label for spec in NOVELTY_CATALOG.values() if spec.bucket
}


@dataclass(frozen=True)
class BonusBreakdown:
    """Additions to pay, one subtotal per category."""

    fixed_compensation: Decimal = ZERO
    sales_bonus: Decimal = ZERO
    fixed_overtime: Decimal = ZERO
    unexpected_overtime: Decimal = ZERO
    night_surcharge: Decimal = ZERO
    sunday_work: Decimal = ZERO
    gas_allowance: Decimal = ZERO
    total: Decimal = ZERO

    def lines(self) -> tuple[tuple[str, Decimal], ...]:
        """(label, amount) for every non-zero category, in catalog order."""
        return tuple(
            (BUCKET_LABELS[f.name], getattr(self, f.name))
            for f in fields(self)
            if f.name != "total" and getattr(self, f.name) != ZERO
        )


@dataclass(frozen=True)
class DeductionBreakdown:
    """Statutory deductions, advances, and deduction novelties."""

    health: Decimal = ZERO
    pension: Decimal = ZERO
    solidarity: Decimal = ZERO
    advances: Decimal = ZERO
    corporate_plan: Decimal = ZERO
    funeral_plan: Decimal = ZERO
    inventory_shortage: Decimal = ZERO
    fines: Decimal = ZERO
    employee_fund: Decimal = ZERO
    employee_receivable: Decimal = ZERO
    novelty_total: Decimal = ZERO
    total: Decimal = ZERO

    def novelty_lines(self) -> tuple[tuple[str, Decimal], ...]:
        """(label, amount) for every non-zero deduction novelty category."""
        return tuple(
            (BUCKET_LABELS[name], getattr(self, name))
            for name in DEDUCTION_NOVELTY_BUCKETS
            if getattr(self, name) != ZERO
        )


DEDUCTION_NOVELTY_BUCKETS: tuple[str, ...] = (
    "corporate_plan",
    "funeral_plan",
    "inventory_shortage",
    "fines",
    "employee_fund",
    "employee_receivable",
)


@dataclass(frozen=True)
class PayrollCalculation:
    """
    One employee's payroll for one month.

    Derived and ephemeral: recomputed on demand from its inputs, never
    stored independently of them.
    """

    employee: Employee
    target_month: PayrollMonth
    days_in_month: int
    worked_days: Decimal
    discounted_days: Decimal
    base_salary: Decimal
    daily_rate: Decimal
    gross_salary: Decimal
    transport_allowance: Decimal
    bonuses: BonusBreakdown
    deductions: DeductionBreakdown
    net_salary: Decimal
    novelties: tuple[Novelty, ...] = ()
    advances: tuple[AdvancePayment, ...] = ()

    @property
    def has_negative_net(self) -> bool:
        return self.net_salary < ZERO


class PayrollEngine:
    """
    Pure function calculator for monthly payroll.

    Contract:
        No I/O, no database access, fully deterministic.
        All reference data (rates, month) passed as parameters.
    Guarantees:
        - One calculation per eligible employee, in roster order.
        - Safe to re-invoke; inputs are read-only snapshots.
    Non-goals:
        - Does not synthesize recurring novelties (see
          ``nomina_engines.recurrence``).
        - Does not validate raw input (see
          ``nomina_modules.payroll.inputs``).
    """

    @traced_engine(
        "payroll",
        "1.0",
        fingerprint_fields=("employees", "novelties", "advances", "rates", "target_month"),
    )
    def calculate(
        self,
        *,
        employees: Sequence[Employee],
        novelties: Iterable[Novelty],
        advances: Iterable[AdvancePayment],
        rates: DeductionRates,
        target_month: PayrollMonth | str,
    ) -> tuple[PayrollCalculation, ...]:
        """
        Calculate the payroll of ``target_month``.

        Preconditions:
            Records are well-typed, already-validated domain objects.

        Postconditions:
            Returns one PayrollCalculation per employee whose
            ``created_date`` is on or before the month's last day.
        """
        t0 = time.monotonic()
        month = PayrollMonth.parse(target_month)
        monthly_novelties = tuple(n for n in novelties if month.contains(n.date))
        monthly_advances = tuple(a for a in advances if a.month == month)

        logger.info("payroll_calculation_started", extra={
            "target_month": str(month),
            "days_in_month": month.days_in_month,
            "employee_count": len(employees),
            "novelty_count": len(monthly_novelties),
            "advance_count": len(monthly_advances),
        })

        calculations: list[PayrollCalculation] = []
        for employee in employees:
            if not employee.is_hired_by(month.last_day):
                logger.info("employee_excluded_not_hired", extra={
                    "employee_id": employee.id,
                    "created_date": employee.created_date,
                    "target_month": str(month),
                })
                continue
            calculations.append(
                self._calculate_employee(
                    employee,
                    tuple(n for n in monthly_novelties if n.employee_id == employee.id),
                    tuple(a for a in monthly_advances if a.employee_id == employee.id),
                    rates,
                    month,
                )
            )

        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.info("payroll_calculation_completed", extra={
            "target_month": str(month),
            "calculated_count": len(calculations),
            "excluded_count": len(employees) - len(calculations),
            "total_net": str(sum((c.net_salary for c in calculations), ZERO)),
            "duration_ms": duration_ms,
        })
        return tuple(calculations)

    def _calculate_employee(
        self,
        employee: Employee,
        novelties: tuple[Novelty, ...],
        advances: tuple[AdvancePayment, ...],
        rates: DeductionRates,
        month: PayrollMonth,
    ) -> PayrollCalculation:
        days_in_month = month.days_in_month
        discounted_days = sum(
            (n.value for n in novelties if n.type.polarity is NoveltyPolarity.DISCOUNT),
            ZERO,
        )
        worked_days = max(ZERO, Decimal(days_in_month) - discounted_days)
        if discounted_days > days_in_month:
            logger.debug("worked_days_clamped", extra={
                "employee_id": employee.id,
                "discounted_days": str(discounted_days),
                "days_in_month": days_in_month,
            })

        daily_rate = employee.salary / PAYROLL_MONTH_DAYS
        gross = daily_rate * worked_days

        transport = ZERO
        if (
            employee.contract_type is ContractType.NOMINA
            and employee.salary < rates.transport_ceiling
        ):
            transport = rates.transport_allowance * worked_days / PAYROLL_MONTH_DAYS

        bonuses = self._bonuses(novelties, rates)

        health = gross * rates.health_pct / PERCENT
        pension = gross * rates.pension_pct / PERCENT
        solidarity = ZERO
        if employee.salary >= rates.solidarity_floor:
            solidarity = gross * rates.solidarity_pct / PERCENT
        advance_total = sum((a.amount for a in advances), ZERO)
        deductions = self._deductions(
            novelties, health, pension, solidarity, advance_total,
        )

        gross_salary = round_money(gross)
        transport_allowance = round_money(transport)
        net_salary = gross_salary + transport_allowance + bonuses.total - deductions.total

        if net_salary < ZERO:
            logger.warning("net_salary_negative", extra={
                "employee_id": employee.id,
                "target_month": str(month),
                "net_salary": str(net_salary),
            })

        logger.debug("employee_payroll_calculated", extra={
            "employee_id": employee.id,
            "worked_days": str(worked_days),
            "gross_salary": str(gross_salary),
            "bonus_total": str(bonuses.total),
            "deduction_total": str(deductions.total),
            "net_salary": str(net_salary),
        })

        return PayrollCalculation(
            employee=employee,
            target_month=month,
            days_in_month=days_in_month,
            worked_days=worked_days,
            discounted_days=discounted_days,
            base_salary=employee.salary,
            daily_rate=round_money(daily_rate),
            gross_salary=gross_salary,
            transport_allowance=transport_allowance,
            bonuses=bonuses,
            deductions=deductions,
            net_salary=net_salary,
            novelties=novelties,
            advances=advances,
        )

    def _bonuses(
        self,
        novelties: tuple[Novelty, ...],
        rates: DeductionRates,
    ) -> BonusBreakdown:
        subtotals: dict[str, Decimal] = {}
        for novelty in novelties:
            spec = novelty.type.spec
            if spec.polarity is not NoveltyPolarity.ADDITION:
                continue
            if spec.unit is NoveltyUnit.MONEY:
                amount = novelty.value
            else:
                unit_rate = getattr(rates, MONETIZATION_RATE_FIELDS[novelty.type])
                amount = novelty.value * unit_rate
            subtotals[spec.bucket] = subtotals.get(spec.bucket, ZERO) + amount

        rounded = {bucket: round_money(amount) for bucket, amount in subtotals.items()}
        return BonusBreakdown(
            **rounded,
            total=round_money(sum(subtotals.values(), ZERO)),
        )

    def _deductions(
        self,
        novelties: tuple[Novelty, ...],
        health: Decimal,
        pension: Decimal,
        solidarity: Decimal,
        advance_total: Decimal,
    ) -> DeductionBreakdown:
        subtotals: dict[str, Decimal] = {}
        for novelty in novelties:
            spec = novelty.type.spec
            if spec.polarity is NoveltyPolarity.DEDUCTION:
                subtotals[spec.bucket] = subtotals.get(spec.bucket, ZERO) + novelty.value

        novelty_total = sum(subtotals.values(), ZERO)
        exact_total = health + pension + solidarity + advance_total + novelty_total
        return DeductionBreakdown(
            health=round_money(health),
            pension=round_money(pension),
            solidarity=round_money(solidarity),
            advances=round_money(advance_total),
            **{bucket: round_money(amount) for bucket, amount in subtotals.items()},
            novelty_total=round_money(novelty_total),
            total=round_money(exact_total),
        )


def calculate_payroll(
    employees: Sequence[Employee],
    novelties: Iterable[Novelty],
    advances: Iterable[AdvancePayment],
    rates: DeductionRates,
    target_month: PayrollMonth | str,
) -> tuple[PayrollCalculation, ...]:
    """Functional form of ``PayrollEngine().calculate``."""
    return PayrollEngine().calculate(
        employees=employees,
        novelties=novelties,
        advances=advances,
        rates=rates,
        target_month=target_month,
    )
