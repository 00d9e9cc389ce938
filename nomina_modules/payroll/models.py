"""
Payroll Domain Models (``nomina_modules.payroll.models``).

Responsibility
--------------
Frozen dataclass value objects representing the nouns of payroll:
employees, novelty events, and cash advances, plus the closed catalog of
novelty types with the unit and polarity of each.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Consumed by the
engines (read-only snapshots), the ledgers, and the boundary parser.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary and quantity fields use ``Decimal`` -- NEVER ``float``.
* A novelty carries exactly one quantity, and its variant matches the
  unit of the novelty's type (days, hours, or money).

Failure modes
-------------
* Negative salary, quantity, or non-positive advance -> ``ValueError``.
* Quantity variant disagreeing with the type's unit ->
  ``NoveltyUnitMismatchError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from nomina_kernel.domain.month import PayrollMonth
from nomina_kernel.domain.values import ZERO
from nomina_kernel.exceptions import NoveltyUnitMismatchError
from nomina_kernel.logging_config import get_logger

logger = get_logger("modules.payroll.models")


class ContractType(str, Enum):
    """Contract classification; each has different allowance eligibility."""
    OPS = "OPS"  # independent contractor
    NOMINA = "NOMINA"  # payroll employee


class NoveltyUnit(str, Enum):
    """What a novelty's quantity counts."""
    DAYS = "days"
    HOURS = "hours"
    MONEY = "money"


class NoveltyPolarity(str, Enum):
    """How a novelty affects pay."""
    DISCOUNT = "discount"  # reduces worked days
    ADDITION = "addition"  # adds pay
    DEDUCTION = "deduction"  # reduces pay directly


class NoveltyType(str, Enum):
    """Closed catalog of novelty types (values are the wire codes)."""
    ABSENCE = "ABSENCE"
    LATE = "LATE"
    EARLY_LEAVE = "EARLY_LEAVE"
    MEDICAL_LEAVE = "MEDICAL_LEAVE"
    VACATION = "VACATION"
    FIXED_COMPENSATION = "FIXED_COMPENSATION"
    SALES_BONUS = "SALES_BONUS"
    FIXED_OVERTIME = "FIXED_OVERTIME"
    UNEXPECTED_OVERTIME = "UNEXPECTED_OVERTIME"
    NIGHT_SURCHARGE = "NIGHT_SURCHARGE"
    SUNDAY_WORK = "SUNDAY_WORK"
    GAS_ALLOWANCE = "GAS_ALLOWANCE"
    CORPORATE_PLAN = "PLAN_CORPORATIVO"
    FUNERAL_PLAN = "RECORDAR"
    INVENTORY_SHORTAGE = "INVENTARIOS_CRUCES"
    FINES = "MULTAS"
    EMPLOYEE_FUND = "FONDO_EMPLEADOS"
    EMPLOYEE_RECEIVABLE = "CARTERA_EMPLEADOS"

    @property
    def spec(self) -> NoveltyTypeSpec:
        return NOVELTY_CATALOG[self]

    @property
    def unit(self) -> NoveltyUnit:
        return NOVELTY_CATALOG[self].unit

    @property
    def polarity(self) -> NoveltyPolarity:
        return NOVELTY_CATALOG[self].polarity

    @property
    def label(self) -> str:
        return NOVELTY_CATALOG[self].label


@dataclass(frozen=True)
class NoveltyTypeSpec:
    """Unit, polarity, report bucket, and display label of a novelty type."""
    unit: NoveltyUnit
    polarity: NoveltyPolarity
    label: str
    bucket: str | None = None  # breakdown field for additions/deductions


_D, _H, _M = NoveltyUnit.DAYS, NoveltyUnit.HOURS, NoveltyUnit.MONEY
_DISC, _ADD, _DED = NoveltyPolarity.DISCOUNT, NoveltyPolarity.ADDITION, NoveltyPolarity.DEDUCTION

NOVELTY_CATALOG: dict[NoveltyType, NoveltyTypeSpec] = {
    NoveltyType.ABSENCE: NoveltyTypeSpec(_D, _DISC, "Ausencia"),
    NoveltyType.LATE: NoveltyTypeSpec(_D, _DISC, "Llegada tarde"),
    NoveltyType.EARLY_LEAVE: NoveltyTypeSpec(_D, _DISC, "Salida temprana"),
    NoveltyType.MEDICAL_LEAVE: NoveltyTypeSpec(_D, _DISC, "Incapacidad médica"),
    NoveltyType.VACATION: NoveltyTypeSpec(_D, _DISC, "Vacaciones"),
    NoveltyType.FIXED_COMPENSATION: NoveltyTypeSpec(_M, _ADD, "Compensatorios fijos", "fixed_compensation"),
    NoveltyType.SALES_BONUS: NoveltyTypeSpec(_M, _ADD, "Bonificación en venta", "sales_bonus"),
    NoveltyType.FIXED_OVERTIME: NoveltyTypeSpec(_H, _ADD, "Horas extra fijas", "fixed_overtime"),
    NoveltyType.UNEXPECTED_OVERTIME: NoveltyTypeSpec(_H, _ADD, "Horas extra NE", "unexpected_overtime"),
    NoveltyType.NIGHT_SURCHARGE: NoveltyTypeSpec(_H, _ADD, "Recargos nocturnos", "night_surcharge"),
    NoveltyType.SUNDAY_WORK: NoveltyTypeSpec(_D, _ADD, "Festivos", "sunday_work"),
    NoveltyType.GAS_ALLOWANCE: NoveltyTypeSpec(_M, _ADD, "Auxilio de gasolina", "gas_allowance"),
    NoveltyType.CORPORATE_PLAN: NoveltyTypeSpec(_M, _DED, "Plan corporativo", "corporate_plan"),
    NoveltyType.FUNERAL_PLAN: NoveltyTypeSpec(_M, _DED, "Recordar", "funeral_plan"),
    NoveltyType.INVENTORY_SHORTAGE: NoveltyTypeSpec(_M, _DED, "Inventarios y cruces", "inventory_shortage"),
    NoveltyType.FINES: NoveltyTypeSpec(_M, _DED, "Multas", "fines"),
    NoveltyType.EMPLOYEE_FUND: NoveltyTypeSpec(_M, _DED, "Fondo de empleados", "employee_fund"),
    NoveltyType.EMPLOYEE_RECEIVABLE: NoveltyTypeSpec(_M, _DED, "Cartera empleados", "employee_receivable"),
}


# ---------------------------------------------------------------------------
# Novelty quantities (one variant per unit)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DaysQuantity:
    """Day count: discounted days, or holiday days worked."""
    days: Decimal
    unit = NoveltyUnit.DAYS

    def __post_init__(self):
        if self.days < ZERO:
            raise ValueError("days cannot be negative")


@dataclass(frozen=True)
class HoursQuantity:
    """Hour count for overtime and night-surcharge novelties."""
    hours: Decimal
    unit = NoveltyUnit.HOURS

    def __post_init__(self):
        if self.hours < ZERO:
            raise ValueError("hours cannot be negative")


@dataclass(frozen=True)
class MoneyQuantity:
    """Peso amount for money bonuses and deduction novelties."""
    amount: Decimal
    unit = NoveltyUnit.MONEY

    def __post_init__(self):
        if self.amount < ZERO:
            raise ValueError("amount cannot be negative")


NoveltyQuantity = DaysQuantity | HoursQuantity | MoneyQuantity


@dataclass(frozen=True)
class Recurrence:
    """Re-apply a novelty every month from ``start_month`` until deleted."""
    start_month: PayrollMonth


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Employee:
    """An employee on the roster."""
    id: str
    name: str
    legal_id: str  # cédula
    contract_type: ContractType
    salary: Decimal  # monthly base salary
    created_date: date | None = None  # hire/creation date
    worked_days: int = 30  # denormalized counter, echoed only
    date_of_birth: date | None = None
    phone: str = ""
    email: str = ""
    eps: str = ""  # health-insurance provider

    def __post_init__(self):
        if self.salary < ZERO:
            logger.warning(
                "employee_negative_salary",
                extra={"employee_id": self.id, "salary": str(self.salary)},
            )
            raise ValueError("salary cannot be negative")
        if not isinstance(self.contract_type, ContractType):
            raise ValueError(f"contract_type must be ContractType, got {self.contract_type!r}")

    def is_hired_by(self, day: date) -> bool:
        """True when the employee exists on or before ``day``."""
        return self.created_date is None or self.created_date <= day


@dataclass(frozen=True)
class Novelty:
    """A dated event affecting one employee's pay."""
    id: str
    employee_id: str
    type: NoveltyType
    date: date
    quantity: NoveltyQuantity
    description: str = ""
    recurrence: Recurrence | None = None
    auto_applied: bool = False
    source_id: str | None = None  # recurring template this copy came from

    def __post_init__(self):
        expected = self.type.unit
        received = getattr(self.quantity, "unit", None)
        if received != expected:
            raise NoveltyUnitMismatchError(
                self.type.value,
                expected.value,
                received.value if isinstance(received, NoveltyUnit) else type(self.quantity).__name__,
            )

    @property
    def month(self) -> PayrollMonth:
        return PayrollMonth.of(self.date)

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None

    @property
    def value(self) -> Decimal:
        """The single populated quantity, whatever its unit."""
        if isinstance(self.quantity, DaysQuantity):
            return self.quantity.days
        if isinstance(self.quantity, HoursQuantity):
            return self.quantity.hours
        return self.quantity.amount


@dataclass(frozen=True)
class AdvancePayment:
    """A cash advance recouped from the payroll run of ``month``."""
    id: str
    employee_id: str
    amount: Decimal
    date: date  # disbursement date
    month: PayrollMonth  # run that absorbs the deduction
    description: str = ""

    def __post_init__(self):
        if self.amount <= ZERO:
            raise ValueError("advance amount must be positive")


def quantity_for(novelty_type: NoveltyType, value: Decimal) -> NoveltyQuantity:
    """Build the quantity variant matching ``novelty_type``'s unit."""
    unit = novelty_type.unit
    if unit is NoveltyUnit.DAYS:
        return DaysQuantity(value)
    if unit is NoveltyUnit.HOURS:
        return HoursQuantity(value)
    return MoneyQuantity(value)
