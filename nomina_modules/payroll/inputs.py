"""
Payroll Boundary Parsing (``nomina_modules.payroll.inputs``).

Responsibility
--------------
Turns the flat records produced by the roster, novelty, advance, and
settings forms (camelCase keys, numbers as strings, one of four optional
value fields per novelty) into the typed domain records the engine
consumes.

Architecture position
---------------------
**Modules layer** -- boundary adapter.  The only place raw input is
interpreted; everything downstream receives validated, well-typed records.

Invariants enforced
-------------------
* Unparseable or missing numeric fields become ``Decimal("0")`` and log
  ``amount_unparseable`` at WARNING -- they never propagate as NaN.
* A novelty's value is read from the field that matches its type's unit
  (``discountDays`` / ``days`` for day types, ``hours``, ``bonusAmount``);
  the other fields are ignored.

Failure modes
-------------
* Unknown novelty type  -> ``UnknownNoveltyTypeError``.
* Unknown contract type  -> ``UnknownContractTypeError``.
* Bad month selector  -> ``InvalidMonthError``.
* Missing required key (``id``, ``employeeId``, ``date``...)  -> ``KeyError``.
* Non-positive advance amount  -> ``ValueError`` from the model.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from nomina_config.schema import DeductionRates
from nomina_kernel.domain.month import PayrollMonth
from nomina_kernel.domain.values import ZERO, to_decimal
from nomina_kernel.exceptions import UnknownContractTypeError, UnknownNoveltyTypeError
from nomina_kernel.logging_config import get_logger
from nomina_modules.payroll.models import (
    AdvancePayment,
    ContractType,
    Employee,
    Novelty,
    NoveltyPolarity,
    NoveltyType,
    NoveltyUnit,
    Recurrence,
    quantity_for,
)

logger = get_logger("modules.payroll.inputs")

# Settings form keys -> DeductionRates fields
_RATE_KEYS: dict[str, str] = {
    "health": "health_pct",
    "pension": "pension_pct",
    "solidarity": "solidarity_pct",
    "transportAllowance": "transport_allowance",
    "minimumSalary": "minimum_salary",
    "ordinaryHourRate": "ordinary_hour_rate",
    "overtimeHourRate": "overtime_hour_rate",
    "nightSurchargeRate": "night_surcharge_rate",
    "holidayDayRate": "holiday_day_rate",
}


def parse_amount(raw: Any, field_name: str = "amount") -> Decimal:
    """
    Parse a numeric form value, degrading to zero.

    ``None`` and empty strings are silently zero (optional fields).  Any
    other unparseable value is zero with a WARNING log.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return ZERO
    if isinstance(raw, float):
        raw = repr(raw)
    try:
        return to_decimal(raw)
    except (TypeError, ValueError):
        logger.warning(
            "amount_unparseable",
            extra={"field": field_name, "raw_value": repr(raw)},
        )
        return ZERO


def parse_date(value: Any) -> date:
    """Parse an ISO date (``2024-04-03`` or a full ISO timestamp)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Cannot parse date from {value!r}")


def _optional_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    return parse_date(value)


def parse_contract_type(value: Any) -> ContractType:
    try:
        return ContractType(str(value).strip().upper())
    except ValueError as exc:
        raise UnknownContractTypeError(str(value)) from exc


def parse_novelty_type(value: Any) -> NoveltyType:
    try:
        return NoveltyType(str(value).strip().upper())
    except ValueError as exc:
        raise UnknownNoveltyTypeError(str(value)) from exc


def employee_from_dict(data: dict[str, Any]) -> Employee:
    """Build an ``Employee`` from a roster form record."""
    worked_days = parse_amount(data.get("workedDays"), "workedDays")
    return Employee(
        id=str(data["id"]),
        name=str(data.get("name", "")),
        legal_id=str(data.get("cedula", "")),
        contract_type=parse_contract_type(data.get("contractType")),
        salary=parse_amount(data.get("salary"), "salary"),
        created_date=_optional_date(data.get("createdDate")),
        worked_days=int(worked_days) if worked_days else 30,
        date_of_birth=_optional_date(data.get("dateOfBirth")),
        phone=str(data.get("phone") or ""),
        email=str(data.get("email") or ""),
        eps=str(data.get("eps") or ""),
    )


def _novelty_value(novelty_type: NoveltyType, data: dict[str, Any]) -> Decimal:
    unit = novelty_type.unit
    if unit is NoveltyUnit.HOURS:
        return parse_amount(data.get("hours"), "hours")
    if unit is NoveltyUnit.MONEY:
        return parse_amount(data.get("bonusAmount"), "bonusAmount")
    if novelty_type.polarity is NoveltyPolarity.DISCOUNT:
        return parse_amount(data.get("discountDays"), "discountDays")
    return parse_amount(data.get("days"), "days")


def novelty_from_dict(data: dict[str, Any]) -> Novelty:
    """
    Build a ``Novelty`` from a novelty form record.

    Recurring records (``isRecurring``) anchor on ``startMonth``, falling
    back to the month of the novelty's own date.
    """
    novelty_type = parse_novelty_type(data["type"])
    novelty_date = parse_date(data["date"])

    recurrence = None
    if data.get("isRecurring"):
        start = data.get("startMonth")
        recurrence = Recurrence(
            PayrollMonth.parse(start) if start else PayrollMonth.of(novelty_date)
        )

    return Novelty(
        id=str(data["id"]),
        employee_id=str(data["employeeId"]),
        type=novelty_type,
        date=novelty_date,
        quantity=quantity_for(novelty_type, abs(_novelty_value(novelty_type, data))),
        description=str(data.get("description") or ""),
        recurrence=recurrence,
        auto_applied=bool(data.get("isAutoApplied", False)),
        source_id=data.get("sourceId"),
    )


def advance_from_dict(data: dict[str, Any]) -> AdvancePayment:
    """Build an ``AdvancePayment`` from an advance form record."""
    disbursed = parse_date(data["date"])
    month = data.get("month")
    return AdvancePayment(
        id=str(data["id"]),
        employee_id=str(data["employeeId"]),
        amount=parse_amount(data.get("amount"), "amount"),
        date=disbursed,
        month=PayrollMonth.parse(month) if month else PayrollMonth.of(disbursed),
        description=str(data.get("description") or ""),
    )


def rates_from_dict(data: dict[str, Any]) -> DeductionRates:
    """
    Build ``DeductionRates`` from the settings form shape.

    Unparseable values fall back to the default for that field rather than
    zero, so a typo never silently removes a statutory deduction.
    """
    defaults = DeductionRates()
    values: dict[str, Decimal] = {}
    for key, field_name in _RATE_KEYS.items():
        if key not in data:
            continue
        raw = data[key]
        if isinstance(raw, float):
            raw = repr(raw)
        try:
            values[field_name] = to_decimal(raw)
        except (TypeError, ValueError):
            logger.warning(
                "rate_unparseable",
                extra={"field": key, "raw_value": repr(raw)},
            )
            values[field_name] = getattr(defaults, field_name)
    return DeductionRates(**values)
