"""
DeductionRates schema.

The process-wide rate configuration consumed by the payroll engine:
statutory deduction percentages, the flat transport allowance, the legal
minimum salary the eligibility thresholds are expressed in, and the fixed
rates that turn hour- and day-denominated novelties into money.

The engine never reads this from ambient state; callers obtain a value
through ``nomina_config.get_active_rates()`` (or build one) and pass it in.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from decimal import Decimal
from typing import Any, Self

from nomina_kernel.domain.values import ZERO
from nomina_kernel.exceptions import InvalidRateError
from nomina_kernel.logging_config import get_logger

logger = get_logger("config.schema")

MINIMUM_SALARY_COLOMBIA = Decimal("1300000")  # 2024 value
TRANSPORT_ALLOWANCE = Decimal("162000")  # 2024 value

_PERCENT_FIELDS = ("health_pct", "pension_pct", "solidarity_pct")
_AMOUNT_FIELDS = (
    "transport_allowance",
    "minimum_salary",
    "ordinary_hour_rate",
    "overtime_hour_rate",
    "night_surcharge_rate",
    "holiday_day_rate",
)


@dataclass(frozen=True)
class DeductionRates:
    """
    Deduction percentages and monetization rates for one payroll run.

    Percentages are expressed as percent (``4`` means 4%), amounts in pesos.
    """

    health_pct: Decimal = Decimal("4")
    pension_pct: Decimal = Decimal("4")
    solidarity_pct: Decimal = Decimal("1")
    transport_allowance: Decimal = TRANSPORT_ALLOWANCE
    minimum_salary: Decimal = MINIMUM_SALARY_COLOMBIA

    # Monetization of hour/day novelties
    ordinary_hour_rate: Decimal = Decimal("6771")
    overtime_hour_rate: Decimal = Decimal("8464")
    night_surcharge_rate: Decimal = Decimal("2370")
    holiday_day_rate: Decimal = Decimal("75833")

    def __post_init__(self):
        for name in _PERCENT_FIELDS + _AMOUNT_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                raise InvalidRateError(name, value, "must be a Decimal")
            if not value.is_finite():
                raise InvalidRateError(name, value, "must be finite")
            if value < ZERO:
                raise InvalidRateError(name, value, "cannot be negative")

        for name in _PERCENT_FIELDS:
            if getattr(self, name) > Decimal("100"):
                raise InvalidRateError(name, getattr(self, name), "cannot exceed 100%")

        if self.minimum_salary == ZERO:
            raise InvalidRateError("minimum_salary", self.minimum_salary, "must be positive")

    @property
    def transport_ceiling(self) -> Decimal:
        """Salaries strictly below this receive the transport allowance."""
        return self.minimum_salary * 2

    @property
    def solidarity_floor(self) -> Decimal:
        """Salaries at or above this pay the solidarity fund."""
        return self.minimum_salary * 4

    def with_updates(self, **changes: Decimal) -> Self:
        """Return a new, validated copy with the given fields replaced."""
        unknown = set(changes) - set(_PERCENT_FIELDS + _AMOUNT_FIELDS)
        if unknown:
            raise TypeError(f"Unknown rate fields: {sorted(unknown)}")
        updated = replace(self, **changes)
        logger.info(
            "deduction_rates_updated",
            extra={"changed_fields": sorted(changes)},
        )
        return updated

    def to_dict(self) -> dict[str, str]:
        """Serializable view (Decimal rendered as strings)."""
        return {key: str(value) for key, value in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """
        Create rates from a snake_case dictionary (YAML, settings form).

        Values may be Decimal, int, or numeric strings.  Missing keys fall
        back to the 2024 defaults.
        """
        unknown = set(data) - set(_PERCENT_FIELDS + _AMOUNT_FIELDS)
        if unknown:
            raise TypeError(f"Unknown rate fields: {sorted(unknown)}")
        values: dict[str, Decimal] = {}
        for key, raw in data.items():
            if isinstance(raw, float):
                raw = str(raw)
            try:
                values[key] = raw if isinstance(raw, Decimal) else Decimal(str(raw))
            except ArithmeticError as exc:
                raise InvalidRateError(key, raw, "not a number") from exc
        return cls(**values)


DEFAULT_DEDUCTION_RATES = DeductionRates()
