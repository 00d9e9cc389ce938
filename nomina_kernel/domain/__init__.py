"""Domain value objects shared by every payroll layer."""

from nomina_kernel.domain.clock import BOGOTA, Clock, DeterministicClock, SystemClock
from nomina_kernel.domain.month import PayrollMonth
from nomina_kernel.domain.values import (
    CENT,
    PAYROLL_MONTH_DAYS,
    ZERO,
    format_cop,
    format_quantity,
    round_money,
    to_decimal,
)

__all__ = [
    "BOGOTA",
    "CENT",
    "Clock",
    "DeterministicClock",
    "PAYROLL_MONTH_DAYS",
    "PayrollMonth",
    "SystemClock",
    "ZERO",
    "format_cop",
    "format_quantity",
    "round_money",
    "to_decimal",
]
