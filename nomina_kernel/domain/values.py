"""
Values -- Decimal money helpers for Colombian peso amounts.

Responsibility:
    Canonical conversion, rounding, and display of peso amounts.  The
    system is single-currency (COP), so amounts travel as bare ``Decimal``
    values and this module is the one place that decides how they are
    rounded and printed.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Decimal-only arithmetic: ``to_decimal`` refuses floats so binary
      rounding noise never enters a calculation.
    - Reported figures are rounded exactly once, to 2 places, ROUND_HALF_UP.

Failure modes:
    - TypeError from ``to_decimal`` for floats and non-numeric types.
    - ValueError from ``to_decimal`` for unparseable strings, NaN, infinity.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")
CENT = Decimal("0.01")

# Fixed payroll month length used for daily-rate conversion.
PAYROLL_MONTH_DAYS = Decimal("30")


def to_decimal(value: Decimal | int | str) -> Decimal:
    """
    Convert a value to a finite ``Decimal``.

    Raises:
        TypeError: If ``value`` is a float or another unsupported type.
        ValueError: If ``value`` cannot be parsed or is not finite.
    """
    if isinstance(value, bool):
        raise TypeError("booleans are not amounts")
    if isinstance(value, float):
        raise TypeError(f"float amounts are not allowed: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"Invalid amount: {value!r}") from exc
    else:
        raise TypeError(f"Unsupported amount type: {type(value).__name__}")
    if not result.is_finite():
        raise ValueError(f"Amount must be finite: {value!r}")
    return result


def round_money(amount: Decimal) -> Decimal:
    """Round to pesos and centavos (2 places, ROUND_HALF_UP)."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_cop(amount: Decimal) -> str:
    """
    Render an amount the es-CO way: ``$1.213.333,33``.

    Negative amounts keep the sign in front of the symbol: ``-$1.500,00``.
    """
    rounded = round_money(amount)
    sign = "-" if rounded < ZERO else ""
    grouped = f"{abs(rounded):,.2f}"
    localized = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}${localized}"


def format_quantity(value: Decimal) -> str:
    """Render a day/hour count without trailing zeros (``2``, ``1,5``)."""
    normalized = value.normalize()
    if normalized == normalized.to_integral_value():
        return str(normalized.quantize(Decimal("1")))
    return format(normalized, "f").replace(".", ",")
