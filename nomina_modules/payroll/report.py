"""
Payroll Text Report (``nomina_modules.payroll.report``).

Responsibility
--------------
Renders a ``PayrollRun`` as the plain-text payroll report: a header with
the month, processing date, and rate configuration; one numbered block per
employee; and a closing summary of run-wide totals.

Invariants enforced
-------------------
* Pure function of the run: the same run always renders the same bytes.
* No recomputation -- every figure printed is a figure the engine already
  reported; totals are sums of those figures.
* Amounts use the es-CO format (``$1.213.333,33``).
"""

from __future__ import annotations

from datetime import date

from nomina_engines.payroll import PayrollCalculation
from nomina_kernel.domain.month import PayrollMonth
from nomina_kernel.domain.values import ZERO, format_cop, format_quantity
from nomina_modules.payroll.models import (
    DaysQuantity,
    HoursQuantity,
    Novelty,
    NoveltyPolarity,
)
from nomina_modules.payroll.results import PayrollRun, summarize_run

HEADER_RULE = "=" * 80
EMPLOYEE_RULE = "-" * 50
NO_DESCRIPTION = "Sin descripción"


def report_filename(month: PayrollMonth) -> str:
    return f"nomina_{month}.txt"


def _pct(value) -> str:
    return f"{format_quantity(value)}%"


def _novelty_line(novelty: Novelty) -> str:
    quantity = novelty.quantity
    if isinstance(quantity, DaysQuantity):
        detail = f"{format_quantity(quantity.days)} días"
    elif isinstance(quantity, HoursQuantity):
        detail = f"{format_quantity(quantity.hours)} horas"
    else:
        sign = "-" if novelty.type.polarity is NoveltyPolarity.DEDUCTION else "+"
        detail = f"{sign}{format_cop(quantity.amount)}"
    marker = " [recurrente]" if novelty.auto_applied else ""
    description = novelty.description or NO_DESCRIPTION
    return (
        f"     - {novelty.date.isoformat()}: {novelty.type.label} "
        f"({detail}){marker} - {description}"
    )


def _employee_block(index: int, calc: PayrollCalculation, run: PayrollRun) -> list[str]:
    rates = run.rates
    employee = calc.employee
    lines = [
        f"{index}. {employee.name}",
        f"   Cédula: {employee.legal_id}",
        f"   Contrato: {employee.contract_type.value}",
        f"   Salario Base: {format_cop(calc.base_salary)}",
        f"   Días Trabajados: {format_quantity(calc.worked_days)}/{calc.days_in_month}",
        f"   Días Descontados: {format_quantity(calc.discounted_days)}",
        f"   Salario Bruto: {format_cop(calc.gross_salary)}",
        f"   Auxilio Transporte: {format_cop(calc.transport_allowance)}",
    ]

    if calc.bonuses.total > ZERO:
        lines.append(f"   Bonificaciones: {format_cop(calc.bonuses.total)}")
        for label, amount in calc.bonuses.lines():
            lines.append(f"     - {label}: {format_cop(amount)}")

    deductions = calc.deductions
    lines.append("   Deducciones:")
    lines.append(f"     - Salud ({_pct(rates.health_pct)}): {format_cop(deductions.health)}")
    lines.append(f"     - Pensión ({_pct(rates.pension_pct)}): {format_cop(deductions.pension)}")
    if deductions.solidarity > ZERO:
        lines.append(
            f"     - Solidaridad ({_pct(rates.solidarity_pct)}): "
            f"{format_cop(deductions.solidarity)}"
        )
    for label, amount in deductions.novelty_lines():
        lines.append(f"     - {label}: {format_cop(amount)}")
    if deductions.advances > ZERO:
        lines.append(f"     - Adelantos: {format_cop(deductions.advances)}")
    lines.append(f"     - Total Deducciones: {format_cop(deductions.total)}")
    lines.append(f"   SALARIO NETO: {format_cop(calc.net_salary)}")

    if calc.novelties:
        lines.append("   Novedades:")
        lines.extend(_novelty_line(n) for n in calc.novelties)

    if calc.advances:
        lines.append("   Adelantos del mes:")
        for advance in calc.advances:
            lines.append(
                f"     - {advance.date.isoformat()}: {format_cop(advance.amount)} - "
                f"{advance.description or NO_DESCRIPTION}"
            )

    lines.extend(["", EMPLOYEE_RULE, ""])
    return lines


def render_payroll_report(run: PayrollRun, processing_date: date | None = None) -> str:
    """
    Render ``run`` as the plain-text payroll report.

    ``processing_date`` defaults to the Bogota date the run was processed.
    """
    rates = run.rates
    processed = processing_date or run.processing_date
    lines = [
        f"NOMINA - {run.month}",
        f"Fecha de procesamiento: {processed.isoformat()}",
        "Configuración de deducciones:",
        f"  - Salud: {_pct(rates.health_pct)}",
        f"  - Pensión: {_pct(rates.pension_pct)}",
        f"  - Solidaridad: {_pct(rates.solidarity_pct)}",
        f"  - Auxilio de Transporte: {format_cop(rates.transport_allowance)}",
        HEADER_RULE,
        "",
    ]

    for index, calc in enumerate(run.calculations, 1):
        lines.extend(_employee_block(index, calc, run))

    summary = summarize_run(run)
    lines.extend([
        "RESUMEN:",
        f"Total Salarios Brutos: {format_cop(summary.total_gross)}",
        f"Total Deducciones: {format_cop(summary.total_deductions)}",
        f"Total Adelantos: {format_cop(summary.total_advances)}",
        f"TOTAL NÓMINA NETA: {format_cop(summary.total_net)}",
    ])
    return "\n".join(lines) + "\n"
