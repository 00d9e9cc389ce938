#!/usr/bin/env python3
"""
Run a monthly payroll from a YAML snapshot and write the text report.

The snapshot holds the records as the roster, novelty, advance and
settings forms produce them (camelCase keys):

    employees:  [{id, name, cedula, contractType, salary, createdDate, ...}]
    novelties:  [{id, employeeId, type, date, discountDays|days|hours|bonusAmount, ...}]
    advances:   [{id, employeeId, amount, date, month, description}]
    settings:   {health, pension, solidarity, transportAllowance, ...}   # optional

Rates are taken from ``--rates`` when given, else from the snapshot's
``settings`` block, else from the packaged rate set for ``--year``.

Usage:
    python3 scripts/run_payroll.py --data snapshot.yaml --month 2024-04
    python3 scripts/run_payroll.py --data snapshot.yaml --month 2024-04 --output /tmp/abril.txt
    python3 scripts/run_payroll.py --data snapshot.yaml --month 2024-04 --rates rates.yaml --verbose
"""

import argparse
import logging
import sys
from pathlib import Path

import yaml

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from nomina_config import DEFAULT_YEAR, get_active_rates, load_rates_file  # noqa: E402
from nomina_kernel.domain.values import format_cop  # noqa: E402
from nomina_kernel.exceptions import NominaKernelError  # noqa: E402
from nomina_kernel.logging_config import configure_logging  # noqa: E402
from nomina_modules.payroll.inputs import (  # noqa: E402
    advance_from_dict,
    employee_from_dict,
    novelty_from_dict,
    parse_date,
    rates_from_dict,
)
from nomina_modules.payroll.ledgers import (  # noqa: E402
    AdvanceLedger,
    EmployeeRoster,
    NoveltyLedger,
    RateSettings,
)
from nomina_modules.payroll.report import report_filename  # noqa: E402
from nomina_modules.payroll.results import summarize_run  # noqa: E402
from nomina_modules.payroll.service import PayrollService  # noqa: E402


def load_snapshot(path: Path) -> dict:
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Snapshot {path} must be a mapping, got {type(data).__name__}")
    return data


def build_service(snapshot: dict, args: argparse.Namespace) -> PayrollService:
    if args.rates:
        rates, _checksum = load_rates_file(args.rates)
    elif snapshot.get("settings"):
        rates = rates_from_dict(snapshot["settings"])
    else:
        rates = get_active_rates(args.year)

    service = PayrollService(
        roster=EmployeeRoster(),
        novelties=NoveltyLedger(),
        advances=AdvanceLedger(),
        settings=RateSettings(rates),
    )
    for record in snapshot.get("employees") or []:
        service.add_employee(employee_from_dict(record))
    for record in snapshot.get("novelties") or []:
        service.add_novelty(novelty_from_dict(record))
    for record in snapshot.get("advances") or []:
        service.add_advance(advance_from_dict(record))
    return service


def print_summary(run, output: Path) -> None:
    summary = summarize_run(run)
    print(f"  Nómina {run.month.label}")
    print(f"    Empleados:           {summary.employee_count}")
    print(f"    Total bruto:         {format_cop(summary.total_gross)}")
    print(f"    Total deducciones:   {format_cop(summary.total_deductions)}")
    print(f"    Total adelantos:     {format_cop(summary.total_advances)}")
    print(f"    Total neto:          {format_cop(summary.total_net)}")
    if summary.negative_net_employee_ids:
        print(f"    Neto negativo:       {', '.join(summary.negative_net_employee_ids)}")
    print(f"    Reporte:             {output}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Calculate a monthly payroll and write the text report.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  python3 scripts/run_payroll.py --data scripts/data/sample_snapshot.yaml --month 2024-04\n"
            "  python3 scripts/run_payroll.py --data snapshot.yaml --month 2024-04 --output abril.txt\n"
        ),
    )
    parser.add_argument(
        "--data", type=Path, required=True,
        help="YAML snapshot of employees, novelties and advances",
    )
    parser.add_argument(
        "--month", type=str, required=True,
        help="Target payroll month (YYYY-MM)",
    )
    parser.add_argument(
        "--rates", type=Path, default=None,
        help="Rate set YAML overriding the packaged one",
    )
    parser.add_argument(
        "--year", type=int, default=DEFAULT_YEAR,
        help=f"Packaged rate set year (default: {DEFAULT_YEAR})",
    )
    parser.add_argument(
        "--output", type=Path, default=None,
        help="Report path (default: nomina_<month>.txt in the current directory)",
    )
    parser.add_argument(
        "--processing-date", type=str, default=None,
        help="Date printed in the report header (YYYY-MM-DD, default: today)",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Emit structured JSON logs to stderr",
    )

    args = parser.parse_args()

    configure_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        snapshot = load_snapshot(args.data)
        service = build_service(snapshot, args)
        run = service.run_payroll(args.month)
        processing_date = (
            parse_date(args.processing_date) if args.processing_date else None
        )
        report = service.export_report(run, processing_date)
    except (NominaKernelError, OSError, ValueError, TypeError, KeyError, yaml.YAMLError) as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    output = args.output or Path(report_filename(run.month))
    output.write_text(report, encoding="utf-8")
    print_summary(run, output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
