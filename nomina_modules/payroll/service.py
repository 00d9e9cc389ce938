"""
Payroll Module Service (``nomina_modules.payroll.service``).

Responsibility
--------------
Orchestrates a monthly payroll: keeps the roster, novelty and advance
ledgers, and rate settings together; reconciles recurring novelties before
a run; hands immutable snapshots to the pure ``PayrollEngine``; stores the
resulting ``PayrollRun``; and renders the text report.

Architecture position
---------------------
**Modules layer** -- thin glue.  ``PayrollService`` is the sole public entry
point for payroll operations.  Computation is delegated to
``nomina_engines`` (``PayrollEngine``, ``reconcile_recurring_novelties``)
and rendering to ``nomina_modules.payroll.report``.

Invariants enforced
-------------------
* Novelties and advances may only reference employees on the roster.
* Recurring novelties for the target month are reconciled before the
  engine reads the ledger, so a run never misses a recurring template.
* Reconciliation and insertion of its results hold one lock, so
  concurrent runs of the same month apply each template once.
* ``latest_run`` is replaced atomically under a lock (last write wins);
  readers see either the previous run or the new one, never a partial run.

Failure modes
-------------
* Unknown employee on a novelty or advance  -> ``EmployeeNotFoundError``.
* Bad month selector  -> ``InvalidMonthError``.
* Report before any run  -> ``NoPayrollRunError``.

Usage::

    service = PayrollService(clock=clock)
    service.add_employee(employee)
    service.add_novelty(novelty)
    run = service.run_payroll("2024-04")
    text = service.export_report()
"""

from __future__ import annotations

import threading
from datetime import date
from uuid import uuid4

from nomina_config.schema import DeductionRates
from nomina_engines.payroll import PayrollEngine
from nomina_engines.recurrence import (
    find_duplicate_novelties,
    reconcile_recurring_novelties,
)
from nomina_kernel.domain.clock import Clock, SystemClock
from nomina_kernel.domain.month import PayrollMonth
from nomina_kernel.exceptions import EmployeeNotFoundError, NoPayrollRunError
from nomina_kernel.logging_config import LogContext, get_logger
from nomina_modules.payroll.ledgers import (
    AdvanceLedger,
    EmployeeRoster,
    NoveltyLedger,
    RateSettings,
)
from nomina_modules.payroll.models import AdvancePayment, Employee, Novelty
from nomina_modules.payroll.report import render_payroll_report, report_filename
from nomina_modules.payroll.results import PayrollRun, summarize_run

logger = get_logger("modules.payroll.service")


class PayrollService:
    """
    Orchestrates payroll runs over in-memory ledgers.

    Contract
    --------
    * ``run_payroll`` returns the stored ``PayrollRun``; the same object is
      exposed as ``latest_run`` until the next run replaces it.
    * ``export_report`` is a pure rendering of a stored run.

    Guarantees
    ----------
    * The engine only sees tuple snapshots taken after reconciliation.
    * Clock is injectable for deterministic testing.

    Non-goals
    ---------
    * Does NOT persist anything; ledgers live for the process lifetime.
    * Does NOT cancel a run in progress.
    """

    def __init__(
        self,
        roster: EmployeeRoster | None = None,
        novelties: NoveltyLedger | None = None,
        advances: AdvanceLedger | None = None,
        settings: RateSettings | None = None,
        clock: Clock | None = None,
    ):
        self.roster = roster if roster is not None else EmployeeRoster()
        self.novelties = novelties if novelties is not None else NoveltyLedger()
        self.advances = advances if advances is not None else AdvanceLedger()
        self.settings = settings if settings is not None else RateSettings()
        self._clock = clock or SystemClock()

        self._engine = PayrollEngine()
        self._reconcile_lock = threading.Lock()
        self._run_lock = threading.Lock()
        self._latest_run: PayrollRun | None = None

    # =========================================================================
    # Records
    # =========================================================================

    def add_employee(self, employee: Employee) -> Employee:
        return self.roster.add(employee)

    def add_novelty(self, novelty: Novelty) -> Novelty:
        if novelty.employee_id not in self.roster:
            raise EmployeeNotFoundError(novelty.employee_id)
        return self.novelties.add(novelty)

    def add_advance(self, advance: AdvancePayment) -> AdvancePayment:
        if advance.employee_id not in self.roster:
            raise EmployeeNotFoundError(advance.employee_id)
        return self.advances.add(advance)

    def update_rates(self, **changes) -> DeductionRates:
        return self.settings.update(**changes)

    # =========================================================================
    # Recurring novelties
    # =========================================================================

    def current_month(self) -> PayrollMonth:
        return PayrollMonth.of(self._clock.today())

    def apply_recurring_novelties(
        self,
        month: PayrollMonth | str | None = None,
    ) -> tuple[Novelty, ...]:
        """
        Insert the missing recurring instances for ``month``.

        Defaults to the clock's current month.  Returns the inserted
        novelties; empty when the month is already reconciled.
        """
        target = PayrollMonth.parse(month) if month is not None else self.current_month()
        # reconcile and insert atomically
        with self._reconcile_lock:
            created = reconcile_recurring_novelties(
                novelties=self.novelties.list(),
                current_month=target,
            )
            self.novelties.add_many(created)
        find_duplicate_novelties(self.novelties.for_month(target))
        return created

    # =========================================================================
    # Payroll run
    # =========================================================================

    @property
    def latest_run(self) -> PayrollRun | None:
        with self._run_lock:
            return self._latest_run

    def run_payroll(self, target_month: PayrollMonth | str) -> PayrollRun:
        """Reconcile, calculate and store the payroll of ``target_month``."""
        month = PayrollMonth.parse(target_month)
        run_id = str(uuid4())

        with LogContext.bind(run_id=run_id):
            logger.info("payroll_run_started", extra={"target_month": str(month)})

            self.apply_recurring_novelties(month)

            rates = self.settings.current
            calculations = self._engine.calculate(
                employees=self.roster.list(),
                novelties=self.novelties.for_month(month),
                advances=self.advances.for_month(month),
                rates=rates,
                target_month=month,
            )
            run = PayrollRun(
                run_id=run_id,
                month=month,
                rates=rates,
                calculations=calculations,
                processed_at=self._clock.now(),
            )
            with self._run_lock:
                self._latest_run = run

            summary = summarize_run(run)
            logger.info("payroll_run_completed", extra={
                "target_month": str(month),
                "employee_count": summary.employee_count,
                "total_gross": str(summary.total_gross),
                "total_deductions": str(summary.total_deductions),
                "total_net": str(summary.total_net),
                "negative_net_count": len(summary.negative_net_employee_ids),
            })
        return run

    # =========================================================================
    # Report
    # =========================================================================

    def export_report(
        self,
        run: PayrollRun | None = None,
        processing_date: date | None = None,
    ) -> str:
        """Render ``run`` (default: the latest run) as the text report."""
        run = run or self.latest_run
        if run is None:
            raise NoPayrollRunError()
        logger.info("payroll_report_exported", extra={
            "run_id": run.run_id,
            "report_filename": report_filename(run.month),
        })
        return render_payroll_report(run, processing_date)
