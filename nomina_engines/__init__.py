"""
Module: nomina_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for the
    service layer.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May import nomina_kernel, nomina_config.schema and the payroll record
    types; MUST NOT import services.

Invariants enforced:
    - Purity: engines never read the clock.  The target month is always
      an explicit parameter.
    - Decimal-only arithmetic: monetary amounts are ``Decimal``.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Every engine invocation is traced via ``@traced_engine`` (see
    ``nomina_engines.tracer``), emitting NOMINA_ENGINE_TRACE log records
    with engine name, version, input fingerprint, and duration.

Usage:
    from nomina_engines import PayrollEngine, reconcile_recurring_novelties
"""

from nomina_engines.payroll import (
    BonusBreakdown,
    DeductionBreakdown,
    PayrollCalculation,
    PayrollEngine,
    calculate_payroll,
)
from nomina_engines.recurrence import (
    find_duplicate_novelties,
    novelty_key,
    reconcile_recurring_novelties,
)
from nomina_engines.tracer import traced_engine

__all__ = [
    "BonusBreakdown",
    "DeductionBreakdown",
    "PayrollCalculation",
    "PayrollEngine",
    "calculate_payroll",
    "find_duplicate_novelties",
    "novelty_key",
    "reconcile_recurring_novelties",
    "traced_engine",
]
