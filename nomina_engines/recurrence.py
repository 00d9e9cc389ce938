"""
nomina_engines.recurrence -- Recurring-novelty reconciliation.

Responsibility:
    Decide which monthly instances of recurring novelties are missing for a
    given month and build them.  The caller inserts the returned novelties
    into its ledger; nothing here mutates the ledger.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Invoked explicitly by
    ``PayrollService`` before a payroll run (or on demand), never from
    inside the payroll engine.

Invariants enforced:
    - Idempotence: an instance is synthesized only when no novelty with the
      same (employee_id, type, month) exists, so reconciling a month twice
      against the updated ledger yields nothing the second time.
    - A template counts as applied for the month while its instance id is
      still in the ledger or one of its instances is dated in the month,
      even after that instance was edited to another type or date.
    - Synthesized ids are derived from (template id, month) with uuid5, so
      the same input always produces the same instance.
    - Only templates whose ``start_month`` is on or before the month apply.

Failure modes:
    None.  Non-recurring novelties are ignored.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import replace
from uuid import NAMESPACE_URL, uuid5

from nomina_engines.tracer import traced_engine
from nomina_kernel.domain.month import PayrollMonth
from nomina_kernel.logging_config import get_logger
from nomina_modules.payroll.models import Novelty, NoveltyType

logger = get_logger("engines.recurrence")

_RECURRENCE_NAMESPACE = uuid5(NAMESPACE_URL, "nomina:recurring-novelty")

NoveltyKey = tuple[str, NoveltyType, PayrollMonth]


def novelty_key(novelty: Novelty) -> NoveltyKey:
    """Deduplication key: (employee_id, type, month)."""
    return (novelty.employee_id, novelty.type, novelty.month)


def synthesized_id(template: Novelty, month: PayrollMonth) -> str:
    """Deterministic id of the instance of ``template`` for ``month``."""
    return str(uuid5(_RECURRENCE_NAMESPACE, f"{template.id}:{month}"))


@traced_engine("recurrence", "1.0", fingerprint_fields=("current_month",))
def reconcile_recurring_novelties(
    *,
    novelties: Iterable[Novelty],
    current_month: PayrollMonth | str,
) -> tuple[Novelty, ...]:
    """
    Build the recurring-novelty instances missing from ``current_month``.

    For every recurring template with ``start_month <= current_month``, if
    no novelty for the same employee and type is dated inside the month, a
    copy dated the 1st of the month is produced with the template's
    quantity and description, flagged ``auto_applied``.

    Returns:
        The novelties to insert, in template order.  Empty when the month
        is already reconciled.
    """
    month = PayrollMonth.parse(current_month)
    snapshot = tuple(novelties)
    existing: set[NoveltyKey] = {novelty_key(n) for n in snapshot}
    known_ids = {n.id for n in snapshot}
    applied_sources = {
        (n.source_id, n.month) for n in snapshot if n.source_id is not None
    }

    created: list[Novelty] = []
    for template in snapshot:
        if template.recurrence is None or template.recurrence.start_month > month:
            continue
        key = (template.employee_id, template.type, month)
        instance_id = synthesized_id(template, month)
        if (
            key in existing
            or instance_id in known_ids
            or (template.id, month) in applied_sources
        ):
            continue

        instance = replace(
            template,
            id=instance_id,
            date=month.first_day,
            recurrence=None,
            auto_applied=True,
            source_id=template.id,
        )
        existing.add(key)
        created.append(instance)
        logger.info("recurring_novelty_synthesized", extra={
            "novelty_id": instance.id,
            "source_id": template.id,
            "employee_id": template.employee_id,
            "novelty_type": template.type.value,
            "month": str(month),
        })

    logger.info("recurring_reconciliation_completed", extra={
        "month": str(month),
        "template_count": sum(1 for n in snapshot if n.recurrence is not None),
        "synthesized_count": len(created),
    })
    return tuple(created)


def find_duplicate_novelties(
    novelties: Iterable[Novelty],
) -> tuple[NoveltyKey, ...]:
    """
    Keys holding more than one auto-applied instance.

    Reconciliation never produces these; a non-empty result means the
    ledger was written around it and needs deduplication.
    """
    counts = Counter(novelty_key(n) for n in novelties if n.auto_applied)
    duplicates = tuple(key for key, count in counts.items() if count > 1)
    if duplicates:
        logger.error("recurring_novelty_duplicates_detected", extra={
            "duplicate_count": len(duplicates),
            "keys": [f"{emp}:{ntype.value}:{month}" for emp, ntype, month in duplicates],
        })
    return duplicates
