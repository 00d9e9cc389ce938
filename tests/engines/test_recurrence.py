"""
Tests for recurring-novelty reconciliation.

Covers:
- Synthesis of missing monthly instances
- Idempotence across repeated passes
- Start-month gating and existing-instance detection
- Deterministic ids and duplicate detection
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from nomina_engines.recurrence import (
    find_duplicate_novelties,
    novelty_key,
    reconcile_recurring_novelties,
    synthesized_id,
)
from nomina_kernel.domain.month import PayrollMonth
from nomina_modules.payroll.models import NoveltyType


@pytest.fixture
def template(create_employee, create_novelty):
    employee = create_employee(employee_id="emp-rec")
    return create_novelty(
        employee,
        NoveltyType.CORPORATE_PLAN,
        "85000",
        novelty_date=date(2024, 1, 5),
        description="Plan celular",
        recurring_from=PayrollMonth(2024, 1),
        novelty_id="nov-template",
    )


class TestSynthesis:
    def test_creates_instance_for_later_month(self, template):
        (instance,) = reconcile_recurring_novelties(
            novelties=[template], current_month="2024-04",
        )
        assert instance.employee_id == template.employee_id
        assert instance.type is NoveltyType.CORPORATE_PLAN
        assert instance.date == date(2024, 4, 1)
        assert instance.quantity == template.quantity
        assert instance.value == Decimal("85000")
        assert instance.description == "Plan celular"
        assert instance.auto_applied is True
        assert instance.source_id == "nov-template"
        assert instance.recurrence is None
        assert instance.id != template.id

    def test_template_month_itself_needs_nothing(self, template):
        assert reconcile_recurring_novelties(novelties=[template], current_month="2024-01") == ()

    def test_month_before_start_is_skipped(self, template):
        late_start = replace(template, date=date(2024, 6, 1))
        late_start = replace(late_start, recurrence=replace(template.recurrence, start_month=PayrollMonth(2024, 6)))
        assert reconcile_recurring_novelties(novelties=[late_start], current_month="2024-04") == ()

    def test_non_recurring_novelties_ignored(self, create_novelty):
        one_off = create_novelty("emp-1", NoveltyType.FINES, "10000", novelty_date=date(2024, 1, 3))
        assert reconcile_recurring_novelties(novelties=[one_off], current_month="2024-04") == ()

    def test_existing_manual_entry_blocks_synthesis(self, template, create_novelty):
        manual = create_novelty(
            template.employee_id, NoveltyType.CORPORATE_PLAN, "90000", novelty_date=date(2024, 4, 20),
        )
        assert reconcile_recurring_novelties(
            novelties=[template, manual], current_month="2024-04",
        ) == ()

    def test_retyped_instance_still_counts_as_applied(self, template):
        (instance,) = reconcile_recurring_novelties(novelties=[template], current_month="2024-04")
        retyped = replace(instance, type=NoveltyType.FINES)
        assert reconcile_recurring_novelties(
            novelties=[template, retyped], current_month="2024-04",
        ) == ()

    def test_instance_under_new_id_in_month_counts_as_applied(self, template):
        (instance,) = reconcile_recurring_novelties(novelties=[template], current_month="2024-04")
        copied = replace(instance, id="nov-copy", type=NoveltyType.FINES, date=date(2024, 4, 18))
        assert reconcile_recurring_novelties(
            novelties=[template, copied], current_month="2024-04",
        ) == ()

    def test_other_type_does_not_block(self, template, create_novelty):
        other = create_novelty(
            template.employee_id, NoveltyType.FINES, "1000", novelty_date=date(2024, 4, 20),
        )
        created = reconcile_recurring_novelties(novelties=[template, other], current_month="2024-04")
        assert len(created) == 1

    def test_duplicate_templates_collapse_to_one_instance(self, template):
        twin = replace(template, id="nov-template-twin")
        created = reconcile_recurring_novelties(novelties=[template, twin], current_month="2024-04")
        assert len(created) == 1
        assert created[0].source_id == "nov-template"

    def test_does_not_mutate_input(self, template):
        ledger = [template]
        reconcile_recurring_novelties(novelties=ledger, current_month="2024-04")
        assert ledger == [template]


class TestIdempotence:
    def test_second_pass_creates_nothing(self, template):
        ledger = [template]
        first = reconcile_recurring_novelties(novelties=ledger, current_month="2024-04")
        ledger.extend(first)
        second = reconcile_recurring_novelties(novelties=ledger, current_month="2024-04")
        assert len(first) == 1
        assert second == ()
        april = [n for n in ledger if n.month == PayrollMonth(2024, 4)]
        assert len(april) == 1

    def test_ids_are_deterministic(self, template):
        first = reconcile_recurring_novelties(novelties=[template], current_month="2024-04")
        second = reconcile_recurring_novelties(novelties=[template], current_month="2024-04")
        assert first == second
        assert first[0].id == synthesized_id(template, PayrollMonth(2024, 4))

    def test_each_month_gets_its_own_id(self, template):
        april = synthesized_id(template, PayrollMonth(2024, 4))
        may = synthesized_id(template, PayrollMonth(2024, 5))
        assert april != may


class TestLogging:
    def test_synthesis_logged(self, template, captured_logs):
        reconcile_recurring_novelties(novelties=[template], current_month="2024-04")
        logs = captured_logs()
        synthesized = [r for r in logs if r["message"] == "recurring_novelty_synthesized"]
        assert len(synthesized) == 1
        assert synthesized[0]["source_id"] == "nov-template"
        completed = [r for r in logs if r["message"] == "recurring_reconciliation_completed"]
        assert completed[0]["synthesized_count"] == 1
        traces = [r for r in logs if r["message"] == "NOMINA_ENGINE_TRACE"]
        assert traces[0]["engine_name"] == "recurrence"


class TestDuplicateDetection:
    def test_clean_ledger_has_no_duplicates(self, template):
        created = reconcile_recurring_novelties(novelties=[template], current_month="2024-04")
        assert find_duplicate_novelties([template, *created]) == ()

    def test_detects_double_application(self, template, captured_logs):
        (instance,) = reconcile_recurring_novelties(novelties=[template], current_month="2024-04")
        copy = replace(instance, id="nov-racy-copy")
        duplicates = find_duplicate_novelties([template, instance, copy])
        assert duplicates == (novelty_key(instance),)

        errors = [r for r in captured_logs() if r["message"] == "recurring_novelty_duplicates_detected"]
        assert errors[0]["level"] == "ERROR"
        assert errors[0]["duplicate_count"] == 1

    def test_manual_entries_are_not_duplicates(self, create_novelty):
        first = create_novelty("emp-1", NoveltyType.FINES, "1000", novelty_date=date(2024, 4, 2))
        second = create_novelty("emp-1", NoveltyType.FINES, "2000", novelty_date=date(2024, 4, 9))
        assert find_duplicate_novelties([first, second]) == ()
