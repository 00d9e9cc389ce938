"""Tests for payroll record types (nomina_modules/payroll/models.py)."""

from datetime import date
from decimal import Decimal

import pytest

from nomina_kernel.domain.month import PayrollMonth
from nomina_kernel.exceptions import NoveltyUnitMismatchError
from nomina_modules.payroll.models import (
    NOVELTY_CATALOG,
    AdvancePayment,
    ContractType,
    DaysQuantity,
    Employee,
    HoursQuantity,
    MoneyQuantity,
    Novelty,
    NoveltyPolarity,
    NoveltyType,
    NoveltyUnit,
    Recurrence,
    quantity_for,
)


class TestNoveltyCatalog:
    def test_every_type_is_cataloged(self):
        assert set(NOVELTY_CATALOG) == set(NoveltyType)
        assert len(NoveltyType) == 18

    @pytest.mark.parametrize(
        "novelty_type",
        [
            NoveltyType.ABSENCE,
            NoveltyType.LATE,
            NoveltyType.EARLY_LEAVE,
            NoveltyType.MEDICAL_LEAVE,
            NoveltyType.VACATION,
        ],
    )
    def test_discount_types_are_days(self, novelty_type):
        assert novelty_type.unit is NoveltyUnit.DAYS
        assert novelty_type.polarity is NoveltyPolarity.DISCOUNT

    @pytest.mark.parametrize(
        "novelty_type",
        [NoveltyType.FIXED_OVERTIME, NoveltyType.UNEXPECTED_OVERTIME, NoveltyType.NIGHT_SURCHARGE],
    )
    def test_hour_types(self, novelty_type):
        assert novelty_type.unit is NoveltyUnit.HOURS
        assert novelty_type.polarity is NoveltyPolarity.ADDITION

    def test_sunday_work_is_an_addition_in_days(self):
        assert NoveltyType.SUNDAY_WORK.unit is NoveltyUnit.DAYS
        assert NoveltyType.SUNDAY_WORK.polarity is NoveltyPolarity.ADDITION

    def test_deduction_types_keep_wire_codes(self):
        assert NoveltyType("MULTAS") is NoveltyType.FINES
        assert NoveltyType("PLAN_CORPORATIVO") is NoveltyType.CORPORATE_PLAN
        assert NoveltyType("RECORDAR") is NoveltyType.FUNERAL_PLAN
        assert NoveltyType.EMPLOYEE_FUND.polarity is NoveltyPolarity.DEDUCTION
        assert NoveltyType.EMPLOYEE_FUND.unit is NoveltyUnit.MONEY

    def test_additions_and_deductions_have_buckets(self):
        for novelty_type, spec in NOVELTY_CATALOG.items():
            if spec.polarity is NoveltyPolarity.DISCOUNT:
                assert spec.bucket is None, novelty_type
            else:
                assert spec.bucket, novelty_type

    def test_labels(self):
        assert NoveltyType.ABSENCE.label == "Ausencia"
        assert NoveltyType.FIXED_OVERTIME.label == "Horas extra fijas"


class TestQuantities:
    def test_quantity_for_matches_unit(self):
        assert quantity_for(NoveltyType.ABSENCE, Decimal("2")) == DaysQuantity(Decimal("2"))
        assert quantity_for(NoveltyType.NIGHT_SURCHARGE, Decimal("3")) == HoursQuantity(Decimal("3"))
        assert quantity_for(NoveltyType.FINES, Decimal("100")) == MoneyQuantity(Decimal("100"))

    @pytest.mark.parametrize("factory", [DaysQuantity, HoursQuantity, MoneyQuantity])
    def test_negative_rejected(self, factory):
        with pytest.raises(ValueError):
            factory(Decimal("-1"))


class TestEmployee:
    def _employee(self, **overrides):
        fields = dict(
            id="emp-1",
            name="Ana",
            legal_id="1020",
            contract_type=ContractType.NOMINA,
            salary=Decimal("1300000"),
        )
        fields.update(overrides)
        return Employee(**fields)

    def test_defaults(self):
        employee = self._employee()
        assert employee.worked_days == 30
        assert employee.created_date is None

    def test_negative_salary_rejected_and_logged(self, captured_logs):
        with pytest.raises(ValueError):
            self._employee(salary=Decimal("-1"))
        assert any(r["message"] == "employee_negative_salary" for r in captured_logs())

    def test_contract_type_must_be_enum(self):
        with pytest.raises(ValueError):
            self._employee(contract_type="FREELANCE")

    def test_is_hired_by(self):
        employee = self._employee(created_date=date(2024, 4, 10))
        assert employee.is_hired_by(date(2024, 4, 30))
        assert employee.is_hired_by(date(2024, 4, 10))
        assert not employee.is_hired_by(date(2024, 3, 31))
        assert self._employee().is_hired_by(date(1900, 1, 1))


class TestNovelty:
    def test_unit_mismatch_rejected(self):
        with pytest.raises(NoveltyUnitMismatchError) as exc_info:
            Novelty(
                id="n1",
                employee_id="emp-1",
                type=NoveltyType.ABSENCE,
                date=date(2024, 4, 1),
                quantity=HoursQuantity(Decimal("8")),
            )
        assert exc_info.value.code == "NOVELTY_UNIT_MISMATCH"
        assert exc_info.value.expected_unit == "days"
        assert exc_info.value.received_unit == "hours"

    def test_value_and_month(self):
        novelty = Novelty(
            id="n1",
            employee_id="emp-1",
            type=NoveltyType.FIXED_OVERTIME,
            date=date(2024, 4, 12),
            quantity=HoursQuantity(Decimal("10")),
        )
        assert novelty.value == Decimal("10")
        assert novelty.month == PayrollMonth(2024, 4)
        assert not novelty.is_recurring

    def test_recurring(self):
        novelty = Novelty(
            id="n1",
            employee_id="emp-1",
            type=NoveltyType.FINES,
            date=date(2024, 1, 2),
            quantity=MoneyQuantity(Decimal("5000")),
            recurrence=Recurrence(PayrollMonth(2024, 1)),
        )
        assert novelty.is_recurring


class TestAdvancePayment:
    @pytest.mark.parametrize("amount", ["0", "-100"])
    def test_amount_must_be_positive(self, amount):
        with pytest.raises(ValueError):
            AdvancePayment(
                id="a1",
                employee_id="emp-1",
                amount=Decimal(amount),
                date=date(2024, 3, 20),
                month=PayrollMonth(2024, 4),
            )
