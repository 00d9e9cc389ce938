"""Tests for the engine invocation tracer (nomina_engines/tracer.py)."""

from decimal import Decimal

from nomina_engines.tracer import _canonicalize, compute_input_fingerprint, traced_engine
from nomina_kernel.domain.month import PayrollMonth


class TestCanonicalize:
    def test_scalars(self):
        assert _canonicalize(None) == "null"
        assert _canonicalize(3) == "3"
        assert _canonicalize("abc") == "abc"

    def test_dict_keys_sorted(self):
        assert _canonicalize({"b": 1, "a": 2}) == _canonicalize({"a": 2, "b": 1})

    def test_sequence_order_kept(self):
        assert _canonicalize([1, 2]) != _canonicalize([2, 1])
        assert _canonicalize((1, 2)) == _canonicalize([1, 2])

    def test_value_objects_use_str(self):
        assert _canonicalize(PayrollMonth(2024, 4)) == "2024-04"
        assert _canonicalize(Decimal("1.50")) == "1.50"

    def test_records_fingerprinted_field_by_field(self, create_employee):
        employee = create_employee(employee_id="emp-1")
        text = _canonicalize(employee)
        assert text.startswith("Employee(id=emp-1,")
        assert "contract_type=NOMINA" in text
        assert "salary=1300000" in text

    def test_changed_salary_changes_fingerprint(self, create_employee):
        before = create_employee(employee_id="emp-1")
        after = create_employee(employee_id="emp-1", salary="1400000")
        assert compute_input_fingerprint(("employees",), {"employees": (before,)}) != (
            compute_input_fingerprint(("employees",), {"employees": (after,)})
        )


class TestFingerprint:
    def test_deterministic(self):
        kwargs = {"target_month": "2024-04", "rates": {"health_pct": "4"}}
        first = compute_input_fingerprint(("target_month", "rates"), kwargs)
        second = compute_input_fingerprint(("target_month", "rates"), dict(kwargs))
        assert first == second
        assert len(first) == 16

    def test_missing_fields_recorded_as_null(self):
        assert compute_input_fingerprint(("x",), {}) == compute_input_fingerprint(
            ("x",), {"x": None},
        )

    def test_sensitive_to_selected_fields_only(self):
        base = compute_input_fingerprint(("month",), {"month": "2024-04", "other": 1})
        assert base == compute_input_fingerprint(("month",), {"month": "2024-04", "other": 2})
        assert base != compute_input_fingerprint(("month",), {"month": "2024-05", "other": 1})


class TestTracedEngine:
    def test_wraps_and_logs(self, captured_logs):
        @traced_engine("sample", "2.1", fingerprint_fields=("value",))
        def double(*, value):
            return value * 2

        assert double(value=21) == 42
        (trace,) = [r for r in captured_logs() if r["message"] == "NOMINA_ENGINE_TRACE"]
        assert trace["trace_type"] == "NOMINA_ENGINE_TRACE"
        assert trace["engine_name"] == "sample"
        assert trace["engine_version"] == "2.1"
        assert trace["input_fingerprint"] == compute_input_fingerprint(("value",), {"value": 21})
        assert trace["function"].endswith("double")
        assert trace["duration_ms"] >= 0

    def test_preserves_metadata(self):
        @traced_engine("sample", "1.0")
        def documented():
            """Docstring survives."""

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Docstring survives."

    def test_no_fingerprint_fields_gives_empty_fingerprint(self, captured_logs):
        @traced_engine("sample", "1.0")
        def noop():
            return None

        noop()
        (trace,) = [r for r in captured_logs() if r["message"] == "NOMINA_ENGINE_TRACE"]
        assert trace["input_fingerprint"] == ""
