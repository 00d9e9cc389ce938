"""Tests for the injectable clocks (nomina_kernel/domain/clock.py)."""

from datetime import UTC, date, datetime

from nomina_kernel.domain.clock import BOGOTA, DeterministicClock, SystemClock


class TestDeterministicClock:
    def test_default_instant(self, deterministic_clock):
        assert deterministic_clock.now() == datetime(2024, 4, 15, 12, 0, tzinfo=UTC)
        assert deterministic_clock.today() == date(2024, 4, 15)

    def test_frozen_until_moved(self, deterministic_clock):
        assert deterministic_clock.now() == deterministic_clock.now()
        deterministic_clock.advance(90)
        assert deterministic_clock.now() == datetime(2024, 4, 15, 12, 1, 30, tzinfo=UTC)

    def test_set_time(self, deterministic_clock):
        deterministic_clock.set_time(datetime(2024, 12, 31, 23, 0, tzinfo=UTC))
        assert deterministic_clock.today() == date(2024, 12, 31)

    def test_naive_time_read_as_utc(self):
        clock = DeterministicClock(datetime(2024, 4, 15, 12, 0))
        assert clock.now().tzinfo is UTC


class TestBogotaDate:
    def test_early_utc_morning_is_previous_day_in_bogota(self):
        clock = DeterministicClock(datetime(2024, 5, 1, 3, 0, tzinfo=UTC))
        assert clock.today() == date(2024, 4, 30)

    def test_after_five_utc_dates_agree(self):
        clock = DeterministicClock(datetime(2024, 5, 1, 5, 0, tzinfo=UTC))
        assert clock.today() == date(2024, 5, 1)

    def test_bogota_offset(self):
        assert BOGOTA.utcoffset(None).total_seconds() == -5 * 3600


class TestSystemClock:
    def test_now_is_aware(self):
        assert SystemClock().now().tzinfo is not None
