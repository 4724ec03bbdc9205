"""Unit tests for balance synthesis helpers."""

import random
from datetime import date
from decimal import Decimal

import pytest

from services.balance_synthesis import (
    demo_trend_balance,
    estimate_previous_total,
    is_weekend,
    shift_months,
    synthesize_balance,
    to_cents,
)
from tests.fixtures.mocks import FixedRandom

WEDNESDAY = date(2026, 3, 11)
SATURDAY = date(2026, 3, 14)
PAYDAY_THURSDAY = date(2026, 3, 26)


class TestToCents:
    """Tests for to_cents()."""

    def test_rounds_half_up(self):
        assert to_cents(Decimal("10.005")) == Decimal("10.01")
        assert to_cents(Decimal("10.004")) == Decimal("10.00")

    def test_always_two_places(self):
        assert str(to_cents(Decimal("7"))) == "7.00"


class TestShiftMonths:
    """Tests for shift_months()."""

    def test_moves_back_three_months(self):
        assert shift_months(date(2026, 3, 11), -3) == date(2025, 12, 11)

    def test_clamps_to_end_of_shorter_month(self):
        assert shift_months(date(2026, 5, 31), -3) == date(2026, 2, 28)

    def test_leap_year(self):
        assert shift_months(date(2024, 5, 31), -3) == date(2024, 2, 29)

    def test_forward(self):
        assert shift_months(date(2025, 11, 15), 2) == date(2026, 1, 15)


def test_is_weekend():
    """Saturday and Sunday are weekend days."""
    assert is_weekend(SATURDAY)
    assert is_weekend(date(2026, 3, 15))
    assert not is_weekend(WEDNESDAY)


class TestSynthesizeBalance:
    """Tests for synthesize_balance()."""

    def test_weekday_draws_only_daily_noise(self):
        """Weekdays draw a single uniform value in +/-3%."""
        rng = FixedRandom(0.5)
        synthesize_balance(Decimal("1000.00"), 5, WEDNESDAY, "savings", rng)
        assert rng.calls == [(-0.03, 0.03)]

    def test_weekend_draws_daily_then_weekend_noise(self):
        rng = FixedRandom(0.5)
        synthesize_balance(Decimal("1000.00"), 5, SATURDAY, "savings", rng)
        assert rng.calls == [(-0.03, 0.03), (-0.075, 0.075)]

    def test_trend_only_with_neutral_noise(self):
        """With zero noise the result is current * (1 - d * rate)."""
        result = synthesize_balance(Decimal("1000.00"), 10, WEDNESDAY, "checking", FixedRandom(0.5))
        assert result == Decimal("992.00")

    def test_unknown_type_uses_default_rate(self):
        result = synthesize_balance(Decimal("1000.00"), 10, WEDNESDAY, "crypto", FixedRandom(0.5))
        assert result == Decimal("990.00")

    def test_payday_bump_for_checking(self):
        result = synthesize_balance(Decimal("1000.00"), 0, PAYDAY_THURSDAY, "checking", FixedRandom(0.5))
        assert result == Decimal("1100.00")

    def test_no_payday_bump_for_savings(self):
        result = synthesize_balance(Decimal("1000.00"), 0, PAYDAY_THURSDAY, "savings", FixedRandom(0.5))
        assert result == Decimal("1000.00")

    def test_weekend_upper_extreme(self):
        result = synthesize_balance(Decimal("1000.00"), 0, SATURDAY, "savings", FixedRandom(1.0))
        assert result == Decimal("1105.00")

    def test_never_negative(self):
        """A long backfill of a cash account bottoms out at zero."""
        result = synthesize_balance(Decimal("500.00"), 600, WEDNESDAY, "cash", FixedRandom(0.0))
        assert result == Decimal("0.00")

    def test_zero_balance_stays_zero(self):
        result = synthesize_balance(Decimal("0.00"), 3, SATURDAY, "checking", random.Random(7))
        assert result == Decimal("0")

    @pytest.mark.parametrize("seed", range(5))
    def test_yesterday_within_expected_band(self, seed):
        """Checking at 1200 one weekday back stays within trend +/- 3%."""
        result = synthesize_balance(
            Decimal("1200.00"), 1, date(2026, 3, 10), "checking", random.Random(seed)
        )
        assert Decimal("1163.04") <= result <= Decimal("1235.04")
        assert result == result.quantize(Decimal("0.01"))

    def test_same_seed_same_result(self):
        a = synthesize_balance(Decimal("1200.00"), 7, SATURDAY, "investment", random.Random(42))
        b = synthesize_balance(Decimal("1200.00"), 7, SATURDAY, "investment", random.Random(42))
        assert a == b


class TestDemoAndEstimates:
    """Tests for demo_trend_balance() and estimate_previous_total()."""

    def test_demo_trend_range(self):
        rng = FixedRandom(0.0)
        assert demo_trend_balance(Decimal("1000.00"), rng) == Decimal("950.00")
        assert rng.calls == [(-0.05, 0.05)]

    def test_estimate_previous_total_bounds(self):
        assert estimate_previous_total(Decimal("1000.00"), FixedRandom(0.0)) == Decimal("950.00")
        assert estimate_previous_total(Decimal("1000.00"), FixedRandom(1.0)) == Decimal("1050.00")
