"""Balance synthesis - plausible balances for days with no recorded history.

Synthesized figures are estimates, not a ledger reconstruction: they walk
backwards from an account's present balance with a per-type drift, random
daily noise, weekend noise and a payday bump for checking accounts.
"""

import calendar
import random
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")
ZERO = Decimal("0")

# Fraction of the current balance removed per day back in time.
DECAY_RATES: dict[str, float] = {
    "savings": 0.0005,
    "checking": 0.0008,
    "investment": 0.001,
    "cash": 0.002,
    "other": 0.001,
}
DEFAULT_DECAY_RATE = 0.001

DAILY_NOISE = 0.03
WEEKEND_NOISE = 0.075
PAYDAY_BUMP = 0.1
PAYDAY_DAYS = range(25, 29)

DEMO_TREND_NOISE = 0.05
PREVIOUS_TOTAL_NOISE = 0.05


def to_cents(value: Decimal) -> Decimal:
    """Round a monetary amount to 2 decimal places (half-up)."""
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def _scale(amount: Decimal, factor: float) -> Decimal:
    return to_cents(Decimal(amount) * Decimal(str(factor)))


def is_weekend(day: date) -> bool:
    """True for Saturday and Sunday."""
    return day.weekday() >= 5


def shift_months(day: date, months: int) -> date:
    """Move a date by whole calendar months, clamping to the month's last day."""
    month_index = day.year * 12 + (day.month - 1) + months
    year, month_zero = divmod(month_index, 12)
    month = month_zero + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def synthesize_balance(
    current_balance: Decimal,
    days_back: int,
    on_date: date,
    account_type: str,
    rng: random.Random,
) -> Decimal:
    """Estimate an account's balance ``days_back`` days before today.

    Draws one uniform value for the daily noise and, on weekends, a second
    one for the weekend noise, in that order. The result is rounded to cents
    and never negative.
    """
    trend_factor = 1 - days_back * DECAY_RATES.get(account_type, DEFAULT_DECAY_RATE)
    random_variation = rng.uniform(-DAILY_NOISE, DAILY_NOISE)
    weekend_factor = rng.uniform(-WEEKEND_NOISE, WEEKEND_NOISE) if is_weekend(on_date) else 0.0
    payday_factor = PAYDAY_BUMP if account_type == "checking" and on_date.day in PAYDAY_DAYS else 0.0

    factor = trend_factor + random_variation + weekend_factor + payday_factor
    return max(ZERO, _scale(current_balance, factor))


def demo_trend_balance(current_balance: Decimal, rng: random.Random) -> Decimal:
    """Undirected +/-5% wobble around the current balance for demo charts."""
    return _scale(current_balance, 1 + rng.uniform(-DEMO_TREND_NOISE, DEMO_TREND_NOISE))


def estimate_previous_total(current_total: Decimal, rng: random.Random) -> Decimal:
    """Stand-in for last month's total when no snapshots were recorded."""
    return _scale(current_total, rng.uniform(1 - PREVIOUS_TOTAL_NOISE, 1 + PREVIOUS_TOTAL_NOISE))
