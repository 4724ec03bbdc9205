"""Analytics service - balance trends, monthly variations and currency breakdown."""

import logging
import random
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable, Optional

from models import Account, BalanceSnapshot
from schemas.analytics import DataSource
from services.balance_synthesis import (
    ZERO,
    demo_trend_balance,
    estimate_previous_total,
    shift_months,
)
from services.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)

TREND_LOOKBACK_MONTHS = 3
DEMO_TREND_DAYS = 90  # the demo series covers today and the 90 days before it


@dataclass(frozen=True)
class LegendAccount:
    """Account entry used to label trend series."""

    id: str
    name: str
    color: Optional[str]
    type: str


@dataclass(frozen=True)
class TrendPoint:
    """Total and per-account balances on one calendar day."""

    date: str  # ISO date (YYYY-MM-DD)
    total: Decimal
    accounts: dict[str, Decimal]


@dataclass(frozen=True)
class TrendsResult:
    source: DataSource
    trends: tuple[TrendPoint, ...] = ()
    accounts: tuple[LegendAccount, ...] = ()

    @property
    def has_data(self) -> bool:
        return self.source is DataSource.RECORDED

    @property
    def is_demo(self) -> bool:
        return self.source is DataSource.SYNTHESIZED


@dataclass(frozen=True)
class TypeVariation:
    """Month-over-month change for one account type."""

    type: str
    current_total: Decimal
    last_month_total: Decimal
    variation: Decimal
    account_count: int
    source: DataSource

    @property
    def has_data(self) -> bool:
        return self.source is DataSource.RECORDED


@dataclass(frozen=True)
class VariationsResult:
    """Change between the current total and the end of the previous month."""

    current_total: Decimal
    last_month_total: Decimal
    total_variation: Decimal
    source: DataSource
    period_current: date  # first day of the current month
    period_previous: date  # first day of the previous month
    variations_by_type: dict[str, TypeVariation] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return self.source is DataSource.RECORDED


@dataclass(frozen=True)
class CurrencyAccount:
    id: str
    name: str
    balance: Decimal
    type: str


@dataclass(frozen=True)
class CurrencyBucket:
    """Current balances held in one currency."""

    currency: str
    total_balance: Decimal
    account_count: int
    accounts: tuple[CurrencyAccount, ...]
    percentage: Decimal


@dataclass(frozen=True)
class CurrenciesResult:
    currencies: tuple[CurrencyBucket, ...]
    total_value: Decimal

    @property
    def currency_count(self) -> int:
        return len(self.currencies)


@dataclass(frozen=True)
class OverviewResult:
    trends: TrendsResult
    variations: VariationsResult
    currencies: CurrenciesResult
    last_updated: datetime


def variation_percent(current: Decimal, previous: Decimal) -> Decimal:
    """Percentage change from previous to current; 0 when previous <= 0."""
    if previous <= 0:
        return ZERO
    return (current - previous) / previous * 100


def previous_month_bounds(today: date) -> tuple[date, date]:
    """First and last day of the calendar month before ``today``."""
    last_day = today.replace(day=1) - timedelta(days=1)
    return last_day.replace(day=1), last_day


def latest_total_per_account(snapshots: Iterable[BalanceSnapshot]) -> Decimal:
    """Sum the first balance seen per account (snapshots sorted newest first)."""
    latest: dict[str, Decimal] = {}
    for snapshot in snapshots:
        latest.setdefault(snapshot.account_id, snapshot.balance)
    return sum(latest.values(), ZERO)


def _legend(accounts: list[Account]) -> tuple[LegendAccount, ...]:
    return tuple(
        LegendAccount(id=a.id, name=a.name, color=a.color, type=a.account_type)
        for a in accounts
    )


class AnalyticsService:
    """Read-side aggregations over accounts and balance snapshots.

    Every method degrades to clearly flagged synthesized output instead of
    failing when history is missing; store errors propagate unchanged.
    """

    def __init__(self, store: SnapshotStore, rng: Optional[random.Random] = None):
        self._store = store
        self._rng = rng or random.Random()

    def get_trends(self, user_id: str, today: Optional[date] = None) -> TrendsResult:
        """Day-by-day balance totals over the last three months.

        Falls back to a demo series when the user has accounts but no
        snapshots in the window.
        """
        today = today or date.today()
        accounts = self._store.find_active_accounts(user_id)
        if not accounts:
            return TrendsResult(source=DataSource.EMPTY)

        window_start = shift_months(today, -TREND_LOOKBACK_MONTHS)
        snapshots = self._store.find_snapshots(user_id=user_id, start_date=window_start)
        if not snapshots:
            logger.debug("No snapshots since %s for user %s, using demo trends", window_start, user_id)
            return self._demo_trends(accounts, today)

        return TrendsResult(
            source=DataSource.RECORDED,
            trends=self._group_by_date(snapshots),
            accounts=_legend(accounts),
        )

    @staticmethod
    def _group_by_date(snapshots: list[BalanceSnapshot]) -> tuple[TrendPoint, ...]:
        """Sum snapshots per calendar day, keeping the first one per account."""
        by_date: dict[date, dict[str, BalanceSnapshot]] = {}
        for snapshot in sorted(snapshots, key=lambda s: s.snapshot_date):
            by_date.setdefault(snapshot.snapshot_date, {}).setdefault(snapshot.account_id, snapshot)

        points = []
        for day, per_account in by_date.items():
            balances: dict[str, Decimal] = {}
            for snapshot in per_account.values():
                balances.setdefault(snapshot.account.name, snapshot.balance)
            points.append(
                TrendPoint(
                    date=day.isoformat(),
                    total=sum((s.balance for s in per_account.values()), ZERO),
                    accounts=balances,
                )
            )
        return tuple(points)

    def _demo_trends(self, accounts: list[Account], today: date) -> TrendsResult:
        points = []
        for days_back in range(DEMO_TREND_DAYS, -1, -1):
            day = today - timedelta(days=days_back)
            balances: dict[str, Decimal] = {}
            total = ZERO
            for account in accounts:
                balance = demo_trend_balance(account.balance, self._rng)
                balances[account.name] = balance
                total += balance
            points.append(
                TrendPoint(
                    date=day.isoformat(),
                    total=total,
                    accounts=balances,
                )
            )
        return TrendsResult(
            source=DataSource.SYNTHESIZED,
            trends=tuple(points),
            accounts=_legend(accounts),
        )

    def get_variations(self, user_id: str, today: Optional[date] = None) -> VariationsResult:
        """Compare current balances with the latest snapshots of last month.

        The comparison is made overall and per account type. When a group
        has no snapshots last month its previous total is estimated and
        flagged as synthesized.
        """
        today = today or date.today()
        month_start = today.replace(day=1)
        previous_start, previous_end = previous_month_bounds(today)

        accounts = self._store.find_active_accounts(user_id)
        current_total = sum((a.balance for a in accounts), ZERO)

        snapshots = self._store.find_snapshots(
            user_id=user_id,
            start_date=previous_start,
            end_date=previous_end,
            newest_first=True,
        )
        last_month_total, source = self._previous_total(current_total, snapshots)

        by_type: dict[str, list[Account]] = {}
        for account in accounts:
            by_type.setdefault(account.account_type, []).append(account)

        variations_by_type = {}
        for account_type, typed_accounts in by_type.items():
            typed_current = sum((a.balance for a in typed_accounts), ZERO)
            typed_snapshots = self._store.find_snapshots(
                user_id=user_id,
                account_ids=[a.id for a in typed_accounts],
                start_date=previous_start,
                end_date=previous_end,
                newest_first=True,
            )
            typed_previous, typed_source = self._previous_total(typed_current, typed_snapshots)
            variations_by_type[account_type] = TypeVariation(
                type=account_type,
                current_total=typed_current,
                last_month_total=typed_previous,
                variation=variation_percent(typed_current, typed_previous),
                account_count=len(typed_accounts),
                source=typed_source,
            )

        return VariationsResult(
            current_total=current_total,
            last_month_total=last_month_total,
            total_variation=variation_percent(current_total, last_month_total),
            source=source,
            period_current=month_start,
            period_previous=previous_start,
            variations_by_type=variations_by_type,
        )

    def _previous_total(
        self, current_total: Decimal, snapshots: list[BalanceSnapshot]
    ) -> tuple[Decimal, DataSource]:
        if snapshots:
            return latest_total_per_account(snapshots), DataSource.RECORDED
        return estimate_previous_total(current_total, self._rng), DataSource.SYNTHESIZED

    def get_currencies(self, user_id: str) -> CurrenciesResult:
        """Group current active balances by currency with each one's share."""
        accounts = self._store.find_active_accounts(user_id)

        grouped: dict[str, list[Account]] = {}
        for account in accounts:
            grouped.setdefault(account.currency, []).append(account)

        totals = {currency: sum((a.balance for a in members), ZERO) for currency, members in grouped.items()}
        total_value = sum(totals.values(), ZERO)

        buckets = tuple(
            CurrencyBucket(
                currency=currency,
                total_balance=totals[currency],
                account_count=len(members),
                accounts=tuple(
                    CurrencyAccount(id=a.id, name=a.name, balance=a.balance, type=a.account_type)
                    for a in members
                ),
                percentage=totals[currency] / total_value * 100 if total_value > 0 else ZERO,
            )
            for currency, members in grouped.items()
        )
        return CurrenciesResult(currencies=buckets, total_value=total_value)

    def get_overview(self, user_id: str, today: Optional[date] = None) -> OverviewResult:
        """Trends, variations and currencies in one call."""
        return OverviewResult(
            trends=self.get_trends(user_id, today),
            variations=self.get_variations(user_id, today),
            currencies=self.get_currencies(user_id),
            last_updated=datetime.now(timezone.utc),
        )
