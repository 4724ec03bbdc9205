"""Unit tests for SnapshotService."""

import random
from datetime import date, timedelta
from decimal import Decimal

import pytest

from models import BalanceSnapshot
from services.snapshot_service import SnapshotService
from services.snapshot_store import SnapshotExistsError, SqlSnapshotStore
from tests.fixtures import make_account, make_snapshot
from tests.fixtures.mocks import FixedRandom, InMemorySnapshotStore, make_transient_account

TODAY = date(2026, 3, 11)  # a Wednesday


@pytest.fixture
def sql_service(db):
    return SnapshotService(SqlSnapshotStore(db), rng=random.Random(1))


class TestGenerateDailySnapshots:
    """Tests for generate_daily_snapshots()."""

    def test_creates_one_per_active_account(self, db, sql_service, user, account, savings_account):
        created = sql_service.generate_daily_snapshots(user.id, today=TODAY)

        assert len(created) == 2
        by_account = {s.account_id: s for s in created}
        assert by_account[account.id].balance == Decimal("1200.00")
        assert by_account[savings_account.id].balance == Decimal("800.00")
        assert db.query(BalanceSnapshot).count() == 2

    def test_derived_calendar_fields(self, sql_service, user, account):
        created = sql_service.generate_daily_snapshots(user.id, today=TODAY)

        snapshot = created[0]
        assert snapshot.snapshot_date == TODAY
        assert snapshot.day_of_week == 3  # 0 = Sunday
        assert snapshot.day_of_month == 11
        assert snapshot.month == 3
        assert snapshot.year == 2026
        assert snapshot.user_id == user.id

    def test_second_run_same_day_is_noop(self, db, sql_service, user, account):
        first = sql_service.generate_daily_snapshots(user.id, today=TODAY)
        second = sql_service.generate_daily_snapshots(user.id, today=TODAY)

        assert len(first) == 1
        assert second == []
        assert db.query(BalanceSnapshot).count() == 1

    def test_next_day_creates_again(self, sql_service, user, account):
        sql_service.generate_daily_snapshots(user.id, today=TODAY)
        created = sql_service.generate_daily_snapshots(user.id, today=TODAY + timedelta(days=1))
        assert len(created) == 1

    def test_skips_inactive_accounts(self, db, sql_service, user, account):
        make_account(db, user, name="Closed", is_active=False)
        created = sql_service.generate_daily_snapshots(user.id, today=TODAY)
        assert [s.account_id for s in created] == [account.id]

    def test_no_accounts_returns_empty(self, sql_service, user):
        assert sql_service.generate_daily_snapshots(user.id, today=TODAY) == []

    def test_only_touches_own_accounts(self, db, sql_service, user, other_user, account):
        make_account(db, other_user, name="Grace Checking")
        created = sql_service.generate_daily_snapshots(user.id, today=TODAY)
        assert [s.account_id for s in created] == [account.id]

    def test_concurrent_insert_is_skipped(self):
        """A snapshot written between the check and the insert is not an error."""
        account = make_transient_account()

        class RacingStore(InMemorySnapshotStore):
            def find_snapshots(self, **kwargs):
                return []

        store = RacingStore(accounts=[account])
        store.add_snapshot(account, TODAY, "1200.00")

        created = SnapshotService(store).generate_daily_snapshots(account.user_id, today=TODAY)

        assert created == []
        assert len(store.snapshots) == 1
        assert store.commits == 0

    def test_commits_once(self):
        accounts = [make_transient_account(name=f"A{i}") for i in range(3)]
        store = InMemorySnapshotStore(accounts=accounts)

        SnapshotService(store).generate_daily_snapshots("user-1", today=TODAY)

        assert store.commits == 1


class TestBackfillHistory:
    """Tests for backfill_history()."""

    def test_one_snapshot_per_account_day(self, db, sql_service, user, account, savings_account):
        created = sql_service.backfill_history(user.id, 5, today=TODAY)

        assert len(created) == 12
        for acc in (account, savings_account):
            days = sorted(
                s.snapshot_date for s in db.query(BalanceSnapshot).filter_by(account_id=acc.id)
            )
            assert days == [TODAY - timedelta(days=n) for n in range(5, -1, -1)]

    def test_yesterday_and_today_for_checking(self, sql_service, user, account):
        """Checking at 1200 with N=1: two rows, both near 1200 and never negative."""
        created = sql_service.backfill_history(user.id, 1, today=TODAY)

        by_day = {s.snapshot_date: s for s in created}
        assert set(by_day) == {date(2026, 3, 10), TODAY}
        assert Decimal("1163.04") <= by_day[date(2026, 3, 10)].balance <= Decimal("1235.04")
        assert Decimal("1164.00") <= by_day[TODAY].balance <= Decimal("1236.00")

    def test_rerun_creates_nothing(self, db, sql_service, user, account):
        sql_service.backfill_history(user.id, 3, today=TODAY)
        again = sql_service.backfill_history(user.id, 3, today=TODAY)

        assert again == []
        assert db.query(BalanceSnapshot).count() == 4

    def test_existing_snapshot_not_overwritten(self, db, sql_service, user, account):
        existing = make_snapshot(db, account, TODAY - timedelta(days=2), "42.00")

        created = sql_service.backfill_history(user.id, 3, today=TODAY)

        assert len(created) == 3
        assert TODAY - timedelta(days=2) not in {s.snapshot_date for s in created}
        db.refresh(existing)
        assert existing.balance == Decimal("42.00")

    def test_zero_days_is_today_only(self, sql_service, user, account):
        created = sql_service.backfill_history(user.id, 0, today=TODAY)
        assert [s.snapshot_date for s in created] == [TODAY]

    def test_negative_days_rejected(self, sql_service, user, account):
        with pytest.raises(ValueError, match="days"):
            sql_service.backfill_history(user.id, -1, today=TODAY)

    def test_balances_never_negative(self, db, sql_service, user):
        make_account(db, user, name="Wallet", account_type="cash", balance="50.00")
        created = sql_service.backfill_history(user.id, 700, today=TODAY)
        assert all(s.balance >= 0 for s in created)

    def test_no_accounts_returns_empty(self, sql_service, user):
        assert sql_service.backfill_history(user.id, 10, today=TODAY) == []

    def test_commits_in_batches(self):
        store = InMemorySnapshotStore(accounts=[make_transient_account()])
        service = SnapshotService(store, rng=FixedRandom(0.5), batch_size=2)

        created = service.backfill_history("user-1", 4, today=TODAY)

        assert len(created) == 5
        assert store.commits == 3

    def test_concurrent_insert_is_skipped(self):
        account = make_transient_account()

        class RacingStore(InMemorySnapshotStore):
            def create_snapshot(self, snapshot):
                if snapshot.snapshot_date == TODAY:
                    raise SnapshotExistsError(snapshot.account_id, snapshot.snapshot_date)
                return super().create_snapshot(snapshot)

        store = RacingStore(accounts=[account])
        created = SnapshotService(store, rng=FixedRandom(0.5)).backfill_history(
            account.user_id, 2, today=TODAY
        )

        assert [s.snapshot_date for s in created] == [TODAY - timedelta(days=2), TODAY - timedelta(days=1)]

    def test_walks_days_oldest_first(self):
        accounts = [make_transient_account(name="A"), make_transient_account(name="B")]
        store = InMemorySnapshotStore(accounts=accounts)

        created = SnapshotService(store, rng=FixedRandom(0.5)).backfill_history(
            "user-1", 1, today=TODAY
        )

        assert [(s.snapshot_date, s.account.name) for s in created] == [
            (TODAY - timedelta(days=1), "A"),
            (TODAY - timedelta(days=1), "B"),
            (TODAY, "A"),
            (TODAY, "B"),
        ]


class TestClearSnapshots:
    """Tests for clear_snapshots()."""

    def test_clears_only_that_user(self, db, sql_service, user, other_user, account):
        other_account = make_account(db, other_user, name="Grace Checking")
        make_snapshot(db, account, TODAY, "1.00")
        make_snapshot(db, other_account, TODAY, "2.00")

        deleted = sql_service.clear_snapshots(user.id)

        assert deleted == 1
        remaining = db.query(BalanceSnapshot).all()
        assert [s.account_id for s in remaining] == [other_account.id]

    def test_clears_everyone_without_user(self, db, sql_service, user, other_user, account):
        other_account = make_account(db, other_user, name="Grace Checking")
        make_snapshot(db, account, TODAY, "1.00")
        make_snapshot(db, other_account, TODAY, "2.00")

        assert sql_service.clear_snapshots() == 2
        assert db.query(BalanceSnapshot).count() == 0
