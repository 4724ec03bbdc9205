"""Snapshot service - daily balance snapshots and historical backfill."""

import logging
import random
from datetime import date, timedelta
from typing import Optional

from config import settings
from models import Account, BalanceSnapshot
from services.balance_synthesis import synthesize_balance
from services.snapshot_store import SnapshotExistsError, SnapshotStore

logger = logging.getLogger(__name__)


class SnapshotService:
    """Creates balance snapshots for a user's active accounts.

    At most one snapshot exists per account and calendar day. Both the
    daily generator and the historical backfill skip account-days that
    already have one, so either can be re-run safely.
    """

    def __init__(
        self,
        store: SnapshotStore,
        rng: Optional[random.Random] = None,
        batch_size: Optional[int] = None,
    ):
        """Initialize with the store and optional randomness/batching overrides.

        Args:
            store: Snapshot storage.
            rng: Random source for synthesized balances. A fresh
                ``random.Random()`` when None.
            batch_size: Snapshots written per commit during backfills.
                Defaults to ``settings.BACKFILL_BATCH_SIZE``.
        """
        self._store = store
        self._rng = rng or random.Random()
        self._batch_size = batch_size or settings.BACKFILL_BATCH_SIZE

    def generate_daily_snapshots(
        self, user_id: str, today: Optional[date] = None
    ) -> list[BalanceSnapshot]:
        """Record today's balance for every active account that lacks one.

        Args:
            user_id: Owner of the accounts.
            today: Calendar day to record (defaults to the local date).

        Returns:
            The snapshots created. Empty when everything is already up to
            date or the user has no active accounts.
        """
        today = today or date.today()
        accounts = self._store.find_active_accounts(user_id)

        created: list[BalanceSnapshot] = []
        for account in accounts:
            existing = self._store.find_snapshots(
                account_ids=[account.id], start_date=today, end_date=today, limit=1
            )
            if existing:
                continue

            snapshot = self._create(account, account.balance, today)
            if snapshot is not None:
                created.append(snapshot)

        if created:
            self._store.commit()

        logger.info(
            "Daily snapshots for user %s on %s: %d created, %d accounts",
            user_id, today.isoformat(), len(created), len(accounts),
        )
        return created

    def backfill_history(
        self, user_id: str, days: int, today: Optional[date] = None
    ) -> list[BalanceSnapshot]:
        """Synthesize snapshots for the ``days + 1`` days ending today.

        Account-days that already have a snapshot are left untouched.
        Writes are committed every ``batch_size`` snapshots.

        Raises:
            ValueError: If days is negative.
        """
        if days < 0:
            raise ValueError(f"days must be zero or positive, got {days}")

        today = today or date.today()
        start_date = today - timedelta(days=days)

        accounts = self._store.find_active_accounts(user_id)
        if not accounts:
            logger.info("No active accounts for user %s, nothing to backfill", user_id)
            return []

        recorded: dict[str, set[date]] = {account.id: set() for account in accounts}
        for snapshot in self._store.find_snapshots(
            account_ids=list(recorded), start_date=start_date, end_date=today
        ):
            recorded[snapshot.account_id].add(snapshot.snapshot_date)

        created: list[BalanceSnapshot] = []
        pending = 0
        for days_back in range(days, -1, -1):
            day = today - timedelta(days=days_back)
            for account in accounts:
                if day in recorded[account.id]:
                    continue

                balance = synthesize_balance(
                    account.balance, days_back, day, account.account_type, self._rng
                )
                snapshot = self._create(account, balance, day)
                if snapshot is None:
                    continue
                created.append(snapshot)

                pending += 1
                if pending >= self._batch_size:
                    self._store.commit()
                    pending = 0

        if pending:
            self._store.commit()

        logger.info(
            "Backfilled %d snapshots over %d days for user %s (%d accounts)",
            len(created), days + 1, user_id, len(accounts),
        )
        return created

    def clear_snapshots(self, user_id: Optional[str] = None) -> int:
        """Delete every snapshot of a user, or of all users when user_id is None."""
        deleted = self._store.delete_snapshots(user_id=user_id)
        self._store.commit()
        logger.info("Deleted %d snapshots%s", deleted, f" for user {user_id}" if user_id else "")
        return deleted

    def _create(self, account: Account, balance, day: date) -> Optional[BalanceSnapshot]:
        """Create one snapshot, returning None if another writer got there first."""
        snapshot = BalanceSnapshot.for_date(
            account_id=account.id,
            user_id=account.user_id,
            balance=balance,
            snapshot_date=day,
        )
        try:
            return self._store.create_snapshot(snapshot)
        except SnapshotExistsError:
            logger.info(
                "Snapshot for account %s on %s created concurrently, skipping",
                account.id, day.isoformat(),
            )
            return None
