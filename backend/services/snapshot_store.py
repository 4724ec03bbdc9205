"""Snapshot store - persistence boundary for the analytics services.

The analytics services only talk to storage through the
:class:`SnapshotStore` protocol, so they can run against the SQLAlchemy
implementation in production and an in-memory fake in tests.
"""

import logging
from datetime import date
from typing import Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from models import Account, BalanceSnapshot

logger = logging.getLogger(__name__)


class SnapshotExistsError(Exception):
    """A snapshot already exists for the account and calendar day."""

    def __init__(self, account_id: str, snapshot_date: date):
        self.account_id = account_id
        self.snapshot_date = snapshot_date
        super().__init__(
            f"Snapshot already exists for account {account_id} on {snapshot_date.isoformat()}"
        )


class SnapshotStore(Protocol):
    """Storage operations consumed by the analytics services."""

    def find_active_accounts(self, user_id: str) -> list[Account]:
        """Return the user's active accounts, oldest first."""
        ...

    def find_snapshots(
        self,
        *,
        user_id: str | None = None,
        account_ids: list[str] | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        newest_first: bool = False,
        limit: int | None = None,
    ) -> list[BalanceSnapshot]:
        """Return snapshots matching every given filter.

        Date bounds are inclusive. Results are ordered by snapshot_date
        (ascending unless ``newest_first``) with the owning account loaded.
        """
        ...

    def create_snapshot(self, snapshot: BalanceSnapshot) -> BalanceSnapshot:
        """Persist a new snapshot.

        Raises:
            SnapshotExistsError: The account already has a snapshot that day.
        """
        ...

    def delete_snapshots(self, *, user_id: str | None = None) -> int:
        """Delete snapshots (all of them when user_id is None). Returns the count."""
        ...

    def commit(self) -> None:
        """Make pending writes durable."""
        ...


class SqlSnapshotStore:
    """SnapshotStore backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self._db = db

    def find_active_accounts(self, user_id: str) -> list[Account]:
        return (
            self._db.query(Account)
            .filter(Account.user_id == user_id, Account.is_active.is_(True))
            .order_by(Account.created_at, Account.id)
            .all()
        )

    def find_snapshots(
        self,
        *,
        user_id: str | None = None,
        account_ids: list[str] | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        newest_first: bool = False,
        limit: int | None = None,
    ) -> list[BalanceSnapshot]:
        query = self._db.query(BalanceSnapshot).options(joinedload(BalanceSnapshot.account))
        if user_id is not None:
            query = query.filter(BalanceSnapshot.user_id == user_id)
        if account_ids is not None:
            query = query.filter(BalanceSnapshot.account_id.in_(account_ids))
        if start_date is not None:
            query = query.filter(BalanceSnapshot.snapshot_date >= start_date)
        if end_date is not None:
            query = query.filter(BalanceSnapshot.snapshot_date <= end_date)

        if newest_first:
            query = query.order_by(BalanceSnapshot.snapshot_date.desc(), BalanceSnapshot.created_at.desc())
        else:
            query = query.order_by(BalanceSnapshot.snapshot_date.asc(), BalanceSnapshot.created_at.asc())

        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def create_snapshot(self, snapshot: BalanceSnapshot) -> BalanceSnapshot:
        # Savepoint so a unique-constraint loss only discards this row
        savepoint = self._db.begin_nested()
        try:
            self._db.add(snapshot)
            self._db.flush()
        except IntegrityError:
            savepoint.rollback()
            raise SnapshotExistsError(snapshot.account_id, snapshot.snapshot_date)
        savepoint.commit()
        return snapshot

    def delete_snapshots(self, *, user_id: str | None = None) -> int:
        query = self._db.query(BalanceSnapshot)
        if user_id is not None:
            query = query.filter(BalanceSnapshot.user_id == user_id)
        deleted = query.delete(synchronize_session=False)
        self._db.flush()
        return deleted

    def commit(self) -> None:
        self._db.commit()
