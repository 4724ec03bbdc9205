#!/usr/bin/env python
"""Seed synthesized balance history for analytics demos.

Generates plausible daily snapshots for every user (or a single one) so the
trend and variation charts have something to show. Users without active
accounts, or that already have snapshots, are skipped by ``seed``.

Usage:
    python -m scripts.seed_analytics seed
    python -m scripts.seed_analytics seed --user-id <id> --days 30
    python -m scripts.seed_analytics clear [--user-id <id>]
    python -m scripts.seed_analytics reseed [--user-id <id>] [--days 90] [--verbose]
"""

import argparse
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from config import settings
from database import get_session_local
from logging_config import setup_logging
from models import BalanceSnapshot
from services.snapshot_service import SnapshotService
from services.snapshot_store import SqlSnapshotStore
from services.user_service import UserService

logger = logging.getLogger(__name__)


@dataclass
class SeedResult:
    users_processed: int = 0
    users_skipped: int = 0
    snapshots_created: int = 0


def seed_analytics(db: Session, user_id: Optional[str] = None, days: int = 90) -> SeedResult:
    """Backfill ``days`` of history for users that have none yet."""
    store = SqlSnapshotStore(db)
    service = SnapshotService(store)
    user_ids = [user_id] if user_id else UserService.list_user_ids(db)

    result = SeedResult()
    for uid in user_ids:
        if not store.find_active_accounts(uid):
            print(f"  No active accounts for user {uid}, skipping")
            result.users_skipped += 1
            continue

        existing = db.query(BalanceSnapshot).filter(BalanceSnapshot.user_id == uid).count()
        if existing:
            print(f"  User {uid} already has {existing} snapshots, skipping")
            result.users_skipped += 1
            continue

        created = service.backfill_history(uid, days)
        print(f"  Created {len(created)} snapshots for user {uid}")
        result.users_processed += 1
        result.snapshots_created += len(created)

    return result


def clear_analytics(db: Session, user_id: Optional[str] = None) -> int:
    """Delete snapshots for one user, or for everyone."""
    return SnapshotService(SqlSnapshotStore(db)).clear_snapshots(user_id)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Seed or clear synthesized analytics history")
    parser.add_argument("command", choices=["seed", "clear", "reseed"])
    parser.add_argument("--user-id", help="Only process this user (default: all users)")
    parser.add_argument(
        "--days",
        type=int,
        default=settings.DEMO_HISTORY_DAYS,
        help="Days of history to generate (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args(argv)
    if args.days < 0:
        parser.error("--days must be zero or positive")

    setup_logging("DEBUG" if args.verbose else None)
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        if args.command in ("clear", "reseed"):
            deleted = clear_analytics(db, args.user_id)
            print(f"Deleted {deleted} snapshots")
        if args.command in ("seed", "reseed"):
            print(f"Generating {args.days} days of history...")
            result = seed_analytics(db, args.user_id, args.days)
            print("\nSummary:")
            print(f"  Users processed: {result.users_processed}")
            print(f"  Users skipped: {result.users_skipped}")
            print(f"  Snapshots created: {result.snapshots_created}")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
