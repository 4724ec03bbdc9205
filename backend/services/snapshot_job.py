"""Scheduled daily snapshot job.

Runs :meth:`SnapshotService.generate_daily_snapshots` for every user once a
day (23:59 local time by default) using an APScheduler background scheduler.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.orm import Session

from config import settings
from database import get_session_local
from services.snapshot_service import SnapshotService
from services.snapshot_store import SqlSnapshotStore
from services.user_service import UserService

logger = logging.getLogger(__name__)

JOB_ID = "daily_snapshots"

_scheduler: Optional[BackgroundScheduler] = None


@dataclass
class SnapshotJobResult:
    """Summary of one run over all users."""

    users_processed: int = 0
    success_count: int = 0
    error_count: int = 0
    snapshots_created: int = 0


def run_daily_snapshots(session_factory: Optional[Callable[[], Session]] = None) -> SnapshotJobResult:
    """Create today's snapshots for every user.

    A failure for one user is logged and counted; the remaining users are
    still processed. Retrying failed users is left to the next run.
    """
    session_factory = session_factory or get_session_local()
    db = session_factory()
    result = SnapshotJobResult()
    try:
        service = SnapshotService(SqlSnapshotStore(db))
        for user_id in UserService.list_user_ids(db):
            result.users_processed += 1
            try:
                created = service.generate_daily_snapshots(user_id)
            except Exception:
                db.rollback()
                result.error_count += 1
                logger.error("Snapshot creation failed for user %s", user_id, exc_info=True)
                continue
            result.success_count += 1
            result.snapshots_created += len(created)
    finally:
        db.close()

    logger.info(
        "Snapshot job completed: %d users, %d ok, %d errors, %d snapshots created",
        result.users_processed,
        result.success_count,
        result.error_count,
        result.snapshots_created,
    )
    return result


def start_snapshot_scheduler() -> BackgroundScheduler:
    """Start the background scheduler with the daily snapshot job."""
    global _scheduler
    if _scheduler is not None and _scheduler.running:
        return _scheduler

    scheduler = BackgroundScheduler()
    scheduler.add_job(
        run_daily_snapshots,
        CronTrigger(hour=settings.SNAPSHOT_JOB_HOUR, minute=settings.SNAPSHOT_JOB_MINUTE),
        id=JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    _scheduler = scheduler
    logger.info(
        "Daily snapshot job scheduled (%02d:%02d every day)",
        settings.SNAPSHOT_JOB_HOUR,
        settings.SNAPSHOT_JOB_MINUTE,
    )
    return scheduler


def stop_snapshot_scheduler() -> None:
    """Shut down the scheduler if it is running."""
    global _scheduler
    if _scheduler is not None and _scheduler.running:
        _scheduler.shutdown(wait=False)
        logger.info("Daily snapshot job stopped")
    _scheduler = None
