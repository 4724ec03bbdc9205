"""Analytics API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.helpers import get_current_user_id
from config import settings
from database import get_db
from schemas import (
    BackfillRequest,
    ClearSnapshotsResponse,
    CurrenciesResponse,
    OverviewResponse,
    SnapshotBatchResponse,
    SnapshotResponse,
    TrendsResponse,
    VariationsResponse,
)
from schemas.analytics import TypeVariationResponse, VariationPeriod
from services.analytics_service import AnalyticsService, VariationsResult
from services.snapshot_service import SnapshotService
from services.snapshot_store import SnapshotStore, SqlSnapshotStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


def get_snapshot_store(db: Session = Depends(get_db)) -> SnapshotStore:
    """Snapshot store bound to the request's session."""
    return SqlSnapshotStore(db)


def get_analytics_service(store: SnapshotStore = Depends(get_snapshot_store)) -> AnalyticsService:
    """Get AnalyticsService instance, allowing for test overrides."""
    return AnalyticsService(store)


def get_snapshot_service(store: SnapshotStore = Depends(get_snapshot_store)) -> SnapshotService:
    """Get SnapshotService instance, allowing for test overrides."""
    return SnapshotService(store)


def _variations_response(result: VariationsResult) -> VariationsResponse:
    return VariationsResponse(
        has_data=result.has_data,
        source=result.source,
        current_total=result.current_total,
        last_month_total=result.last_month_total,
        total_variation=result.total_variation,
        variations_by_type={
            account_type: TypeVariationResponse.model_validate(variation)
            for account_type, variation in result.variations_by_type.items()
        },
        period=VariationPeriod(current=result.period_current, previous=result.period_previous),
    )


def _batch_response(snapshots) -> SnapshotBatchResponse:
    return SnapshotBatchResponse(
        created_count=len(snapshots),
        snapshots=[SnapshotResponse.model_validate(s) for s in snapshots],
    )


@router.get("/trends", response_model=TrendsResponse)
def get_trends(
    user_id: str = Depends(get_current_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Daily balance totals for the last three months.

    ``is_demo`` is true when no snapshots exist yet and the series was
    synthesized; clients should label such charts as estimates.
    """
    return TrendsResponse.model_validate(service.get_trends(user_id))


@router.get("/variations", response_model=VariationsResponse)
def get_variations(
    user_id: str = Depends(get_current_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Percentage change since the end of last month, overall and per account type."""
    return _variations_response(service.get_variations(user_id))


@router.get("/currencies", response_model=CurrenciesResponse)
def get_currencies(
    user_id: str = Depends(get_current_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Current balances grouped by currency."""
    return CurrenciesResponse.model_validate(service.get_currencies(user_id))


@router.get("/overview", response_model=OverviewResponse)
def get_overview(
    user_id: str = Depends(get_current_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Trends, variations and currencies in a single response."""
    overview = service.get_overview(user_id)
    return OverviewResponse(
        trends=TrendsResponse.model_validate(overview.trends),
        variations=_variations_response(overview.variations),
        currencies=CurrenciesResponse.model_validate(overview.currencies),
        last_updated=overview.last_updated,
    )


@router.post("/snapshots", response_model=SnapshotBatchResponse, status_code=201)
def create_snapshots(
    user_id: str = Depends(get_current_user_id),
    service: SnapshotService = Depends(get_snapshot_service),
):
    """Record today's balance for every active account (manual trigger).

    Returns an empty batch when today's snapshots already exist.
    """
    return _batch_response(service.generate_daily_snapshots(user_id))


@router.post("/backfill", response_model=SnapshotBatchResponse, status_code=201)
def backfill_snapshots(
    body: BackfillRequest | None = None,
    user_id: str = Depends(get_current_user_id),
    service: SnapshotService = Depends(get_snapshot_service),
):
    """Synthesize plausible history for days without snapshots."""
    days = body.days if body and body.days is not None else settings.DEMO_HISTORY_DAYS
    try:
        snapshots = service.backfill_history(user_id, days)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _batch_response(snapshots)


@router.delete("/snapshots", response_model=ClearSnapshotsResponse)
def clear_snapshots(
    user_id: str = Depends(get_current_user_id),
    service: SnapshotService = Depends(get_snapshot_service),
):
    """Delete all of the user's snapshots."""
    return ClearSnapshotsResponse(deleted_count=service.clear_snapshots(user_id))
