"""Pydantic schemas for analytics API responses.

Responses are validated straight from the service-layer result dataclasses
(``from_attributes``), including their computed ``has_data``/``is_demo``
flags.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DataSource(str, Enum):
    """Where an analytics figure came from."""

    RECORDED = "recorded"  # built from stored snapshots
    SYNTHESIZED = "synthesized"  # estimated, must be shown as such
    EMPTY = "empty"  # nothing to show (no active accounts)


class SnapshotResponse(BaseModel):
    """A stored balance snapshot."""

    id: str
    account_id: str
    user_id: str
    balance: Decimal
    snapshot_date: date
    day_of_week: int
    day_of_month: int
    month: int
    year: int

    model_config = ConfigDict(from_attributes=True)


class SnapshotBatchResponse(BaseModel):
    """Snapshots created by a generation or backfill run."""

    created_count: int
    snapshots: list[SnapshotResponse]


class BackfillRequest(BaseModel):
    """Request body for a historical backfill."""

    days: Optional[int] = Field(default=None, ge=0, le=3660)


class ClearSnapshotsResponse(BaseModel):
    deleted_count: int


class LegendAccountResponse(BaseModel):
    id: str
    name: str
    color: Optional[str] = None
    type: str

    model_config = ConfigDict(from_attributes=True)


class TrendPointResponse(BaseModel):
    """Total and per-account balances on one day."""

    date: str  # ISO date (YYYY-MM-DD)
    total: Decimal
    accounts: dict[str, Decimal]

    model_config = ConfigDict(from_attributes=True)


class TrendsResponse(BaseModel):
    """Daily balance trend. ``is_demo`` marks synthesized series."""

    has_data: bool
    is_demo: bool
    source: DataSource
    trends: list[TrendPointResponse]
    accounts: list[LegendAccountResponse]

    model_config = ConfigDict(from_attributes=True)


class TypeVariationResponse(BaseModel):
    type: str
    current_total: Decimal
    last_month_total: Decimal
    variation: Decimal
    account_count: int
    has_data: bool
    source: DataSource

    model_config = ConfigDict(from_attributes=True)


class VariationPeriod(BaseModel):
    current: date
    previous: date


class VariationsResponse(BaseModel):
    """Month-over-month variation. ``has_data`` is false for estimates."""

    has_data: bool
    source: DataSource
    current_total: Decimal
    last_month_total: Decimal
    total_variation: Decimal
    variations_by_type: dict[str, TypeVariationResponse]
    period: VariationPeriod


class CurrencyAccountResponse(BaseModel):
    id: str
    name: str
    balance: Decimal
    type: str

    model_config = ConfigDict(from_attributes=True)


class CurrencyBucketResponse(BaseModel):
    currency: str
    total_balance: Decimal
    account_count: int
    accounts: list[CurrencyAccountResponse]
    percentage: Decimal

    model_config = ConfigDict(from_attributes=True)


class CurrenciesResponse(BaseModel):
    currencies: list[CurrencyBucketResponse]
    total_value: Decimal
    currency_count: int

    model_config = ConfigDict(from_attributes=True)


class OverviewResponse(BaseModel):
    trends: TrendsResponse
    variations: VariationsResponse
    currencies: CurrenciesResponse
    last_updated: datetime
