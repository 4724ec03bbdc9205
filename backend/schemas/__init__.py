"""Pydantic schemas for API request/response validation."""

from .account import (
    AccountCreate,
    AccountResponse,
    AccountsSummaryResponse,
    AccountType,
    AccountTypeSummary,
    AccountUpdate,
    TransferRequest,
    TransferResponse,
)
from .analytics import (
    BackfillRequest,
    ClearSnapshotsResponse,
    CurrenciesResponse,
    OverviewResponse,
    SnapshotBatchResponse,
    SnapshotResponse,
    TrendsResponse,
    VariationsResponse,
)
from .user import UserCreate, UserResponse

__all__ = [
    "AccountCreate",
    "AccountResponse",
    "AccountsSummaryResponse",
    "AccountType",
    "AccountTypeSummary",
    "AccountUpdate",
    "BackfillRequest",
    "ClearSnapshotsResponse",
    "CurrenciesResponse",
    "OverviewResponse",
    "SnapshotBatchResponse",
    "SnapshotResponse",
    "TransferRequest",
    "TransferResponse",
    "TrendsResponse",
    "UserCreate",
    "UserResponse",
    "VariationsResponse",
]
