"""Pydantic schemas for account request/response validation."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class AccountType(str, Enum):
    """Valid account types."""

    savings = "savings"
    checking = "checking"
    investment = "investment"
    cash = "cash"
    other = "other"


def _normalize_currency(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip().upper()
    if len(v) != 3 or not v.isalpha():
        raise ValueError("currency must be a 3-letter ISO 4217 code")
    return v


class AccountBase(BaseModel):
    """Base schema for Account."""

    name: str = Field(min_length=1, max_length=100)
    account_type: AccountType = AccountType.other
    color: Optional[str] = None  # Hex color code, e.g., "#3B82F6"
    icon: Optional[str] = None


class AccountCreate(AccountBase):
    """Schema for creating an Account."""

    balance: Decimal = Field(default=Decimal("0"), decimal_places=2)
    currency: Optional[str] = None  # Defaults to settings.DEFAULT_CURRENCY

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_currency(v)


class AccountUpdate(BaseModel):
    """Schema for updating an Account."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    account_type: Optional[AccountType] = None
    balance: Optional[Decimal] = Field(default=None, decimal_places=2)
    currency: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_currency(v)


class AccountResponse(AccountBase):
    """Schema for Account API response."""

    id: str
    account_type: str
    balance: Decimal
    currency: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AccountTypeSummary(BaseModel):
    """Count and balance of accounts of one type."""

    count: int
    balance: Decimal

    model_config = ConfigDict(from_attributes=True)


class AccountsSummaryResponse(BaseModel):
    """Schema for the accounts summary (totals and per-type breakdown)."""

    total_balance: Decimal
    total_accounts: int
    by_type: dict[str, AccountTypeSummary]
    accounts: list[AccountResponse]

    model_config = ConfigDict(from_attributes=True)


class TransferRequest(BaseModel):
    """Schema for moving money between two accounts."""

    from_account_id: str
    to_account_id: str
    amount: Decimal = Field(gt=0, decimal_places=2)

    @model_validator(mode="after")
    def check_distinct_accounts(self) -> "TransferRequest":
        if self.from_account_id == self.to_account_id:
            raise ValueError("from_account_id and to_account_id must differ")
        return self


class TransferResponse(BaseModel):
    """Both accounts after a transfer."""

    from_account: AccountResponse
    to_account: AccountResponse
