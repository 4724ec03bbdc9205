"""Accounts API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.helpers import get_account_or_404, get_current_user_id
from database import get_db
from schemas import (
    AccountCreate,
    AccountResponse,
    AccountsSummaryResponse,
    AccountTypeSummary,
    AccountUpdate,
    TransferRequest,
    TransferResponse,
)
from services.account_service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/accounts", tags=["accounts"])


@router.get("", response_model=list[AccountResponse])
def list_accounts(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """List the user's active accounts."""
    return AccountService.list_accounts(db, user_id)


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    account_data: AccountCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create a new account."""
    return AccountService.create_account(
        db,
        user_id,
        name=account_data.name,
        account_type=account_data.account_type.value,
        balance=account_data.balance,
        currency=account_data.currency,
        color=account_data.color,
        icon=account_data.icon,
    )


@router.get("/summary", response_model=AccountsSummaryResponse)
def get_accounts_summary(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Total balance and per-type breakdown of active accounts."""
    summary = AccountService.get_summary(db, user_id)
    return AccountsSummaryResponse(
        total_balance=summary.total_balance,
        total_accounts=summary.total_accounts,
        by_type={
            account_type: AccountTypeSummary(count=s.count, balance=s.balance)
            for account_type, s in summary.by_type.items()
        },
        accounts=[AccountResponse.model_validate(a) for a in summary.accounts],
    )


@router.post("/transfer", response_model=TransferResponse)
def transfer(
    body: TransferRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Move money between two active accounts of the same currency."""
    try:
        result = AccountService.transfer(
            db, user_id, body.from_account_id, body.to_account_id, body.amount
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if result is None:
        raise HTTPException(status_code=404, detail="Account not found")

    source, destination = result
    return TransferResponse(
        from_account=AccountResponse.model_validate(source),
        to_account=AccountResponse.model_validate(destination),
    )


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Get a specific account by ID."""
    return get_account_or_404(db, user_id, account_id)


@router.put("/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: str,
    account_data: AccountUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Update an account's name, type, balance, currency or appearance."""
    get_account_or_404(db, user_id, account_id)
    updates = account_data.model_dump(exclude_unset=True)
    if updates.get("account_type") is not None:
        updates["account_type"] = updates["account_type"].value
    return AccountService.update_account(db, user_id, account_id, **updates)


@router.delete("/{account_id}", status_code=204)
def delete_account(
    account_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Soft-delete an account (its snapshots are kept)."""
    if not AccountService.deactivate_account(db, user_id, account_id):
        raise HTTPException(status_code=404, detail="Account not found")
