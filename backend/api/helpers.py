"""Shared API helpers for route handlers.

Identity arrives already authenticated: an upstream gateway verifies the
session and forwards the user's ID in the ``X-User-Id`` header.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models import Account
from services.account_service import AccountService
from services.user_service import UserService

USER_ID_HEADER = "X-User-Id"


def get_current_user_id(
    user_id: Optional[str] = Header(default=None, alias=USER_ID_HEADER),
    db: Session = Depends(get_db),
) -> str:
    """Resolve the calling user's ID or raise 401.

    Raises:
        HTTPException: 401 if the header is missing or names an unknown user.
    """
    if not user_id:
        raise HTTPException(status_code=401, detail=f"Missing {USER_ID_HEADER} header")
    if UserService.get_user(db, user_id) is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user_id


def get_account_or_404(db: Session, user_id: str, account_id: str) -> Account:
    """Fetch one of the user's accounts or raise 404.

    Args:
        db: Database session.
        user_id: Owner the account must belong to.
        account_id: Primary key value.

    Returns:
        The Account instance.

    Raises:
        HTTPException: 404 if the account doesn't exist for this user.
    """
    account = AccountService.get_account(db, user_id, account_id)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")
    return account
