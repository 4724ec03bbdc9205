"""Account management service."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from config import settings
from models import Account
from services.balance_synthesis import ZERO

logger = logging.getLogger(__name__)


@dataclass
class TypeSummary:
    """Count and balance of a user's accounts of one type."""

    count: int = 0
    balance: Decimal = ZERO


@dataclass
class AccountsSummary:
    total_balance: Decimal
    total_accounts: int
    by_type: dict[str, TypeSummary] = field(default_factory=dict)
    accounts: list[Account] = field(default_factory=list)


class AccountService:
    """Service for managing a user's account CRUD operations.

    Every lookup is scoped to the owning user; an account belonging to
    someone else behaves as if it did not exist.
    """

    @staticmethod
    def create_account(
        db: Session,
        user_id: str,
        *,
        name: str,
        account_type: str,
        balance: Decimal = ZERO,
        currency: Optional[str] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> Account:
        """Create a new active account for a user."""
        account = Account(
            user_id=user_id,
            name=name,
            account_type=account_type,
            balance=balance,
            currency=(currency or settings.DEFAULT_CURRENCY).upper(),
            color=color,
            icon=icon,
            is_active=True,
        )
        db.add(account)
        db.commit()
        db.refresh(account)
        logger.info("Account created: %s (id=%s, user=%s)", account.name, account.id, user_id)
        return account

    @staticmethod
    def list_accounts(db: Session, user_id: str) -> list[Account]:
        """List the user's active accounts, newest first."""
        return (
            db.query(Account)
            .filter(Account.user_id == user_id, Account.is_active.is_(True))
            .order_by(Account.created_at.desc())
            .all()
        )

    @staticmethod
    def get_account(db: Session, user_id: str, account_id: str) -> Account | None:
        """Get a specific account by ID, if it belongs to the user."""
        return (
            db.query(Account)
            .filter(Account.id == account_id, Account.user_id == user_id)
            .first()
        )

    @staticmethod
    def update_account(
        db: Session,
        user_id: str,
        account_id: str,
        *,
        name: str | None = None,
        account_type: str | None = None,
        balance: Decimal | None = None,
        currency: str | None = None,
        color: str | None = None,
        icon: str | None = None,
        is_active: bool | None = None,
    ) -> Account | None:
        """Update an account's properties. Only non-None values are applied."""
        account = AccountService.get_account(db, user_id, account_id)
        if not account:
            return None

        if name is not None:
            account.name = name
        if account_type is not None:
            account.account_type = account_type
        if balance is not None:
            account.balance = balance
        if currency is not None:
            account.currency = currency.upper()
        if color is not None:
            account.color = color
        if icon is not None:
            account.icon = icon
        if is_active is not None:
            account.is_active = is_active

        db.commit()
        db.refresh(account)
        logger.info("Account updated: %s (id=%s)", account.name, account.id)
        return account

    @staticmethod
    def deactivate_account(db: Session, user_id: str, account_id: str) -> bool:
        """Soft-delete an account by clearing is_active.

        Snapshots of the account are kept as historical record.

        Returns:
            True if the account exists for the user, False otherwise.
        """
        account = AccountService.get_account(db, user_id, account_id)
        if not account:
            return False

        if not account.is_active:
            logger.info(
                "Account %s (%s) is already inactive, skipping deactivation",
                account.name, account_id,
            )
            return True

        account.is_active = False
        db.commit()
        logger.info("Deactivated account %s (%s)", account.name, account_id)
        return True

    @staticmethod
    def get_summary(db: Session, user_id: str) -> AccountsSummary:
        """Total balance and per-type breakdown of the user's active accounts."""
        accounts = AccountService.list_accounts(db, user_id)

        by_type: dict[str, TypeSummary] = {}
        for account in accounts:
            summary = by_type.setdefault(account.account_type, TypeSummary())
            summary.count += 1
            summary.balance += account.balance

        return AccountsSummary(
            total_balance=sum((a.balance for a in accounts), ZERO),
            total_accounts=len(accounts),
            by_type=by_type,
            accounts=accounts,
        )

    @staticmethod
    def transfer(
        db: Session,
        user_id: str,
        from_account_id: str,
        to_account_id: str,
        amount: Decimal,
    ) -> tuple[Account, Account] | None:
        """Move money between two of the user's active accounts.

        Both balance updates are committed together; if the commit fails
        neither is applied.

        Returns:
            The (source, destination) accounts, or None if either is missing
            or inactive.

        Raises:
            ValueError: If amount is not positive, both IDs are the same, or the
                accounts hold different currencies.
        """
        if amount <= 0:
            raise ValueError("Transfer amount must be positive")
        if from_account_id == to_account_id:
            raise ValueError("Cannot transfer to the same account")

        source = AccountService.get_account(db, user_id, from_account_id)
        destination = AccountService.get_account(db, user_id, to_account_id)
        if not source or not destination or not source.is_active or not destination.is_active:
            return None
        if source.currency != destination.currency:
            raise ValueError(
                f"Cannot transfer between {source.currency} and {destination.currency} accounts"
            )

        source.balance = source.balance - amount
        destination.balance = destination.balance + amount
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(source)
        db.refresh(destination)
        logger.info(
            "Transferred %s %s from %s to %s",
            amount, source.currency, from_account_id, to_account_id,
        )
        return source, destination
