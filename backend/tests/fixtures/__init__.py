"""Test fixtures and sample data."""
import pytest
from datetime import date
from decimal import Decimal

from models import Account, BalanceSnapshot, User
from sqlalchemy.orm import Session


def make_user(db: Session, email: str = "ada@example.com", name: str | None = "Ada") -> User:
    """Create and commit a user."""
    u = User(email=email, name=name)
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def make_account(
    db: Session,
    user: User,
    *,
    name: str = "Main Checking",
    account_type: str = "checking",
    balance: Decimal | str = Decimal("1200.00"),
    currency: str = "EUR",
    color: str | None = "#3B82F6",
    is_active: bool = True,
) -> Account:
    """Create and commit an account for a user.

    This is a helper function (not a fixture) for tests that need several
    accounts with different types or currencies.
    """
    acc = Account(
        user_id=user.id,
        name=name,
        account_type=account_type,
        balance=Decimal(balance),
        currency=currency,
        color=color,
        is_active=is_active,
    )
    db.add(acc)
    db.commit()
    db.refresh(acc)
    return acc


def make_snapshot(
    db: Session,
    account: Account,
    snapshot_date: date,
    balance: Decimal | str,
) -> BalanceSnapshot:
    """Create and commit a snapshot for an account on a given day."""
    snap = BalanceSnapshot.for_date(
        account_id=account.id,
        user_id=account.user_id,
        balance=Decimal(balance),
        snapshot_date=snapshot_date,
    )
    db.add(snap)
    db.commit()
    db.refresh(snap)
    return snap


@pytest.fixture
def user(db: Session) -> User:
    """Create a test user."""
    return make_user(db)


@pytest.fixture
def other_user(db: Session) -> User:
    """Create a second user whose data must stay invisible to ``user``."""
    return make_user(db, email="grace@example.com", name="Grace")


@pytest.fixture
def account(db: Session, user: User) -> Account:
    """Create a checking account with 1200.00 EUR."""
    return make_account(db, user)


@pytest.fixture
def savings_account(db: Session, user: User) -> Account:
    """Create a savings account with 800.00 EUR."""
    return make_account(
        db, user, name="Rainy Day", account_type="savings", balance="800.00", color="#10B981"
    )


@pytest.fixture
def auth_headers(user: User) -> dict[str, str]:
    """Identity header forwarded by the upstream gateway."""
    return {"X-User-Id": user.id}
