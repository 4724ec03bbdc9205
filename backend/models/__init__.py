"""SQLAlchemy ORM models."""

from .account import Account
from .balance_snapshot import BalanceSnapshot
from .user import User
from .utils import generate_uuid

__all__ = ["Account", "BalanceSnapshot", "User", "generate_uuid"]
