"""Account model - a user's bank, savings, investment or cash account."""

from decimal import Decimal

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class Account(Base):
    """A money account owned by a user.

    Accounts are never physically removed: deleting one clears ``is_active``
    so its balance snapshots remain as historical record.
    """

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    account_type = Column(String, nullable=False, default="other")  # savings | checking | investment | cash | other
    balance = Column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    currency = Column(String(3), nullable=False, default="EUR")
    color = Column(String, nullable=True)  # Hex color used for chart legends
    icon = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(
        DateTime,
        default=utc_now,
        onupdate=utc_now,
    )

    # Relationships
    user = relationship("User", back_populates="accounts")
    balance_snapshots = relationship("BalanceSnapshot", back_populates="account")
