"""BalanceSnapshot model - an account's balance on one calendar day."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class BalanceSnapshot(Base):
    """Immutable record of one account's balance on one calendar day.

    The day_of_week/day_of_month/month/year columns are denormalized from
    snapshot_date for query convenience; build rows with :meth:`for_date`
    so they always agree.
    """

    __tablename__ = "balance_snapshots"
    __table_args__ = (
        UniqueConstraint("account_id", "snapshot_date", name="uix_account_snapshot_date"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    balance = Column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    snapshot_date = Column(Date, nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday .. 6 = Saturday
    day_of_month = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)  # 1-12
    year = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=utc_now)

    # Relationships
    account = relationship("Account", back_populates="balance_snapshots")

    @classmethod
    def for_date(
        cls,
        *,
        account_id: str,
        user_id: str,
        balance: Decimal,
        snapshot_date: date,
    ) -> "BalanceSnapshot":
        """Build a snapshot with the calendar fields derived from snapshot_date."""
        return cls(
            account_id=account_id,
            user_id=user_id,
            balance=balance,
            snapshot_date=snapshot_date,
            day_of_week=snapshot_date.isoweekday() % 7,
            day_of_month=snapshot_date.day,
            month=snapshot_date.month,
            year=snapshot_date.year,
        )
