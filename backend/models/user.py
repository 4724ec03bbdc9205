"""User model - the owner of accounts and balance snapshots."""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utc_now


class User(Base):
    """An application user.

    Authentication happens upstream; this table only anchors ownership.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)
    created_at = Column(DateTime, default=utc_now)

    # Relationships
    accounts = relationship("Account", back_populates="user")
