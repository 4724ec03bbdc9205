"""User service - minimal user records that own accounts."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import User

logger = logging.getLogger(__name__)


class UserService:
    """Service for creating and looking up users."""

    @staticmethod
    def create_user(db: Session, email: str, name: str | None = None) -> User:
        """Create a user.

        Raises:
            ValueError: If a user with this email already exists.
        """
        email = email.strip().lower()
        user = User(email=email, name=name)
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ValueError(f"User with email {email!r} already exists")
        db.refresh(user)
        logger.info("Created user %s", user.id)
        return user

    @staticmethod
    def get_user(db: Session, user_id: str) -> User | None:
        """Get a user by ID."""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def list_user_ids(db: Session) -> list[str]:
        """IDs of every user, oldest first."""
        return [row.id for row in db.query(User.id).order_by(User.created_at).all()]
