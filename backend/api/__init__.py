"""API route handlers."""
from . import accounts, analytics, users

__all__ = ["accounts", "analytics", "users"]
