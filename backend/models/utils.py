"""Shared column defaults for ORM models."""

import uuid
from datetime import datetime, timezone


def generate_uuid() -> str:
    """Generate a UUID string for use as a primary key."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Timezone-aware current time for created_at/updated_at columns."""
    return datetime.now(timezone.utc)
