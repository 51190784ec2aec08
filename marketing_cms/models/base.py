"""
Shared helpers for table models.
"""
import uuid

from sqlalchemy import DateTime

# Datetimes are stored naive UTC; the column type is pinned so that the
# mapping does not depend on the sqlmodel release.
NAIVE_UTC = DateTime(timezone=False)


def new_id() -> str:
    """Opaque document id assigned at creation."""
    return uuid.uuid4().hex
