"""Small shared helpers."""

from datetime import UTC, datetime
from uuid import uuid4


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the database stores UTC without offset)."""
    return datetime.now(UTC).replace(tzinfo=None)


def new_uuid() -> str:
    return str(uuid4())
