"""Common types and helpers shared across models."""

from datetime import UTC, datetime
from typing import TypeAlias

OrderId: TypeAlias = str
IdentityId: TypeAlias = str


def utc_now() -> datetime:
    return datetime.now(UTC)


def to_iso(dt: datetime) -> str:
    """Fixed-width ISO timestamp so stored strings sort chronologically."""
    return dt.astimezone(UTC).isoformat(timespec="microseconds")


def from_iso(value: str) -> datetime:
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt
