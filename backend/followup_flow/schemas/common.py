"""Common schemas and timestamp helpers."""

from datetime import datetime, timezone

from pydantic import BaseModel


def utcnow() -> datetime:
    """Naive UTC timestamp; all stored datetimes use this convention."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class HealthResponse(BaseModel):
    status: str
    version: str = "1.0.0"
    storage: str
    gamification: str
    text_generation: str
