from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict


def utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


class Entity(BaseModel):
    """Base class for domain entities read from table rows."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
