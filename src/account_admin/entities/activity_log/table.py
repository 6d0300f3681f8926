"""Activity log database table model."""

from datetime import datetime

from sqlalchemy import Column, String, Text
from sqlmodel import Field, SQLModel

from src.account_admin.entities._base import utc_now


class ActivityLogTable(SQLModel, table=True):
    """Append-only audit trail of account actions.

    ``user_id`` is the actor. It carries no foreign key so entries outlive the
    account that wrote them.
    """

    __tablename__ = "activity_logs"

    log_id: int | None = Field(default=None, primary_key=True)
    user_id: int | None = Field(default=None, index=True)
    role: str = Field(sa_column=Column(String(20), nullable=False, index=True))
    action_type: str = Field(sa_column=Column(String(100), nullable=False, index=True))
    description: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    affected_entity_id: int | None = Field(default=None)
    entity_type: str | None = Field(
        default=None, sa_column=Column(String(50), nullable=True)
    )
    timestamp: datetime = Field(default_factory=utc_now, nullable=False)
