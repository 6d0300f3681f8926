"""Account database table model."""

from datetime import datetime

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlmodel import Field, SQLModel

from src.account_admin.entities._base import utc_now


class AccountTable(SQLModel, table=True):
    """Local identity record, one row per account.

    ``remote_ref`` links the row to its identity provider record. Deleting a
    row cascades to the role profile tables and bookings through their
    foreign keys.
    """

    __tablename__ = "users"

    user_id: int | None = Field(default=None, primary_key=True)
    remote_ref: str = Field(
        sa_column=Column(String(128), nullable=False, unique=True, index=True)
    )
    username: str = Field(sa_column=Column(String(50), nullable=False, unique=True))
    email: str | None = Field(
        default=None, sa_column=Column(String(100), nullable=True)
    )
    role: str = Field(sa_column=Column(String(20), nullable=False, index=True))
    mobile_number: str | None = Field(
        default=None, sa_column=Column(String(15), nullable=True)
    )
    created_at: datetime = Field(default_factory=utc_now, nullable=False)
    created_by: int | None = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("users.user_id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
    )
