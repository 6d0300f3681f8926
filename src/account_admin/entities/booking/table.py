"""Booking database table model."""

from datetime import datetime

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlmodel import Field, SQLModel

from src.account_admin.entities._base import utc_now


class BookingTable(SQLModel, table=True):
    """Seat bookings held by an account; removed with the account."""

    __tablename__ = "bookings"

    booking_id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("users.user_id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    status: str = Field(
        default="pending", sa_column=Column(String(20), nullable=False, index=True)
    )
    quantity: int = Field(default=1)
    created_at: datetime = Field(default_factory=utc_now, nullable=False)
