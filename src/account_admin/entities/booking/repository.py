"""Booking repository."""

from enum import Enum

from sqlalchemy import func
from sqlmodel import Session, select

from src.account_admin.entities.booking.table import BookingTable


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


ACTIVE_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


class BookingRepository:
    """Read access to bookings for the account deletion guard."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def count_active(self, user_id: int) -> int:
        """Number of pending or confirmed bookings held by ``user_id``."""
        statement = (
            select(func.count())
            .select_from(BookingTable)
            .where(BookingTable.user_id == user_id)
            .where(BookingTable.status.in_(ACTIVE_STATUSES))
        )
        return self._session.exec(statement).one()

    def create(
        self,
        user_id: int,
        status: BookingStatus = BookingStatus.PENDING,
        quantity: int = 1,
    ) -> int:
        row = BookingTable(user_id=user_id, status=status.value, quantity=quantity)
        self._session.add(row)
        self._session.flush()
        return row.booking_id
