"""Booking entity module."""

from .repository import ACTIVE_STATUSES, BookingRepository, BookingStatus
from .table import BookingTable

__all__ = ["ACTIVE_STATUSES", "BookingRepository", "BookingStatus", "BookingTable"]
