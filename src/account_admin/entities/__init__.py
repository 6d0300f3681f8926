"""Entities module with an entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model read from table rows
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .account import Account, AccountRepository, AccountTable
from .activity_log import (
    ActionType,
    ActivityLogEntry,
    ActivityLogRepository,
    ActivityLogTable,
)
from .booking import BookingRepository, BookingStatus, BookingTable
from .role_profile import CustomerTable, RoleProfile, RoleProfileRepository, SellerTable

__all__ = [
    "Account",
    "AccountRepository",
    "AccountTable",
    "ActionType",
    "ActivityLogEntry",
    "ActivityLogRepository",
    "ActivityLogTable",
    "BookingRepository",
    "BookingStatus",
    "BookingTable",
    "CustomerTable",
    "RoleProfile",
    "RoleProfileRepository",
    "SellerTable",
]
