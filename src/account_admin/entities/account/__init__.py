"""Account entity module.

This module contains all Account-related classes organized by responsibility:
- Account: Domain entity for the local half of an identity
- AccountTable: Database persistence model (``users`` table)
- AccountRepository: Data access layer
"""

from .entity import Account
from .repository import AccountRepository
from .table import AccountTable

__all__ = ["Account", "AccountRepository", "AccountTable"]
