"""Role profile entity module.

Customers and sellers keep their names and profile picture in a table of
their own; admins have no profile.
"""

from .entity import RoleProfile
from .repository import RoleProfileRepository, table_for
from .table import CustomerTable, SellerTable

__all__ = [
    "CustomerTable",
    "RoleProfile",
    "RoleProfileRepository",
    "SellerTable",
    "table_for",
]
