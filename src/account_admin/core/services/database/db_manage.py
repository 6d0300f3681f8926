"""Schema management for the local user store."""

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel


def register_tables() -> None:
    """Import every table model so it is attached to the shared metadata."""
    from src.account_admin.entities.account.table import AccountTable  # noqa: F401
    from src.account_admin.entities.activity_log.table import ActivityLogTable  # noqa: F401
    from src.account_admin.entities.booking.table import BookingTable  # noqa: F401
    from src.account_admin.entities.role_profile.table import (  # noqa: F401
        CustomerTable,
        SellerTable,
    )


class DbManageService:
    def __init__(self, engine: Engine):
        self._engine = engine

    def create_all(self) -> None:
        """Create all database tables."""
        register_tables()
        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def drop_all(self) -> None:
        register_tables()
        SQLModel.metadata.drop_all(self._engine)
        logger.warning("Dropped all database tables.")
