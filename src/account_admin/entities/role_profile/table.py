"""Role profile database table models."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlmodel import Field, SQLModel


def _owner_column() -> Column:
    return Column(
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )


class CustomerTable(SQLModel, table=True):
    """Profile attributes for accounts with role ``customer``."""

    __tablename__ = "customers"

    customer_id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(sa_column=_owner_column())
    first_name: str = Field(default="", sa_column=Column(String(50), nullable=False))
    last_name: str = Field(default="", sa_column=Column(String(50), nullable=False))
    profile_picture: str | None = Field(
        default=None, sa_column=Column(String(255), nullable=True)
    )


class SellerTable(SQLModel, table=True):
    """Profile attributes for accounts with role ``seller``."""

    __tablename__ = "sellers"

    seller_id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(sa_column=_owner_column())
    first_name: str = Field(default="", sa_column=Column(String(50), nullable=False))
    last_name: str = Field(default="", sa_column=Column(String(50), nullable=False))
    profile_picture: str | None = Field(
        default=None, sa_column=Column(String(255), nullable=True)
    )
