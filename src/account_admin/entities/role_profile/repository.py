"""Role profile repository."""

from typing import Any

from sqlmodel import Session, select

from src.account_admin.core.models.account import Role
from src.account_admin.entities.role_profile.entity import RoleProfile
from src.account_admin.entities.role_profile.table import CustomerTable, SellerTable

ProfileTable = CustomerTable | SellerTable

_TABLES: dict[Role, type[CustomerTable] | type[SellerTable]] = {
    Role.CUSTOMER: CustomerTable,
    Role.SELLER: SellerTable,
}


def table_for(role: Role) -> type[CustomerTable] | type[SellerTable] | None:
    """Return the profile table for ``role``; admins have none."""
    return _TABLES.get(role)


class RoleProfileRepository:
    """Data-access layer for the customer and seller profile tables.

    Never commits; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _get_row(self, user_id: int, role: Role) -> ProfileTable | None:
        table = table_for(role)
        if table is None:
            return None
        statement = select(table).where(table.user_id == user_id)
        return self._session.exec(statement).first()

    def get(self, user_id: int, role: Role) -> RoleProfile | None:
        row = self._get_row(user_id, role)
        if row is None:
            return None
        return RoleProfile.model_validate(row, from_attributes=True)

    def create(
        self,
        user_id: int,
        role: Role,
        first_name: str | None = None,
        last_name: str | None = None,
        profile_picture: str | None = None,
    ) -> RoleProfile:
        table = table_for(role)
        if table is None:
            raise ValueError(f"Role {role.value} has no profile table")

        row = table(
            user_id=user_id,
            first_name=first_name or "",
            last_name=last_name or "",
            profile_picture=profile_picture,
        )
        self._session.add(row)
        self._session.flush()
        return RoleProfile.model_validate(row, from_attributes=True)

    def upsert(self, user_id: int, role: Role, changes: dict[str, Any]) -> RoleProfile:
        """Apply ``changes`` to the profile, creating it on first write."""
        row = self._get_row(user_id, role)
        if row is None:
            return self.create(user_id, role, **changes)

        for column, value in changes.items():
            if column in ("first_name", "last_name") and value is None:
                value = ""
            setattr(row, column, value)
        self._session.add(row)
        self._session.flush()
        return RoleProfile.model_validate(row, from_attributes=True)
