"""Account repository."""

from typing import Any

from sqlalchemy import and_, delete, func, or_
from sqlalchemy.orm import aliased
from sqlmodel import Session, select

from src.account_admin.core.models.account import Role
from src.account_admin.entities.account.entity import Account
from src.account_admin.entities.account.table import AccountTable
from src.account_admin.entities.role_profile.entity import RoleProfile
from src.account_admin.entities.role_profile.table import CustomerTable, SellerTable


class AccountRepository:
    """Data-access layer for the ``users`` table.

    Writes are flushed so constraint violations surface inside the caller's
    transaction; nothing here commits.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: int) -> Account | None:
        row = self._session.get(AccountTable, user_id)
        if row is None:
            return None
        return Account.model_validate(row, from_attributes=True)

    def get_by_remote_ref(self, remote_ref: str) -> Account | None:
        statement = select(AccountTable).where(AccountTable.remote_ref == remote_ref)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return Account.model_validate(row, from_attributes=True)

    def username_taken(self, username: str, exclude_id: int | None = None) -> bool:
        statement = select(AccountTable.user_id).where(AccountTable.username == username)
        if exclude_id is not None:
            statement = statement.where(AccountTable.user_id != exclude_id)
        return self._session.exec(statement).first() is not None

    def create(
        self,
        *,
        remote_ref: str,
        username: str,
        email: str | None,
        role: Role,
        mobile_number: str | None = None,
        created_by: int | None = None,
    ) -> None:
        row = AccountTable(
            remote_ref=remote_ref,
            username=username,
            email=email,
            role=role.value,
            mobile_number=mobile_number,
            created_by=created_by,
        )
        self._session.add(row)
        self._session.flush()

    def update(self, user_id: int, changes: dict[str, Any]) -> Account:
        row = self._session.get(AccountTable, user_id)
        if row is None:
            raise ValueError(f"User with id {user_id} not found")

        for column, value in changes.items():
            if isinstance(value, Role):
                value = value.value
            setattr(row, column, value)

        self._session.add(row)
        self._session.flush()
        return Account.model_validate(row, from_attributes=True)

    def delete(self, user_id: int) -> bool:
        """Delete the row; profiles and bookings go with it by foreign key."""
        result = self._session.execute(
            delete(AccountTable).where(AccountTable.user_id == user_id)
        )
        self._session.flush()
        # Rows cascaded away by the database are still in the identity map.
        self._session.expire_all()
        return result.rowcount > 0

    def _detailed_select(self):
        creator = aliased(AccountTable)
        statement = (
            select(AccountTable, CustomerTable, SellerTable, creator.username)
            .outerjoin(
                CustomerTable,
                and_(
                    CustomerTable.user_id == AccountTable.user_id,
                    AccountTable.role == Role.CUSTOMER.value,
                ),
            )
            .outerjoin(
                SellerTable,
                and_(
                    SellerTable.user_id == AccountTable.user_id,
                    AccountTable.role == Role.SELLER.value,
                ),
            )
            .outerjoin(creator, creator.user_id == AccountTable.created_by)
        )
        return statement

    @staticmethod
    def _assemble(row, customer, seller, creator_username) -> Account:
        account = Account.model_validate(row, from_attributes=True)
        profile_row = customer or seller
        if profile_row is not None:
            account.profile = RoleProfile.model_validate(profile_row, from_attributes=True)
        account.created_by_username = creator_username
        return account

    def get_detailed(self, user_id: int) -> Account | None:
        """Return the account joined with its role profile and creator."""
        statement = self._detailed_select().where(AccountTable.user_id == user_id)
        result = self._session.exec(statement).first()
        if result is None:
            return None
        return self._assemble(*result)

    def list_detailed(
        self, role: Role | None = None, search: str | None = None
    ) -> list[Account]:
        statement = self._detailed_select()

        if role is not None:
            statement = statement.where(AccountTable.role == role.value)

        if search:
            pattern = f"%{search}%"
            statement = statement.where(
                or_(
                    AccountTable.username.ilike(pattern),
                    AccountTable.email.ilike(pattern),
                    func.coalesce(CustomerTable.first_name, SellerTable.first_name).ilike(pattern),
                    func.coalesce(CustomerTable.last_name, SellerTable.last_name).ilike(pattern),
                )
            )

        statement = statement.order_by(
            AccountTable.created_at.desc(), AccountTable.user_id.desc()
        )
        return [self._assemble(*result) for result in self._session.exec(statement).all()]
