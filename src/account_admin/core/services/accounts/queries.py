"""Read-side account operations. None of these touch the identity provider."""

from typing import Any

from sqlmodel import Session

from src.account_admin.core.authorization import CONSOLE_ROLES, authorize
from src.account_admin.core.errors import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from src.account_admin.core.models.account import Actor
from src.account_admin.core.services.accounts.coordinator import parse_role
from src.account_admin.entities.account import Account, AccountRepository
from src.account_admin.entities.activity_log import ActivityLogEntry, ActivityLogRepository

MAX_PAGE_SIZE = 200


def _page(limit: int, offset: int) -> tuple[int, int]:
    if limit < 1 or offset < 0:
        raise ValidationError("limit must be positive and offset non-negative")
    return min(limit, MAX_PAGE_SIZE), offset


class AccountQueryService:
    """Lookups over the local store."""

    def __init__(self, db_session: Session):
        self._session = db_session
        self._accounts = AccountRepository(db_session)
        self._activity = ActivityLogRepository(db_session)

    def get_account(self, user_id: int, actor: Actor) -> Account:
        authorize(
            actor,
            owner_id=user_id,
            message="Unauthorized: You can only view your own account",
        )
        account = self._accounts.get_detailed(user_id)
        if account is None:
            raise NotFoundError()
        return account

    def list_accounts(
        self, actor: Actor, role: str | None = None, search: str | None = None
    ) -> list[Account]:
        authorize(actor)
        role_filter = parse_role(role) if role else None
        return self._accounts.list_detailed(role=role_filter, search=search or None)

    def get_profile(self, actor: Actor) -> Account:
        if actor is None or actor.id is None:
            raise AuthorizationError("Authentication required")
        return self.get_account(actor.id, actor)

    def list_activity(
        self,
        actor: Actor,
        user_id: int | None = None,
        action_type: str | None = None,
        entity_type: str | None = None,
        affected_entity_id: int | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> dict[str, Any]:
        authorize(actor)
        limit, offset = _page(limit, offset)
        entries, total = self._activity.list_entries(
            user_id=user_id,
            action_type=action_type,
            entity_type=entity_type,
            affected_entity_id=affected_entity_id,
            limit=limit,
            offset=offset,
        )
        return self._paginated(entries, total, limit, offset)

    def list_my_activity(
        self, actor: Actor, limit: int = 50, offset: int = 0
    ) -> dict[str, Any]:
        if actor is None or actor.id is None:
            raise AuthorizationError("Authentication required")
        limit, offset = _page(limit, offset)
        entries, total = self._activity.list_entries(
            user_id=actor.id, limit=limit, offset=offset
        )
        return self._paginated(entries, total, limit, offset)

    @staticmethod
    def _paginated(
        entries: list[ActivityLogEntry], total: int, limit: int, offset: int
    ) -> dict[str, Any]:
        return {
            "logs": [entry.model_dump(mode="json") for entry in entries],
            "pagination": {
                "total": total,
                "limit": limit,
                "offset": offset,
                "has_more": offset + len(entries) < total,
            },
        }

    def verify_admin(self, actor: Actor) -> dict[str, Any]:
        """Report whether the caller's stored role may use the admin console."""
        if actor is None or actor.id is None:
            raise AuthorizationError("Authentication required")
        account = self._accounts.get(actor.id)
        if account is None:
            raise NotFoundError()
        return {
            "is_admin": account.role in CONSOLE_ROLES,
            "role": account.role.value,
        }
