"""Unit tests for account creation across both stores."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import select

from src.account_admin.core.errors import (
    AuthorizationError,
    DuplicateUsernameError,
    LocalStoreError,
    RemoteProviderError,
    UsernameRaceError,
    ValidationError,
)
from src.account_admin.core.models import AccountCreate, Actor, Role
from src.account_admin.core.services.identity_provider import IdentityProviderError
from src.account_admin.entities import (
    AccountRepository,
    AccountTable,
    ActivityLogRepository,
    ActivityLogTable,
    RoleProfileRepository,
)


def _new_customer(**overrides) -> AccountCreate:
    data = {
        "email": "c@x.io",
        "password": "secret123",
        "username": "carl",
        "role": "customer",
        "first_name": "Carl",
        "last_name": "Smith",
    }
    data.update(overrides)
    return AccountCreate(**data)


class TestCreateAccount:
    """Successful creation writes every piece exactly once."""

    def test_creates_remote_identity_and_local_record(
        self, coordinator, identity_provider, session, admin_actor
    ):
        account = coordinator.create_account(_new_customer(), admin_actor)

        assert account.remote_ref in identity_provider.identities
        assert identity_provider.identities[account.remote_ref]["email"] == "c@x.io"

        stored = AccountRepository(session).get_by_remote_ref(account.remote_ref)
        assert stored is not None
        assert stored.username == "carl"
        assert stored.role == Role.CUSTOMER
        assert stored.created_by == admin_actor.id

    def test_creates_profile_for_customer(self, coordinator, session, admin_actor):
        account = coordinator.create_account(_new_customer(), admin_actor)

        profile = RoleProfileRepository(session).get(account.id, Role.CUSTOMER)
        assert profile is not None
        assert profile.first_name == "Carl"
        assert profile.last_name == "Smith"

    def test_profile_names_default_to_empty(self, coordinator, session, admin_actor):
        account = coordinator.create_account(
            AccountCreate(
                email="a@x.com", password="secret1", username="ann", role="customer"
            ),
            admin_actor,
        )

        profile = RoleProfileRepository(session).get(account.id, Role.CUSTOMER)
        assert profile.first_name == ""
        assert profile.last_name == ""

    def test_admin_role_has_no_profile(self, coordinator, session, super_admin_actor):
        account = coordinator.create_account(
            _new_customer(username="ada", role="admin"), super_admin_actor
        )

        assert account.profile is None
        assert RoleProfileRepository(session).get(account.id, Role.CUSTOMER) is None

    def test_writes_user_created_entry(self, coordinator, session, admin_actor):
        account = coordinator.create_account(_new_customer(), admin_actor)

        entries, total = ActivityLogRepository(session).list_entries(
            action_type="user_created"
        )
        assert total == 1
        assert entries[0].actor_id == admin_actor.id
        assert entries[0].actor_role == "admin"
        assert entries[0].affected_entity_id == account.id
        assert entries[0].entity_type == "user"

    def test_system_actor_records_no_creator(self, coordinator, session, app_config):
        account = coordinator.create_account(
            _new_customer(username="root", role="super_admin"), Actor.system()
        )

        assert AccountRepository(session).get(account.id).created_by is None


class TestCreateAccountPreconditions:
    """Rejected requests never reach either store."""

    def test_missing_fields_rejected_before_remote_call(
        self, coordinator, identity_provider, admin_actor
    ):
        with pytest.raises(ValidationError) as exc_info:
            coordinator.create_account(_new_customer(password=None), admin_actor)

        assert "password" in exc_info.value.detail
        assert identity_provider.calls == []

    def test_invalid_role_rejected_before_remote_call(
        self, coordinator, identity_provider, admin_actor
    ):
        with pytest.raises(ValidationError, match="Invalid role"):
            coordinator.create_account(_new_customer(role="guest"), admin_actor)

        assert identity_provider.calls == []

    def test_short_password_rejected(self, coordinator, identity_provider, admin_actor):
        with pytest.raises(ValidationError, match="at least 6"):
            coordinator.create_account(_new_customer(password="abc"), admin_actor)

        assert identity_provider.calls == []

    def test_duplicate_username_rejected_before_remote_call(
        self, coordinator, identity_provider, admin_actor, customer
    ):
        with pytest.raises(DuplicateUsernameError):
            coordinator.create_account(
                _new_customer(username=customer.username), admin_actor
            )

        assert identity_provider.calls == []

    def test_customer_cannot_create_accounts(
        self, coordinator, identity_provider, customer_actor
    ):
        with pytest.raises(AuthorizationError):
            coordinator.create_account(_new_customer(), customer_actor)

        assert identity_provider.calls == []

    def test_admin_cannot_create_admin(self, coordinator, identity_provider, admin_actor):
        with pytest.raises(AuthorizationError, match="Only super admins"):
            coordinator.create_account(
                _new_customer(username="ada", role="admin"), admin_actor
            )

        assert identity_provider.calls == []

    def test_unauthenticated_rejected(self, coordinator):
        with pytest.raises(AuthorizationError, match="Authentication required"):
            coordinator.create_account(_new_customer(), None)


class TestCreateAccountFailures:
    """Partial failures leave no orphan on either side."""

    def test_remote_failure_writes_nothing_locally(
        self, coordinator, identity_provider, session, admin_actor
    ):
        identity_provider.fail_create = IdentityProviderError(
            "email already exists", status_code=409
        )

        with pytest.raises(RemoteProviderError) as exc_info:
            coordinator.create_account(_new_customer(), admin_actor)

        assert "email already exists" in exc_info.value.detail
        assert AccountRepository(session).username_taken("carl") is False
        assert session.exec(select(ActivityLogTable)).all() == []

    def test_local_failure_deletes_remote_identity(
        self, coordinator, identity_provider, session, admin_actor
    ):
        failure = OperationalError("INSERT", {}, Exception("database is locked"))
        with patch.object(ActivityLogRepository, "append", side_effect=failure):
            with pytest.raises(LocalStoreError) as exc_info:
                coordinator.create_account(_new_customer(), admin_actor)

        assert exc_info.value.compensation_failures == []
        created_ref = identity_provider.calls_of("delete")[0]
        assert created_ref not in identity_provider.identities
        assert list(identity_provider.identities) == [admin_actor.remote_ref]
        assert AccountRepository(session).get_by_remote_ref(created_ref) is None

    def test_local_failure_rolls_back_every_local_write(
        self, coordinator, session, admin_actor
    ):
        failure = OperationalError("INSERT", {}, Exception("disk I/O error"))
        with patch.object(ActivityLogRepository, "append", side_effect=failure):
            with pytest.raises(LocalStoreError):
                coordinator.create_account(_new_customer(), admin_actor)

        assert session.exec(
            select(AccountTable).where(AccountTable.username == "carl")
        ).first() is None
        assert session.exec(select(ActivityLogTable)).all() == []

    def test_failed_compensation_is_attached_to_error(
        self, coordinator, identity_provider, admin_actor
    ):
        identity_provider.fail_delete = IdentityProviderError("timed out")
        failure = OperationalError("INSERT", {}, Exception("database is locked"))

        with patch.object(ActivityLogRepository, "append", side_effect=failure):
            with pytest.raises(LocalStoreError) as exc_info:
                coordinator.create_account(_new_customer(), admin_actor)

        [compensation] = exc_info.value.compensation_failures
        assert compensation.action == "delete_remote_identity"
        assert compensation.remote_ref in identity_provider.identities
        assert compensation.detail == "timed out"

    def test_unique_violation_maps_to_duplicate_username(
        self, coordinator, identity_provider, admin_actor
    ):
        violation = IntegrityError(
            "INSERT", {}, Exception("UNIQUE constraint failed: users.username")
        )
        with patch.object(AccountRepository, "create", side_effect=violation):
            with pytest.raises(UsernameRaceError) as exc_info:
                coordinator.create_account(_new_customer(), admin_actor)

        assert isinstance(exc_info.value, DuplicateUsernameError)
        assert isinstance(exc_info.value, LocalStoreError)
        assert exc_info.value.status_code == 409
        assert list(identity_provider.identities) == [admin_actor.remote_ref]
