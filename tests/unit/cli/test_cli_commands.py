"""Tests for the account-admin command line."""

from unittest.mock import patch

from typer.testing import CliRunner

from src.account_admin.cli import app
from src.account_admin.core.models import Role
from src.account_admin.core.services.identity_provider import IdentityProviderError
from src.account_admin.entities import AccountRepository

runner = CliRunner()

COMMANDS = "src.account_admin.cli.account_commands"


def test_bootstrap_creates_super_admin(db_service, identity_provider, session):
    with (
        patch(f"{COMMANDS}.DbSessionService", return_value=db_service),
        patch(f"{COMMANDS}.KeycloakIdentityProvider", return_value=identity_provider),
    ):
        result = runner.invoke(
            app,
            ["accounts", "bootstrap", "root", "--email", "r@x.io", "--password", "secret123"],
        )

    assert result.exit_code == 0, result.output
    assert "Created super admin 'root'" in result.output
    [remote_ref] = identity_provider.identities
    account = AccountRepository(session).get_by_remote_ref(remote_ref)
    assert account.role == Role.SUPER_ADMIN
    assert account.created_by is None


def test_bootstrap_reports_remote_failure(db_service, identity_provider):
    identity_provider.fail_create = IdentityProviderError("connection refused")

    with (
        patch(f"{COMMANDS}.DbSessionService", return_value=db_service),
        patch(f"{COMMANDS}.KeycloakIdentityProvider", return_value=identity_provider),
    ):
        result = runner.invoke(
            app,
            ["accounts", "bootstrap", "root", "--email", "r@x.io", "--password", "secret123"],
        )

    assert result.exit_code == 1
    assert "Failed to create super admin" in result.output


def test_list_prints_accounts(db_service, customer, seller):
    with patch(f"{COMMANDS}.DbSessionService", return_value=db_service):
        result = runner.invoke(app, ["accounts", "list", "--role", "seller"])

    assert result.exit_code == 0, result.output
    assert "sam" in result.output
    assert "carol" not in result.output
    assert "Found 1 accounts" in result.output
