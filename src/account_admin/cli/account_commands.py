"""Account bootstrap and inspection commands."""

import typer
from rich.console import Console
from rich.table import Table

from src.account_admin.core.errors import AccountError
from src.account_admin.core.models import AccountCreate, Actor, Role
from src.account_admin.core.services import (
    AccountConsistencyCoordinator,
    AccountQueryService,
    DbSessionService,
    KeycloakIdentityProvider,
)
from src.account_admin.runtime.context import get_config

console = Console()

accounts_app = typer.Typer(help="Manage accounts from the command line")


@accounts_app.command("bootstrap")
def bootstrap(
    username: str = typer.Argument(..., help="Username for the first super admin"),
    email: str = typer.Option(..., "--email", "-e", help="Email address"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, help="Password"
    ),
) -> None:
    """Create the first super admin in both the local store and Keycloak."""
    database_service = DbSessionService()
    identity_provider = KeycloakIdentityProvider(get_config().identity_provider)

    with database_service.get_session() as db:
        coordinator = AccountConsistencyCoordinator(db, identity_provider)
        try:
            account = coordinator.create_account(
                AccountCreate(
                    email=email,
                    password=password,
                    username=username,
                    role=Role.SUPER_ADMIN.value,
                ),
                Actor.system(),
            )
        except AccountError as e:
            console.print(f"[red]❌ Failed to create super admin: {e}[/red]")
            for failure in e.compensation_failures:
                console.print(
                    f"[red]   Manual cleanup needed: {failure.action} "
                    f"{failure.remote_ref} ({failure.detail})[/red]"
                )
            raise typer.Exit(code=1) from e

    console.print(
        f"[green]✅ Created super admin '{account.username}' "
        f"(id {account.id}, keycloak {account.remote_ref})[/green]"
    )


@accounts_app.command("list")
def list_accounts(
    role: str | None = typer.Option(None, "--role", "-r", help="Only this role"),
    search: str | None = typer.Option(None, "--search", "-s", help="Search text"),
) -> None:
    """List local accounts, newest first."""
    database_service = DbSessionService()

    with database_service.get_session() as db:
        try:
            accounts = AccountQueryService(db).list_accounts(
                Actor.system(), role=role, search=search
            )
        except AccountError as e:
            console.print(f"[red]❌ Failed to list accounts: {e}[/red]")
            raise typer.Exit(code=1) from e

    if not accounts:
        console.print("[yellow]No accounts found[/yellow]")
        return

    table = Table(title="Accounts")
    table.add_column("ID", style="cyan")
    table.add_column("Username", style="green")
    table.add_column("Email", style="blue")
    table.add_column("Role", style="magenta")
    table.add_column("Name", style="magenta")
    table.add_column("Created by", style="yellow")

    for account in accounts:
        view = account.public_view()
        name = " ".join(
            part for part in (view["first_name"], view["last_name"]) if part
        )
        table.add_row(
            str(view["user_id"]),
            view["username"],
            view["email"] or "",
            view["role"],
            name,
            view["created_by"] or "",
        )

    console.print(table)
    console.print(f"\n[green]Found {len(accounts)} accounts[/green]")
