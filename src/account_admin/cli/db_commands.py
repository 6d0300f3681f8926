"""Local user store schema commands."""

import typer
from rich.console import Console
from rich.prompt import Confirm

from src.account_admin.core.services import DbManageService, DbSessionService

console = Console()

db_app = typer.Typer(help="Manage the local user store schema")


@db_app.command("init")
def init_db() -> None:
    """Create all database tables."""
    database_service = DbSessionService()
    DbManageService(database_service.engine).create_all()
    console.print("[green]✅ Database tables created[/green]")


@db_app.command("reset")
def reset_db(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Drop and recreate all tables. Remote identities are left untouched."""
    if not force and not Confirm.ask(
        "This deletes every local account record. Continue?"
    ):
        console.print("[yellow]Aborted[/yellow]")
        raise typer.Exit(code=1)

    database_service = DbSessionService()
    manager = DbManageService(database_service.engine)
    manager.drop_all()
    manager.create_all()
    console.print("[green]✅ Database reset[/green]")
