"""Main CLI application module."""

import typer

from .account_commands import accounts_app
from .db_commands import db_app

app = typer.Typer(
    help="Account Admin CLI - database and account bootstrap tooling",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(db_app, name="db")
app.add_typer(accounts_app, name="accounts")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
