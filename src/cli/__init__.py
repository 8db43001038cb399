"""Main CLI application module."""

import typer

from .auth_commands import auth_app
from .book_commands import books_app
from .db_commands import db_app
from .server_commands import serve

# Create the main CLI application
app = typer.Typer(
    help="📚 Bookshelf CLI - catalog server, client and database tooling",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register command groups
app.command(name="serve")(serve)
app.add_typer(books_app, name="books")
app.add_typer(db_app, name="db")
app.add_typer(auth_app, name="auth")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
