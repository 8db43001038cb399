"""Auth token helpers."""

import typer

from src.bookshelf.core.security import generate_secure_token

from .utils import console

auth_app = typer.Typer(help="🔐 Bearer token helpers")


@auth_app.command("token")
def new_token(
    length: int = typer.Option(32, help="Number of random bytes before encoding"),
) -> None:
    """Generate a random value suitable for AUTH_TOKEN."""
    console.print(generate_secure_token(length))
