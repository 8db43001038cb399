"""Book catalog CLI commands, driven through the GraphQL gateway client."""

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.table import Table

from src.bookshelf.client import BookGatewayClient, BookSyncController, ConsoleNotifier
from src.bookshelf.core.errors import BookshelfError
from src.bookshelf.entities.service.book import Book, BookInput
from src.bookshelf.runtime.context import get_config

from .utils import console

books_app = typer.Typer(help="📚 Browse and edit the book catalog")


def _gateway(base_url: str | None, token: str | None) -> BookGatewayClient:
    config = get_config()
    return BookGatewayClient(
        base_url=base_url or config.client.base_url,
        graphql_path=config.app.graphql_path,
        token=token if token is not None else config.auth.token,
        timeout=config.client.timeout_seconds,
    )


@contextmanager
def _controller(base_url: str | None, token: str | None) -> Iterator[BookSyncController]:
    config = get_config()
    client = _gateway(base_url, token)
    try:
        yield BookSyncController(
            client,
            ConsoleNotifier(console),
            notification_life=config.client.notification_life_seconds,
        )
    finally:
        client.close()


def _book_table(books: list[Book], title: str) -> Table:
    table = Table(title=title)
    table.add_column("_id", style="dim")
    table.add_column("Title", style="bold green")
    table.add_column("Author", style="cyan")
    table.add_column("Year", justify="right")
    table.add_column("Genre", style="magenta")
    table.add_column("Publisher", style="blue")
    for book in books:
        table.add_row(
            book.object_id,
            book.title,
            book.author,
            str(book.year),
            book.genre,
            book.publisher,
        )
    return table


BaseUrlOption = typer.Option(None, "--url", help="Server base URL (default: client.base_url)")
TokenOption = typer.Option(None, "--token", envvar="AUTH_TOKEN", help="Bearer token")


@books_app.command("list")
def list_books(
    search: str = typer.Option("", "--search", "-s", help="Filter by title, author, genre or publisher"),
    base_url: str | None = BaseUrlOption,
    token: str | None = TokenOption,
) -> None:
    """List the catalog, newest first."""
    with _controller(base_url, token) as controller:
        if not controller.fetch():
            raise typer.Exit(code=1)
        books = controller.search(search)

    if not books:
        console.print("[yellow]No books found[/yellow]")
        return
    console.print(_book_table(books, "Books"))
    console.print(f"\n[green]Found {len(books)} books[/green]")


@books_app.command("show")
def show_book(
    book_id: str = typer.Argument(..., help="The book's _id or book_ id"),
    base_url: str | None = BaseUrlOption,
    token: str | None = TokenOption,
) -> None:
    """Show a single book."""
    with _gateway(base_url, token) as client:
        try:
            book = client.get_book(book_id)
        except BookshelfError as e:
            console.print(f"[red]❌ {e.message}[/red]")
            raise typer.Exit(code=1) from e

    console.print(_book_table([book], book.title))
    console.print(f"[dim]id: {book.id}  created: {book.created_at}  updated: {book.updated_at}[/dim]")


@books_app.command("add")
def add_book(
    title: str = typer.Option(..., "--title", "-t"),
    author: str = typer.Option(..., "--author", "-a"),
    year: int = typer.Option(..., "--year", "-y"),
    genre: str = typer.Option(..., "--genre", "-g"),
    publisher: str = typer.Option(..., "--publisher", "-p"),
    base_url: str | None = BaseUrlOption,
    token: str | None = TokenOption,
) -> None:
    """Add a book to the catalog."""
    book_input = BookInput(
        title=title, author=author, year=year, genre=genre, publisher=publisher
    )
    with _controller(base_url, token) as controller:
        book = controller.create(book_input)
    if book is None:
        raise typer.Exit(code=1)
    console.print(f"[dim]_id: {book.object_id}[/dim]")


@books_app.command("update")
def update_book(
    book_id: str = typer.Argument(..., help="The book's _id or book_ id"),
    title: str | None = typer.Option(None, "--title", "-t"),
    author: str | None = typer.Option(None, "--author", "-a"),
    year: int | None = typer.Option(None, "--year", "-y"),
    genre: str | None = typer.Option(None, "--genre", "-g"),
    publisher: str | None = typer.Option(None, "--publisher", "-p"),
    base_url: str | None = BaseUrlOption,
    token: str | None = TokenOption,
) -> None:
    """Change the given fields of a book; omitted fields are left alone."""
    supplied = {
        name: value
        for name, value in {
            "title": title,
            "author": author,
            "year": year,
            "genre": genre,
            "publisher": publisher,
        }.items()
        if value is not None
    }
    if not supplied:
        console.print("[yellow]Nothing to update: pass at least one field option[/yellow]")
        raise typer.Exit(code=1)

    with _controller(base_url, token) as controller:
        book = controller.update(book_id, BookInput(**supplied))
    if book is None:
        raise typer.Exit(code=1)


@books_app.command("delete")
def delete_book(
    book_id: str = typer.Argument(..., help="The book's _id or book_ id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
    base_url: str | None = BaseUrlOption,
    token: str | None = TokenOption,
) -> None:
    """Delete a book."""
    if not yes and not typer.confirm(f"Delete book {book_id}?"):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit()

    with _controller(base_url, token) as controller:
        book = controller.delete(book_id)
    if book is None:
        raise typer.Exit(code=1)
