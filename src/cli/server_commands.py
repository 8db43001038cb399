"""Server CLI commands."""

import typer
import uvicorn
from rich.panel import Panel

from src.bookshelf.runtime.context import get_config

from .utils import console, get_project_root


def serve(
    host: str | None = typer.Option(None, help="Host to bind to (default: app.host)"),
    port: int | None = typer.Option(None, help="Port to bind to (default: app.port)"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
) -> None:
    """
    🚀 Start the GraphQL server.

    Serves the book API at the configured GraphQL path together with the
    /health and /health/ready probes.
    """
    app_config = get_config().app
    bind_host = host or app_config.host
    bind_port = port or app_config.port

    console.print(
        Panel.fit(
            f"[bold green]Starting book catalog on {bind_host}:{bind_port}"
            f"{app_config.graphql_path}[/bold green]",
            border_style="green",
        )
    )

    uvicorn.run(
        "src.bookshelf.api.http.app:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        reload_dirs=[str(get_project_root() / "src")] if reload else None,
        log_config=None,
    )
