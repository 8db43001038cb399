"""Database administration CLI commands."""

import typer
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from src.bookshelf.core.errors import InfrastructureError
from src.bookshelf.core.services import DbClientService, DbManageService
from src.bookshelf.runtime.context import get_config

from .utils import console

db_app = typer.Typer(help="🗄️  MongoDB administration commands")


@db_app.command("init")
def init_indexes() -> None:
    """Create the unique id, text search and createdAt indexes."""
    database_service = DbClientService()
    try:
        DbManageService(database_service).create_indexes()
    except InfrastructureError as e:
        console.print(f"[red]❌ Failed to create indexes: {e.message}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        database_service.close()

    db_config = get_config().database
    console.print(
        f"[green]✅ Indexes ready on {db_config.name}.{db_config.books_collection}[/green]"
    )


@db_app.command("init-replica")
def init_replica() -> None:
    """Initiate the replica set described by database.replica_set.

    Connects directly to the first member; an already initialized set is
    reported as success.
    """
    db_config = get_config().database
    replica_set = db_config.replica_set
    seed = replica_set.members[0]
    console.print(f"[cyan]Initiating replica set '{replica_set.name}' via {seed}[/cyan]")

    client: MongoClient = MongoClient(
        f"mongodb://{seed}",
        directConnection=True,
        serverSelectionTimeoutMS=db_config.server_selection_timeout_ms,
    )
    try:
        DbManageService(DbClientService(client=client)).init_replica_set(replica_set)
    except PyMongoError as e:
        console.print(f"[red]❌ Replica set initialization failed: {e}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        client.close()

    console.print(f"[green]✅ Replica set '{replica_set.name}' is initialized[/green]")
