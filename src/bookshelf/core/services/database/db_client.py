"""MongoDB client and collection access used across the application."""

from typing import Any

from loguru import logger
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from src.bookshelf.entities.service.book import BookRepository
from src.bookshelf.runtime.config.config_data import DatabaseConfig
from src.bookshelf.runtime.context import get_config


class DbClientService:
    def __init__(self, client: MongoClient | None = None, db_config: DatabaseConfig | None = None):
        """Create the shared MongoDB client; the driver owns the connection pool.

        ``client`` is injected by tests (e.g. a mongomock client); otherwise a
        pymongo client is built from the ``database`` section of the config.
        """
        main_config = get_config()
        self._config = db_config or main_config.database

        if client is None:
            client_kwargs = self._get_client_kwargs(self._config)
            logger.info(
                "Initializing MongoDB client for environment {} with pool {}-{}",
                main_config.app.environment,
                self._config.min_pool_size,
                self._config.max_pool_size,
            )
            client = MongoClient(self._config.url, **client_kwargs)

        self._client = client

    @staticmethod
    def _get_client_kwargs(db_config: DatabaseConfig) -> dict[str, Any]:
        """Driver options: bounded pool, selection/socket timeouts, retryable writes."""
        return {
            "minPoolSize": db_config.min_pool_size,
            "maxPoolSize": db_config.max_pool_size,
            "serverSelectionTimeoutMS": db_config.server_selection_timeout_ms,
            "socketTimeoutMS": db_config.socket_timeout_ms,
            "retryWrites": db_config.retry_writes,
            "tz_aware": True,
            "appname": "bookshelf",
        }

    @property
    def client(self) -> MongoClient:
        return self._client

    def get_database(self) -> Database:
        """Return the application database."""
        return self._client[self._config.name]

    def get_books_collection(self) -> Collection:
        """Return the collection holding book records."""
        return self.get_database()[self._config.books_collection]

    def get_book_repository(self) -> BookRepository:
        """Return a repository bound to the books collection."""
        return BookRepository(self.get_books_collection(), id_prefix=self._config.id_prefix)

    def health_check(self) -> bool:
        """Ping the server; False when it cannot be reached."""
        try:
            self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error(
                "Database health check failed",
                extra={
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            return False

    def close(self) -> None:
        """Release the connection pool."""
        logger.info("Closing MongoDB client")
        self._client.close()
