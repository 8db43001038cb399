"""Deployment-time database management: indexes and replica set bootstrap."""

from typing import Any

from loguru import logger
from pymongo import MongoClient
from pymongo.errors import OperationFailure

from src.bookshelf.core.services.database.db_client import DbClientService
from src.bookshelf.runtime.config.config_data import ReplicaSetConfig


def replica_set_document(replica_set: ReplicaSetConfig) -> dict[str, Any]:
    """The ``replSetInitiate`` configuration document for the configured members."""
    return {
        "_id": replica_set.name,
        "members": [
            {"_id": index, "host": host}
            for index, host in enumerate(replica_set.members)
        ],
    }


class DbManageService:
    def __init__(self, database_service: DbClientService):
        self._database_service = database_service

    def create_indexes(self) -> list[str]:
        """Create every index the book collection relies on."""
        names = self._database_service.get_book_repository().ensure_indexes()
        logger.info("Database initialized with indexes.")
        return names

    def init_replica_set(
        self, replica_set: ReplicaSetConfig, client: MongoClient | None = None
    ) -> dict[str, Any]:
        """Run ``replSetInitiate`` against a member of a fresh deployment.

        Connect directly to one member (``directConnection=true``) since no
        replica set exists yet. An already-initialized set is reported and
        left alone.
        """
        admin = (client or self._database_service.client).admin
        document = replica_set_document(replica_set)
        try:
            result = admin.command("replSetInitiate", document)
        except OperationFailure as exc:
            if exc.code == 23:  # AlreadyInitialized
                logger.info("Replica set {} already initialized", replica_set.name)
                return {"ok": 1.0, "alreadyInitialized": True}
            logger.error("Error initializing replica set: {}", exc)
            raise
        logger.info("Replica set {} initialized successfully", replica_set.name)
        return result
