"""Unit tests for the MongoDB client and management services."""

from unittest.mock import MagicMock, Mock

import pytest
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from src.bookshelf.core.services import DbClientService, DbManageService
from src.bookshelf.core.services.database.db_manage import replica_set_document
from src.bookshelf.entities.service.book import BookRepository
from src.bookshelf.runtime.config.config_data import DatabaseConfig, ReplicaSetConfig


class TestDbClientService:
    """Test client construction and collection access."""

    def test_client_kwargs_follow_config(self):
        kwargs = DbClientService._get_client_kwargs(
            DatabaseConfig(min_pool_size=2, max_pool_size=4, server_selection_timeout_ms=1000)
        )

        assert kwargs["minPoolSize"] == 2
        assert kwargs["maxPoolSize"] == 4
        assert kwargs["serverSelectionTimeoutMS"] == 1000
        assert kwargs["retryWrites"] is True
        assert kwargs["tz_aware"] is True

    def test_books_collection_uses_configured_names(self, database_service):
        collection = database_service.get_books_collection()

        assert collection.name == "books"
        assert collection.database.name == "bookshelf_test"

    def test_book_repository_uses_prefix(self, mongo_client):
        service = DbClientService(
            client=mongo_client, db_config=DatabaseConfig(id_prefix="b-")
        )

        repository = service.get_book_repository()

        assert isinstance(repository, BookRepository)
        assert repository.id_prefix == "b-"

    def test_health_check_ok(self):
        client = MagicMock()
        client.admin.command.return_value = {"ok": 1.0}

        assert DbClientService(client=client).health_check() is True
        client.admin.command.assert_called_once_with("ping")

    def test_health_check_unreachable(self):
        client = MagicMock()
        client.admin.command.side_effect = ServerSelectionTimeoutError("no servers")

        assert DbClientService(client=client).health_check() is False

    def test_close_releases_client(self):
        client = MagicMock()

        DbClientService(client=client).close()

        client.close.assert_called_once()


class TestDbManageService:
    """Index creation and replica set bootstrap."""

    def test_create_indexes_delegates_to_repository(self):
        database_service = Mock(spec=DbClientService)
        database_service.get_book_repository.return_value.ensure_indexes.return_value = [
            "id_unique"
        ]

        assert DbManageService(database_service).create_indexes() == ["id_unique"]

    def test_replica_set_document(self):
        document = replica_set_document(ReplicaSetConfig())

        assert document == {
            "_id": "rs0",
            "members": [
                {"_id": 0, "host": "mongo1:27017"},
                {"_id": 1, "host": "mongo2:27017"},
                {"_id": 2, "host": "mongo3:27017"},
            ],
        }

    def test_init_replica_set(self):
        client = MagicMock()
        client.admin.command.return_value = {"ok": 1.0}
        service = DbManageService(DbClientService(client=client))

        result = service.init_replica_set(ReplicaSetConfig(name="rs1", members=["a:1"]))

        assert result == {"ok": 1.0}
        client.admin.command.assert_called_once_with(
            "replSetInitiate", {"_id": "rs1", "members": [{"_id": 0, "host": "a:1"}]}
        )

    def test_already_initialized_is_ok(self):
        client = MagicMock()
        client.admin.command.side_effect = OperationFailure("already initialized", code=23)
        service = DbManageService(DbClientService(client=client))

        result = service.init_replica_set(ReplicaSetConfig())

        assert result["alreadyInitialized"] is True

    def test_other_failures_propagate(self):
        client = MagicMock()
        client.admin.command.side_effect = OperationFailure("bad config", code=93)
        service = DbManageService(DbClientService(client=client))

        with pytest.raises(OperationFailure):
            service.init_replica_set(ReplicaSetConfig())
