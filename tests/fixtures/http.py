"""HTTP fixtures: the FastAPI app wired to in-memory storage."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from src.bookshelf.api.http.app import app
from src.bookshelf.api.http.app_data import ApplicationDependencies
from src.bookshelf.client import BookGatewayClient
from src.bookshelf.core.services import DbClientService
from src.bookshelf.runtime.config.config_data import AuthConfig
from src.bookshelf.runtime.context import get_config


@pytest.fixture
def app_dependencies(
    database_service: DbClientService, auth_config: AuthConfig
) -> ApplicationDependencies:
    return ApplicationDependencies(
        database_service=database_service,
        book_repository=database_service.get_book_repository(),
        auth=auth_config,
    )


@pytest.fixture
def http_client(
    app_dependencies: ApplicationDependencies,
) -> Generator[TestClient, None, None]:
    """Test client with startup dependencies injected instead of the lifespan."""
    previous = getattr(app.state, "app_dependencies", None)
    app.state.app_dependencies = app_dependencies
    yield TestClient(app)
    app.state.app_dependencies = previous


@pytest.fixture
def graphql_path() -> str:
    return get_config().app.graphql_path


@pytest.fixture
def gateway_client(
    http_client: TestClient, graphql_path: str, auth_token: str
) -> BookGatewayClient:
    """Gateway client whose transport is the in-process app."""
    return BookGatewayClient(graphql_path=graphql_path, token=auth_token, http_client=http_client)


@pytest.fixture
def anonymous_gateway_client(http_client: TestClient, graphql_path: str) -> BookGatewayClient:
    return BookGatewayClient(graphql_path=graphql_path, http_client=http_client)
