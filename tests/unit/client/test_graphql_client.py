"""Unit tests for the gateway client over a mocked transport."""

import json

import httpx
import pytest

from src.bookshelf.client import BookGatewayClient
from src.bookshelf.client import operations
from src.bookshelf.core.errors import (
    AuthorizationError,
    BookshelfError,
    InfrastructureError,
    NotFoundError,
    ValidationError,
)
from src.bookshelf.entities.service.book import BookInput

_BOOK = {
    "_id": "65a1b2c3d4e5f6a7b8c9d0e1",
    "id": "book_65a1b2c3d4e5f6a7b8c9d0e1",
    "title": "Dune",
    "author": "Frank Herbert",
    "year": 1965,
    "genre": "Science Fiction",
    "publisher": "Chilton Books",
    "createdAt": "2024-01-01T00:00:00+00:00",
    "updatedAt": "2024-01-01T00:00:00+00:00",
}


def _client(handler, token: str | None = None) -> BookGatewayClient:
    http = httpx.Client(base_url="http://books.test", transport=httpx.MockTransport(handler))
    return BookGatewayClient(graphql_path="/gql", token=token, http_client=http)


def _graphql_error(code: str, message: str):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"data": None, "errors": [{"message": message, "extensions": {"code": code}}]},
        )

    return handler


class TestRequests:
    """What the client puts on the wire."""

    def test_posts_query_with_bearer_token(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": {"bookList": [_BOOK]}})

        books = _client(handler, token="secret").list_books()

        assert books[0].title == "Dune"
        assert books[0].object_id == _BOOK["_id"]
        assert seen[0].url.path == "/gql"
        assert seen[0].headers["Authorization"] == "Bearer secret"
        assert json.loads(seen[0].content)["query"] == operations.BOOK_LIST_QUERY

    def test_no_token_no_header(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": {"bookList": []}})

        assert _client(handler).list_books() == []
        assert "Authorization" not in seen[0].headers

    def test_update_sends_only_supplied_fields(self):
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"data": {"bookUpdate": {**_BOOK, "year": 1966}}})

        book = _client(handler).update_book(_BOOK["id"], BookInput(year=1966))

        assert book.year == 1966
        assert seen[0]["variables"] == {"id": _BOOK["id"], "input": {"year": 1966}}

    def test_delete_returns_removed_record(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"data": {"bookDelete": _BOOK}})

        assert _client(handler).delete_book(_BOOK["_id"]).title == "Dune"


class TestErrors:
    """GraphQL and transport failures map onto the error taxonomy."""

    @pytest.mark.parametrize(
        ("code", "error_cls"),
        [
            ("BAD_USER_INPUT", ValidationError),
            ("NOT_FOUND", NotFoundError),
            ("UNAUTHENTICATED", AuthorizationError),
            ("INFRASTRUCTURE_ERROR", InfrastructureError),
        ],
    )
    def test_graphql_error_codes(self, code, error_cls):
        client = _client(_graphql_error(code, "nope"))

        with pytest.raises(error_cls, match="nope"):
            client.get_book("book_x")

    def test_unclassified_graphql_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"errors": [{"message": "Syntax Error"}]})

        with pytest.raises(BookshelfError, match="Syntax Error"):
            _client(handler).list_books()

    def test_transport_error_is_infrastructure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(InfrastructureError, match="unreachable"):
            _client(handler).list_books()

    def test_non_json_response_is_infrastructure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="<html>Bad Gateway</html>")

        with pytest.raises(InfrastructureError, match="502"):
            _client(handler).list_books()

    def test_http_error_without_graphql_errors(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"detail": "Internal Server Error"})

        with pytest.raises(InfrastructureError):
            _client(handler).list_books()
