"""httpx client for the book GraphQL gateway."""

from typing import Any

import httpx
from loguru import logger

from src.bookshelf.client import operations
from src.bookshelf.core.errors import BookshelfError, InfrastructureError, error_from_code
from src.bookshelf.entities.service.book import Book, BookInput
from src.bookshelf.runtime.config.config_data import AuthConfig, ClientConfig


class BookGatewayClient:
    """Issues the book queries and mutations and returns Book entities.

    GraphQL errors come back as the matching taxonomy error (ValidationError,
    NotFoundError, AuthorizationError, InfrastructureError). Transport failures
    and non-GraphQL HTTP errors become InfrastructureError. Nothing is retried.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        graphql_path: str = "/gql",
        token: str | None = None,
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._graphql_path = graphql_path
        self._token = token
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    @classmethod
    def from_config(
        cls,
        client_config: ClientConfig,
        graphql_path: str,
        auth: AuthConfig,
    ) -> "BookGatewayClient":
        return cls(
            base_url=client_config.base_url,
            graphql_path=graphql_path,
            token=auth.token,
            timeout=client_config.timeout_seconds,
        )

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "BookGatewayClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def execute(self, document: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """POST one GraphQL operation and return its ``data`` payload."""
        payload = {"query": document, "variables": variables or {}}
        try:
            response = self._http.post(
                self._graphql_path, json=payload, headers=self._headers()
            )
        except httpx.HTTPError as exc:
            logger.bind(error_type=type(exc).__name__).error("gateway.transport_error")
            raise InfrastructureError(f"Book service unreachable: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise InfrastructureError(
                f"Unexpected response from book service (HTTP {response.status_code})"
            ) from exc

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            raise self._error_from_payload(errors[0])

        if response.status_code >= 400 or not isinstance(body, dict) or body.get("data") is None:
            raise InfrastructureError(
                f"Unexpected response from book service (HTTP {response.status_code})"
            )
        return body["data"]

    @staticmethod
    def _error_from_payload(error: dict[str, Any]) -> BookshelfError:
        code = (error.get("extensions") or {}).get("code")
        message = error.get("message") or "Request failed"
        return error_from_code(code, message)

    def list_books(self) -> list[Book]:
        data = self.execute(operations.BOOK_LIST_QUERY)
        return [Book.model_validate(item) for item in data["bookList"]]

    def get_book(self, book_id: str) -> Book:
        data = self.execute(operations.GET_BOOK_QUERY, {"id": book_id})
        return Book.model_validate(data["book"])

    def search_books(self, query: str) -> list[Book]:
        data = self.execute(operations.SEARCH_BOOKS_QUERY, {"query": query})
        return [Book.model_validate(item) for item in data["bookSearch"]]

    def create_book(self, book_input: BookInput) -> Book:
        data = self.execute(
            operations.CREATE_BOOK_MUTATION, {"input": book_input.supplied_fields()}
        )
        return Book.model_validate(data["bookCreate"])

    def update_book(self, book_id: str, book_input: BookInput) -> Book:
        data = self.execute(
            operations.UPDATE_BOOK_MUTATION,
            {"id": book_id, "input": book_input.supplied_fields()},
        )
        return Book.model_validate(data["bookUpdate"])

    def delete_book(self, book_id: str) -> Book:
        data = self.execute(operations.DELETE_BOOK_MUTATION, {"id": book_id})
        return Book.model_validate(data["bookDelete"])
