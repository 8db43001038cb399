"""Keeps the client-side book store in step with the GraphQL gateway."""

import time
from collections.abc import Callable
from typing import TypeVar

from loguru import logger

from src.bookshelf.client.graphql_client import BookGatewayClient
from src.bookshelf.client.notifier import DEFAULT_LIFE_SECONDS, Notification, Notifier
from src.bookshelf.client.store import (
    Action,
    BookState,
    CreateSucceeded,
    DeleteSucceeded,
    FetchSucceeded,
    Operation,
    OperationFailed,
    OperationStarted,
    SearchChanged,
    Tick,
    UpdateSucceeded,
    reduce,
)
from src.bookshelf.core.errors import BookshelfError, InfrastructureError
from src.bookshelf.entities.service.book import Book, BookInput

T = TypeVar("T")

GENERIC_FAILURE = "Something went wrong, please try again"


class BookSyncController:
    """Runs each operation against the gateway and folds the outcome into the store.

    Successful mutations are spliced into the local list (no refetch). Every
    failure leaves the list unchanged, records an error that expires after
    ``notification_life`` seconds and is shown through the injected notifier.
    Failures are never retried.
    """

    def __init__(
        self,
        client: BookGatewayClient,
        notifier: Notifier,
        notification_life: float = DEFAULT_LIFE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        state: BookState | None = None,
    ) -> None:
        self._client = client
        self._notifier = notifier
        self._notification_life = notification_life
        self._clock = clock
        self._state = state or BookState()

    @property
    def state(self) -> BookState:
        return self._state

    def dispatch(self, action: Action) -> BookState:
        self._state = reduce(self._state, action)
        return self._state

    def tick(self) -> BookState:
        """Dismiss errors whose display time has elapsed."""
        return self.dispatch(Tick(now=self._clock()))

    def _fail(self, operation: Operation, summary: str, exc: BookshelfError) -> None:
        # Infrastructure details are logged, the user gets a generic message
        detail = GENERIC_FAILURE if isinstance(exc, InfrastructureError) else exc.message
        logger.bind(operation=operation, code=exc.code).warning("sync.failed: {}", exc.message)
        self.dispatch(
            OperationFailed(
                operation=operation,
                message=detail,
                expires_at=self._clock() + self._notification_life,
            )
        )
        self._notifier.notify(
            Notification(
                severity="error",
                summary=summary,
                detail=detail,
                life_seconds=self._notification_life,
            )
        )

    def _succeed(self, summary: str, detail: str | None = None) -> None:
        self._notifier.notify(
            Notification(
                severity="success",
                summary=summary,
                detail=detail,
                life_seconds=self._notification_life,
            )
        )

    def _call(self, operation: Operation, summary: str, call: Callable[[], T]) -> T | None:
        """Run one gateway call; any failure is recorded and notified, never raised."""
        self.dispatch(OperationStarted(operation))
        try:
            return call()
        except BookshelfError as exc:
            self._fail(operation, summary, exc)
        except Exception as exc:
            # Malformed payloads and other surprises settle like infrastructure failures
            logger.opt(exception=exc).bind(operation=operation).error("sync.unexpected_error")
            self._fail(operation, summary, InfrastructureError(f"Unexpected failure: {exc}"))
        return None

    def fetch(self) -> bool:
        """Replace the local list with the server's; False on failure."""
        books = self._call("list", "Failed to fetch books", self._client.list_books)
        if books is None:
            return False
        self.dispatch(FetchSucceeded(books=tuple(books)))
        return True

    def create(self, book_input: BookInput) -> Book | None:
        book = self._call(
            "create", "Failed to create book", lambda: self._client.create_book(book_input)
        )
        if book is not None:
            self.dispatch(CreateSucceeded(book=book))
            self._succeed("Book created", book.title)
        return book

    def update(self, object_id: str, book_input: BookInput) -> Book | None:
        book = self._call(
            "update",
            "Failed to update book",
            lambda: self._client.update_book(object_id, book_input),
        )
        if book is not None:
            self.dispatch(UpdateSucceeded(book=book))
            self._succeed("Book updated", book.title)
        return book

    def delete(self, object_id: str) -> Book | None:
        book = self._call(
            "delete", "Failed to delete book", lambda: self._client.delete_book(object_id)
        )
        if book is not None:
            self.dispatch(DeleteSucceeded(object_id=book.object_id))
            self._succeed("Book deleted", book.title)
        return book

    def search(self, query: str) -> list[Book]:
        """Filter the local list; never touches the server."""
        self.dispatch(SearchChanged(query=query))
        return self._state.visible_books()
