"""Client-side book store: a pure reducer over an immutable state.

The state mirrors the server's book list and is kept in sync only through
the transitions below, one per completed or failed operation. Nothing here
performs I/O; ``BookSyncController`` dispatches the actions.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from typing import Literal

from src.bookshelf.entities.service.book import Book

Operation = Literal["list", "create", "update", "delete"]
OPERATIONS: tuple[Operation, ...] = ("list", "create", "update", "delete")


@dataclass(frozen=True)
class OperationStatus:
    loading: bool = False
    error: str | None = None
    error_expires_at: float | None = None


def _idle_statuses() -> dict[str, OperationStatus]:
    return {operation: OperationStatus() for operation in OPERATIONS}


@dataclass(frozen=True)
class BookState:
    books: tuple[Book, ...] = ()
    status: dict[str, OperationStatus] = field(default_factory=_idle_statuses)
    add_dialog_open: bool = False
    edit_book_id: str | None = None
    search_query: str = ""

    @property
    def edit_dialog_open(self) -> bool:
        return self.edit_book_id is not None

    def visible_books(self) -> list[Book]:
        """The book list narrowed by the current search query."""
        return filter_books(self.books, self.search_query)


# --- Actions ---


@dataclass(frozen=True)
class FetchSucceeded:
    books: tuple[Book, ...]


@dataclass(frozen=True)
class OperationStarted:
    operation: Operation


@dataclass(frozen=True)
class OperationFailed:
    operation: Operation
    message: str
    expires_at: float | None = None


@dataclass(frozen=True)
class CreateSucceeded:
    book: Book


@dataclass(frozen=True)
class UpdateSucceeded:
    book: Book


@dataclass(frozen=True)
class DeleteSucceeded:
    object_id: str


@dataclass(frozen=True)
class ErrorDismissed:
    operation: Operation


@dataclass(frozen=True)
class Tick:
    """Clock advance; errors whose expiry has passed are dismissed."""

    now: float


@dataclass(frozen=True)
class AddDialogOpened:
    pass


@dataclass(frozen=True)
class AddDialogClosed:
    pass


@dataclass(frozen=True)
class EditDialogOpened:
    object_id: str


@dataclass(frozen=True)
class EditDialogClosed:
    pass


@dataclass(frozen=True)
class SearchChanged:
    query: str


Action = (
    FetchSucceeded
    | OperationStarted
    | OperationFailed
    | CreateSucceeded
    | UpdateSucceeded
    | DeleteSucceeded
    | ErrorDismissed
    | Tick
    | AddDialogOpened
    | AddDialogClosed
    | EditDialogOpened
    | EditDialogClosed
    | SearchChanged
)


def filter_books(books: Iterable[Book], query: str) -> list[Book]:
    """Case-insensitive substring match over title, author, genre and publisher.

    An empty or blank query keeps every book.
    """
    return [book for book in books if book.matches(query)]


def _with_status(state: BookState, operation: str, status: OperationStatus) -> BookState:
    return replace(state, status={**state.status, operation: status})


def _settled(state: BookState, operation: str) -> BookState:
    return _with_status(state, operation, OperationStatus())


def _fetch_succeeded(state: BookState, action: FetchSucceeded) -> BookState:
    return replace(_settled(state, "list"), books=tuple(action.books))


def _operation_started(state: BookState, action: OperationStarted) -> BookState:
    return _with_status(state, action.operation, OperationStatus(loading=True))


def _operation_failed(state: BookState, action: OperationFailed) -> BookState:
    status = OperationStatus(error=action.message, error_expires_at=action.expires_at)
    return _with_status(state, action.operation, status)


def _create_succeeded(state: BookState, action: CreateSucceeded) -> BookState:
    state = _settled(state, "create")
    return replace(state, books=(action.book, *state.books), add_dialog_open=False)


def _update_succeeded(state: BookState, action: UpdateSucceeded) -> BookState:
    state = _settled(state, "update")
    books = tuple(
        action.book if book.object_id == action.book.object_id else book
        for book in state.books
    )
    return replace(state, books=books, edit_book_id=None)


def _delete_succeeded(state: BookState, action: DeleteSucceeded) -> BookState:
    state = _settled(state, "delete")
    books = tuple(book for book in state.books if book.object_id != action.object_id)
    edit_book_id = None if state.edit_book_id == action.object_id else state.edit_book_id
    return replace(state, books=books, edit_book_id=edit_book_id)


def _error_dismissed(state: BookState, action: ErrorDismissed) -> BookState:
    current = state.status[action.operation]
    return _with_status(state, action.operation, replace(current, error=None, error_expires_at=None))


def _tick(state: BookState, action: Tick) -> BookState:
    expired = [
        operation
        for operation, status in state.status.items()
        if status.error is not None
        and status.error_expires_at is not None
        and status.error_expires_at <= action.now
    ]
    if not expired:
        return state
    status = dict(state.status)
    for operation in expired:
        status[operation] = replace(status[operation], error=None, error_expires_at=None)
    return replace(state, status=status)


def _add_dialog_opened(state: BookState, action: AddDialogOpened) -> BookState:
    return replace(state, add_dialog_open=True)


def _add_dialog_closed(state: BookState, action: AddDialogClosed) -> BookState:
    return replace(state, add_dialog_open=False)


def _edit_dialog_opened(state: BookState, action: EditDialogOpened) -> BookState:
    return replace(state, edit_book_id=action.object_id)


def _edit_dialog_closed(state: BookState, action: EditDialogClosed) -> BookState:
    return replace(state, edit_book_id=None)


def _search_changed(state: BookState, action: SearchChanged) -> BookState:
    return replace(state, search_query=action.query)


_REDUCERS: dict[type, Callable[[BookState, Action], BookState]] = {
    FetchSucceeded: _fetch_succeeded,
    OperationStarted: _operation_started,
    OperationFailed: _operation_failed,
    CreateSucceeded: _create_succeeded,
    UpdateSucceeded: _update_succeeded,
    DeleteSucceeded: _delete_succeeded,
    ErrorDismissed: _error_dismissed,
    Tick: _tick,
    AddDialogOpened: _add_dialog_opened,
    AddDialogClosed: _add_dialog_closed,
    EditDialogOpened: _edit_dialog_opened,
    EditDialogClosed: _edit_dialog_closed,
    SearchChanged: _search_changed,
}


def reduce(state: BookState, action: Action) -> BookState:
    """Return the state that follows ``action``; ``state`` is never mutated."""
    try:
        reducer = _REDUCERS[type(action)]
    except KeyError:
        raise TypeError(f"Unknown action: {type(action).__name__}") from None
    return reducer(state, action)
