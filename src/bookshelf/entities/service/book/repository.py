"""Data-access layer for book records stored in MongoDB."""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

import pydantic
from bson import ObjectId
from loguru import logger
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure, ExecutionTimeout, WTimeoutError

from src.bookshelf.core.errors import InfrastructureError, NotFoundError, ValidationError
from src.bookshelf.entities.core._base import next_timestamp, utc_now
from src.bookshelf.entities.service.book.document import (
    BOOK_INDEXES,
    from_document,
    parse_object_id,
    secondary_id,
    to_document,
)
from src.bookshelf.entities.service.book.entity import (
    REQUIRED_FIELDS,
    TEXT_FIELDS,
    Book,
    BookInput,
)

NEWEST_FIRST = [("createdAt", DESCENDING), ("_id", DESCENDING)]

_STORAGE_ERRORS = (ConnectionFailure, ExecutionTimeout, WTimeoutError)


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Re-raise driver connectivity and timeout failures as InfrastructureError."""
    try:
        yield
    except _STORAGE_ERRORS as exc:
        logger.bind(operation=operation, error_type=type(exc).__name__).error(
            "book.storage_unavailable"
        )
        raise InfrastructureError(
            f"Storage unavailable during {operation}: {exc}"
        ) from exc


def validate_book_fields(
    book_input: BookInput | Mapping[str, Any], *, partial: bool
) -> dict[str, Any]:
    """Check required-field presence and return the fields to persist.

    With ``partial=False`` every required field must be present; with
    ``partial=True`` only the supplied ones are checked, but at least one must
    be supplied. Text fields must not be blank and ``year`` must be an integer.
    """
    if not isinstance(book_input, BookInput):
        try:
            book_input = BookInput.model_validate(dict(book_input))
        except pydantic.ValidationError as exc:
            fields = [str(err["loc"][0]) for err in exc.errors() if err.get("loc")]
            raise ValidationError(
                f"Invalid value for: {', '.join(fields)}", fields=fields
            ) from exc

    fields = book_input.supplied_fields()
    blank = [
        name
        for name in TEXT_FIELDS
        if name in fields and not str(fields[name]).strip()
    ]
    missing = [] if partial else [name for name in REQUIRED_FIELDS if name not in fields]
    problems = [name for name in REQUIRED_FIELDS if name in blank or name in missing]

    if problems:
        raise ValidationError(
            f"Missing required field(s): {', '.join(problems)}", fields=problems
        )
    if partial and not fields:
        raise ValidationError("No fields supplied for update")
    return fields


class BookRepository:
    """Data-access layer for books."""

    def __init__(self, collection: Collection, id_prefix: str = "book_") -> None:
        self._collection = collection
        self._id_prefix = id_prefix

    @property
    def id_prefix(self) -> str:
        return self._id_prefix

    def ensure_indexes(self) -> list[str]:
        """Create the unique secondary-id index, the text index and the sort index."""
        names = []
        with storage_errors("ensure_indexes"):
            for keys, options in BOOK_INDEXES:
                names.append(self._collection.create_index(keys, **options))
        logger.info("Book indexes ensured: {}", names)
        return names

    def _object_id(self, book_id: str) -> ObjectId:
        object_id = parse_object_id(book_id, self._id_prefix)
        if object_id is None:
            raise NotFoundError.for_id(book_id)
        return object_id

    def create(self, book_input: BookInput | Mapping[str, Any]) -> Book:
        fields = validate_book_fields(book_input, partial=False)

        object_id = ObjectId()
        now = utc_now()
        book = Book(
            object_id=str(object_id),
            id=secondary_id(object_id, self._id_prefix),
            created_at=now,
            updated_at=now,
            **fields,
        )
        with storage_errors("create"):
            self._collection.insert_one(to_document(book))

        logger.bind(book_id=book.object_id).info("book.created")
        return book

    def get(self, book_id: str) -> Book:
        object_id = self._object_id(book_id)
        with storage_errors("get"):
            document = self._collection.find_one({"_id": object_id})
        if document is None:
            raise NotFoundError.for_id(book_id)
        return from_document(document)

    def list_all(self) -> list[Book]:
        """All books, newest first by creation time."""
        with storage_errors("list"):
            documents = list(self._collection.find().sort(NEWEST_FIRST))
        return [from_document(document) for document in documents]

    def search(self, query: str) -> list[Book]:
        """Server-side keyword search over the text index, newest first."""
        if not query.strip():
            return self.list_all()
        with storage_errors("search"):
            documents = list(
                self._collection.find({"$text": {"$search": query}}).sort(NEWEST_FIRST)
            )
        return [from_document(document) for document in documents]

    def update(self, book_id: str, book_input: BookInput | Mapping[str, Any]) -> Book:
        """Replace the supplied fields and bump ``updatedAt``.

        An unknown id raises NotFoundError before the input is validated.
        """
        object_id = self._object_id(book_id)
        with storage_errors("update"):
            current = self._collection.find_one({"_id": object_id}, {"updatedAt": 1})
        if current is None:
            raise NotFoundError.for_id(book_id)

        fields = validate_book_fields(book_input, partial=True)
        with storage_errors("update"):
            changes = {**fields, "updatedAt": next_timestamp(current.get("updatedAt"))}
            document = self._collection.find_one_and_update(
                {"_id": object_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )

        if document is None:
            raise NotFoundError.for_id(book_id)

        logger.bind(book_id=str(object_id), fields=sorted(fields)).info("book.updated")
        return from_document(document)

    def delete(self, book_id: str) -> Book:
        """Remove the book and return what was removed."""
        object_id = self._object_id(book_id)
        with storage_errors("delete"):
            document = self._collection.find_one_and_delete({"_id": object_id})
        if document is None:
            raise NotFoundError.for_id(book_id)

        logger.bind(book_id=str(object_id)).info("book.deleted")
        return from_document(document)
