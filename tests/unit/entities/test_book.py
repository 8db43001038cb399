"""Unit tests for the Book entity and its document mapping."""

from datetime import UTC, datetime, timedelta

from bson import ObjectId

from src.bookshelf.entities.core._base import ensure_utc, next_timestamp, utc_now
from src.bookshelf.entities.service.book import Book, BookInput
from src.bookshelf.entities.service.book.document import (
    from_document,
    parse_object_id,
    secondary_id,
    to_document,
)


def _book(**overrides) -> Book:
    data = {
        "title": "Dune",
        "author": "Frank Herbert",
        "year": 1965,
        "genre": "Science Fiction",
        "publisher": "Chilton Books",
    }
    data.update(overrides)
    return Book(**data)


class TestBookEntity:
    """Test Book model behavior."""

    def test_aliases_round_trip(self):
        book = _book()
        dumped = book.model_dump(by_alias=True)

        assert dumped["_id"] == book.object_id
        assert "createdAt" in dumped and "updatedAt" in dumped
        assert Book.model_validate(dumped) == book

    def test_equality_ignores_timestamps(self):
        book = _book()
        later = book.model_copy(update={"updated_at": book.updated_at + timedelta(days=1)})

        assert book == later
        assert hash(book) == hash(later)

    def test_equality_compares_fields(self):
        book = _book()

        assert book != book.model_copy(update={"title": "Dune Messiah"})
        assert book != "Dune"

    def test_matches_is_case_insensitive_substring(self):
        book = _book()

        assert book.matches("du")
        assert book.matches("HERBERT")
        assert book.matches("fiction")
        assert book.matches("chilton")
        assert not book.matches("orwell")

    def test_matches_ignores_year(self):
        assert not _book().matches("1965")

    def test_blank_query_matches(self):
        assert _book().matches("")
        assert _book().matches("   ")


class TestBookInput:
    def test_supplied_fields_skip_none(self):
        book_input = BookInput(title="Dune", year=1965)

        assert book_input.supplied_fields() == {"title": "Dune", "year": 1965}

    def test_identifiers_are_ignored(self):
        book_input = BookInput.model_validate({"title": "Dune", "_id": "x", "id": "book_x"})

        assert book_input.supplied_fields() == {"title": "Dune"}


class TestTimestamps:
    def test_utc_now_is_millisecond_precision(self):
        now = utc_now()

        assert now.tzinfo is not None
        assert now.microsecond % 1000 == 0

    def test_ensure_utc_attaches_timezone(self):
        naive = datetime(2024, 1, 1, 12, 0, 0)

        assert ensure_utc(naive) == datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)

    def test_next_timestamp_is_strictly_later(self):
        future = utc_now() + timedelta(seconds=5)

        assert next_timestamp(future) == future + timedelta(milliseconds=1)

    def test_next_timestamp_without_previous(self):
        assert next_timestamp(None) <= utc_now()


class TestDocumentMapping:
    def test_secondary_id_uses_prefix(self):
        object_id = ObjectId()

        assert secondary_id(object_id, "book_") == f"book_{object_id}"

    def test_parse_object_id_accepts_both_forms(self):
        object_id = ObjectId()

        assert parse_object_id(str(object_id), "book_") == object_id
        assert parse_object_id(f"book_{object_id}", "book_") == object_id

    def test_parse_object_id_rejects_malformed(self):
        assert parse_object_id("not-an-id", "book_") is None
        assert parse_object_id("book_123", "book_") is None
        assert parse_object_id("", "book_") is None

    def test_document_round_trip(self):
        object_id = ObjectId()
        book = _book(object_id=str(object_id), id=secondary_id(object_id, "book_"))

        document = to_document(book)

        assert document["_id"] == object_id
        assert document["createdAt"] == book.created_at
        assert from_document(document) == book
