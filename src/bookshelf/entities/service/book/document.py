"""MongoDB document mapping for books."""

from typing import Any

from bson import ObjectId
from bson.errors import InvalidId

from src.bookshelf.entities.core._base import ensure_utc
from src.bookshelf.entities.service.book.entity import Book

# (keys, options) pairs passed to ``Collection.create_index``
BOOK_INDEXES: list[tuple[list[tuple[str, Any]], dict[str, Any]]] = [
    ([("id", 1)], {"name": "id_unique", "unique": True}),
    (
        [("title", "text"), ("author", "text"), ("genre", "text"), ("publisher", "text")],
        {"name": "book_text", "default_language": "none"},
    ),
    ([("createdAt", -1)], {"name": "created_at_desc"}),
]


def secondary_id(object_id: ObjectId | str, prefix: str) -> str:
    """Human-facing identifier derived from the primary one."""
    return f"{prefix}{object_id}"


def parse_object_id(value: str, prefix: str) -> ObjectId | None:
    """Resolve either a primary id or a ``<prefix><primary id>`` secondary id.

    Returns None when the value cannot name any document.
    """
    raw = value.strip()
    if prefix and raw.startswith(prefix):
        raw = raw[len(prefix):]
    try:
        return ObjectId(raw)
    except (InvalidId, TypeError):
        return None


def to_document(book: Book) -> dict[str, Any]:
    """Map a Book onto the stored document shape."""
    return {
        "_id": ObjectId(book.object_id),
        "id": book.id,
        "title": book.title,
        "author": book.author,
        "year": book.year,
        "genre": book.genre,
        "publisher": book.publisher,
        "createdAt": book.created_at,
        "updatedAt": book.updated_at,
    }


def from_document(document: dict[str, Any]) -> Book:
    """Build a Book from a stored document."""
    return Book(
        object_id=str(document["_id"]),
        id=document.get("id"),
        title=document["title"],
        author=document["author"],
        year=document["year"],
        genre=document["genre"],
        publisher=document["publisher"],
        created_at=ensure_utc(document["createdAt"]),
        updated_at=ensure_utc(document["updatedAt"]),
    )
