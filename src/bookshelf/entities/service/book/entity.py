"""Entity: Book."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.bookshelf.entities.core._base import Document

REQUIRED_FIELDS = ("title", "author", "year", "genre", "publisher")
TEXT_FIELDS = ("title", "author", "genre", "publisher")


class BookInput(BaseModel):
    """Writable book attributes as supplied by callers.

    Every field is optional here: create requires all of them, update applies
    only those that are set. Identifiers and timestamps are never accepted.
    """

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    author: str | None = None
    year: int | None = None
    genre: str | None = None
    publisher: str | None = None

    def supplied_fields(self) -> dict[str, Any]:
        """Fields the caller actually provided, skipping ``None`` values."""
        return {
            name: value
            for name, value in self.model_dump(include=set(REQUIRED_FIELDS)).items()
            if value is not None
        }


class Book(Document):
    """Book entity representing a catalog record.

    ``id`` is the human-facing identifier derived from ``_id`` on creation
    (``book_<_id>``) and never regenerated afterwards.
    """

    id: str | None = Field(default=None, description="Derived secondary identifier")
    title: str = Field(description="Title")
    author: str = Field(description="Author")
    year: int = Field(description="Publication year")
    genre: str = Field(description="Genre")
    publisher: str = Field(description="Publisher")

    def __eq__(self, other: Any) -> bool:
        """Compare books by identity and business attributes, ignoring timestamps."""
        if not isinstance(other, Book):
            return False

        return (
            self.object_id == other.object_id
            and self.id == other.id
            and self.title == other.title
            and self.author == other.author
            and self.year == other.year
            and self.genre == other.genre
            and self.publisher == other.publisher
        )

    def __hash__(self) -> int:
        """Hash based on identity and business attributes, ignoring timestamps."""
        return hash((
            self.object_id,
            self.id,
            self.title,
            self.author,
            self.year,
            self.genre,
            self.publisher,
        ))

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match over the text fields."""
        needle = query.strip().lower()
        if not needle:
            return True
        return any(needle in getattr(self, name).lower() for name in TEXT_FIELDS)
