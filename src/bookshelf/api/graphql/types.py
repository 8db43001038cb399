"""GraphQL object and input types for books."""

from datetime import datetime

import strawberry

from src.bookshelf.entities.service.book import Book, BookInput


@strawberry.type(name="Book", description="A catalog record")
class BookType:
    object_id: strawberry.ID = strawberry.field(name="_id")
    id: strawberry.ID | None
    title: str | None
    author: str | None
    year: int | None
    genre: str | None
    publisher: str | None
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_entity(cls, book: Book) -> "BookType":
        return cls(
            object_id=strawberry.ID(book.object_id),
            id=strawberry.ID(book.id) if book.id else None,
            title=book.title,
            author=book.author,
            year=book.year,
            genre=book.genre,
            publisher=book.publisher,
            created_at=book.created_at,
            updated_at=book.updated_at,
        )


@strawberry.input(name="BookInput", description="Writable book fields; omitted fields are left untouched on update")
class BookInputType:
    title: str | None = None
    author: str | None = None
    year: int | None = None
    genre: str | None = None
    publisher: str | None = None

    def to_entity(self) -> BookInput:
        return BookInput(
            title=self.title,
            author=self.author,
            year=self.year,
            genre=self.genre,
            publisher=self.publisher,
        )
