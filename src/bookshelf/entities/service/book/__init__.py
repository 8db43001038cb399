"""Entity package: Book."""

from .entity import Book, BookInput
from .repository import BookRepository

__all__ = ["Book", "BookInput", "BookRepository"]
