"""Error taxonomy shared by the repository, the GraphQL gateway and the client.

Every error carries the GraphQL ``extensions.code`` it is reported with, so the
server and the client agree on how a failure is classified.
"""

from typing import Any


class BookshelfError(Exception):
    """Base class for every error surfaced by the catalog."""

    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def extensions(self) -> dict[str, Any]:
        """GraphQL error extensions; graphql-core copies them onto the reported error."""
        return {"code": self.code}


class ValidationError(BookshelfError):
    """A required field is missing, empty or of the wrong type."""

    code = "BAD_USER_INPUT"

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []

    @property
    def extensions(self) -> dict[str, Any]:
        return {"code": self.code, "fields": self.fields}


class NotFoundError(BookshelfError):
    """No book record exists for the given identifier."""

    code = "NOT_FOUND"

    def __init__(self, message: str, book_id: str = "") -> None:
        super().__init__(message)
        self.book_id = book_id

    @classmethod
    def for_id(cls, book_id: str) -> "NotFoundError":
        return cls(f"Book '{book_id}' not found", book_id=book_id)


class AuthorizationError(BookshelfError):
    """The bearer credential is missing or does not match the shared secret."""

    code = "UNAUTHENTICATED"


class InfrastructureError(BookshelfError):
    """Storage or transport is unreachable or timed out; the caller may retry."""

    code = "INFRASTRUCTURE_ERROR"


ERRORS_BY_CODE: dict[str, type[BookshelfError]] = {
    ValidationError.code: ValidationError,
    NotFoundError.code: NotFoundError,
    AuthorizationError.code: AuthorizationError,
    InfrastructureError.code: InfrastructureError,
}


def error_from_code(code: str | None, message: str) -> BookshelfError:
    """Rebuild a taxonomy error from a GraphQL error code and message."""
    error_cls = ERRORS_BY_CODE.get(code or "")
    if error_cls is None:
        return BookshelfError(message)
    return error_cls(message)
