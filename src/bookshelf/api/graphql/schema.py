"""GraphQL schema: book queries and mutations over the repository.

Resolvers are async; the blocking pymongo calls run in the threadpool so one
field resolution never blocks another. Taxonomy errors raised by the
repository or the permission are reported as GraphQL errors whose
``extensions.code`` names the failure.
"""

from typing import Annotated

import strawberry
from graphql import GraphQLError
from graphql.validation import NoSchemaIntrospectionCustomRule
from loguru import logger
from starlette.concurrency import run_in_threadpool
from strawberry.extensions import AddValidationRules
from strawberry.types import ExecutionContext, Info

from src.bookshelf.api.graphql.context import GraphQLContext
from src.bookshelf.api.graphql.permissions import BearerTokenPermission
from src.bookshelf.api.graphql.types import BookInputType, BookType
from src.bookshelf.core.errors import BookshelfError, InfrastructureError

BookInfo = Info[GraphQLContext, None]
InputArgument = Annotated[BookInputType, strawberry.argument(name="input")]


@strawberry.type
class Query:
    @strawberry.field(permission_classes=[BearerTokenPermission])
    async def book_list(self, info: BookInfo) -> list[BookType]:
        """All books, newest first."""
        books = await run_in_threadpool(info.context.book_repository.list_all)
        return [BookType.from_entity(book) for book in books]

    @strawberry.field(permission_classes=[BearerTokenPermission])
    async def book(self, info: BookInfo, id: strawberry.ID) -> BookType:
        book = await run_in_threadpool(info.context.book_repository.get, str(id))
        return BookType.from_entity(book)

    @strawberry.field(permission_classes=[BearerTokenPermission])
    async def book_search(self, info: BookInfo, query: str) -> list[BookType]:
        """Keyword search over title, author, genre and publisher."""
        books = await run_in_threadpool(info.context.book_repository.search, query)
        return [BookType.from_entity(book) for book in books]


@strawberry.type
class Mutation:
    @strawberry.mutation(permission_classes=[BearerTokenPermission])
    async def book_create(self, info: BookInfo, book_input: InputArgument) -> BookType:
        book = await run_in_threadpool(
            info.context.book_repository.create, book_input.to_entity()
        )
        return BookType.from_entity(book)

    @strawberry.mutation(permission_classes=[BearerTokenPermission])
    async def book_update(
        self, info: BookInfo, id: strawberry.ID, book_input: InputArgument
    ) -> BookType:
        book = await run_in_threadpool(
            info.context.book_repository.update, str(id), book_input.to_entity()
        )
        return BookType.from_entity(book)

    @strawberry.mutation(permission_classes=[BearerTokenPermission])
    async def book_delete(self, info: BookInfo, id: strawberry.ID) -> BookType:
        book = await run_in_threadpool(info.context.book_repository.delete, str(id))
        return BookType.from_entity(book)


class BookSchema(strawberry.Schema):
    """Schema that logs expected user errors quietly and everything else loudly."""

    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        for error in errors:
            original = error.original_error
            if isinstance(original, BookshelfError) and not isinstance(
                original, InfrastructureError
            ):
                logger.bind(code=original.code, path=error.path).info(
                    "graphql.user_error: {}", error.message
                )
            else:
                logger.opt(exception=original).bind(path=error.path).error(
                    "graphql.error: {}", error.message
                )


def build_schema(introspection: bool = True) -> BookSchema:
    """Build the schema; introspection queries are rejected when disabled."""
    extensions = []
    if not introspection:
        extensions.append(AddValidationRules([NoSchemaIntrospectionCustomRule]))
    return BookSchema(query=Query, mutation=Mutation, extensions=extensions)
