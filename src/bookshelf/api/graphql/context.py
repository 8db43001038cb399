"""Per-request GraphQL context built from the application dependencies."""

from fastapi import Depends
from strawberry.fastapi import BaseContext

from src.bookshelf.api.http.app_data import ApplicationDependencies
from src.bookshelf.api.http.deps import get_app_dependencies
from src.bookshelf.entities.service.book import BookRepository
from src.bookshelf.runtime.config.config_data import AuthConfig


class GraphQLContext(BaseContext):
    """Resolvers reach storage and auth settings only through this object.

    Strawberry fills in ``request`` and ``response`` after the getter returns.
    """

    def __init__(self, book_repository: BookRepository, auth: AuthConfig) -> None:
        super().__init__()
        self.book_repository = book_repository
        self.auth = auth

    @property
    def authorization(self) -> str | None:
        if self.request is None:
            return None
        return self.request.headers.get("authorization")


async def get_graphql_context(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> GraphQLContext:
    return GraphQLContext(book_repository=app_deps.book_repository, auth=app_deps.auth)
