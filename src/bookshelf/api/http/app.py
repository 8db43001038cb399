"""FastAPI application: GraphQL endpoint, health probes and lifecycle."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.concurrency import run_in_threadpool
from strawberry.fastapi import GraphQLRouter

from src.bookshelf.api.graphql.context import get_graphql_context
from src.bookshelf.api.graphql.schema import build_schema
from src.bookshelf.api.http.app_data import ApplicationDependencies
from src.bookshelf.api.http.middleware.request_logging import log_requests
from src.bookshelf.api.http.routers.health import router as health_router
from src.bookshelf.api.utils.app_startup import configure_logging
from src.bookshelf.core.errors import InfrastructureError
from src.bookshelf.core.services import DbClientService
from src.bookshelf.runtime.context import get_config

configure_logging()

__all__ = ["app", "startup", "shutdown"]


# --- Lifecycle hooks ---
async def startup() -> None:
    """Open the MongoDB client, ensure indexes and publish the dependencies."""
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    database_service = DbClientService()
    book_repository = database_service.get_book_repository()
    try:
        await run_in_threadpool(book_repository.ensure_indexes)
    except InfrastructureError:
        if config.app.environment == "production":
            raise
        logger.warning("MongoDB unreachable at startup; indexes not ensured")

    app.state.app_dependencies = ApplicationDependencies(
        database_service=database_service,
        book_repository=book_repository,
        auth=config.auth,
    )
    logger.info(
        "GraphQL endpoint mounted at {} (protected operations: {})",
        config.app.graphql_path,
        config.auth.protected_operations,
    )


async def shutdown() -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is not None:
        app_dependencies.database_service.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


def create_app() -> FastAPI:
    app_config = get_config().app
    cors = app_config.cors
    if app_config.environment == "production" and "*" in cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    application = FastAPI(
        title="Bookshelf",
        lifespan=lifespan,
        docs_url="/docs" if app_config.introspection else None,
        redoc_url="/redoc" if app_config.introspection else None,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=cors.origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
    )
    application.middleware("http")(log_requests)

    graphql_router = GraphQLRouter(
        build_schema(introspection=app_config.introspection),
        context_getter=get_graphql_context,
        graphql_ide="graphiql" if app_config.introspection else None,
    )
    application.include_router(graphql_router, prefix=app_config.graphql_path)
    application.include_router(health_router)
    return application


app = create_app()
