"""FastAPI dependency implementations."""

from __future__ import annotations

from fastapi import Request

from src.bookshelf.api.http.app_data import ApplicationDependencies
from src.bookshelf.core.services import DbClientService


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    """Get the dependencies created at startup."""
    return request.app.state.app_dependencies


def get_database_service(request: Request) -> DbClientService:
    """Get the MongoDB client service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.database_service