"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool
from starlette.responses import JSONResponse

from src.bookshelf.api.http.deps import get_database_service
from src.bookshelf.core.services import DbClientService
from src.bookshelf.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe: 200 OK as long as the process is running."""
    return {"status": "healthy", "service": "bookshelf"}


@router.get("/ready", response_model=None)
async def readiness(
    database_service: DbClientService = Depends(get_database_service),
) -> dict[str, Any] | JSONResponse:
    """Readiness probe: 200 when MongoDB answers a ping, 503 otherwise."""
    db_healthy = await run_in_threadpool(database_service.health_check)
    body = {
        "status": "ready" if db_healthy else "not_ready",
        "environment": get_config().app.environment,
        "checks": {
            "database": {
                "status": "healthy" if db_healthy else "unhealthy",
                "type": "mongodb",
            }
        },
    }
    if not db_healthy:
        return JSONResponse(status_code=503, content=body)
    return body
