"""Per-request correlation id and access logging."""

import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from fastapi.exceptions import HTTPException
from loguru import logger
from starlette.responses import JSONResponse

REQUEST_ID_HEADER = "X-Request-ID"


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _error_response(status_code: int, detail: object, request_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "request_id": request_id},
        headers={REQUEST_ID_HEADER: request_id},
    )


async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Log start and end of every request with a shared ``request_id``.

    Everything logged while the request is handled, resolvers included,
    carries the request context. Exceptions that escape the app become a JSON
    error carrying the request id.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    started = time.perf_counter()

    def elapsed_ms() -> float:
        return round((time.perf_counter() - started) * 1000, 1)

    with logger.contextualize(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        client_ip=_client_ip(request),
        user_agent=request.headers.get("user-agent", "unknown"),
    ):
        logger.info("request.start")
        try:
            response = await call_next(request)
        except HTTPException as exc:
            logger.bind(
                status_code=exc.status_code,
                duration_ms=elapsed_ms(),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return _error_response(exc.status_code, exc.detail, request_id)
        except Exception as exc:
            logger.bind(
                status_code=500,
                duration_ms=elapsed_ms(),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return _error_response(500, "Internal Server Error", request_id)

        logger.bind(status_code=response.status_code, duration_ms=elapsed_ms()).info(
            "request.end"
        )
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        return response
