"""Request context middleware for observability."""

import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from navgraph.observability.logging import (
    bind_session_context,
    clear_session_context,
    get_logger,
)

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a request id to every log event emitted while serving a request.

    The id is taken from an incoming ``X-Request-ID`` header when present
    and echoed back on the response.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        clear_session_context()
        bind_session_context(request_id=request_id)
        logger.debug("request_started", method=request.method, path=request.url.path)

        try:
            response = await call_next(request)
        finally:
            clear_session_context()

        logger.debug(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            request_id=request_id,
        )
        response.headers["X-Request-ID"] = request_id
        return response
