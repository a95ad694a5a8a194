"""Request ID binding and timing for every HTTP request."""

from __future__ import annotations

import time
from uuid import uuid4

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from doc_chat.observability.logger import get_logger

logger = get_logger("middleware")

EVENT_STREAM = "text/event-stream"


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Binds a request ID to the structlog context of everything the request logs.

    Streaming responses are logged when their headers are sent; token-level
    timing for them comes from the chat service's stream metrics.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        start = time.monotonic()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id, method=request.method, path=request.url.path
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                error=str(e),
                duration_ms=round((time.monotonic() - start) * 1000, 2),
            )
            raise

        duration_ms = round((time.monotonic() - start) * 1000, 2)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Duration-MS"] = str(duration_ms)
        if response.headers.get("content-type", "").startswith(EVENT_STREAM):
            logger.info("stream_started", status=response.status_code, duration_ms=duration_ms)
        else:
            logger.info("request_completed", status=response.status_code, duration_ms=duration_ms)
        return response
