"""HTTP middleware for request logging."""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

SLOW_REQUEST_THRESHOLD_MS = 1000
EVENT_STREAM_MEDIA_TYPE = "text/event-stream"


def response_log_level(status: int, duration_ms: float, streaming: bool) -> tuple[int, str]:
    """
    Pick the log level and suffix for a finished request.

    Event streams are timed only until the stream opens, so they are never
    reported as slow.
    """
    if status >= 500:
        return logging.ERROR, ""
    if status >= 400:
        return logging.WARNING, ""
    if streaming:
        return logging.INFO, " stream opened"
    if duration_ms > SLOW_REQUEST_THRESHOLD_MS:
        return logging.WARNING, " SLOW"
    return logging.INFO, ""


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each HTTP request with its status and latency."""

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        logger.debug("%s %s", request.method, request.url.path)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - started) * 1000
        streaming = response.headers.get("content-type", "").startswith(EVENT_STREAM_MEDIA_TYPE)
        level, suffix = response_log_level(response.status_code, duration_ms, streaming)
        logger.log(
            level,
            "%s %s -> %d (%.1fms)%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            suffix,
        )
        return response
