"""Request ids and timing for the studio API."""
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("inkvalue-api.requests")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """
    Echoes the caller's X-Request-ID (or mints one), adds X-Process-Time in ms
    and logs "METHOD /path" for everything but /health.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        started = time.perf_counter()
        response = await call_next(request)
        elapsed = round((time.perf_counter() - started) * 1000, 2)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = str(elapsed)
        if request.url.path != "/health":
            logger.info(
                "%s %s", request.method, request.url.path,
                extra={"request_id": request_id, "status_code": response.status_code, "duration_ms": elapsed},
            )
        return response
