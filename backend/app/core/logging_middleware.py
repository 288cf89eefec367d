"""Request logging middleware."""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("copydeck.requests")

MAX_LOGGED_DETAIL = 500


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request's method, path, status and duration.

    Error responses (4xx/5xx) also log their body, which carries the
    validation or HTTPException detail. The elapsed time is returned to the
    client in an ``X-Process-Time`` header (milliseconds).
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        elapsed_ms = (time.monotonic() - start) * 1000

        status = response.status_code
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"

        if status >= 400 and hasattr(response, "body_iterator"):
            body = b"".join(
                [
                    chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                    async for chunk in response.body_iterator
                ]
            )
            detail = body.decode("utf-8", errors="replace")
            if len(detail) > MAX_LOGGED_DETAIL:
                detail = detail[:MAX_LOGGED_DETAIL] + "..."

            log = logger.warning if status < 500 else logger.error
            log("%s %s -> %d (%.0fms) %s", request.method, target, status, elapsed_ms, detail)

            # The body iterator is consumed; rebuild the response around it.
            response = Response(
                content=body,
                status_code=status,
                headers=dict(response.headers),
                media_type=response.media_type,
            )
        else:
            logger.info("%s %s -> %d (%.0fms)", request.method, target, status, elapsed_ms)

        response.headers["X-Process-Time"] = f"{elapsed_ms:.1f}"
        return response
