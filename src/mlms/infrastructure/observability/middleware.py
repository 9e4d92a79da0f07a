"""Per-request access logging and correlation id propagation."""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from mlms.infrastructure.observability.logging import (
    get_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


# Hey future me, this middleware is the first thing every request hits. It pins the correlation id
# into the context (so every log line below inherits it), logs ONE completion line with the
# duration, and echoes the id back to the client. Request bodies are NEVER logged - they carry
# passwords on /auth/register, /auth/login and change-password.
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes one access line per request and echoes the correlation id header."""

    def __init__(self, app: ASGIApp, skip_paths: tuple[str, ...] = ("/health",)) -> None:
        # skip_paths are still served, just not logged (probes hit /health constantly)
        super().__init__(app)
        self.skip_paths = skip_paths

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        set_correlation_id(request.headers.get(CORRELATION_HEADER))

        method = request.method
        path = request.url.path
        quiet = path in self.skip_paths

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = int((time.perf_counter() - start_time) * 1000)
            logger.exception(
                f"Request failed: {method} {path}",
                extra={
                    "method": method,
                    "path": path,
                    "duration_ms": duration_ms,
                    "error_type": type(e).__name__,
                },
            )
            raise

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        if not quiet:
            status_mark = "✓" if response.status_code < 400 else "✗"
            logger.info(
                f"{status_mark} {method} {path} → {response.status_code} ({duration_ms}ms)",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                    "client_ip": request.client.host if request.client else "unknown",
                },
            )

        response.headers[CORRELATION_HEADER] = get_correlation_id()
        return response
