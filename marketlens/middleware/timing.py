"""
Request timing middleware
"""

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from marketlens.core.logging import log


SLOW_REQUEST_SECONDS = 1.0


class TimingMiddleware(BaseHTTPMiddleware):
    """Add request timing to responses and log slow requests"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        if process_time > SLOW_REQUEST_SECONDS:
            log.warning("Slow request {} {} took {:.2f}s", request.method, request.url.path, process_time)

        return response
