"""
Headlines Backend — Request Logging Middleware
===============================================

What:  One access-log line per HTTP request.
Why:   Request visibility for debugging scrape runs and store errors.
How:   Measures handler duration and logs method, path, status, duration,
       request ID and client address.

Log line:
    2024-01-15T12:00:00 [INFO] headlines.access: GET /scrape 200 812.4ms [a1b2c3d4] from 127.0.0.1

What we log vs what we DON'T log:
    Log: method, path, status, duration, IP, request ID
    Don't log: request bodies (notes are user-authored text)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from headlines.middleware.request_id import request_id_var

logger = logging.getLogger("headlines.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request after the response is produced.

    Level by status: 5xx → ERROR, 4xx → WARNING, otherwise INFO.
    Error payloads sent with status 200 (the default error mode) log at INFO;
    the exception handlers log those failures themselves.
    Health checks are skipped.
    """

    SKIPPED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
