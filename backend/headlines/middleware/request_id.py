"""
Headlines Backend — Request ID Middleware
==========================================

What:  Assigns a short correlation ID to each request and echoes it back.
How:   Accepts a client-sent X-Request-ID or generates one; stores it in a
       ContextVar for loggers and error handlers, and in request.state.
Who:   Applied to every request via Starlette middleware.

Error payloads carry the same ID, so a client can quote it when reporting
a failed scrape or store error and it can be found in the access log.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Use the X-Request-ID header when the client sent one
        2. Otherwise generate an 8-character ID
        3. Store it in the ContextVar and request.state
        4. Add it to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
