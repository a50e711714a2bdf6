"""
Headlines Backend — Middleware Package
=======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → Route Handler

    1. Request ID: Generate or accept a correlation ID
    2. Logging: Log method, path, status and duration with that ID

    The order is reversed for responses, so the logged line already knows the
    final status code and the response carries the X-Request-ID header.
"""
