"""
Headlines Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for the failure modes of the service.
Why:   Services raise typed errors; global handlers in main.py turn them into
       one consistent JSON error object, so no route needs its own try/except.
How:   Each exception carries a user-facing message, an optional context dict,
       a machine-readable error code, and the HTTP status used in strict mode.

Exception Hierarchy:
    HeadlinesError (base)
    ├── ValidationError  → 400 Bad Request (client can fix)
    ├── StoreError       → 500 Internal Server Error
    └── FetchError       → 502 Bad Gateway (scrape target failed)

A missing record is not an error in this service: lookups by unknown id
return None and are serialized as `null`.
"""

from typing import Any, Dict, Optional


class HeadlinesError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; returned only where safe)
    """

    error_code = "server_error"
    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(HeadlinesError):
    """
    Raised when client input fails validation.

    When:  Note body is not a JSON object / form, or a path id is malformed.
    HTTP:  400 Bad Request
    """

    error_code = "validation_error"
    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class StoreError(HeadlinesError):
    """
    Raised when a database query, insert, or update fails.

    Security Note:
        The message returned to the client is always generic. The original
        exception type is kept in `context` and logged server-side only.
    """

    error_code = "store_error"
    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FetchError(HeadlinesError):
    """
    Raised when the scrape target cannot be fetched.

    When:  Connection refused, DNS failure, timeout, or a non-2xx response.
    HTTP:  502 Bad Gateway (the upstream site failed, not this service)

    No retry is attempted; the caller may simply hit /scrape again.
    """

    error_code = "fetch_error"
    status_code = 502

    def __init__(
        self,
        url: str,
        reason: str,
        status: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["url"] = url
        if status is not None:
            ctx["status"] = status
        super().__init__(message=f"Could not fetch {url}: {reason}", context=ctx)
        self.url = url
        self.status = status
