"""
Headlines Backend — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, the store client, middleware, routes, and
       lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn headlines.main:app) and by the tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  app.state: settings │ db (Database) │ ingestor     │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐                   │
    │  │ Req ID   │→│  Logging        │                   │
    │  └──────────┘ └─────────────────┘                   │
    │                                                     │
    │  Routes:                                            │
    │  /  /scrape  /articles  /saved  /delete  /health    │
    │  (+ /getNotes /createNote when legacy_routes)       │
    │                                                     │
    │  Exception Handlers → one JSON error object         │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, create missing tables (auto_create_tables)
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from headlines import __version__
from headlines.config import Settings, get_settings
from headlines.database import Database
from headlines.exceptions import HeadlinesError, StoreError
from headlines.middleware.logging import RequestLoggingMiddleware
from headlines.middleware.request_id import RequestIDMiddleware, request_id_var
from headlines.routes import articles, health, pages, scrape
from headlines.services.scrape_service import ScrapeIngestor

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # These log every operation at DEBUG/INFO; our own access log covers requests
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    database: Database = app.state.db

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings)
    logger.info("=" * 60)
    logger.info("Headlines backend %s starting up...", __version__)

    if settings.auto_create_tables:
        await database.create_tables()
        logger.info("Database tables ensured")

    logger.info("Scrape target: %s", settings.scrape_url)
    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Headlines backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    request: Request,
    error: str,
    message: str,
    status_code: int,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """
    Build the JSON error object.

    The HTTP status is 200 unless settings.strict_status_codes is on; clients
    read failures from the body, not the status.
    """
    settings: Settings = request.app.state.settings
    content: Dict[str, Any] = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(
        status_code=status_code if settings.strict_status_codes else 200,
        content=content,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to error payloads.

    Handler hierarchy:
        StoreError              → store_error, generic message, details logged only
        HeadlinesError (others) → exception's own code, message and context
        RequestValidationError  → validation_error (malformed id, etc.)
        Exception (fallback)    → internal_server_error, stack trace logged only
    """

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        rid = request_id_var.get("")
        logger.error("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
        return error_response(request, exc.error_code, exc.message, exc.status_code)

    @app.exception_handler(HeadlinesError)
    async def handle_app_error(request: Request, exc: HeadlinesError):
        rid = request_id_var.get("")
        logger.warning("[%s] %s: %s", rid, exc.error_code, exc.message)
        return error_response(
            request, exc.error_code, exc.message, exc.status_code, exc.context
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": [str(p) for p in err["loc"]], "msg": err["msg"], "type": err["type"]}
            for err in exc.errors()
        ]
        return error_response(
            request,
            "validation_error",
            "Request parameters are invalid",
            422,
            {"errors": errors},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return error_response(
            request,
            "internal_server_error",
            "An unexpected error occurred. Please try again.",
            500,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    scrape_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings:          Defaults to settings read from the environment
        scrape_transport:  httpx transport for the scrape fetch (tests)

    The Database and ScrapeIngestor are built here, not at import time, and
    live on app.state for the dependencies in headlines.database and
    headlines.routes.scrape.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Headlines API",
        description=(
            "Scrapes article listings, stores them with optional notes, "
            "and serves them as JSON and a rendered homepage."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    database = Database(settings)
    app.state.settings = settings
    app.state.db = database
    app.state.ingestor = ScrapeIngestor(database, settings, transport=scrape_transport)

    # Last added runs first: RequestID → Logging → route
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(pages.router)
    app.include_router(scrape.router)
    app.include_router(articles.router)
    if settings.legacy_routes:
        app.include_router(articles.legacy_router)
    app.include_router(health.router)

    return app


app = create_app()
