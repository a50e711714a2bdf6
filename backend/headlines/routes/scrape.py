"""
Headlines Backend — Scrape Route Handler
=========================================

What:  GET /scrape runs one ingest of the configured listing page.
How:   Delegates to the app's ScrapeIngestor. A fetch failure surfaces as a
       FetchError payload through the global handlers, never as a hung or
       dropped request.

Note: every call inserts every listing again; there is no deduplication.
"""

import logging

from fastapi import APIRouter, Depends, Request

from headlines.schemas.article import IngestResult
from headlines.schemas.common import ErrorResponse
from headlines.services.scrape_service import ScrapeIngestor

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Scrape"])


def get_ingestor(request: Request) -> ScrapeIngestor:
    """FastAPI dependency returning the app's ScrapeIngestor."""
    return request.app.state.ingestor


@router.get(
    "/scrape",
    response_model=IngestResult,
    responses={502: {"description": "Scrape target unreachable", "model": ErrorResponse}},
    summary="Scrape the listing page and store its articles",
)
async def scrape(ingestor: ScrapeIngestor = Depends(get_ingestor)) -> IngestResult:
    result = await ingestor.ingest()
    if result.found == 0:
        logger.warning(
            "No listings matched %r on %s; the page markup may have changed",
            ingestor.settings.listing_selector,
            result.source,
        )
    return result
