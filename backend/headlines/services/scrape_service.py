"""
Headlines Backend — Scrape Ingestor
====================================

What:  Fetches the configured listing page and stores one Article per listing.
Why:   The only way articles enter the system.
How:   httpx fetch → BeautifulSoup parse → CSS-selector extraction per listing
       → ArticleStore.create() in its own unit of work per listing.
Who:   Called by GET /scrape.

Extraction (all selectors come from Settings):
    listing_selector  every match is one listing, processed in document order
    title_selector    nested heading; its text (whitespace-normalized) is the title
    link_selector     nested anchor; its href is resolved against scrape_url.
                      Falls back to the first anchor inside the title heading
    author_selector   heading next to the title; text, empty when absent

Failure policy:
    - Fetch failures (transport error, timeout, non-2xx) raise FetchError.
      Nothing is retried.
    - A listing without a title or link is skipped with a warning.
    - A failed insert is logged and the remaining listings still run; each
      listing commits independently, so earlier inserts are kept.
    - No deduplication: scraping an unchanged page twice stores every listing
      twice. Concurrent runs are not coordinated either.
"""

import logging
from typing import List, Optional
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup
from bs4.element import Tag
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from headlines import __version__
from headlines.config import Settings
from headlines.database import Database
from headlines.exceptions import FetchError, StoreError
from headlines.schemas.article import (
    ArticleCreate,
    ArticleResponse,
    IngestResult,
    ScrapedListing,
)
from headlines.services.article_store import ArticleStore, article_store

logger = logging.getLogger(__name__)


def _text(element: Optional[Tag]) -> Optional[str]:
    if element is None:
        return None
    return element.get_text(" ", strip=True)


class ScrapeIngestor:
    """
    One scrape run per ingest() call.

    Args:
        database:   Store client; one session is opened per listing
        settings:   Target URL, timeout, and selectors
        articles:   ArticleStore used for inserts
        transport:  Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        database: Database,
        settings: Settings,
        articles: Optional[ArticleStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.database = database
        self.settings = settings
        self.articles = articles or article_store
        self.transport = transport

    async def fetch(self) -> str:
        """
        GET the scrape target and return its body as text.

        Raises:
            FetchError: Transport failure, timeout, or non-2xx status
        """
        url = self.settings.scrape_url
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.scrape_timeout,
                follow_redirects=True,
                headers={"User-Agent": f"headlines/{__version__}"},
                transport=self.transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error("Scrape target %s answered HTTP %d", url, status)
            raise FetchError(url, f"HTTP {status}", status=status) from e
        except httpx.HTTPError as e:
            logger.error("Scrape target %s unreachable: %s", url, str(e))
            raise FetchError(url, str(e) or type(e).__name__) from e

        logger.info("Fetched %s (%d bytes)", url, len(response.content))
        return response.text

    def extract(self, html: str) -> List[ScrapedListing]:
        """Pull title/link/author out of every listing element, in document order."""
        soup = BeautifulSoup(html, "html.parser")
        base_url = self.settings.scrape_url
        listings = []

        for element in soup.select(self.settings.listing_selector):
            title_el = element.select_one(self.settings.title_selector)
            link_el = element.select_one(self.settings.link_selector)
            if link_el is None and title_el is not None:
                link_el = title_el.find("a", href=True)
            author_el = element.select_one(self.settings.author_selector)

            href = link_el.get("href") if link_el is not None else None
            listings.append(
                ScrapedListing(
                    title=_text(title_el),
                    link=urljoin(base_url, href) if href else None,
                    author=_text(author_el),
                )
            )

        logger.debug("Extracted %d listings", len(listings))
        return listings

    async def ingest(self) -> IngestResult:
        """
        Scrape once and insert one article per usable listing.

        Returns:
            IngestResult with counts, the created articles, and the last
            extracted listing.

        Raises:
            FetchError: The page could not be fetched (nothing is inserted)
        """
        html = await self.fetch()
        listings = self.extract(html)

        created: List[ArticleResponse] = []
        failed = 0

        for position, listing in enumerate(listings):
            try:
                fields = ArticleCreate(
                    title=listing.title or "",
                    link=listing.link or "",
                    author=listing.author or "",
                )
            except PydanticValidationError as e:
                failed += 1
                logger.warning(
                    "Skipping listing #%d: %s",
                    position,
                    "; ".join(f"{'.'.join(str(p) for p in err['loc'])} {err['msg']}" for err in e.errors()),
                )
                continue

            try:
                async with self.database.session() as session:
                    article = await self.articles.create(session, fields)
            except (StoreError, SQLAlchemyError) as e:
                failed += 1
                logger.error("Failed to store listing #%d (%s): %s", position, fields.link, str(e))
                continue

            created.append(article)

        logger.info(
            "Scrape of %s complete: %d found, %d created, %d failed",
            self.settings.scrape_url,
            len(listings),
            len(created),
            failed,
        )

        return IngestResult(
            source=self.settings.scrape_url,
            found=len(listings),
            created=len(created),
            failed=failed,
            articles=created,
            last_listing=listings[-1] if listings else None,
        )
