"""
Headlines Backend — Article Store
==================================

What:  Queries and updates for scraped articles.
Why:   Keeps all article SQL in one place, independent of HTTP concerns.
How:   Stateless methods taking an AsyncSession; results are returned as
       response schemas, and any SQLAlchemy failure becomes a StoreError.
Who:   Called by the article routes, the linkage workflow, and the scrape
       ingestor.

Not-found policy:
    Lookups and updates by an unknown id return None. The routes serialize
    that as `null` with a success status, the contract existing clients use.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from headlines.exceptions import StoreError
from headlines.models.article import Article
from headlines.schemas.article import (
    ArticleCreate,
    ArticleDetailResponse,
    ArticleResponse,
)
from headlines.services.note_store import to_note_response

logger = logging.getLogger(__name__)


def to_article_response(article: Article) -> ArticleResponse:
    """Reference form: the note is reported by id only."""
    return ArticleResponse(
        id=article.id,
        title=article.title,
        link=article.link,
        author=article.author,
        note=article.note_id,
        is_saved=article.is_saved,
        created_at=article.created_at,
    )


class ArticleStore:
    """
    Data access for the `articles` table.

    Error Handling Strategy:
        Database errors are wrapped in StoreError with a generic message;
        the original exception type is kept in context for the logs.
    """

    async def list_all(self, db: AsyncSession) -> List[ArticleResponse]:
        """Every article, unfiltered, in the store's own order."""
        try:
            result = await db.execute(select(Article))
            articles = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing articles: %s", str(e))
            raise StoreError(
                message="Could not retrieve articles. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e
        return [to_article_response(a) for a in articles]

    async def list_saved(self, db: AsyncSession) -> List[ArticleResponse]:
        """Articles the user saved (is_saved = true)."""
        try:
            result = await db.execute(
                select(Article).where(Article.is_saved.is_(True))
            )
            articles = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing saved articles: %s", str(e))
            raise StoreError(
                message="Could not retrieve saved articles. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e
        return [to_article_response(a) for a in articles]

    async def get_by_id(
        self, db: AsyncSession, article_id: UUID
    ) -> Optional[ArticleDetailResponse]:
        """
        One article with its note loaded and embedded.

        Query plan:
            SELECT ... FROM articles WHERE id = :id
            SELECT ... FROM notes WHERE id IN (:note_id)   (selectinload)
        """
        try:
            result = await db.execute(
                select(Article)
                .options(selectinload(Article.note))
                .where(Article.id == article_id)
            )
            article = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching article %s: %s", article_id, str(e))
            raise StoreError(
                message="Could not retrieve the article. Please try again.",
                context={"article_id": str(article_id)},
            ) from e

        if article is None:
            return None

        return ArticleDetailResponse(
            id=article.id,
            title=article.title,
            link=article.link,
            author=article.author,
            note=to_note_response(article.note) if article.note else None,
            is_saved=article.is_saved,
            created_at=article.created_at,
        )

    async def create(self, db: AsyncSession, fields: ArticleCreate) -> ArticleResponse:
        """
        Insert a new article. It always starts unsaved and without a note.

        The row is flushed (id assigned) but committed by the caller.
        """
        try:
            article = Article(
                title=fields.title,
                link=fields.link,
                author=fields.author,
                is_saved=False,
                note_id=None,
            )
            db.add(article)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating article '%s': %s", fields.title, str(e))
            raise StoreError(
                message="Could not save the article.",
                context={"error_type": type(e).__name__, "link": fields.link},
            ) from e

        logger.debug("Article created: %s (%s)", article.id, article.link)
        return to_article_response(article)

    async def set_saved(
        self, db: AsyncSession, article_id: UUID, value: bool
    ) -> Optional[ArticleResponse]:
        """
        Set the save flag of one article and return the updated record.

        Idempotent: setting the current value again is a successful no-op.
        """
        try:
            article = await db.get(Article, article_id)
            if article is None:
                return None
            if article.is_saved != value:
                article.is_saved = value
                await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating article %s: %s", article_id, str(e))
            raise StoreError(
                message="Could not update the article. Please try again.",
                context={"article_id": str(article_id)},
            ) from e

        logger.info("Article %s is_saved=%s", article_id, value)
        return to_article_response(article)

    async def set_note(
        self, db: AsyncSession, article_id: UUID, note_id: UUID
    ) -> Optional[ArticleResponse]:
        """Point an article's note reference at note_id. None if no such article."""
        try:
            article = await db.get(Article, article_id)
            if article is None:
                return None
            article.note_id = note_id
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error linking note to article %s: %s", article_id, str(e))
            raise StoreError(
                message="Could not attach the note. Please try again.",
                context={"article_id": str(article_id), "note_id": str(note_id)},
            ) from e

        return to_article_response(article)


article_store = ArticleStore()
