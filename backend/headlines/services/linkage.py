"""
Headlines Backend — Note Linkage Workflow
==========================================

What:  Creates a note and records its id on an existing article.
Who:   Called by POST /articles/{id} (and its alias POST /createNote/{id}).

Flow:
    ┌──────────────┐    ┌──────────────────────┐    ┌──────────────────┐
    │ NoteStore    │───▶│ ArticleStore         │───▶│ updated article  │
    │ .create()    │    │ .set_note()          │    │ (reference form) │
    └──────────────┘    └──────────────────────┘    └──────────────────┘

Known inconsistency window:
    The note is written before the article is looked up. When the article id
    does not exist the note is kept (orphaned) and None is returned. Attaching
    a new note to an article that already has one replaces the reference and
    leaves the previous note orphaned. Two concurrent attaches to the same
    article race; the last write wins.
"""

import logging
from typing import Any, Mapping, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from headlines.schemas.article import ArticleResponse
from headlines.services.article_store import ArticleStore, article_store
from headlines.services.note_store import NoteStore, note_store

logger = logging.getLogger(__name__)


class LinkageWorkflow:
    def __init__(
        self,
        notes: Optional[NoteStore] = None,
        articles: Optional[ArticleStore] = None,
    ):
        self.notes = notes or note_store
        self.articles = articles or article_store

    async def attach_note(
        self,
        db: AsyncSession,
        article_id: UUID,
        note_fields: Mapping[str, Any],
    ) -> Optional[ArticleResponse]:
        """
        Create a note from note_fields and link it to article_id.

        Returns:
            The updated article with `note` set to the new note's id, or None
            when article_id does not exist (the note is still persisted).

        Raises:
            StoreError: Either write failed
        """
        note = await self.notes.create(db, note_fields)
        article = await self.articles.set_note(db, article_id, note.id)

        if article is None:
            logger.warning(
                "Note %s created for unknown article %s; left unlinked",
                note.id,
                article_id,
            )
            return None

        logger.info("Note %s attached to article %s", note.id, article_id)
        return article


linkage_workflow = LinkageWorkflow()
