"""
Headlines Backend — Note Store
===============================

What:  Persists free-form notes.
How:   Stores the caller's mapping verbatim in a JSON column.
Who:   Called by the linkage workflow; serialization helper also used by
       ArticleStore when it resolves an article's note.
"""

import logging
from typing import Any, Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from headlines.exceptions import StoreError
from headlines.models.note import Note
from headlines.schemas.note import NoteResponse

logger = logging.getLogger(__name__)


def to_note_response(note: Note) -> NoteResponse:
    """Flatten a stored note; server-assigned fields override caller keys."""
    return NoteResponse.model_validate(
        {**(note.body or {}), "id": note.id, "created_at": note.created_at}
    )


class NoteStore:
    """Stateless; receives the session for each call."""

    async def create(self, db: AsyncSession, fields: Mapping[str, Any]) -> Note:
        """
        Insert a note from caller-supplied fields.

        The returned ORM object has its id assigned (flushed, not committed;
        the commit belongs to the caller's unit of work).

        Raises:
            StoreError: Insert failed
        """
        try:
            note = Note(body=dict(fields))
            db.add(note)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e))
            raise StoreError(
                message="Could not save the note. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Note created: %s (%d fields)", note.id, len(note.body))
        return note


note_store = NoteStore()
