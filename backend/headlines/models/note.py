"""
Headlines Backend — Note SQLAlchemy Model
==========================================

What:  ORM model representing the `notes` table.
Why:   Maps free-form user annotations to database rows.
Who:   Written by NoteStore; read through Article.note when an article is resolved.

Table Design Rationale:
    - UUID primary key: Opaque, globally unique, generated in Python so the
      same model works on PostgreSQL and SQLite
    - body: JSON object holding whatever fields the caller sent; there is no
      fixed schema beyond "a mapping"
    - created_at: UTC with timezone
    - No back-reference to Article: a note is only ever reached from its article
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import JSON, DateTime, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from headlines.database import Base


class Note(Base):
    """
    A caller-authored annotation attached to at most one Article.

    Lifecycle:
        1. Created by the linkage workflow from the request body, verbatim
        2. Its id is immediately written into the owning Article's note_id
        3. Never updated and never deleted
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier",
    )

    body: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Caller-supplied note fields, stored verbatim",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this note was created (UTC)",
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, fields={sorted(self.body or {})})>"
