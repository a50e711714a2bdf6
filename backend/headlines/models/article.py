"""
Headlines Backend — Article SQLAlchemy Model
=============================================

What:  ORM model representing the `articles` table.
Why:   One row per scraped listing, plus the user's save flag and note link.
Who:   Written by the scrape ingestor (via ArticleStore) and the linkage
       workflow; read by every listing route.

Table Design Rationale:
    - title/link/author: Copied from the listing at scrape time, never refreshed
    - note_id: Nullable foreign key; NULL until a note is attached. Attaching a
      second note replaces the reference (the previous note stays orphaned)
    - is_saved: The only mutable user state; "deleting" an article clears it
    - No uniqueness on link: re-scraping the same page inserts duplicates

    Index on is_saved:
        Backs GET /saved, the only filtered query.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Uuid, false, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from headlines.database import Base
from headlines.models.note import Note


class Article(Base):
    """
    A scraped article listing.

    Lifecycle:
        1. Created by the ingestor with is_saved = False and no note
        2. Optionally saved / unsaved any number of times
        3. Optionally linked to a note (latest link wins)
        4. Never deleted
    """

    __tablename__ = "articles"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier",
    )

    title: Mapped[str] = mapped_column(
        String(512),
        nullable=False,
        comment="Listing headline text",
    )

    link: Mapped[str] = mapped_column(
        String(2048),
        nullable=False,
        comment="Absolute URL of the article",
    )

    author: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
        server_default=text("''"),
        comment="Author name as shown on the listing",
    )

    note_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("notes.id"),
        nullable=True,
        default=None,
        comment="Attached note, if any",
    )

    is_saved: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
        comment="Whether the user saved this article",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this article was scraped (UTC)",
    )

    # lazy="raise": async sessions cannot lazy-load, so every read that needs
    # the note must ask for it with selectinload()
    note: Mapped[Optional[Note]] = relationship(Note, lazy="raise")

    __table_args__ = (
        Index("idx_articles_is_saved", "is_saved"),
    )

    def __repr__(self) -> str:
        return (
            f"<Article(id={self.id}, title='{self.title[:40]}', "
            f"is_saved={self.is_saved}, note_id={self.note_id})>"
        )
