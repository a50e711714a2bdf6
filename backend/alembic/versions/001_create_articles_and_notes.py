"""Create notes and articles tables

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Initial schema: `notes` (free-form JSON body) and `articles`
       (scraped listing + save flag + optional note reference).
How:   Portable column types (Uuid, JSON) so the same revision runs on
       PostgreSQL and SQLite. See headlines/models/ for column rationale.

Rollback: downgrade() drops both tables (destructive — all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # notes first: articles.note_id references it
    op.create_table(
        "notes",
        sa.Column("id", sa.Uuid(), nullable=False, comment="Unique identifier"),
        sa.Column(
            "body",
            sa.JSON(),
            nullable=False,
            comment="Caller-supplied note fields, stored verbatim",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this note was created (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "articles",
        sa.Column("id", sa.Uuid(), nullable=False, comment="Unique identifier"),
        sa.Column("title", sa.String(512), nullable=False, comment="Listing headline text"),
        sa.Column("link", sa.String(2048), nullable=False, comment="Absolute URL of the article"),
        sa.Column(
            "author",
            sa.String(255),
            nullable=False,
            server_default=sa.text("''"),
            comment="Author name as shown on the listing",
        ),
        sa.Column("note_id", sa.Uuid(), nullable=True, comment="Attached note, if any"),
        sa.Column(
            "is_saved",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
            comment="Whether the user saved this article",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this article was scraped (UTC)",
        ),
        sa.ForeignKeyConstraint(["note_id"], ["notes.id"]),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("idx_articles_is_saved", "articles", ["is_saved"])


def downgrade() -> None:
    op.drop_index("idx_articles_is_saved", table_name="articles")
    op.drop_table("articles")
    op.drop_table("notes")
