"""
Headlines Backend — Note Schemas
=================================

What:  Pydantic model for serialized notes.
Why:   Notes have no fixed schema, so the response model allows extra fields
       and flattens the stored body next to the server-assigned id.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NoteResponse(BaseModel):
    """
    What:  A note as returned to clients, e.g. {"id": "...", "title": "..", "body": ".."}.
    Who:   Embedded in ArticleDetailResponse.note by GET /saved/{id}.

    The caller's fields appear as extra attributes. `id` and `created_at` are
    reserved: the stored values always win over same-named caller fields.
    """
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    created_at: Optional[datetime] = Field(
        default=None,
        description="When the note was created (UTC ISO 8601)",
    )

    model_config = ConfigDict(extra="allow")
