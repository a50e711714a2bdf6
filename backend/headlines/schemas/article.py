"""
Headlines Backend — Article Request/Response Schemas
=====================================================

What:  Pydantic models defining the article side of the API contract.
Why:   Strict shapes for what the stores accept and what the routes return.

Wire names:
    Fields are snake_case in Python. `is_saved` is published as `isSaved`,
    the name existing clients of the service already read.
"""

import uuid
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from headlines.schemas.note import NoteResponse


class ArticleCreate(BaseModel):
    """
    What:  Fields extracted from one listing element.
    Who:   Built by the scrape ingestor, consumed by ArticleStore.create().

    Validation:
        Text is stripped before length checks; title and link must be
        non-empty after stripping.
        Author may be empty (some listings do not show one).
    """
    title: str = Field(max_length=512, description="Listing headline")
    link: str = Field(max_length=2048, description="Absolute article URL")
    author: str = Field(default="", max_length=255, description="Author name")

    @field_validator("title", "link", "author", mode="before")
    @classmethod
    def strip_whitespace(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("title", "link")
    @classmethod
    def require_text(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        return v


class ArticleResponse(BaseModel):
    """
    What:  An article in reference form: `note` is the attached note's id.
    Who:   Returned by GET /articles, GET /saved, PUT /saved/{id},
           PUT /delete/{id}, POST /articles/{id} and GET /scrape.
    """
    id: uuid.UUID = Field(description="Unique article identifier")
    title: str = Field(description="Listing headline")
    link: str = Field(description="Absolute article URL")
    author: str = Field(description="Author name (may be empty)")
    note: Optional[uuid.UUID] = Field(default=None, description="Attached note id")
    is_saved: bool = Field(alias="isSaved", description="Whether the user saved it")
    created_at: Optional[datetime] = Field(default=None, description="Scrape time (UTC)")

    model_config = ConfigDict(populate_by_name=True)


class ArticleDetailResponse(ArticleResponse):
    """
    What:  An article with its note resolved: `note` is the full note object.
    Who:   Returned by GET /saved/{id} (and its alias GET /getNotes/{id}).
    """
    note: Optional[NoteResponse] = Field(default=None, description="Attached note")


class ScrapedListing(BaseModel):
    """What: The raw fields pulled from one listing element, before storage."""
    title: Optional[str] = None
    link: Optional[str] = None
    author: Optional[str] = None


class IngestResult(BaseModel):
    """
    What:  Outcome of one scrape run.
    Who:   Returned by GET /scrape.

    found counts every listing element; created + failed == found.
    """
    source: str = Field(description="URL that was scraped")
    found: int = Field(description="Listing elements matched on the page")
    created: int = Field(description="Articles inserted")
    failed: int = Field(description="Listings skipped or failed to insert")
    articles: List[ArticleResponse] = Field(default_factory=list)
    last_listing: Optional[ScrapedListing] = Field(
        default=None,
        description="Fields of the last listing on the page, in document order",
    )
