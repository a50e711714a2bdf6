"""
Headlines Backend — Article & Note Route Handlers
==================================================

What:  Listing, saving, and note-linking endpoints.
How:   Each handler makes one call into the stores or the linkage workflow and
       returns the result as JSON. Errors propagate to the global handlers.

Routes:
    GET  /articles          all articles
    POST /articles/{id}     create a note from the body and attach it
    GET  /saved             saved articles
    GET  /saved/{id}        one article with its note embedded
    PUT  /saved/{id}        mark saved
    PUT  /delete/{id}       mark unsaved (articles are never removed)

Legacy aliases (`legacy_router`, mounted when settings.legacy_routes is on):
    GET  /getNotes/{id}     same handler as GET /saved/{id}
    POST /createNote/{id}   same handler as POST /articles/{id}

Unknown ids are not errors: the response body is `null`.
"""

import json
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from headlines.database import get_db_session
from headlines.exceptions import ValidationError
from headlines.schemas.article import ArticleDetailResponse, ArticleResponse
from headlines.schemas.common import ErrorResponse
from headlines.services.article_store import article_store
from headlines.services.linkage import linkage_workflow

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Articles"])
legacy_router = APIRouter(tags=["Legacy"])

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _reject_constant(token: str) -> Any:
    # NaN and Infinity are not JSON and cannot be stored in a JSON column
    raise ValueError(f"{token} is not a valid JSON value")


async def read_note_fields(request: Request) -> Dict[str, Any]:
    """
    Parse the request body into note fields.

    Accepts a JSON object, a url-encoded form, or a multipart form (text
    fields only). An empty body yields an empty note.

    Raises:
        ValidationError: Body is not a JSON object or a form
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    raw = await request.body()
    if not raw.strip():
        return {}

    try:
        data = json.loads(raw, parse_constant=_reject_constant)
    except ValueError as e:
        raise ValidationError(
            message="Note body must be a JSON object or a form",
            field="body",
            context={"reason": str(e)},
        )

    if not isinstance(data, dict):
        raise ValidationError(
            message=f"Note body must be a JSON object, not {type(data).__name__}",
            field="body",
        )
    return data


@router.get(
    "/articles",
    response_model=List[ArticleResponse],
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="List all scraped articles",
)
async def list_articles(
    db: AsyncSession = Depends(get_db_session),
) -> List[ArticleResponse]:
    return await article_store.list_all(db)


@router.post(
    "/articles/{article_id}",
    response_model=Optional[ArticleResponse],
    responses={
        400: {"description": "Body is not an object", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Attach a new note to an article",
    description=(
        "Creates a note from the request body (any fields) and links it to the "
        "article. Returns the updated article with `note` set to the new note id, "
        "or null when the article does not exist (the note is still stored)."
    ),
)
async def attach_note(
    article_id: UUID,
    note_fields: Dict[str, Any] = Depends(read_note_fields),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[ArticleResponse]:
    return await linkage_workflow.attach_note(db, article_id, note_fields)


@router.get(
    "/saved",
    response_model=List[ArticleResponse],
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="List saved articles",
)
async def list_saved_articles(
    db: AsyncSession = Depends(get_db_session),
) -> List[ArticleResponse]:
    return await article_store.list_saved(db)


@router.get(
    "/saved/{article_id}",
    response_model=Optional[ArticleDetailResponse],
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="Get one article with its note embedded",
)
async def get_article(
    article_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Optional[ArticleDetailResponse]:
    return await article_store.get_by_id(db, article_id)


@router.put(
    "/saved/{article_id}",
    response_model=Optional[ArticleResponse],
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="Mark an article as saved",
)
async def save_article(
    article_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Optional[ArticleResponse]:
    return await article_store.set_saved(db, article_id, True)


@router.put(
    "/delete/{article_id}",
    response_model=Optional[ArticleResponse],
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="Remove an article from the saved list",
)
async def unsave_article(
    article_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Optional[ArticleResponse]:
    return await article_store.set_saved(db, article_id, False)


legacy_router.add_api_route(
    "/getNotes/{article_id}",
    get_article,
    methods=["GET"],
    response_model=Optional[ArticleDetailResponse],
    summary="Alias of GET /saved/{id}",
)
legacy_router.add_api_route(
    "/createNote/{article_id}",
    attach_note,
    methods=["POST"],
    response_model=Optional[ArticleResponse],
    summary="Alias of POST /articles/{id}",
)
