"""
Headlines Backend — Server-Rendered Pages
==========================================

What:  GET / renders the homepage listing every stored article.
How:   Jinja2 template from headlines/templates, rendered with the same
       ArticleResponse objects the JSON API returns.
"""

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from headlines.database import get_db_session
from headlines.services.article_store import article_store

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["Pages"])


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> HTMLResponse:
    articles = await article_store.list_all(db)
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "articles": articles,
            "saved_count": sum(1 for a in articles if a.is_saved),
        },
    )
