"""Public health article endpoints."""

from fastapi import APIRouter, Query

from app.dependencies import DatabaseSession
from app.schemas.articles import (
    ArticleCategory,
    ArticleResponse,
    ArticleSummary,
    CategoryOption,
)
from app.schemas.common import PaginatedResponse, SuccessResponse
from app.services.article_service import ArticleService

router = APIRouter()


@router.get(
    "/",
    response_model=PaginatedResponse[ArticleSummary],
    summary="List published articles",
)
async def list_articles(
    db: DatabaseSession,
    category: ArticleCategory | None = Query(None),
    q: str | None = Query(None, description="Title or excerpt text"),
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=50),
) -> PaginatedResponse[ArticleSummary]:
    """
    List published articles, newest first.

    - **category**: One of the article categories
    - **q**: Matches the title or excerpt
    """
    items, pagination = await ArticleService(db).list_published(
        category=category, q=q, page=page, limit=limit
    )
    return PaginatedResponse(data=items, pagination=pagination)


@router.get(
    "/categories/list",
    response_model=SuccessResponse[list[CategoryOption]],
    summary="List article categories",
)
async def list_categories() -> SuccessResponse[list[CategoryOption]]:
    return SuccessResponse(data=ArticleService.categories())


@router.get(
    "/{slug_or_id}",
    response_model=SuccessResponse[ArticleResponse],
    summary="Read article",
)
async def read_article(
    slug_or_id: str,
    db: DatabaseSession,
) -> SuccessResponse[ArticleResponse]:
    """Get a published article by slug or id. Each read counts as a view."""
    article = await ArticleService(db).read(slug_or_id)
    return SuccessResponse(data=article)
