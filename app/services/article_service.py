"""Health article service."""

import structlog
from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundException
from app.models.content import articles
from app.schemas.articles import (
    CATEGORY_LABELS,
    ArticleCategory,
    ArticleResponse,
    ArticleSummary,
    CategoryOption,
)
from app.schemas.common import Pagination

logger = structlog.get_logger(__name__)

PUBLISHED = "published"


class ArticleService:
    """Read access to published health articles."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def list_published(
        self,
        category: ArticleCategory | None = None,
        q: str | None = None,
        page: int = 1,
        limit: int = 12,
    ) -> tuple[list[ArticleSummary], Pagination]:
        """
        List published articles, newest first.

        Args:
            category: Only this category
            q: Text matched against title and excerpt
            page: Page number
            limit: Items per page

        Returns:
            Page of article summaries
        """
        conditions = [articles.c.status == PUBLISHED]
        if category:
            conditions.append(articles.c.category == category.value)
        if q:
            pattern = f"%{q}%"
            conditions.append(
                or_(articles.c.title.ilike(pattern), articles.c.excerpt.ilike(pattern))
            )

        total = (
            await self.db.execute(
                select(func.count()).select_from(articles).where(and_(*conditions))
            )
        ).scalar() or 0
        rows = (
            await self.db.execute(
                select(articles)
                .where(and_(*conditions))
                .order_by(articles.c.published_at.desc(), articles.c.created_at.desc())
                .limit(limit)
                .offset((page - 1) * limit)
            )
        ).fetchall()
        items = [ArticleSummary.model_validate(dict(row._mapping)) for row in rows]
        return items, Pagination.build(page, limit, total)

    async def read(self, slug_or_id: str) -> ArticleResponse:
        """
        Get a published article by slug or id and count the view.

        Raises:
            NotFoundException: No published article matches
        """
        row = (
            await self.db.execute(
                select(articles).where(
                    or_(articles.c.slug == slug_or_id, articles.c.id == slug_or_id),
                    articles.c.status == PUBLISHED,
                )
            )
        ).fetchone()
        if not row:
            raise NotFoundException("Article not found")

        updated = (
            await self.db.execute(
                update(articles)
                .where(articles.c.id == row.id)
                .values(view_count=articles.c.view_count + 1)
                .returning(articles)
            )
        ).fetchone()
        await self.db.commit()

        logger.debug("article_viewed", article_id=row.id, slug=row.slug)
        return ArticleResponse.model_validate(dict(updated._mapping))

    @staticmethod
    def categories() -> list[CategoryOption]:
        return [
            CategoryOption(value=category, label=CATEGORY_LABELS[category])
            for category in ArticleCategory
        ]
