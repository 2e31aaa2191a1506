"""Health article schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class ArticleCategory(str, Enum):
    """Article category."""

    WELLNESS = "wellness"
    PREVENTION = "prevention"
    DISEASE = "disease"
    NUTRITION = "nutrition"
    MENTAL_HEALTH = "mental_health"
    FITNESS = "fitness"
    NEWS = "news"


CATEGORY_LABELS = {
    ArticleCategory.WELLNESS: "Wellness",
    ArticleCategory.PREVENTION: "Prevention",
    ArticleCategory.DISEASE: "Disease",
    ArticleCategory.NUTRITION: "Nutrition",
    ArticleCategory.MENTAL_HEALTH: "Mental Health",
    ArticleCategory.FITNESS: "Fitness",
    ArticleCategory.NEWS: "Health News",
}


class ArticleSummary(BaseModel):
    """Article as shown in listings."""

    id: str
    title: str
    slug: str
    excerpt: str | None = None
    category: str | None = None
    published_at: datetime | None = None
    view_count: int = 0

    model_config = {"from_attributes": True}


class ArticleResponse(ArticleSummary):
    """Full article."""

    body: str
    author_id: str | None = None
    created_at: datetime
    updated_at: datetime


class CategoryOption(BaseModel):
    value: ArticleCategory
    label: str
