"""Tests for public health articles."""

from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.utils import new_id
from app.models.content import articles


@pytest_asyncio.fixture
async def library(db_session: AsyncSession) -> dict[str, dict]:
    """Two published articles and a draft."""
    now = datetime.now(UTC)
    rows = {
        "malaria": {
            "id": new_id(),
            "title": "Preventing malaria during the rains",
            "slug": "preventing-malaria",
            "excerpt": "Nets, repellents and when to see a doctor.",
            "body": "Sleep under a treated net every night.",
            "category": "prevention",
            "status": "published",
            "published_at": now - timedelta(days=2),
        },
        "sleep": {
            "id": new_id(),
            "title": "Better sleep, better mood",
            "slug": "better-sleep",
            "excerpt": "Small habits that help you rest.",
            "body": "Keep a regular bedtime.",
            "category": "mental_health",
            "status": "published",
            "published_at": now - timedelta(days=1),
        },
        "draft": {
            "id": new_id(),
            "title": "Upcoming vaccination drive",
            "slug": "vaccination-drive",
            "excerpt": None,
            "body": "Details to follow.",
            "category": "news",
            "status": "draft",
            "published_at": None,
        },
    }
    await db_session.execute(insert(articles), list(rows.values()))
    await db_session.commit()
    return rows


@pytest.mark.asyncio
async def test_list_only_published_newest_first(client: AsyncClient, library: dict) -> None:
    response = await client.get("/api/v1/articles/")
    assert response.status_code == 200
    body = response.json()
    assert [a["slug"] for a in body["data"]] == ["better-sleep", "preventing-malaria"]
    assert body["pagination"]["total"] == 2
    assert "body" not in body["data"][0]


@pytest.mark.asyncio
async def test_list_filters(client: AsyncClient, library: dict) -> None:
    response = await client.get("/api/v1/articles/?category=prevention")
    assert [a["slug"] for a in response.json()["data"]] == ["preventing-malaria"]

    response = await client.get("/api/v1/articles/?q=habits")
    assert [a["slug"] for a in response.json()["data"]] == ["better-sleep"]

    response = await client.get("/api/v1/articles/?category=gossip")
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_read_by_slug_or_id_counts_views(client: AsyncClient, library: dict) -> None:
    response = await client.get("/api/v1/articles/preventing-malaria")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["body"] == "Sleep under a treated net every night."
    assert data["view_count"] == 1

    response = await client.get(f"/api/v1/articles/{library['malaria']['id']}")
    assert response.json()["data"]["view_count"] == 2


@pytest.mark.asyncio
async def test_draft_is_not_readable(client: AsyncClient, library: dict) -> None:
    response = await client.get("/api/v1/articles/vaccination-drive")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Article not found"}


@pytest.mark.asyncio
async def test_categories(client: AsyncClient) -> None:
    response = await client.get("/api/v1/articles/categories/list")
    assert response.status_code == 200
    categories = {c["value"]: c["label"] for c in response.json()["data"]}
    assert len(categories) == 7
    assert categories["mental_health"] == "Mental Health"
